"""Terminal colour code removal."""

from __future__ import annotations

import re

# SGR sequences: ESC [ <params> m, e.g. "\x1b[32m" or "\x1b[1;31m"
ANSI_SGR = re.compile(r"\x1b\[[0-9;]*m")


def strip_ansi(line: str) -> str:
    """Return *line* with colour/style escape sequences removed."""
    if "\x1b" not in line:
        return line
    return ANSI_SGR.sub("", line)
