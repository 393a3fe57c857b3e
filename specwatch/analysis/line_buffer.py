"""Reassembly of complete lines from an arbitrarily chunked text stream.

Child process output arrives in pieces that are not aligned to line
boundaries.  ``LineBuffer`` carries the incomplete trailing fragment over
to the next chunk so that downstream parsing only ever sees whole lines.
"""

from __future__ import annotations


class LineBuffer:
    """Accumulates raw chunks and yields complete lines.

    A trailing fragment without a terminating newline is held back until
    a later chunk completes it.  It is never flushed automatically: output
    that ends without a newline is dropped when the session ends.
    """

    def __init__(self) -> None:
        self._carry = ""

    @property
    def pending(self) -> str:
        """The incomplete fragment waiting for its newline."""
        return self._carry

    def feed(self, chunk: str) -> list[str]:
        """Append *chunk* and return every line it completed.

        Args:
            chunk: Raw text of any size, possibly empty.

        Returns:
            Complete lines in arrival order, without their newlines.
        """
        if not chunk:
            return []
        segments = (self._carry + chunk).split("\n")
        self._carry = segments.pop()
        return segments

    def reset(self) -> None:
        """Discard the pending fragment."""
        self._carry = ""
