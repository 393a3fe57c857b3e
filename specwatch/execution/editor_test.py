"""Tests for opening source locations in the editor."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from specwatch.execution.editor import EditorLauncher, parse_location


class TestParseLocation:
    """Tests for parse_location."""

    def test_posix(self):
        assert parse_location("/app/test/login.spec.js:12:5") == (
            "/app/test/login.spec.js", 12, 5,
        )

    def test_windows_drive(self):
        assert parse_location(r"C:\work\cart.spec.ts:30:9") == (
            r"C:\work\cart.spec.ts", 30, 9,
        )

    def test_quotes_removed(self):
        assert parse_location('"/app/a.js":1:2') == ("/app/a.js", 1, 2)

    @pytest.mark.parametrize("location", ["/app/a.js", "/app/a.js:1", "a.js:x:2", ""])
    def test_invalid(self, location):
        with pytest.raises(ValueError, match="path:line:col"):
            parse_location(location)


class TestEditorLauncher:
    """Tests for EditorLauncher."""

    def test_build_command(self):
        launcher = EditorLauncher()
        assert launcher.build_command("/app/a.js", 3, 7) == [
            "code", "--goto", "/app/a.js:3:7",
        ]

    def test_build_command_strips_quotes(self):
        launcher = EditorLauncher("codium")
        assert launcher.build_command('/app/"a".js', 1, 1) == [
            "codium", "--goto", "/app/a.js:1:1",
        ]

    @patch("specwatch.execution.editor.shutil.which", return_value="/usr/bin/code")
    @patch("specwatch.execution.editor.subprocess.Popen")
    def test_open_at_detaches(self, mock_popen, mock_which):
        launcher = EditorLauncher()
        assert launcher.open_at("/app/a.js", 3, 7)

        mock_popen.assert_called_once()
        args, kwargs = mock_popen.call_args
        assert args[0] == ["/usr/bin/code", "--goto", "/app/a.js:3:7"]
        assert kwargs["start_new_session"] is True

    @patch("specwatch.execution.editor.subprocess.Popen", side_effect=FileNotFoundError("code"))
    def test_open_at_launch_failure(self, mock_popen):
        assert not EditorLauncher().open_at("/app/a.js", 1, 1)

    @patch("specwatch.execution.editor.subprocess.Popen")
    def test_open_location(self, mock_popen):
        assert EditorLauncher("true").open_location("/app/test/a.spec.js:12:5")
        assert mock_popen.call_args[0][0][-1] == "/app/test/a.spec.js:12:5"

    @patch("specwatch.execution.editor.subprocess.Popen")
    def test_open_location_invalid(self, mock_popen):
        with pytest.raises(ValueError):
            EditorLauncher().open_location("nothing here")
        mock_popen.assert_not_called()
