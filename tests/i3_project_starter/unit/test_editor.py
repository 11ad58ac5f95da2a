"""Unit tests for editor lookup and invocation."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from i3_project_starter.core.editor import find_editor, open_editor
from i3_project_starter.errors import EditorNotFound


class TestFindEditor:
    """Tests for find_editor."""

    def test_visual_wins_over_editor(self):
        assert find_editor({"VISUAL": "gvim", "EDITOR": "vi"}) == ["gvim"]

    def test_editor_with_arguments(self):
        assert find_editor({"EDITOR": "nano -w"}) == ["nano", "-w"]

    def test_blank_visual_falls_back_to_editor(self):
        assert find_editor({"VISUAL": "  ", "EDITOR": "vi"}) == ["vi"]

    def test_no_editor(self):
        with pytest.raises(EditorNotFound, match=r"\$VISUAL or \$EDITOR"):
            find_editor({})

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("EDITOR", "emacs -nw")
        assert find_editor() == ["emacs", "-nw"]


class TestOpenEditor:
    """Tests for open_editor."""

    def test_runs_editor_on_path(self):
        with patch("i3_project_starter.core.editor.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0)

            code = open_editor(Path("/tmp/web.toml"), {"EDITOR": "nano -w"})

        assert code == 0
        mock_run.assert_called_once_with(["nano", "-w", "/tmp/web.toml"], check=False)

    def test_nonzero_exit_is_returned_and_logged(self, caplog):
        with patch("i3_project_starter.core.editor.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=2)

            with caplog.at_level("WARNING", logger="i3start.editor"):
                code = open_editor(Path("/tmp/web.toml"), {"EDITOR": "vi"})

        assert code == 2
        assert "exited with code 2" in caplog.text

    def test_missing_editor_runs_nothing(self):
        with patch("i3_project_starter.core.editor.subprocess.run") as mock_run:
            with pytest.raises(EditorNotFound):
                open_editor(Path("/tmp/web.toml"), {})

        mock_run.assert_not_called()
