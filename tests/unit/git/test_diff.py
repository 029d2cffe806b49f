"""Test changed-file listing."""

import os
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from monoscope.errors import GitError
from monoscope.git.diff import get_changed_files


def _out(stdout: str) -> MagicMock:
    return MagicMock(returncode=0, stdout=stdout, stderr="")


def test_committed_and_uncommitted_files():
    with patch("monoscope.git.diff.run_git_command") as mock_run:
        mock_run.side_effect = [
            _out("packages/a/x.py\0README.md\0"),
            _out("packages/a/x.py\0packages/b/y.py\0"),
            _out("new.txt\0"),
        ]

        files = get_changed_files(Path("/repo"), "main")

        assert files == sorted(
            [
                os.path.join("packages", "a", "x.py"),
                os.path.join("packages", "b", "y.py"),
                "README.md",
                "new.txt",
            ]
        )
        commands = [call.args[0] for call in mock_run.call_args_list]
        assert commands == [
            ["diff", "--name-only", "-z", "main...HEAD"],
            ["diff", "--name-only", "-z", "HEAD"],
            ["ls-files", "-z", "--others", "--exclude-standard", "--full-name"],
        ]


def test_committed_only():
    with patch("monoscope.git.diff.run_git_command") as mock_run:
        mock_run.return_value = _out("a.py\0")

        files = get_changed_files(Path("/repo"), "v1.0", "feature", include_uncommitted=False)

        assert files == ["a.py"]
        mock_run.assert_called_once_with(
            ["diff", "--name-only", "-z", "v1.0...feature"], cwd=Path("/repo")
        )


def test_empty_to_ref_means_head():
    with patch("monoscope.git.diff.run_git_command") as mock_run:
        mock_run.return_value = _out("")

        assert get_changed_files(Path("/repo"), "main", "", include_uncommitted=False) == []
        assert mock_run.call_args.args[0] == ["diff", "--name-only", "-z", "main...HEAD"]


def test_git_failure_propagates():
    with patch("monoscope.git.diff.run_git_command", side_effect=GitError("bad revision")):
        with pytest.raises(GitError):
            get_changed_files(Path("/repo"), "nope")


def test_unusual_names_are_kept_verbatim():
    with patch("monoscope.git.diff.run_git_command") as mock_run:
        mock_run.return_value = _out("packages/a/café.py\0packages/a/my notes.txt\0 lead.txt\0")

        files = get_changed_files(Path("/repo"), "main", include_uncommitted=False)

        assert files == sorted(
            [
                os.path.join("packages", "a", "café.py"),
                os.path.join("packages", "a", "my notes.txt"),
                " lead.txt",
            ]
        )
