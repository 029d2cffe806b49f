"""Git integration."""

from monoscope.git.diff import get_changed_files
from monoscope.git.repo import get_repo_root, run_git_command
from monoscope.git.scm import SCM, GitSCM

__all__ = [
    "SCM",
    "GitSCM",
    "get_changed_files",
    "get_repo_root",
    "run_git_command",
]
