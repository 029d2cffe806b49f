"""Version-control adapter used by change detection."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Protocol

from monoscope.git.diff import get_changed_files
from monoscope.git.repo import get_repo_root


class SCM(Protocol):
    """Lists files changed between two references."""

    def changed_files(
        self,
        from_ref: str,
        to_ref: str,
        include_uncommitted: bool,
        cwd: Path,
    ) -> list[str]:
        """Return changed paths relative to cwd.

        Raises:
            GitError: If the underlying VCS call fails.
        """
        ...


class GitSCM:
    """SCM backed by the git command line."""

    def changed_files(
        self,
        from_ref: str,
        to_ref: str,
        include_uncommitted: bool,
        cwd: Path,
    ) -> list[str]:
        cwd = Path(cwd).resolve()
        files = get_changed_files(
            cwd,
            from_ref,
            to_ref,
            include_uncommitted=include_uncommitted,
        )
        # git reports paths from the top of the repository, which may sit
        # above the workspace root
        toplevel = get_repo_root(cwd).resolve()
        if toplevel == cwd:
            return files
        return sorted(os.path.relpath(toplevel / f, cwd) for f in files)
