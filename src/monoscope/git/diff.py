"""Changed-file listing between git references."""

from __future__ import annotations

from pathlib import Path, PurePosixPath, PurePath

from monoscope.git.repo import run_git_command


def _paths(output: str) -> list[str]:
    # -z output: NUL-terminated, unquoted paths
    return [path for path in output.split("\0") if path]


def get_changed_files(
    root: Path,
    from_ref: str,
    to_ref: str = "HEAD",
    *,
    include_uncommitted: bool = True,
) -> list[str]:
    """Get files changed between two references.

    Collects:
    1. Commits on the current branch since the merge base (``from...to``)
    2. Staged and unstaged changes relative to ``to_ref``
    3. Untracked files (when include_uncommitted is set)

    Args:
        root: Repository root.
        from_ref: Base reference. Must not be empty.
        to_ref: Target reference (defaults to HEAD).
        include_uncommitted: Also report working tree and untracked files.

    Returns:
        Sorted repo-relative paths using the host path separator.

    Raises:
        GitError: If any git command fails.
    """
    to_ref = to_ref or "HEAD"
    files: set[str] = set()

    result = run_git_command(["diff", "--name-only", "-z", f"{from_ref}...{to_ref}"], cwd=root)
    files.update(_paths(result.stdout))

    if include_uncommitted:
        result = run_git_command(["diff", "--name-only", "-z", to_ref], cwd=root)
        files.update(_paths(result.stdout))

        result = run_git_command(
            ["ls-files", "-z", "--others", "--exclude-standard", "--full-name"],
            cwd=root,
        )
        files.update(_paths(result.stdout))

    # git always reports forward slashes
    return sorted(str(PurePath(PurePosixPath(f))) for f in files)
