"""Change detection: mapping changed files to the packages that own them."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path, PurePath
from typing import Protocol

from monoscope.filters.globs import GlobMatcher, compile_globs, matches_any
from monoscope.git.scm import SCM
from monoscope.workspace.package import ROOT_PKG_NAME, Package, PackageName, PackageSet

logger = logging.getLogger(__name__)


def file_in_package(changed_file: str, package_dir: str, sep: str = os.sep) -> bool:
    """Check whether a repo-relative file lives in a package directory.

    Matches on whole path segments: ``packages/foo`` owns
    ``packages/foo/x.py`` but not ``packages/foobar/x.py``.
    """
    if not changed_file.startswith(package_dir):
        return False
    if len(changed_file) == len(package_dir):
        return True
    return changed_file[len(package_dir)] == sep


def _candidates(packages: Mapping[PackageName, Package]) -> list[Package]:
    # Sorted so that first-match-wins is reproducible. Directories never
    # overlap in a valid workspace.
    return sorted(
        (p for name, p in packages.items() if name != ROOT_PKG_NAME),
        key=lambda p: (p.directory, p.name),
    )


def _owner(changed_file: str, candidates: list[Package]) -> PackageName:
    for package in candidates:
        if file_in_package(changed_file, package.directory):
            return package.name
    return ROOT_PKG_NAME


def count_changed_files(
    changed_files: Iterable[str],
    packages: Mapping[PackageName, Package],
) -> dict[PackageName, int]:
    """Number of changed files per owning package, root package included."""
    candidates = _candidates(packages)
    counts: dict[PackageName, int] = {}
    for changed_file in changed_files:
        owner = _owner(changed_file, candidates)
        counts[owner] = counts.get(owner, 0) + 1
    return counts


def get_changed_packages(
    changed_files: Iterable[str],
    packages: Mapping[PackageName, Package] | Sequence[Package],
) -> PackageSet:
    """Map changed files to the set of packages owning them.

    A file outside every package directory marks the root package as changed.
    If package directories were nested, the first directory in sorted order
    wins.
    """
    if not isinstance(packages, Mapping):
        packages = {p.name: p for p in packages}
    candidates = _candidates(packages)

    return PackageSet(_owner(changed_file, candidates) for changed_file in changed_files)


def repo_global_file_has_changed(
    global_deps: GlobMatcher | None, changed_files: Iterable[str]
) -> bool:
    """Check if any changed file matches a global dependency glob."""
    return any(matches_any(global_deps, PurePath(f).as_posix()) for f in changed_files)


def filter_ignored_files(ignore: GlobMatcher | None, changed_files: Iterable[str]) -> list[str]:
    """Drop changed files matching an ignore glob."""
    return [f for f in changed_files if not matches_any(ignore, PurePath(f).as_posix())]


class PackagesChangedInRange(Protocol):
    """Answers which packages changed between two references."""

    def changed_packages_in_range(self, from_ref: str, to_ref: str) -> PackageSet: ...


class PackageChangeDetector:
    """Computes changed packages for a git range.

    Globs are compiled once on construction so an invalid --ignore or
    --global-deps value fails before any git command runs.

    Raises:
        InvalidGlobError: On construction, if a glob is malformed.
    """

    def __init__(
        self,
        scm: SCM,
        cwd: Path,
        packages: Mapping[PackageName, Package],
        *,
        ignore_patterns: Sequence[str] = (),
        global_dep_patterns: Sequence[str] = (),
    ) -> None:
        self.scm = scm
        self.cwd = cwd
        self.packages = packages
        self.global_deps = compile_globs(global_dep_patterns, option="global-deps")
        self.ignore = compile_globs(ignore_patterns, option="ignore")

    def changed_files(self, from_ref: str, to_ref: str) -> list[str]:
        """Files changed in the range. An empty from_ref means nothing changed.

        Raises:
            GitError: If the VCS call fails.
        """
        if not from_ref:
            return []
        return self.scm.changed_files(from_ref, to_ref, True, self.cwd)

    def changed_packages_in_range(self, from_ref: str, to_ref: str) -> PackageSet:
        """Packages changed between from_ref and to_ref.

        Raises:
            GitError: If the VCS call fails.
        """
        changed_files = self.changed_files(from_ref, to_ref)

        if repo_global_file_has_changed(self.global_deps, changed_files):
            logger.debug("global dependency changed in %s...%s", from_ref, to_ref)
            return PackageSet(self.packages)

        relevant = filter_ignored_files(self.ignore, changed_files)
        changed = get_changed_packages(relevant, self.packages)
        logger.debug(
            "%d of %d changed files in %s...%s touch %s",
            len(relevant),
            len(changed_files),
            from_ref,
            to_ref or "HEAD",
            ", ".join(changed) or "no packages",
        )
        return changed
