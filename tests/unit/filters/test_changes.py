"""Tests for change classification and the package change detector."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

import monoscope.filters.changes as changes_module
from monoscope.errors import GitError, InvalidGlobError
from monoscope.filters.changes import (
    PackageChangeDetector,
    count_changed_files,
    file_in_package,
    filter_ignored_files,
    get_changed_packages,
    repo_global_file_has_changed,
)
from monoscope.filters.globs import compile_globs
from monoscope.workspace import ROOT_PKG_NAME, PackageSet


def p(path: str) -> str:
    """Repo-relative path with the host separator."""
    return path.replace("/", os.sep)


class TestFileInPackage:
    """Tests for file_in_package."""

    def test_file_below_package(self) -> None:
        assert file_in_package("packages/foo/src/x.ts", "packages/foo", sep="/")

    def test_sibling_with_shared_prefix(self) -> None:
        assert not file_in_package("packages/foobar/x.ts", "packages/foo", sep="/")

    def test_same_path(self) -> None:
        assert file_in_package("packages/foo", "packages/foo", sep="/")

    def test_unrelated(self) -> None:
        assert not file_in_package("README.md", "packages/foo", sep="/")

    def test_host_separator_default(self) -> None:
        assert file_in_package(p("packages/foo/x.py"), p("packages/foo"))
        assert not file_in_package(p("packages/foo-bar/x.py"), p("packages/foo"))


class TestGetChangedPackages:
    """Tests for get_changed_packages."""

    def test_unowned_file_goes_to_root(self, make_workspace) -> None:
        workspace = make_workspace({"a": "packages/a", "b": "packages/b"})

        changed = get_changed_packages(
            [p("packages/a/x.js"), "README.md"], workspace.package_infos
        )

        assert changed == {"a", ROOT_PKG_NAME}

    def test_no_files(self, make_workspace) -> None:
        workspace = make_workspace({"a": "packages/a"})
        assert get_changed_packages([], workspace.package_infos) == PackageSet()

    def test_prefix_collision_not_attributed(self, make_workspace) -> None:
        workspace = make_workspace({"a": "packages/a"})

        changed = get_changed_packages([p("packages/ab/x.py")], workspace.package_infos)

        assert changed == {ROOT_PKG_NAME}

    def test_accepts_package_list(self, make_workspace) -> None:
        workspace = make_workspace({"a": "packages/a", "b": "packages/b"})

        changed = get_changed_packages(
            [p("packages/b/pyproject.toml")], list(workspace.packages.values())
        )

        assert changed == {"b"}

    def test_nested_directories_first_sorted_wins(self, make_workspace) -> None:
        workspace = make_workspace({"outer": "libs", "inner": "libs/inner"})

        changed = get_changed_packages([p("libs/inner/x.py")], workspace.package_infos)

        assert changed == {"outer"}

    def test_order_of_index_irrelevant(self, make_workspace) -> None:
        workspace = make_workspace({"b": "packages/b", "a": "packages/a"})
        files = [p("packages/b/1"), p("packages/a/2"), "setup.cfg"]

        forward = get_changed_packages(files, workspace.package_infos)
        backward = get_changed_packages(
            reversed(files), dict(reversed(list(workspace.package_infos.items())))
        )

        assert forward == backward == {"a", "b", ROOT_PKG_NAME}

    def test_unusual_names_are_attributed(self, make_workspace) -> None:
        workspace = make_workspace({"a": "packages/a", "b": "packages/b"})
        files = [p("packages/a/café.py"), p("packages/b/my notes.txt")]

        assert get_changed_packages(files, workspace.package_infos) == {"a", "b"}

    def test_file_above_workspace_goes_to_root(self, make_workspace) -> None:
        workspace = make_workspace({"a": "packages/a"})
        files = [p("../CHANGELOG.md"), p("../packages/a/x.py")]

        assert get_changed_packages(files, workspace.package_infos) == {ROOT_PKG_NAME}


class TestCountChangedFiles:
    """Tests for count_changed_files."""

    def test_counts_per_owner(self, make_workspace) -> None:
        workspace = make_workspace({"a": "packages/a", "b": "packages/b"})
        files = [p("packages/a/1"), p("packages/a/2"), p("packages/b/3"), "README.md"]

        counts = count_changed_files(files, workspace.package_infos)

        assert counts == {"a": 2, "b": 1, ROOT_PKG_NAME: 1}

    def test_packages_sorted_once(self, make_workspace) -> None:
        workspace = make_workspace({"a": "packages/a", "b": "packages/b"})
        files = [p(f"packages/a/{i}.py") for i in range(50)]

        with patch(
            "monoscope.filters.changes._candidates",
            wraps=changes_module._candidates,
        ) as candidates:
            counts = count_changed_files(files, workspace.package_infos)

        assert counts == {"a": 50}
        candidates.assert_called_once()


class TestGlobHelpers:
    """Tests for ignore and global-deps helpers."""

    def test_global_file_changed(self) -> None:
        matcher = compile_globs(["uv.lock"], option="global-deps")
        assert repo_global_file_has_changed(matcher, ["packages/a/x.py", "uv.lock"])
        assert not repo_global_file_has_changed(matcher, ["packages/a/x.py"])

    def test_global_no_patterns(self) -> None:
        assert not repo_global_file_has_changed(None, ["uv.lock"])

    def test_filter_ignored_files(self) -> None:
        matcher = compile_globs(["**/*.md"], option="ignore")
        files = [p("packages/a/README.md"), p("packages/a/x.py")]
        assert filter_ignored_files(matcher, files) == [p("packages/a/x.py")]

    def test_filter_without_patterns_keeps_everything(self) -> None:
        assert filter_ignored_files(None, ["a", "b"]) == ["a", "b"]

    def test_matching_uses_forward_slashes(self) -> None:
        matcher = compile_globs(["packages/a/docs/**"], option="ignore")
        assert filter_ignored_files(matcher, [p("packages/a/docs/x.md")]) == []


class TestPackageChangeDetector:
    """Tests for PackageChangeDetector."""

    def make_detector(self, workspace, files: list[str], **kwargs) -> PackageChangeDetector:
        scm = MagicMock()
        scm.changed_files.return_value = files
        return PackageChangeDetector(scm, workspace.root, workspace.package_infos, **kwargs)

    def test_empty_base_skips_vcs(self, make_workspace) -> None:
        workspace = make_workspace({"a": "packages/a"})
        detector = self.make_detector(workspace, [p("packages/a/x.py")])

        assert detector.changed_packages_in_range("", "HEAD") == PackageSet()
        detector.scm.changed_files.assert_not_called()

    def test_calls_vcs_with_uncommitted(self, make_workspace) -> None:
        workspace = make_workspace({"a": "packages/a"})
        detector = self.make_detector(workspace, [p("packages/a/x.py")])

        assert detector.changed_packages_in_range("main", "HEAD") == {"a"}
        detector.scm.changed_files.assert_called_once_with("main", "HEAD", True, workspace.root)

    def test_global_dep_selects_everything(self, make_workspace) -> None:
        workspace = make_workspace({"a": "packages/a", "b": "packages/b"})
        detector = self.make_detector(
            workspace,
            [p("packages/a/x.py"), "uv.lock"],
            global_dep_patterns=["uv.lock"],
        )

        changed = detector.changed_packages_in_range("main", "HEAD")

        assert changed == {"a", "b", ROOT_PKG_NAME}

    def test_package_local_file_is_not_global(self, make_workspace) -> None:
        workspace = make_workspace({"a": "packages/a", "b": "packages/b"})
        detector = self.make_detector(
            workspace,
            [p("packages/a/.env")],
            global_dep_patterns=[".env"],
        )

        assert detector.changed_packages_in_range("main", "HEAD") == {"a"}

    def test_global_dep_checked_before_ignore(self, make_workspace) -> None:
        workspace = make_workspace({"a": "packages/a", "b": "packages/b"})
        detector = self.make_detector(
            workspace,
            ["uv.lock"],
            ignore_patterns=["uv.lock"],
            global_dep_patterns=["uv.lock"],
        )

        assert detector.changed_packages_in_range("main", "HEAD") == {"a", "b", ROOT_PKG_NAME}

    def test_ignored_files_do_not_count(self, make_workspace) -> None:
        workspace = make_workspace({"a": "packages/a", "b": "packages/b"})
        detector = self.make_detector(
            workspace,
            [p("packages/a/CHANGELOG.md"), p("packages/b/b.py")],
            ignore_patterns=["**/*.md"],
        )

        assert detector.changed_packages_in_range("main", "HEAD") == {"b"}

    def test_vcs_error_propagates(self, make_workspace) -> None:
        workspace = make_workspace({"a": "packages/a"})
        detector = self.make_detector(workspace, [])
        detector.scm.changed_files.side_effect = GitError("bad revision 'nope'")

        with pytest.raises(GitError):
            detector.changed_packages_in_range("nope", "HEAD")

    def test_invalid_glob_fails_on_construction(self, make_workspace) -> None:
        workspace = make_workspace({"a": "packages/a"})

        with pytest.raises(InvalidGlobError) as exc_info:
            self.make_detector(workspace, [], ignore_patterns=["!"])

        assert exc_info.value.option == "ignore"

    def test_invalid_global_deps_glob(self, make_workspace) -> None:
        workspace = make_workspace({"a": "packages/a"})

        with pytest.raises(InvalidGlobError) as exc_info:
            self.make_detector(workspace, [], global_dep_patterns=["!"])

        assert exc_info.value.option == "global-deps"

    def test_cwd_passed_through(self, make_workspace) -> None:
        workspace = make_workspace({"a": "packages/a"})
        scm = MagicMock()
        scm.changed_files.return_value = []
        detector = PackageChangeDetector(scm, Path("/elsewhere"), workspace.package_infos)

        detector.changed_packages_in_range("main", "")

        scm.changed_files.assert_called_once_with("main", "", True, Path("/elsewhere"))
