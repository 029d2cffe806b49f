"""Workspace discovery and package index."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path

from monoscope.config import MonoscopeConfig, find_config_file, load_config
from monoscope.errors import ConfigurationError, PackageNotFoundError
from monoscope.workspace.graph import DependencyGraph
from monoscope.workspace.package import ROOT_PKG_NAME, Package, PackageName, normalize_name

logger = logging.getLogger(__name__)


class Workspace:
    """A monorepo: its root, configuration, packages and dependency graph.

    ``packages`` holds the real workspace packages. ``package_infos`` also
    contains the synthetic root package under ``ROOT_PKG_NAME``.
    """

    def __init__(
        self,
        root: Path,
        config: MonoscopeConfig,
        packages: dict[PackageName, Package],
    ) -> None:
        self.root = root
        self.config = config
        self.packages = packages
        self.root_package = Package(name=ROOT_PKG_NAME, path=root, directory=".")
        self.graph = DependencyGraph(packages)

    @classmethod
    def discover(cls, path: Path | None = None) -> Workspace:
        """Find the workspace containing path and load its packages.

        Args:
            path: Directory to start searching from (defaults to cwd).

        Raises:
            WorkspaceNotFoundError: If no monoscope.yaml is found.
            ConfigurationError: If configuration or a pyproject.toml is invalid.
        """
        config_path = find_config_file(path)
        root = config_path.parent
        config = load_config(config_path)
        packages = discover_packages(root, config.packages)
        logger.debug("discovered %d packages under %s", len(packages), root)
        return cls(root, config, packages)

    @property
    def package_infos(self) -> dict[PackageName, Package]:
        """Package index including the root package."""
        return {ROOT_PKG_NAME: self.root_package, **self.packages}

    @property
    def package_names(self) -> list[PackageName]:
        """Every known package name, root package included."""
        return sorted(self.package_infos)

    def get_package(self, name: str) -> Package:
        """Get a package by name.

        Raises:
            PackageNotFoundError: If no such package exists.
        """
        try:
            return self.package_infos[PackageName(name)]
        except KeyError:
            raise PackageNotFoundError(name, list(self.packages)) from None


def _read_pyproject(path: Path) -> dict[str, object]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"invalid TOML: {e}", path=str(path)) from e


def discover_packages(root: Path, patterns: list[str]) -> dict[PackageName, Package]:
    """Find package directories matching the configured globs.

    A directory is a package when it holds a pyproject.toml with a
    [project] name.

    Raises:
        ConfigurationError: If two packages share a name.
    """
    pyprojects: dict[Path, dict[str, object]] = {}
    for pattern in patterns:
        for candidate in sorted(root.glob(pattern)):
            pyproject = candidate / "pyproject.toml"
            if candidate == root or not pyproject.is_file():
                continue
            pyprojects.setdefault(candidate.resolve(), _read_pyproject(pyproject))

    workspace_names = set()
    for data in pyprojects.values():
        project = data.get("project")
        if isinstance(project, dict) and project.get("name"):
            workspace_names.add(normalize_name(str(project["name"])))

    packages: dict[PackageName, Package] = {}
    resolved_root = root.resolve()
    for pkg_path, data in pyprojects.items():
        package = Package.from_pyproject(pkg_path, resolved_root, data, workspace_names)
        if package.name in packages:
            raise ConfigurationError(
                f"duplicate package name '{package.name}' "
                f"({packages[package.name].directory} and {package.directory})"
            )
        packages[package.name] = package
    return packages
