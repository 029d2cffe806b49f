"""Package model and package-name sets."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import NewType

from monoscope.errors import ConfigurationError

PackageName = NewType("PackageName", str)

# Synthetic package standing for the repository root itself.
ROOT_PKG_NAME = PackageName("//")

_REQUIREMENT_NAME = re.compile(r"^\s*([A-Za-z0-9][A-Za-z0-9._-]*)")


def normalize_name(name: str) -> str:
    """Normalize a distribution name (PEP 503)."""
    return re.sub(r"[-_.]+", "-", name).lower()


@dataclass(frozen=True)
class Package:
    """A workspace package.

    Attributes:
        name: Package name.
        path: Absolute path to the package directory.
        directory: Package directory relative to the workspace root, using the
            host path separator.
        version: Version from pyproject.toml.
        description: Optional description.
        dependencies: Names of workspace packages this package depends on.
    """

    name: PackageName
    path: Path
    directory: str
    version: str = "0.0.0"
    description: str | None = None
    dependencies: frozenset[PackageName] = field(default_factory=frozenset)

    @property
    def is_root(self) -> bool:
        return self.name == ROOT_PKG_NAME

    @classmethod
    def from_pyproject(
        cls,
        path: Path,
        root: Path,
        data: dict[str, object],
        workspace_names: set[str] | None = None,
    ) -> Package:
        """Build a package from parsed pyproject.toml data.

        Args:
            path: Absolute package directory.
            root: Workspace root.
            data: Parsed pyproject.toml.
            workspace_names: Normalized names of all workspace packages. Only
                requirements naming one of these become graph dependencies.

        Raises:
            ConfigurationError: If the [project] table has no name.
        """
        project = data.get("project")
        if not isinstance(project, dict) or not project.get("name"):
            raise ConfigurationError(
                "missing [project] name", path=str(path / "pyproject.toml")
            )

        deps: set[PackageName] = set()
        for requirement in project.get("dependencies", []) or []:
            match = _REQUIREMENT_NAME.match(str(requirement))
            if not match:
                continue
            dep = match.group(1)
            if workspace_names is None or normalize_name(dep) in workspace_names:
                deps.add(PackageName(dep))

        return cls(
            name=PackageName(str(project["name"])),
            path=path,
            directory=str(path.relative_to(root)),
            version=str(project.get("version", "0.0.0")),
            description=project.get("description"),
            dependencies=frozenset(deps),
        )


class PackageSet:
    """A set of package names.

    Iteration is always in sorted order so output and test failures are
    reproducible.
    """

    __slots__ = ("_names",)

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._names: set[PackageName] = {PackageName(n) for n in names}

    def add(self, name: str) -> None:
        self._names.add(PackageName(name))

    def discard(self, name: str) -> None:
        self._names.discard(PackageName(name))

    # Alias kept for readers coming from set-of-keys code.
    delete = discard

    def update(self, names: Iterable[str]) -> None:
        for name in names:
            self.add(name)

    def union(self, other: Iterable[str]) -> PackageSet:
        result = PackageSet(self._names)
        result.update(other)
        return result

    def intersection(self, other: Iterable[str]) -> PackageSet:
        other_names = set(other)
        return PackageSet(n for n in self._names if n in other_names)

    def difference(self, other: Iterable[str]) -> PackageSet:
        other_names = set(other)
        return PackageSet(n for n in self._names if n not in other_names)

    def copy(self) -> PackageSet:
        return PackageSet(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[PackageName]:
        return iter(sorted(self._names))

    def __len__(self) -> int:
        return len(self._names)

    def __bool__(self) -> bool:
        return bool(self._names)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PackageSet):
            return self._names == other._names
        if isinstance(other, (set, frozenset)):
            return self._names == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"PackageSet({sorted(self._names)!r})"
