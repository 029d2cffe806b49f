"""Package dependency graph."""

from __future__ import annotations

from collections import deque
from collections.abc import Mapping

from monoscope.errors import CyclicDependencyError, PackageNotFoundError
from monoscope.workspace.package import Package, PackageName, normalize_name


class DependencyGraph:
    """Directed graph of workspace packages.

    An edge ``a -> b`` means package ``a`` depends on package ``b``. Only
    dependencies on other workspace packages are tracked.
    """

    def __init__(self, packages: Mapping[PackageName, Package]) -> None:
        self._packages = dict(packages)
        by_normalized = {normalize_name(name): name for name in self._packages}

        self._dependencies: dict[PackageName, set[PackageName]] = {
            name: set() for name in self._packages
        }
        self._dependents: dict[PackageName, set[PackageName]] = {
            name: set() for name in self._packages
        }
        for name, package in self._packages.items():
            for dep in package.dependencies:
                target = by_normalized.get(normalize_name(dep))
                if target is None or target == name:
                    continue
                self._dependencies[name].add(target)
                self._dependents[target].add(name)

        self._check_cycles()

    def __contains__(self, name: object) -> bool:
        return name in self._packages

    def _require(self, name: str) -> PackageName:
        if name not in self._packages:
            raise PackageNotFoundError(name, list(self._packages))
        return PackageName(name)

    def get_dependencies(self, name: str) -> list[Package]:
        """Get direct dependencies of a package."""
        key = self._require(name)
        return [self._packages[d] for d in sorted(self._dependencies[key])]

    def get_dependents(self, name: str) -> list[Package]:
        """Get packages that depend directly on a package."""
        key = self._require(name)
        return [self._packages[d] for d in sorted(self._dependents[key])]

    def get_transitive_dependencies(self, name: str) -> list[Package]:
        """Get all packages a package depends on, directly or not."""
        return self._walk(self._require(name), self._dependencies)

    def get_transitive_dependents(self, name: str) -> list[Package]:
        """Get all packages that depend on a package, directly or not."""
        return self._walk(self._require(name), self._dependents)

    def _walk(
        self, start: PackageName, edges: dict[PackageName, set[PackageName]]
    ) -> list[Package]:
        seen: set[PackageName] = set()
        queue = deque(edges[start])
        while queue:
            current = queue.popleft()
            if current in seen or current == start:
                continue
            seen.add(current)
            queue.extend(edges[current])
        return [self._packages[n] for n in sorted(seen)]

    def _check_cycles(self) -> None:
        visiting: set[PackageName] = set()
        done: set[PackageName] = set()
        stack: list[PackageName] = []

        def visit(name: PackageName) -> None:
            if name in done:
                return
            if name in visiting:
                start = stack.index(name)
                raise CyclicDependencyError([*stack[start:], name])
            visiting.add(name)
            stack.append(name)
            for dep in sorted(self._dependencies[name]):
                visit(dep)
            stack.pop()
            visiting.discard(name)
            done.add(name)

        for name in sorted(self._dependencies):
            visit(name)
