"""Filter-pattern parsing and evaluation.

A filter pattern selects packages::

    [!][...][^]<name-glob>[{<dir>}][[...][<from>[...<to>]]][^][...]

- ``!`` negates the selector; matches are removed from the result.
- a leading ``...`` adds packages depending on the matches.
- a trailing ``...`` adds dependencies of the matches.
- ``^`` next to either ``...`` drops the matches themselves.
- ``{dir}`` (or a bare ``./dir``) restricts matches to packages below dir.
- ``[ref]`` or ``[from...to]`` restricts matches to packages changed in the
  git range. Written ``...[ref]`` after a name, a package also matches when
  one of its dependencies changed.
"""

from __future__ import annotations

import fnmatch
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Protocol

from monoscope.errors import PatternEvaluationError
from monoscope.filters.changes import PackagesChangedInRange
from monoscope.filters.inference import PackageInference, contains_path, resolve_unknown_path
from monoscope.workspace.graph import DependencyGraph
from monoscope.workspace.package import Package, PackageName, PackageSet

logger = logging.getLogger(__name__)

_SELECTOR = re.compile(
    r"^(?P<name>[^.{}\[\]](?:[^{}\[\]]*[^{}\[\].])?)?"
    r"(?P<directory>\{[^}]*\})?"
    r"(?P<commits>(?:\.{3})?\[[^\]]+\])?$"
)
_GLOB_CHARS = frozenset("*?[")


@dataclass(frozen=True)
class TargetSelector:
    """A parsed filter pattern."""

    raw: str
    exclude: bool = False
    include_dependents: bool = False
    include_dependencies: bool = False
    exclude_self: bool = False
    name_pattern: str = ""
    parent_dir: str = ""
    from_ref: str = ""
    to_ref: str = ""
    match_dependencies: bool = False


def parse_target_selector(raw: str) -> TargetSelector:
    """Parse one filter pattern.

    Raises:
        PatternEvaluationError: If the pattern is malformed.
    """
    text = raw.strip()
    exclude = include_dependents = include_dependencies = exclude_self = False

    if text.startswith("!"):
        exclude = True
        text = text[1:]
    if text.startswith("..."):
        include_dependents = True
        text = text[3:]
        if text.startswith("^"):
            exclude_self = True
            text = text[1:]
    if text.endswith("..."):
        include_dependencies = True
        text = text[:-3]
        if text.endswith("^"):
            exclude_self = True
            text = text[:-1]

    if not text:
        raise PatternEvaluationError(raw, "selects nothing")

    match = _SELECTOR.match(text)
    if match is None:
        if text.startswith("."):
            # bare relative directory, e.g. ./apps/web
            return TargetSelector(
                raw=raw,
                exclude=exclude,
                include_dependents=include_dependents,
                include_dependencies=include_dependencies,
                exclude_self=exclude_self,
                parent_dir=text,
            )
        raise PatternEvaluationError(raw, "does not match the filter syntax")

    name = match.group("name") or ""
    directory = (match.group("directory") or "")[1:-1]
    commits = match.group("commits") or ""
    if match.group("directory") is not None and not directory:
        raise PatternEvaluationError(raw, "empty directory selector")

    match_dependencies = False
    from_ref = to_ref = ""
    if commits:
        if commits.startswith("..."):
            if not name and not directory:
                raise PatternEvaluationError(
                    raw, "'...[ref]' needs a package name or directory before it"
                )
            match_dependencies = True
            commits = commits[3:]
        refs = commits[1:-1]
        from_ref, _, to_ref = refs.partition("...")
        if not from_ref:
            raise PatternEvaluationError(raw, "git range has no base reference")
        to_ref = to_ref or "HEAD"

    return TargetSelector(
        raw=raw,
        exclude=exclude,
        include_dependents=include_dependents,
        include_dependencies=include_dependencies,
        exclude_self=exclude_self,
        name_pattern=name,
        parent_dir=directory,
        from_ref=from_ref,
        to_ref=to_ref,
        match_dependencies=match_dependencies,
    )


@dataclass(frozen=True)
class FilterContext:
    """Everything a pattern evaluator may consult.

    Attributes:
        graph: Dependency graph of the workspace packages.
        package_infos: Package index, root package included.
        cwd: Directory relative selectors are resolved against.
        inference: Scope inferred from the inference root, if any.
        change_detector: Source of changed packages for git-range selectors.
    """

    graph: DependencyGraph
    package_infos: Mapping[PackageName, Package]
    cwd: Path
    inference: PackageInference | None
    change_detector: PackagesChangedInRange


class PatternEvaluator(Protocol):
    """Expands filter patterns into package names."""

    def get_packages_from_patterns(
        self, patterns: list[str], context: FilterContext
    ) -> PackageSet:
        """Raises PatternEvaluationError on malformed patterns."""
        ...


def apply_inference(
    selectors: list[TargetSelector], inference: PackageInference | None
) -> list[TargetSelector]:
    """Resolve selectors against the inferred scope.

    Directory selectors are joined to the inference root. Selectors with
    neither a name nor a directory are narrowed to the inferred package or
    directory.

    With inference and no selectors at all, a single selector for the
    inferred scope is synthesized.
    """
    if inference is None:
        return selectors
    if not selectors:
        selectors = [TargetSelector(raw="")]

    inferred: list[TargetSelector] = []
    for selector in selectors:
        if selector.parent_dir:
            parent = str(inference.directory_root / selector.parent_dir)
            inferred.append(replace(selector, parent_dir=parent))
        elif selector.name_pattern:
            inferred.append(selector)
        elif inference.package_name is None:
            inferred.append(replace(selector, parent_dir=str(inference.directory_root)))
        else:
            inferred.append(replace(selector, name_pattern=inference.package_name))
    return inferred


class SelectorEvaluator:
    """Default pattern evaluator walking the workspace dependency graph."""

    def get_packages_from_patterns(
        self, patterns: list[str], context: FilterContext
    ) -> PackageSet:
        selectors = apply_inference(
            [parse_target_selector(p) for p in patterns], context.inference
        )
        if not selectors:
            return PackageSet()

        includes = [s for s in selectors if not s.exclude]
        excludes = [s for s in selectors if s.exclude]

        if includes:
            result = PackageSet()
            for selector in includes:
                result.update(self._select(selector, context))
        else:
            # only negations: start from everything
            result = PackageSet(context.package_infos)

        for selector in excludes:
            result = result.difference(self._select(selector, context))

        logger.debug("patterns %s selected %s", patterns, ", ".join(result) or "nothing")
        return result

    def _select(self, selector: TargetSelector, context: FilterContext) -> PackageSet:
        entry = self._entry_packages(selector, context)
        graph = context.graph

        result = PackageSet() if selector.exclude_self else entry.copy()
        for name in entry:
            if name not in graph:
                continue
            if selector.include_dependencies:
                result.update(p.name for p in graph.get_transitive_dependencies(name))
            if selector.include_dependents:
                for dependent in graph.get_transitive_dependents(name):
                    result.add(dependent.name)
                    if selector.include_dependencies:
                        result.update(
                            p.name for p in graph.get_transitive_dependencies(dependent.name)
                        )
        return result

    def _entry_packages(self, selector: TargetSelector, context: FilterContext) -> PackageSet:
        candidates = PackageSet(context.package_infos)

        if selector.name_pattern:
            candidates = self._match_names(selector, candidates)

        if selector.parent_dir:
            candidates = self._match_directory(selector, candidates, context)

        if selector.from_ref:
            changed = context.change_detector.changed_packages_in_range(
                selector.from_ref, selector.to_ref
            )
            if selector.match_dependencies:
                candidates = PackageSet(
                    name
                    for name in candidates
                    if name in changed or self._dependency_changed(name, changed, context)
                )
            else:
                candidates = candidates.intersection(changed)

        return candidates

    @staticmethod
    def _dependency_changed(name: PackageName, changed: PackageSet, context: FilterContext) -> bool:
        if name not in context.graph:
            return False
        return any(p.name in changed for p in context.graph.get_transitive_dependencies(name))

    @staticmethod
    def _match_names(selector: TargetSelector, candidates: PackageSet) -> PackageSet:
        pattern = selector.name_pattern
        if not _GLOB_CHARS.intersection(pattern):
            if pattern not in candidates:
                raise PatternEvaluationError(selector.raw, f"no package named '{pattern}'")
            return PackageSet([pattern])
        return PackageSet(n for n in candidates if fnmatch.fnmatchcase(n, pattern))

    @staticmethod
    def _match_directory(
        selector: TargetSelector, candidates: PackageSet, context: FilterContext
    ) -> PackageSet:
        parent = resolve_unknown_path(context.cwd, selector.parent_dir)
        is_glob = bool(_GLOB_CHARS.intersection(selector.parent_dir))
        matched = PackageSet()
        for name in candidates:
            pkg_path = resolve_unknown_path(context.cwd, str(context.package_infos[name].path))
            if is_glob:
                if fnmatch.fnmatchcase(pkg_path.as_posix(), parent.as_posix()):
                    matched.add(name)
            elif contains_path(parent, pkg_path):
                matched.add(name)
        return matched
