"""Resolving the set of packages a command runs in."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from monoscope.filters.changes import PackageChangeDetector
from monoscope.filters.inference import calculate_inference
from monoscope.filters.legacy import LegacyFilter
from monoscope.filters.selector import FilterContext, PatternEvaluator, SelectorEvaluator
from monoscope.git.scm import SCM
from monoscope.workspace.package import ROOT_PKG_NAME, PackageSet
from monoscope.workspace.workspace import Workspace

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScopeOptions:
    """Package selection options for one invocation.

    Attributes:
        legacy_filter: --scope, --since, --include-dependencies, --no-deps.
        filter_patterns: --filter values.
        ignore_patterns: Globs of changed files to ignore (--ignore).
        global_dep_patterns: Globs of files whose change affects every
            package (--global-deps).
        package_inference_root: Directory, relative to the workspace root,
            used to infer packages (--infer-filter-root).
    """

    legacy_filter: LegacyFilter = field(default_factory=LegacyFilter)
    filter_patterns: list[str] = field(default_factory=list)
    ignore_patterns: list[str] = field(default_factory=list)
    global_dep_patterns: list[str] = field(default_factory=list)
    package_inference_root: str = ""

    def all_patterns(self) -> list[str]:
        """Explicit filter patterns followed by translated legacy options."""
        return [*self.filter_patterns, *self.legacy_filter.as_filter_patterns()]


@dataclass(frozen=True)
class ScopeResult:
    """Resolved packages.

    Attributes:
        packages: Selected package names, never including the root package.
        is_all_packages: True when no filter or inference root was given and
            every package was selected by default.
    """

    packages: PackageSet
    is_all_packages: bool


def resolve_packages(
    opts: ScopeOptions,
    cwd: Path,
    scm: SCM,
    workspace: Workspace,
    *,
    evaluator: PatternEvaluator | None = None,
) -> ScopeResult:
    """Translate selection options into the set of packages to run in.

    Args:
        opts: Selection options.
        cwd: Directory filters are resolved against (the workspace root).
        scm: VCS adapter used for git-range selectors.
        workspace: Package index and dependency graph.
        evaluator: Pattern evaluator (defaults to SelectorEvaluator).

    Raises:
        InferenceResolutionError: If the inference root cannot be resolved.
        InvalidGlobError: If an ignore or global-deps glob is malformed.
        GitError: If listing changed files fails.
        PatternEvaluationError: If a filter pattern is invalid.
    """
    package_infos = workspace.package_infos

    inference = calculate_inference(workspace.root, opts.package_inference_root, package_infos)
    change_detector = PackageChangeDetector(
        scm,
        cwd,
        package_infos,
        ignore_patterns=opts.ignore_patterns,
        global_dep_patterns=opts.global_dep_patterns,
    )

    patterns = opts.all_patterns()
    is_all_packages = not patterns and not opts.package_inference_root
    logger.debug("resolving filter patterns %s", patterns)

    context = FilterContext(
        graph=workspace.graph,
        package_infos=package_infos,
        cwd=cwd,
        inference=inference,
        change_detector=change_detector,
    )
    packages = PackageSet(
        (evaluator or SelectorEvaluator()).get_packages_from_patterns(patterns, context)
    )

    if is_all_packages:
        # no filters specified, run every package
        packages = packages.union(workspace.package_names)
    packages.discard(ROOT_PKG_NAME)

    return ScopeResult(packages=packages, is_all_packages=is_all_packages)
