"""Package selection: filter patterns, inference and change detection."""

from monoscope.filters.changes import (
    PackageChangeDetector,
    count_changed_files,
    file_in_package,
    filter_ignored_files,
    get_changed_packages,
    repo_global_file_has_changed,
)
from monoscope.filters.globs import GlobMatcher, compile_globs, matches_any
from monoscope.filters.inference import PackageInference, calculate_inference
from monoscope.filters.legacy import LegacyFilter, translate
from monoscope.filters.scope import ScopeOptions, ScopeResult, resolve_packages
from monoscope.filters.selector import (
    FilterContext,
    PatternEvaluator,
    SelectorEvaluator,
    TargetSelector,
    parse_target_selector,
)

__all__ = [
    "FilterContext",
    "GlobMatcher",
    "LegacyFilter",
    "PackageChangeDetector",
    "PackageInference",
    "PatternEvaluator",
    "ScopeOptions",
    "ScopeResult",
    "SelectorEvaluator",
    "TargetSelector",
    "calculate_inference",
    "compile_globs",
    "count_changed_files",
    "file_in_package",
    "filter_ignored_files",
    "get_changed_packages",
    "matches_any",
    "parse_target_selector",
    "repo_global_file_has_changed",
    "resolve_packages",
    "translate",
]
