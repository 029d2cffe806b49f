"""monoscope - package scope resolution for Python monorepos.

Decides which workspace packages a task invocation runs in:
- Filter patterns (``--filter``) and legacy selection flags
- Scope inference from a directory inside the workspace
- Git-based change detection with ignore and global-dependency globs
"""

from monoscope.config import MonoscopeConfig, load_config
from monoscope.errors import (
    ConfigurationError,
    CyclicDependencyError,
    GitError,
    InferenceResolutionError,
    InvalidGlobError,
    MonoscopeError,
    PackageNotFoundError,
    PatternEvaluationError,
    ValidationError,
    WorkspaceNotFoundError,
)
from monoscope.filters import (
    LegacyFilter,
    PackageChangeDetector,
    PackageInference,
    ScopeOptions,
    ScopeResult,
    resolve_packages,
)
from monoscope.workspace import (
    ROOT_PKG_NAME,
    DependencyGraph,
    Package,
    PackageName,
    PackageSet,
    Workspace,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Core
    "Workspace",
    "Package",
    "PackageName",
    "PackageSet",
    "ROOT_PKG_NAME",
    "DependencyGraph",
    "MonoscopeConfig",
    "load_config",
    # Scope resolution
    "LegacyFilter",
    "PackageChangeDetector",
    "PackageInference",
    "ScopeOptions",
    "ScopeResult",
    "resolve_packages",
    # Errors
    "MonoscopeError",
    "ConfigurationError",
    "WorkspaceNotFoundError",
    "PackageNotFoundError",
    "CyclicDependencyError",
    "InvalidGlobError",
    "GitError",
    "InferenceResolutionError",
    "PatternEvaluationError",
    "ValidationError",
]
