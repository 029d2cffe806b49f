"""Inferring an implicit package scope from a directory."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from monoscope.errors import InferenceResolutionError
from monoscope.workspace.package import ROOT_PKG_NAME, Package, PackageName

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackageInference:
    """Scope implied by the directory a command was run from.

    Attributes:
        package_name: The single package containing the directory, or None
            to mean every package under ``directory_root``.
        directory_root: Absolute inference directory.
    """

    package_name: PackageName | None
    directory_root: Path


def resolve_unknown_path(root: Path, raw_path: str) -> Path:
    """Resolve a path that may be absolute or relative to root.

    The result is normalized lexically; the filesystem is not consulted.
    """
    path = Path(raw_path)
    if not path.is_absolute():
        path = root / path
    return Path(os.path.normpath(path))


def contains_path(parent: Path, child: Path) -> bool:
    """Check whether child is parent or lies below it.

    Raises:
        InferenceResolutionError: If the paths cannot be related, e.g. they
            sit on different drives.
    """
    try:
        rel = os.path.relpath(child, parent)
    except ValueError as e:
        raise InferenceResolutionError(str(child), str(e)) from e
    return rel != ".." and not rel.startswith(".." + os.sep) and not os.path.isabs(rel)


def calculate_inference(
    repo_root: Path,
    raw_inference_dir: str,
    packages: Mapping[PackageName, Package],
) -> PackageInference | None:
    """Determine the package scope implied by a directory.

    Args:
        repo_root: Absolute workspace root.
        raw_inference_dir: Inference directory, absolute or relative to the
            root. Empty means no inference.
        packages: Package index.

    Returns:
        None if no inference was requested; a directive naming the package
        containing the directory; or a directive with no package meaning
        "every package under this directory" (also used when the directory
        is unrelated to every package).

    Raises:
        InferenceResolutionError: If a path containment check fails.
    """
    if not raw_inference_dir:
        return None

    inference_path = resolve_unknown_path(Path(repo_root), raw_inference_dir)

    # The root package contains every path, so it never takes part.
    candidates = sorted(
        (p for name, p in packages.items() if name != ROOT_PKG_NAME),
        key=lambda p: (p.directory, p.name),
    )
    for package in candidates:
        package_path = resolve_unknown_path(Path(repo_root), package.directory)
        if contains_path(package_path, inference_path):
            logger.debug("inferred package %s from %s", package.name, inference_path)
            return PackageInference(package_name=package.name, directory_root=inference_path)
        if contains_path(inference_path, package_path):
            # some package lives below the inference dir
            break

    logger.debug("inferred all packages under %s", inference_path)
    return PackageInference(package_name=None, directory_root=inference_path)
