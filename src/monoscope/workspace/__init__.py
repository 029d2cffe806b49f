"""Workspace model: packages, dependency graph and discovery."""

from monoscope.workspace.graph import DependencyGraph
from monoscope.workspace.package import (
    ROOT_PKG_NAME,
    Package,
    PackageName,
    PackageSet,
)
from monoscope.workspace.workspace import Workspace, discover_packages

__all__ = [
    "ROOT_PKG_NAME",
    "DependencyGraph",
    "Package",
    "PackageName",
    "PackageSet",
    "Workspace",
    "discover_packages",
]
