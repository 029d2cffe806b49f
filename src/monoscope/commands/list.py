"""List command implementation."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.table import Table

from monoscope.commands.base import CommandContext, SyncCommand
from monoscope.errors import MonoscopeError
from monoscope.filters.scope import ScopeOptions, resolve_packages

if TYPE_CHECKING:
    from monoscope.workspace.workspace import Workspace


class ListFormat(Enum):
    """Output format for list command."""

    TABLE = "table"
    JSON = "json"
    NAMES = "names"


@dataclass
class PackageInfo:
    """Information about a package for display."""

    name: str
    version: str
    path: str
    dependencies: list[str]
    dependents: list[str]


@dataclass
class ListResult:
    """Result of list command."""

    packages: list[PackageInfo]
    is_all_packages: bool


@dataclass
class ListOptions:
    """Options for list command."""

    scope: ScopeOptions = field(default_factory=ScopeOptions)
    format: ListFormat = ListFormat.TABLE


class ListCommand(SyncCommand[ListResult]):
    """List the packages selected by the scope options."""

    def __init__(self, context: CommandContext, options: ListOptions | None = None) -> None:
        super().__init__(context)
        self.options = options or ListOptions()

    def scope_options(self) -> ScopeOptions:
        """Scope options merged with the config file.

        Config globs come first. The config inference root applies only when
        none was given explicitly.
        """
        config = self.workspace.config
        scope = self.options.scope
        return replace(
            scope,
            package_inference_root=scope.package_inference_root or config.infer_filter_root,
            ignore_patterns=[*config.ignore, *scope.ignore_patterns],
            global_dep_patterns=[*config.global_deps, *scope.global_dep_patterns],
        )

    def execute(self) -> ListResult:
        """Execute the list command."""
        result = resolve_packages(
            self.scope_options(),
            self.workspace.root,
            self.context.scm,
            self.workspace,
        )
        graph = self.workspace.graph

        infos: list[PackageInfo] = []
        for name in result.packages:
            pkg = self.workspace.get_package(name)
            infos.append(
                PackageInfo(
                    name=pkg.name,
                    version=pkg.version,
                    path=pkg.directory,
                    dependencies=[d.name for d in graph.get_dependencies(name)],
                    dependents=[d.name for d in graph.get_dependents(name)],
                )
            )

        return ListResult(packages=infos, is_all_packages=result.is_all_packages)


def list_packages(
    workspace: Workspace,
    scope: ScopeOptions | None = None,
    *,
    context: CommandContext | None = None,
) -> ListResult:
    """Convenience function to list selected packages.

    Args:
        workspace: Workspace to list.
        scope: Selection options.
        context: Command context (defaults to one using git).

    Returns:
        List result.
    """
    context = context or CommandContext(workspace=workspace)
    options = ListOptions(scope=scope or ScopeOptions())
    return ListCommand(context, options).execute()


def handle_list_command(
    workspace: Workspace,
    *,
    console: Console,
    error_console: Console,
    scope: ScopeOptions,
    format: ListFormat = ListFormat.TABLE,
    context: CommandContext | None = None,
) -> None:
    """Handle list command."""
    try:
        result = list_packages(workspace, scope, context=context)
    except MonoscopeError as e:
        error_console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1) from e

    if format is ListFormat.JSON:
        data = {
            "all_packages": result.is_all_packages,
            "packages": [
                {
                    "name": p.name,
                    "version": p.version,
                    "path": p.path,
                    "dependencies": p.dependencies,
                    "dependents": p.dependents,
                }
                for p in result.packages
            ],
        }
        console.print_json(json.dumps(data))
    elif format is ListFormat.NAMES:
        for pkg in result.packages:
            console.print(pkg.name, highlight=False)
    else:
        title = "Packages (all)" if result.is_all_packages else "Packages"
        table = Table(title=title)
        table.add_column("Name", style="bold")
        table.add_column("Version")
        table.add_column("Path")
        table.add_column("Dependencies")

        for pkg in result.packages:
            deps = ", ".join(pkg.dependencies) if pkg.dependencies else "-"
            table.add_row(pkg.name, pkg.version, pkg.path, deps)

        console.print(table)
        if not result.packages:
            console.print("[dim]No packages selected[/dim]")
