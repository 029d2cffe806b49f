"""Changed command implementation."""

from __future__ import annotations

import json
from dataclasses import dataclass, field

import typer
from rich.console import Console

from monoscope.commands.base import CommandContext, SyncCommand
from monoscope.errors import MonoscopeError, ValidationError
from monoscope.filters.changes import (
    PackageChangeDetector,
    count_changed_files,
    filter_ignored_files,
    repo_global_file_has_changed,
)
from monoscope.workspace.package import ROOT_PKG_NAME
from monoscope.workspace.workspace import Workspace


@dataclass
class ChangedPackage:
    """Information about a changed package."""

    name: str
    path: str
    files_changed: int
    is_dependent: bool  # True if changed due to dependency


@dataclass
class ChangedResult:
    """Result of changed command."""

    since: str
    changed: list[ChangedPackage]
    total_files_changed: int
    root_files_changed: int = 0
    global_change: bool = False


@dataclass
class ChangedOptions:
    """Options for changed command."""

    since: str
    to_ref: str = "HEAD"
    include_dependents: bool = True
    ignore: list[str] = field(default_factory=list)
    global_deps: list[str] = field(default_factory=list)


class ChangedCommand(SyncCommand[ChangedResult]):
    """List packages that have changed in a git range."""

    def __init__(self, context: CommandContext, options: ChangedOptions) -> None:
        super().__init__(context)
        self.options = options

    def validate(self) -> list[str]:
        if not self.options.since:
            return ["a base git reference is required"]
        return []

    def execute(self) -> ChangedResult:
        """Execute the changed command."""
        config = self.workspace.config
        detector = PackageChangeDetector(
            self.context.scm,
            self.workspace.root,
            self.workspace.package_infos,
            ignore_patterns=[*config.ignore, *self.options.ignore],
            global_dep_patterns=[*config.global_deps, *self.options.global_deps],
        )
        changed_files = detector.changed_files(self.options.since, self.options.to_ref)
        global_change = repo_global_file_has_changed(detector.global_deps, changed_files)

        files_by_package = count_changed_files(
            filter_ignored_files(detector.ignore, changed_files), self.workspace.packages
        )
        root_files = files_by_package.pop(ROOT_PKG_NAME, 0)

        directly_changed = set(self.workspace.packages) if global_change else set(files_by_package)

        # Get dependents if requested
        dependent_packages: set[str] = set()
        if self.options.include_dependents:
            for pkg_name in directly_changed:
                for dep in self.workspace.graph.get_transitive_dependents(pkg_name):
                    if dep.name not in directly_changed:
                        dependent_packages.add(dep.name)

        changed_pkgs: list[ChangedPackage] = []
        for pkg_name in directly_changed | dependent_packages:
            pkg = self.workspace.get_package(pkg_name)
            changed_pkgs.append(
                ChangedPackage(
                    name=pkg_name,
                    path=pkg.directory,
                    files_changed=files_by_package.get(pkg_name, 0),
                    is_dependent=pkg_name in dependent_packages,
                )
            )

        # Sort by name
        changed_pkgs.sort(key=lambda p: p.name)

        return ChangedResult(
            since=self.options.since,
            changed=changed_pkgs,
            total_files_changed=len(changed_files),
            root_files_changed=root_files,
            global_change=global_change,
        )


def get_changed_packages(
    workspace: Workspace,
    since: str,
    *,
    to_ref: str = "HEAD",
    include_dependents: bool = True,
    ignore: list[str] | None = None,
    global_deps: list[str] | None = None,
    context: CommandContext | None = None,
) -> ChangedResult:
    """Convenience function to get changed packages.

    Args:
        workspace: Workspace to check.
        since: Base git reference.
        to_ref: Target git reference.
        include_dependents: Include transitive dependents.
        ignore: Globs of changed files to ignore.
        global_deps: Globs of files whose change affects every package.
        context: Command context (defaults to one using git).

    Returns:
        Changed result.
    """
    context = context or CommandContext(workspace=workspace)
    options = ChangedOptions(
        since=since,
        to_ref=to_ref,
        include_dependents=include_dependents,
        ignore=ignore or [],
        global_deps=global_deps or [],
    )
    cmd = ChangedCommand(context, options)
    errors = cmd.validate()
    if errors:
        raise ValidationError("; ".join(errors))
    return cmd.execute()


def handle_changed_command(
    workspace: Workspace,
    *,
    console: Console,
    error_console: Console,
    since: str,
    to_ref: str = "HEAD",
    include_dependents: bool = True,
    ignore: list[str] | None = None,
    global_deps: list[str] | None = None,
    json_output: bool = False,
    context: CommandContext | None = None,
) -> None:
    """Handle changed command."""
    try:
        result = get_changed_packages(
            workspace,
            since,
            to_ref=to_ref,
            include_dependents=include_dependents,
            ignore=ignore,
            global_deps=global_deps,
            context=context,
        )
    except MonoscopeError as e:
        error_console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1) from e

    if json_output:
        data = [
            {
                "name": p.name,
                "path": p.path,
                "files_changed": p.files_changed,
                "is_dependent": p.is_dependent,
            }
            for p in result.changed
        ]
        console.print_json(json.dumps(data))
        return

    console.print(f"Packages changed since [bold]{since}[/bold]:")
    if result.global_change:
        console.print("  [yellow]A global dependency changed; every package is affected[/yellow]")
    for pkg in result.changed:
        suffix = " [dim](dependent)[/dim]" if pkg.is_dependent else ""
        console.print(f"  - {pkg.name} ({pkg.files_changed} files){suffix}")

    if not result.changed:
        console.print("  [dim]No packages changed[/dim]")
    if result.root_files_changed:
        console.print(f"  [dim]{result.root_files_changed} files outside any package[/dim]")
