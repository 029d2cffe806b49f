"""monoscope CLI application."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from monoscope.errors import MonoscopeError
from monoscope.filters import LegacyFilter, ScopeOptions
from monoscope.workspace import Workspace


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from monoscope import __version__

        print(f"monoscope {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="monoscope",
    help="Select the monorepo packages a task should run in",
    no_args_is_help=True,
    add_completion=False,
)

console = Console()
error_console = Console(stderr=True)


def configure_logging(verbose: bool) -> None:
    """Send monoscope log records to stderr through rich."""
    logger = logging.getLogger("monoscope")
    logger.handlers.clear()
    logger.addHandler(
        RichHandler(console=error_console, show_time=False, show_path=False, markup=False)
    )
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


@app.callback()
def _app_callback(
    version: Annotated[  # noqa: ARG001
        bool,
        typer.Option("--version", "-V", help="Show version and exit", callback=version_callback),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """Select the monorepo packages a task should run in."""
    configure_logging(verbose)


def get_workspace(path: Path | None = None) -> Workspace:
    """Load workspace from current directory or specified path."""
    try:
        return Workspace.discover(path)
    except MonoscopeError as e:
        error_console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1) from e


@app.command("list")
def list_cmd(
    filter_patterns: Annotated[
        list[str] | None,
        typer.Option(
            "--filter",
            "-F",
            help="Package selector (repeatable), e.g. '...app', 'lib...', '{./apps}', '[main]'",
        ),
    ] = None,
    ignore: Annotated[
        list[str] | None,
        typer.Option("--ignore", help="Changed files to ignore when detecting changes (glob)"),
    ] = None,
    global_deps: Annotated[
        list[str] | None,
        typer.Option("--global-deps", help="Files whose change affects every package (glob)"),
    ] = None,
    infer_filter_root: Annotated[
        str,
        typer.Option(
            "--infer-filter-root",
            help="Workspace-relative directory used to infer packages",
        ),
    ] = "",
    scope: Annotated[
        list[str] | None,
        typer.Option("--scope", "-s", help="Entry point package(s); supports globs"),
    ] = None,
    include_dependencies: Annotated[
        bool,
        typer.Option("--include-dependencies", help="Include dependencies of the entry points"),
    ] = False,
    no_deps: Annotated[
        bool,
        typer.Option("--no-deps", help="Exclude dependents of the entry points"),
    ] = False,
    since: Annotated[
        str,
        typer.Option("--since", help="Only packages changed since this git ref (merge base)"),
    ] = "",
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
    names_only: Annotated[
        bool,
        typer.Option("--names", help="Output package names only"),
    ] = False,
) -> None:
    """List the packages selected by filters."""
    from monoscope.commands import ListFormat, handle_list_command

    workspace = get_workspace()

    fmt = ListFormat.TABLE
    if json_output:
        fmt = ListFormat.JSON
    elif names_only:
        fmt = ListFormat.NAMES

    options = ScopeOptions(
        legacy_filter=LegacyFilter(
            include_dependencies=include_dependencies,
            skip_dependents=no_deps,
            entrypoints=scope or [],
            since=since,
        ),
        filter_patterns=filter_patterns or [],
        ignore_patterns=ignore or [],
        global_dep_patterns=global_deps or [],
        package_inference_root=infer_filter_root,
    )

    handle_list_command(
        workspace,
        console=console,
        error_console=error_console,
        scope=options,
        format=fmt,
    )


@app.command()
def changed(
    since: Annotated[str, typer.Argument(help="Git reference (branch, tag, commit)")],
    to_ref: Annotated[
        str,
        typer.Option("--to", help="Target git reference"),
    ] = "HEAD",
    no_dependents: Annotated[
        bool,
        typer.Option("--no-dependents", help="Exclude dependent packages"),
    ] = False,
    ignore: Annotated[
        list[str] | None,
        typer.Option("--ignore", help="Changed files to ignore (glob)"),
    ] = None,
    global_deps: Annotated[
        list[str] | None,
        typer.Option("--global-deps", help="Files whose change affects every package (glob)"),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """List packages changed since a git reference."""
    from monoscope.commands import handle_changed_command

    workspace = get_workspace()
    handle_changed_command(
        workspace,
        console=console,
        error_console=error_console,
        since=since,
        to_ref=to_ref,
        include_dependents=not no_dependents,
        ignore=ignore,
        global_deps=global_deps,
        json_output=json_output,
    )


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
