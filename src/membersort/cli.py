"""Membersort CLI entry point."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from membersort import __version__


@click.group()
@click.version_option(version=__version__, prog_name="membersort")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Minimal output (errors only).")
@click.pass_context
def main(ctx: click.Context, *, verbose: bool, quiet: bool) -> None:
    """Membersort - keep type members ordered by accessibility."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet

    level = logging.WARNING
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


_project_option = click.option(
    "--project",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Project root (default: current directory).",
)
_config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file (default: <project>/.membersort.yml).",
)
_paths_argument = click.argument(
    "paths", nargs=-1, type=click.Path(exists=True, path_type=Path)
)


@main.command()
@_paths_argument
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["rich", "json", "porcelain"]),
    default=None,
    help="Output format (default: rich if TTY, porcelain if piped).",
)
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Exit 1 on any violation, warnings included.",
)
@_project_option
@_config_option
def check(
    paths: tuple[Path, ...],
    *,
    fmt: str | None,
    strict: bool,
    project: Path | None,
    config_path: Path | None,
) -> None:
    """Report members declared out of accessibility order.

    Exit codes: 0 = clean or warnings only, 1 = error-severity violations
    (any violation with --strict), 2 = configuration error.
    """
    from membersort.linter import LintError
    from membersort.linter import format_json as _format_json
    from membersort.linter import format_porcelain as _format_porcelain
    from membersort.linter import format_rich as _format_rich
    from membersort.linter import lint as run_lint

    project_root = project or Path.cwd()

    # Resolve output format: explicit flag > TTY detection.
    if fmt is None:
        fmt = "rich" if sys.stdout.isatty() else "porcelain"

    try:
        result = run_lint(project_root, paths=list(paths) or None, config_path=config_path)
    except LintError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    formatters = {
        "rich": _format_rich,
        "json": _format_json,
        "porcelain": _format_porcelain,
    }
    output = formatters[fmt](result)
    if output:
        click.echo(output)

    if result.errors or (strict and result.violations):
        sys.exit(1)


@main.command()
@_paths_argument
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Report what would change without writing files.",
)
@_project_option
@_config_option
def fix(
    paths: tuple[Path, ...],
    *,
    dry_run: bool,
    project: Path | None,
    config_path: Path | None,
) -> None:
    """Arrange members by accessibility in every file with a violation.

    Exit codes: 0 = success, 1 = at least one file could not be
    transformed, 2 = configuration error.
    """
    from rich.console import Console

    from membersort.linter import LintError, render_fix_report
    from membersort.linter import fix as run_fix

    project_root = project or Path.cwd()

    try:
        report = run_fix(
            project_root, paths=list(paths) or None, config_path=config_path, dry_run=dry_run
        )
    except LintError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    console = Console()
    render_fix_report(report, console, dry_run=dry_run)

    if report.failed:
        sys.exit(1)
