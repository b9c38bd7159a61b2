"""Linter orchestrator: discover sources, analyze or fix them, format results."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from membersort.codefix import FixStatus, fix_source
from membersort.config import SOURCE_EXTENSIONS, ConfigError, load_config
from membersort.core.errors import InspectionUnavailable
from membersort.host.csharp import CSharpInspector
from membersort.rule import analyze_source

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from rich.console import Console

    from membersort.config import Config
    from membersort.rule import Diagnostic

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class LintError(Exception):
    """Raised when lint encounters a configuration error."""


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class LintResult:
    """Result of a lint run."""

    violations: list[Diagnostic] = field(default_factory=list)
    files_scanned: int = 0
    types_checked: int = 0
    skipped: list[str] = field(default_factory=list)
    elapsed_ms: float = 0.0

    @property
    def errors(self) -> list[Diagnostic]:
        return [v for v in self.violations if v.severity == "error"]


@dataclass(frozen=True)
class FileFix:
    """Fix outcome for one file."""

    path: str
    status: FixStatus
    types_fixed: tuple[str, ...] = ()
    error: str | None = None


@dataclass
class FixReport:
    """Result of a fix run."""

    files: list[FileFix] = field(default_factory=list)
    files_scanned: int = 0
    elapsed_ms: float = 0.0

    @property
    def changed(self) -> list[FileFix]:
        return [f for f in self.files if f.status is FixStatus.APPLIED]

    @property
    def failed(self) -> list[FileFix]:
        return [f for f in self.files if f.status is FixStatus.FAILED]


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def _relative(path: Path, project_root: Path) -> str:
    try:
        return path.resolve().relative_to(project_root.resolve()).as_posix()
    except ValueError:
        return path.as_posix()


def discover_files(
    project_root: Path, config: Config, paths: Sequence[Path] | None = None
) -> list[Path]:
    """Return the source files to analyze, sorted and de-duplicated.

    Explicit *paths* take precedence over the configured ``paths``.
    Excluded globs apply to files found by walking directories only.
    """
    roots = list(paths) if paths else [project_root / p for p in config.paths]
    found: dict[str, Path] = {}
    for root in roots:
        if root.is_file():
            found.setdefault(str(root.resolve()), root)
            continue
        if not root.is_dir():
            logger.warning("Path not found: %s", root)
            continue
        for file_path in sorted(root.rglob("*")):
            if file_path.suffix not in SOURCE_EXTENSIONS or not file_path.is_file():
                continue
            if config.is_excluded(_relative(file_path, project_root)):
                continue
            found.setdefault(str(file_path.resolve()), file_path)
    return sorted(found.values())


def _read(file_path: Path) -> str | None:
    try:
        return file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        logger.warning("Cannot read file: %s", file_path)
        return None


def _load(project_root: Path, config_path: Path | None) -> Config:
    try:
        return load_config(project_root, config_path)
    except ConfigError as exc:
        msg = f"Invalid configuration: {exc}"
        raise LintError(msg) from exc


# ---------------------------------------------------------------------------
# Main entry points
# ---------------------------------------------------------------------------


def lint(
    project_root: Path,
    *,
    paths: Sequence[Path] | None = None,
    config_path: Path | None = None,
) -> LintResult:
    """Analyze every source file and collect diagnostics.

    Parameters
    ----------
    project_root:
        Root of the project (where ``.membersort.yml`` lives).
    paths:
        Optional files or directories overriding the configured ``paths``.
    config_path:
        Optional explicit configuration file.

    Raises
    ------
    LintError
        When the configuration file is present but invalid.
    """
    start = time.monotonic()
    config = _load(project_root, config_path)
    result = LintResult()
    inspector = CSharpInspector()

    for file_path in discover_files(project_root, config, paths):
        rel_path = _relative(file_path, project_root)
        source = _read(file_path)
        if source is None:
            result.skipped.append(f"{rel_path}: unreadable")
            continue
        result.files_scanned += 1
        try:
            report = analyze_source(
                source, path=rel_path, inspector=inspector, rule_config=config.rule
            )
        except InspectionUnavailable as exc:
            logger.warning("Cannot inspect %s: %s", rel_path, exc)
            result.skipped.append(f"{rel_path}: {exc}")
            continue
        result.violations.extend(report.diagnostics)
        result.types_checked += report.types_checked
        result.skipped.extend(f"{rel_path}: {reason}" for reason in report.skipped)

    result.elapsed_ms = (time.monotonic() - start) * 1000
    return result


def fix(
    project_root: Path,
    *,
    paths: Sequence[Path] | None = None,
    config_path: Path | None = None,
    dry_run: bool = False,
) -> FixReport:
    """Apply the fix to every source file; each file is an independent transform.

    A failing file is reported and left untouched; other files still get fixed.
    """
    start = time.monotonic()
    config = _load(project_root, config_path)
    report = FixReport()

    for file_path in discover_files(project_root, config, paths):
        rel_path = _relative(file_path, project_root)
        source = _read(file_path)
        if source is None:
            report.files.append(FileFix(rel_path, FixStatus.FAILED, error="unreadable"))
            continue
        report.files_scanned += 1
        outcome = fix_source(source, path=rel_path, rule_config=config.rule)
        if outcome.status is FixStatus.UNCHANGED:
            continue
        if outcome.changed and not dry_run:
            file_path.write_text(outcome.text, encoding="utf-8")
        report.files.append(
            FileFix(
                path=rel_path,
                status=outcome.status,
                types_fixed=outcome.types_fixed,
                error=str(outcome.error) if outcome.error is not None else None,
            )
        )

    report.elapsed_ms = (time.monotonic() - start) * 1000
    return report


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------


def format_rich(result: LintResult) -> str:
    """Format a LintResult as human-readable text.

    Example output::

        x src/Billing/Invoice.cs:14:24 Counter should be moved
          MembersSort (error) in Invoice

        1 violation found (3 files, 4 types checked, 0.1s)
    """
    lines: list[str] = []
    elapsed_str = f"{result.elapsed_ms / 1000:.1f}s"
    summary = f"{result.files_scanned} files, {result.types_checked} types checked, {elapsed_str}"

    for v in result.violations:
        lines.append(f"✗ {v.position} {v.message}")
        lines.append(f"  {v.rule_id} ({v.severity}) in {v.type_name}")
        lines.append("")

    for reason in result.skipped:
        lines.append(f"! skipped {reason}")
    if result.skipped:
        lines.append("")

    if result.violations:
        count = len(result.violations)
        noun = "violation" if count == 1 else "violations"
        lines.append(f"{count} {noun} found ({summary})")
    else:
        lines.append(f"✓ No violations found ({summary})")
    return "\n".join(lines)


def format_json(result: LintResult) -> str:
    """Format a LintResult as structured JSON with ``violations`` and ``summary``."""
    violations_list: list[dict[str, object]] = [
        {
            "rule_id": v.rule_id,
            "severity": v.severity,
            "file_path": v.position.path,
            "line": v.position.line,
            "column": v.position.column,
            "type_name": v.type_name,
            "member_name": v.member_name,
            "message": v.message,
        }
        for v in result.violations
    ]
    output: dict[str, object] = {
        "violations": violations_list,
        "summary": {
            "violations_count": len(result.violations),
            "files_scanned": result.files_scanned,
            "types_checked": result.types_checked,
            "skipped": result.skipped,
            "elapsed_ms": result.elapsed_ms,
        },
    }
    return json.dumps(output, indent=2)


def format_porcelain(result: LintResult) -> str:
    """Format a LintResult as one line per violation.

    Format: ``file_path:line:column:severity:rule_id:message``.
    Returns empty string when there are no violations.
    """
    lines: list[str] = []
    for v in result.violations:
        file_path = v.position.path or ""
        lines.append(
            f"{file_path}:{v.position.line}:{v.position.column}:{v.severity}:{v.rule_id}:{v.message}"
        )
    return "\n".join(lines)


def render_fix_report(report: FixReport, console: Console, *, dry_run: bool = False) -> None:
    """Render a FixReport as a Rich table."""
    from rich.table import Table

    if not report.files:
        console.print(f"[green]Nothing to arrange[/] ({report.files_scanned} files scanned)")
        return

    verb = "Would arrange" if dry_run else "Arranged"
    table = Table(title=f"{verb} members by accessibility", show_lines=False)
    table.add_column("File", style="cyan")
    table.add_column("Status")
    table.add_column("Types / error")
    for entry in report.files:
        if entry.status is FixStatus.FAILED:
            table.add_row(entry.path, "[red]failed[/]", entry.error or "")
        else:
            table.add_row(entry.path, f"[green]{entry.status.value}[/]", ", ".join(entry.types_fixed))
    console.print(table)
    console.print(
        f"{len(report.changed)} changed, {len(report.failed)} failed "
        f"({report.files_scanned} files scanned)"
    )
