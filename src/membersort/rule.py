"""The MembersSort rule: identity, diagnostics, and per-document analysis."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from membersort.config import RuleConfig
from membersort.core.checker import find_first_violation
from membersort.core.errors import InspectionUnavailable
from membersort.core.selector import select_members
from membersort.host.csharp import CSharpInspector

if TYPE_CHECKING:
    from membersort.core.model import SourcePosition
    from membersort.host.protocols import MemberInspector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleDescriptor:
    """Stable identity of a lint rule."""

    rule_id: str
    title: str
    message_format: str
    category: str
    severity: str = "error"  # "error" | "warn"
    enabled_by_default: bool = True


MEMBERS_SORT = RuleDescriptor(
    rule_id="MembersSort",
    title="Members must be ordered by accessibility",
    message_format="{0} should be moved",
    category="Naming",
)


@dataclass(frozen=True)
class Diagnostic:
    """One reported violation; the message is only formatted on demand."""

    rule: RuleDescriptor
    member_name: str
    position: SourcePosition
    type_name: str
    scope_id: int
    severity: str = "error"

    @property
    def rule_id(self) -> str:
        return self.rule.rule_id

    @property
    def message(self) -> str:
        return self.rule.message_format.format(self.member_name)


@dataclass
class AnalysisReport:
    """Diagnostics for one document plus the types that could not be inspected."""

    diagnostics: list[Diagnostic] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)  # "<type>: <reason>"
    types_checked: int = 0


def analyze_source(
    source: str,
    *,
    path: str | None = None,
    inspector: MemberInspector | None = None,
    rule_config: RuleConfig | None = None,
    rule: RuleDescriptor = MEMBERS_SORT,
) -> AnalysisReport:
    """Check every type in *source* and report at most one diagnostic per type.

    A type whose members cannot be inspected is skipped and logged; it never
    prevents the remaining types from being checked.
    """
    config = rule_config or RuleConfig()
    report = AnalysisReport()
    if not config.enabled:
        return report

    inspector = inspector or CSharpInspector()
    for scope in inspector.inspect(source, path=path):
        if scope.type_kind not in config.type_kinds:
            continue
        try:
            violating = find_first_violation(select_members(scope))
        except InspectionUnavailable as exc:
            logger.warning("Skipping %s in %s: %s", scope.name, path or "<source>", exc)
            report.skipped.append(f"{scope.name}: {exc}")
            continue

        report.types_checked += 1
        if violating is None:
            continue
        report.diagnostics.append(
            Diagnostic(
                rule=rule,
                member_name=violating.name,
                position=violating.position,
                type_name=scope.name,
                scope_id=scope.scope_id,
                severity=config.severity,
            )
        )
    return report
