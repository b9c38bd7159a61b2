"""Code fix: arrange members by accessibility for reported diagnostics."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from membersort.core.errors import InspectionUnavailable, MembersortError, TransformFailure
from membersort.core.reorderer import plan_reorder
from membersort.host.csharp import CSharpInspector
from membersort.host.editor import TextDeclarationEditor
from membersort.rule import MEMBERS_SORT, analyze_source

if TYPE_CHECKING:
    import threading
    from collections.abc import Iterable, Sequence

    from membersort.config import RuleConfig
    from membersort.core.model import DeclarationSpan
    from membersort.host.protocols import DeclarationEditor, MemberInspector
    from membersort.rule import Diagnostic

logger = logging.getLogger(__name__)

FIX_TITLE = "Arrange members by accessibility"
FIXABLE_RULE_IDS: frozenset[str] = frozenset({MEMBERS_SORT.rule_id})


class FixStatus(Enum):
    APPLIED = "applied"
    UNCHANGED = "unchanged"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class FixResult:
    """Outcome of a fix; the caller decides what to do with a failure."""

    status: FixStatus
    text: str
    error: MembersortError | None = None
    types_fixed: tuple[str, ...] = ()

    @property
    def changed(self) -> bool:
        return self.status is FixStatus.APPLIED


@dataclass(frozen=True)
class CodeAction:
    """A fix offered for one diagnostic."""

    title: str
    diagnostic: Diagnostic
    equivalence_key: str = MEMBERS_SORT.rule_id

    def apply(
        self,
        source: str,
        *,
        path: str | None = None,
        cancel: threading.Event | None = None,
    ) -> FixResult:
        return fix_document(source, [self.diagnostic], path=path, cancel=cancel)


def register_code_fixes(diagnostics: Iterable[Diagnostic]) -> list[CodeAction]:
    """Offer one code action per fixable diagnostic."""
    return [
        CodeAction(title=FIX_TITLE, diagnostic=d)
        for d in diagnostics
        if d.rule_id in FIXABLE_RULE_IDS
    ]


def _cancelled(cancel: threading.Event | None) -> bool:
    return cancel is not None and cancel.is_set()


def fix_document(
    source: str,
    diagnostics: Sequence[Diagnostic],
    *,
    path: str | None = None,
    inspector: MemberInspector | None = None,
    editor: DeclarationEditor | None = None,
    cancel: threading.Event | None = None,
) -> FixResult:
    """Reorder the members of every type referenced by *diagnostics*.

    All types are rewritten in one atomic edit of the document snapshot.
    Cancellation is checked before starting and before committing.
    """
    if _cancelled(cancel):
        return FixResult(status=FixStatus.CANCELLED, text=source)

    inspector = inspector or CSharpInspector()
    editor = editor or TextDeclarationEditor()

    scope_ids: list[int] = []
    for diagnostic in diagnostics:
        if diagnostic.rule_id in FIXABLE_RULE_IDS and diagnostic.scope_id not in scope_ids:
            scope_ids.append(diagnostic.scope_id)
    if not scope_ids:
        return FixResult(status=FixStatus.UNCHANGED, text=source)

    edits: dict[DeclarationSpan, str] = {}
    fixed: list[str] = []
    try:
        scopes = {scope.scope_id: scope for scope in inspector.inspect(source, path=path)}
        for scope_id in scope_ids:
            scope = scopes.get(scope_id)
            if scope is None:
                msg = f"no type declaration at offset {scope_id}; the document has changed"
                raise TransformFailure(msg)
            plan = plan_reorder(scope)
            if not plan.is_empty:
                edits.update(plan.edits)
                fixed.append(plan.type_name)

        if _cancelled(cancel):
            return FixResult(status=FixStatus.CANCELLED, text=source)

        new_text = editor.apply(source, edits)
    except (InspectionUnavailable, TransformFailure) as exc:
        logger.warning("Cannot arrange members in %s: %s", path or "<source>", exc)
        return FixResult(status=FixStatus.FAILED, text=source, error=exc)

    if new_text == source:
        return FixResult(status=FixStatus.UNCHANGED, text=source)
    logger.debug("Arranged members of %s in %s", ", ".join(fixed), path or "<source>")
    return FixResult(status=FixStatus.APPLIED, text=new_text, types_fixed=tuple(fixed))


def fix_source(
    source: str,
    *,
    path: str | None = None,
    rule_config: RuleConfig | None = None,
    cancel: threading.Event | None = None,
) -> FixResult:
    """Analyze *source* and apply the fix for every diagnostic found (fix-all)."""
    inspector = CSharpInspector()
    try:
        report = analyze_source(source, path=path, inspector=inspector, rule_config=rule_config)
    except InspectionUnavailable as exc:
        logger.warning("Cannot inspect %s: %s", path or "<source>", exc)
        return FixResult(status=FixStatus.FAILED, text=source, error=exc)
    return fix_document(
        source, report.diagnostics, path=path, inspector=inspector, cancel=cancel
    )
