"""Reorderer: positional replacement plan that restores accessibility order."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from membersort.core.errors import TransformFailure
from membersort.core.ranking import sort_by_accessibility
from membersort.core.selector import select_members

if TYPE_CHECKING:
    from collections.abc import Sequence

    from membersort.core.model import DeclarationSpan, Member, TypeScope


@dataclass(frozen=True)
class ReorderPlan:
    """Replacement plan for one type: original span -> new declaration text.

    Positions whose content does not change are left out of ``edits``.
    """

    type_name: str
    scope_id: int
    edits: dict[DeclarationSpan, str] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.edits


def _declarations(members: Sequence[Member]) -> list[DeclarationSpan]:
    spans = [m.declaration for m in members if m.declaration is not None]
    if len(spans) != len(members):
        missing = [m.name for m in members if m.declaration is None]
        msg = f"no declaration available for: {', '.join(missing)}"
        raise TransformFailure(msg)
    return spans


def reorder(selected: Sequence[Member]) -> list[str]:
    """Return, for each original position, the declaration text that goes there.

    Raises
    ------
    TransformFailure
        When a member has no declaration text to move.
    """
    return [span.text for span in _declarations(sort_by_accessibility(selected))]


def plan_reorder(scope: TypeScope) -> ReorderPlan:
    """Build the replacement plan for *scope*.

    Raises
    ------
    TransformFailure
        When the plan cannot be built without risking a partial edit.
    """
    selected = select_members(scope)
    try:
        spans = _declarations(selected)
        contents = reorder(selected)
    except TransformFailure as exc:
        raise TransformFailure(f"{scope.name}: {exc}", type_name=scope.name) from exc

    edits: dict[DeclarationSpan, str] = {}
    previous_end = -1
    for member, span, content in zip(selected, spans, contents):
        if span.start < previous_end or span.end < span.start:
            msg = f"{scope.name}: declaration of '{member.name}' overlaps its predecessor"
            raise TransformFailure(msg, type_name=scope.name)
        previous_end = span.end
        if span.text != content:
            edits[span] = content

    return ReorderPlan(type_name=scope.name, scope_id=scope.scope_id, edits=edits)
