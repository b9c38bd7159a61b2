"""Core ordering policy: model, selection, checking, reordering."""

from membersort.core.checker import find_first_violation, is_ordered
from membersort.core.errors import InspectionUnavailable, MembersortError, TransformFailure
from membersort.core.model import (
    AccessibilityLevel,
    DeclarationSpan,
    Member,
    MemberKind,
    SourcePosition,
    TypeScope,
)
from membersort.core.ranking import rank, sort_by_accessibility
from membersort.core.reorderer import ReorderPlan, plan_reorder, reorder
from membersort.core.selector import SELECTED_KINDS, select_members

__all__ = [
    "SELECTED_KINDS",
    "AccessibilityLevel",
    "DeclarationSpan",
    "InspectionUnavailable",
    "Member",
    "MemberKind",
    "MembersortError",
    "ReorderPlan",
    "SourcePosition",
    "TransformFailure",
    "TypeScope",
    "find_first_violation",
    "is_ordered",
    "plan_reorder",
    "rank",
    "reorder",
    "select_members",
    "sort_by_accessibility",
]
