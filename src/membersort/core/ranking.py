"""Shared ranking used by both the order checker and the reorderer."""

from __future__ import annotations

from typing import TYPE_CHECKING

from membersort.core.errors import InspectionUnavailable
from membersort.core.model import AccessibilityLevel

if TYPE_CHECKING:
    from collections.abc import Sequence

    from membersort.core.model import Member


def rank(member: Member) -> int:
    """Return the sort rank of *member* (higher means more visible)."""
    if member.accessibility is None:
        msg = f"accessibility of '{member.name}' is unknown"
        raise InspectionUnavailable(msg)
    return int(AccessibilityLevel(member.accessibility))


def sort_by_accessibility(members: Sequence[Member]) -> list[Member]:
    """Stable sort by accessibility, most visible first.

    Members of equal level keep their relative declaration order.
    """
    return sorted(members, key=rank, reverse=True)
