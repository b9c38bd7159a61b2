"""Order checker: find the first member declared out of accessibility order."""

from __future__ import annotations

from typing import TYPE_CHECKING

from membersort.core.ranking import rank, sort_by_accessibility

if TYPE_CHECKING:
    from collections.abc import Sequence

    from membersort.core.model import Member


def find_first_violation(selected: Sequence[Member]) -> Member | None:
    """Return the first misplaced member of *selected*, or ``None``.

    *selected* is compared slot by slot with its stable accessibility sort.
    The member reported is the first one that is more visible than the
    member the sort puts in its slot, i.e. it was declared after something
    less visible.  Slots holding a less visible member are skipped; an
    unordered sequence always has at least one slot of the reported kind.
    """
    target = sort_by_accessibility(selected)
    for current, wanted in zip(selected, target):
        if rank(current) == rank(wanted):
            continue
        if rank(wanted) < rank(current):
            return current
    return None


def is_ordered(selected: Sequence[Member]) -> bool:
    """Return ``True`` when *selected* is already in non-increasing order."""
    return find_first_violation(selected) is None
