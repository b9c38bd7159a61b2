"""Member selection: which members of a type the ordering rule governs."""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING

from membersort.core.errors import InspectionUnavailable
from membersort.core.model import MemberKind

if TYPE_CHECKING:
    from membersort.core.model import Member, TypeScope

# Constructors may stay private and first (singletons), accessors are judged
# through their property, and fields conventionally sit at the top.
SELECTED_KINDS: frozenset[MemberKind] = frozenset({MemberKind.METHOD, MemberKind.PROPERTY})


def select_members(scope: TypeScope) -> tuple[Member, ...]:
    """Return the methods and properties of *scope* in declaration order.

    Each returned member carries its ``original_index`` within the selection.

    Raises
    ------
    InspectionUnavailable
        When the host did not supply a kind or accessibility for a member.
    """
    selected: list[Member] = []
    for member in scope.members:
        if member.kind is None:
            msg = f"{scope.name}: kind of member '{member.name}' is unknown"
            raise InspectionUnavailable(msg, type_name=scope.name)
        if member.kind not in SELECTED_KINDS:
            continue
        if member.accessibility is None:
            msg = f"{scope.name}: accessibility of member '{member.name}' is unknown"
            raise InspectionUnavailable(msg, type_name=scope.name)
        selected.append(dataclasses.replace(member, original_index=len(selected)))
    return tuple(selected)
