"""Shared test fixtures for Membersort."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from membersort.core.model import (
    AccessibilityLevel,
    DeclarationSpan,
    Member,
    MemberKind,
    SourcePosition,
    TypeScope,
)

MemberFactory = Callable[..., Member]


@pytest.fixture()
def make_member() -> MemberFactory:
    """Build members with sequential positions and one-line declarations."""
    counter = {"line": 0, "offset": 0}

    def _make(
        name: str,
        accessibility: AccessibilityLevel | None = AccessibilityLevel.PUBLIC,
        kind: MemberKind | None = MemberKind.METHOD,
        *,
        with_declaration: bool = True,
    ) -> Member:
        counter["line"] += 1
        text = f"void {name}() {{ }}"
        start = counter["offset"]
        counter["offset"] += len(text) + 1
        return Member(
            name=name,
            kind=kind,
            accessibility=accessibility,
            position=SourcePosition(line=counter["line"], column=5),
            declaration=DeclarationSpan(start, start + len(text), text) if with_declaration else None,
        )

    return _make


@pytest.fixture()
def make_scope() -> Callable[..., TypeScope]:
    """Wrap members into a class TypeScope."""

    def _make(*members: Member, name: str = "Sample") -> TypeScope:
        return TypeScope(
            name=name,
            type_kind="class",
            position=SourcePosition(line=1, column=7),
            scope_id=0,
            members=tuple(members),
        )

    return _make
