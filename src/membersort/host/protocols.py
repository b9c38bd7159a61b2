"""Narrow collaborator interfaces the rule depends on instead of a compiler API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Mapping

    from membersort.core.model import DeclarationSpan, TypeScope


class MemberInspector(Protocol):
    """Turns a document into per-type member snapshots."""

    def inspect(self, source: str, *, path: str | None = None) -> list[TypeScope]:
        """Return one TypeScope per type declaration, in file order.

        Raises ``InspectionUnavailable`` when the document cannot be inspected.
        """
        ...


class DeclarationEditor(Protocol):
    """Applies positional declaration replacements to a document."""

    def apply(self, source: str, edits: Mapping[DeclarationSpan, str]) -> str:
        """Return *source* with every edit applied, or raise ``TransformFailure``.

        Either all edits are applied or none are.
        """
        ...
