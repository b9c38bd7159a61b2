"""Data model: accessibility levels, members, and per-type scopes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class AccessibilityLevel(IntEnum):
    """Declared accessibility of a member, from least to most visible.

    The integer values are the sort ranks.  ``ProtectedOrInternal`` outranks
    ``Internal``, which outranks ``Protected``.
    """

    NOT_APPLICABLE = 0
    PRIVATE = 1
    PROTECTED_AND_INTERNAL = 2
    PROTECTED = 3
    INTERNAL = 4
    PROTECTED_OR_INTERNAL = 5
    PUBLIC = 6


class MemberKind(Enum):
    """Kind of a declared member."""

    METHOD = "method"
    PROPERTY = "property"
    FIELD = "field"
    CONSTRUCTOR = "constructor"
    PROPERTY_ACCESSOR = "property_accessor"
    OTHER = "other"


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SourcePosition:
    """1-based line/column locator of a declaration."""

    line: int
    column: int
    path: str | None = None

    def __str__(self) -> str:
        loc = f"{self.line}:{self.column}"
        return f"{self.path}:{loc}" if self.path else loc


@dataclass(frozen=True)
class DeclarationSpan:
    """Byte range ``[start, end)`` of a full member declaration and its text.

    The range covers attributes, the attached leading comment block and a
    trailing comment on the declaration's last line.
    """

    start: int
    end: int
    text: str


@dataclass(frozen=True)
class Member:
    """One declared member of a type."""

    name: str
    kind: MemberKind | None
    accessibility: AccessibilityLevel | None
    position: SourcePosition
    original_index: int | None = None  # set by the selector
    declaration: DeclarationSpan | None = None


@dataclass(frozen=True)
class TypeScope:
    """Snapshot of all members of one type declaration, in file order."""

    name: str
    type_kind: str  # "class" | "struct" | "interface"; records take class or struct
    position: SourcePosition
    scope_id: int  # byte offset of the type declaration
    members: tuple[Member, ...] = ()
