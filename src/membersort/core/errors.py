"""Declared failures of the ordering rule."""

from __future__ import annotations


class MembersortError(Exception):
    """Base class for all membersort failures."""


class InspectionUnavailable(MembersortError):
    """Raised when the host cannot supply symbol or syntax data for a member.

    Analysis of the affected type stops; other types are unaffected.
    """

    def __init__(self, message: str, *, type_name: str | None = None) -> None:
        super().__init__(message)
        self.type_name = type_name


class TransformFailure(MembersortError):
    """Raised when a reorder plan cannot be built or applied safely."""

    def __init__(self, message: str, *, type_name: str | None = None) -> None:
        super().__init__(message)
        self.type_name = type_name
