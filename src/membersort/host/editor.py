"""Atomic text-span editor for declaration replacements."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from membersort.core.errors import TransformFailure

if TYPE_CHECKING:
    from collections.abc import Mapping

    from membersort.core.model import DeclarationSpan

logger = logging.getLogger(__name__)


class TextDeclarationEditor:
    """Replace byte spans of a UTF-8 document in one pass.

    Every span is validated against the document before anything is
    written, so a bad plan leaves the document untouched.
    """

    def apply(self, source: str, edits: Mapping[DeclarationSpan, str]) -> str:
        if not edits:
            return source

        data = source.encode("utf-8")
        ordered = sorted(edits.items(), key=lambda item: (item[0].start, item[0].end))

        previous_end = 0
        for span, _replacement in ordered:
            if span.start < previous_end:
                msg = f"overlapping edits at byte {span.start}"
                raise TransformFailure(msg)
            if span.end > len(data) or span.start > span.end:
                msg = f"edit span {span.start}-{span.end} is outside the document"
                raise TransformFailure(msg)
            current = data[span.start : span.end].decode("utf-8", errors="replace")
            if current != span.text:
                msg = f"document changed under edit span {span.start}-{span.end}"
                raise TransformFailure(msg)
            previous_end = span.end

        chunks: list[bytes] = []
        cursor = 0
        for span, replacement in ordered:
            chunks.append(data[cursor : span.start])
            chunks.append(replacement.encode("utf-8"))
            cursor = span.end
        chunks.append(data[cursor:])

        logger.debug("Applied %d declaration edits", len(ordered))
        return b"".join(chunks).decode("utf-8")
