"""C# member inspector: tree-sitter parsing into per-type member snapshots."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from tree_sitter import Language, Parser

from membersort.core.errors import InspectionUnavailable
from membersort.core.model import (
    AccessibilityLevel,
    DeclarationSpan,
    Member,
    MemberKind,
    SourcePosition,
    TypeScope,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from tree_sitter import Node as TSNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LangConfig:
    """Tree-sitter configuration for C#."""

    language: Language
    comment_types: frozenset[str]
    type_kinds: dict[str, str]  # node_type -> type kind
    member_kinds: dict[str, MemberKind]  # node_type -> member kind
    container_types: frozenset[str]  # nodes that hold type declarations


def _load_csharp() -> LangConfig:
    import tree_sitter_c_sharp as tscsharp

    type_kinds = {
        "class_declaration": "class",
        "struct_declaration": "struct",
        "record_declaration": "class",
        "record_struct_declaration": "struct",
        "interface_declaration": "interface",
    }
    member_kinds = {
        "method_declaration": MemberKind.METHOD,
        "property_declaration": MemberKind.PROPERTY,
        "field_declaration": MemberKind.FIELD,
        "constructor_declaration": MemberKind.CONSTRUCTOR,
        "event_field_declaration": MemberKind.OTHER,
        "event_declaration": MemberKind.OTHER,
        "indexer_declaration": MemberKind.OTHER,
        "operator_declaration": MemberKind.OTHER,
        "conversion_operator_declaration": MemberKind.OTHER,
        "destructor_declaration": MemberKind.OTHER,
        "delegate_declaration": MemberKind.OTHER,
        "enum_declaration": MemberKind.OTHER,
    }
    member_kinds.update(dict.fromkeys(type_kinds, MemberKind.OTHER))

    return LangConfig(
        language=Language(tscsharp.language()),
        comment_types=frozenset({"comment"}),
        type_kinds=type_kinds,
        member_kinds=member_kinds,
        container_types=frozenset(
            {
                "compilation_unit",
                "namespace_declaration",
                "file_scoped_namespace_declaration",
                "declaration_list",
            }
        ),
    )


# Loaded once per process.
_LANG_CACHE: dict[str, LangConfig] = {}


def get_lang_config() -> LangConfig:
    """Return the C# grammar configuration.

    Raises ``InspectionUnavailable`` when ``tree-sitter-c-sharp`` is missing.
    """
    config = _LANG_CACHE.get("csharp")
    if config is not None:
        return config
    try:
        config = _load_csharp()
    except ImportError as exc:
        msg = "C# grammar unavailable: install tree-sitter-c-sharp"
        raise InspectionUnavailable(msg) from exc
    _LANG_CACHE["csharp"] = config
    return config


def clear_cache() -> None:
    """Clear the language config cache (useful for testing)."""
    _LANG_CACHE.clear()


# ---------------------------------------------------------------------------
# Accessibility
# ---------------------------------------------------------------------------

_ACCESS_WORDS: frozenset[str] = frozenset({"public", "private", "protected", "internal"})

_ACCESS_TABLE: dict[frozenset[str], AccessibilityLevel] = {
    frozenset({"public"}): AccessibilityLevel.PUBLIC,
    frozenset({"protected", "internal"}): AccessibilityLevel.PROTECTED_OR_INTERNAL,
    frozenset({"internal"}): AccessibilityLevel.INTERNAL,
    frozenset({"protected"}): AccessibilityLevel.PROTECTED,
    frozenset({"private", "protected"}): AccessibilityLevel.PROTECTED_AND_INTERNAL,
    frozenset({"private"}): AccessibilityLevel.PRIVATE,
}


def _modifiers(node: TSNode) -> set[str]:
    """Collect modifier keywords declared directly on *node*."""
    words: set[str] = set()
    for child in node.children:
        if child.type == "modifier":
            words.add(_text(child).strip())
        elif not child.is_named and child.type in _ACCESS_WORDS:
            words.add(child.type)
    return words


def declared_accessibility(
    modifiers: set[str], *, in_interface: bool = False, explicit_impl: bool = False
) -> AccessibilityLevel | None:
    """Map C# modifier keywords to an accessibility level.

    Members without an access modifier are public inside interfaces and
    private elsewhere.  Returns ``None`` for contradictory combinations.
    """
    access = frozenset(modifiers & _ACCESS_WORDS)
    if not access:
        if in_interface and not explicit_impl:
            return AccessibilityLevel.PUBLIC
        return AccessibilityLevel.PRIVATE
    return _ACCESS_TABLE.get(access)


# ---------------------------------------------------------------------------
# Node helpers
# ---------------------------------------------------------------------------


def _text(node: TSNode) -> str:
    return node.text.decode("utf-8") if node.text else ""


def _body(node: TSNode) -> TSNode | None:
    body = node.child_by_field_name("body")
    if body is not None and body.type == "declaration_list":
        return body
    for child in node.named_children:
        if child.type == "declaration_list":
            return child
    return None


def _name_node(node: TSNode) -> TSNode | None:
    name = node.child_by_field_name("name")
    if name is not None:
        return name
    # Fields and event fields: the first variable declarator carries the name.
    for child in node.named_children:
        if child.type == "variable_declaration":
            for declarator in child.named_children:
                if declarator.type == "variable_declarator":
                    inner = declarator.child_by_field_name("name")
                    if inner is not None:
                        return inner
                    for part in declarator.named_children:
                        if part.type == "identifier":
                            return part
    return None


def _member_name(node: TSNode) -> str:
    name_node = _name_node(node)
    if name_node is not None:
        name = _text(name_node)
        return f"~{name}" if node.type == "destructor_declaration" else name
    if node.type == "indexer_declaration":
        return "this"
    if node.type in {"operator_declaration", "conversion_operator_declaration"}:
        operator = node.child_by_field_name("operator") or node.child_by_field_name("type")
        return f"operator {_text(operator)}" if operator is not None else "operator"
    return node.type


def _is_explicit_impl(node: TSNode) -> bool:
    return any(child.type == "explicit_interface_specifier" for child in node.named_children)


def _type_kind(config: LangConfig, node: TSNode) -> str:
    """Kind of a type declaration; records take the kind of what they declare."""
    # Current grammars parse `record struct` as a record_declaration too.
    if node.type == "record_declaration" and any(c.type == "struct" for c in node.children):
        return "struct"
    return config.type_kinds[node.type]


class _Document:
    """Parsed C# document plus byte/column bookkeeping."""

    def __init__(self, source: str, path: str | None) -> None:
        self.path = path
        self.data = source.encode("utf-8")
        self.config = get_lang_config()
        self.tree = Parser(self.config.language).parse(self.data)

    def position(self, node: TSNode) -> SourcePosition:
        """1-based line and character column of *node*'s start."""
        line_start = node.start_byte - node.start_point.column
        prefix = self.data[line_start : node.start_byte].decode("utf-8", errors="replace")
        return SourcePosition(line=node.start_point.row + 1, column=len(prefix) + 1, path=self.path)

    def starts_line(self, node: TSNode) -> bool:
        line_start = node.start_byte - node.start_point.column
        return not self.data[line_start : node.start_byte].strip()

    def span(self, start: int, end: int) -> DeclarationSpan:
        return DeclarationSpan(start=start, end=end, text=self.data[start:end].decode("utf-8"))


@dataclass
class _Entry:
    """A member node and its declaration byte range, comments included."""

    node: TSNode
    start: int
    end: int


# ---------------------------------------------------------------------------
# Inspector
# ---------------------------------------------------------------------------


class CSharpInspector:
    """MemberInspector over C# source text.

    Every type declaration (each part of a partial type included) becomes
    its own TypeScope.  Nested types are reported after their outer type.
    """

    def inspect(self, source: str, *, path: str | None = None) -> list[TypeScope]:
        doc = _Document(source, path)
        scopes = [self._scope(doc, node) for node in self._type_nodes(doc, doc.tree.root_node)]
        logger.debug("Inspected %s: %d types", path or "<source>", len(scopes))
        return scopes

    def _type_nodes(self, doc: _Document, node: TSNode) -> Iterator[TSNode]:
        for child in node.named_children:
            if child.type in doc.config.type_kinds:
                yield child
                body = _body(child)
                if body is not None:
                    yield from self._type_nodes(doc, body)
            elif child.type in doc.config.container_types:
                yield from self._type_nodes(doc, child)

    def _scope(self, doc: _Document, node: TSNode) -> TypeScope:
        type_kind = _type_kind(doc.config, node)
        name_node = _name_node(node)
        body = _body(node)
        members: list[Member] = []
        if body is not None:
            members = self._members(doc, body, in_interface=type_kind == "interface")
        return TypeScope(
            name=_text(name_node) if name_node is not None else "<anonymous>",
            type_kind=type_kind,
            position=doc.position(name_node if name_node is not None else node),
            scope_id=node.start_byte,
            members=tuple(members),
        )

    def _members(self, doc: _Document, body: TSNode, *, in_interface: bool) -> list[Member]:
        entries: list[_Entry] = []
        pending: list[TSNode] = []
        last_entry: _Entry | None = None

        for child in body.named_children:
            if child.type in doc.config.comment_types:
                if last_entry is not None and child.start_point.row == last_entry.node.end_point.row:
                    last_entry.end = child.end_byte
                    continue
                if not doc.starts_line(child):
                    pending = []
                    continue
                if pending and child.start_point.row > pending[-1].end_point.row + 1:
                    pending = []
                pending.append(child)
                continue

            if child.type != "ERROR" and child.type not in doc.config.member_kinds:
                # Preprocessor directives and anything else stay anchored.
                pending = []
                last_entry = None
                continue

            start = child.start_byte
            if pending and child.start_point.row <= pending[-1].end_point.row + 1:
                start = pending[0].start_byte
            last_entry = _Entry(node=child, start=start, end=child.end_byte)
            entries.append(last_entry)
            pending = []

        members: list[Member] = []
        for entry in entries:
            span = doc.span(entry.start, entry.end)
            members.extend(self._describe(doc, entry.node, span, in_interface=in_interface))
        return members

    def _describe(
        self, doc: _Document, node: TSNode, span: DeclarationSpan, *, in_interface: bool
    ) -> list[Member]:
        if node.type == "ERROR":
            return [
                Member(
                    name="<unparsed>",
                    kind=None,
                    accessibility=None,
                    position=doc.position(node),
                    declaration=span,
                )
            ]

        kind = doc.config.member_kinds[node.type]
        accessibility = None
        if not node.has_error:
            accessibility = declared_accessibility(
                _modifiers(node), in_interface=in_interface, explicit_impl=_is_explicit_impl(node)
            )
        name_node = _name_node(node)
        name = _member_name(node)
        member = Member(
            name=name,
            kind=kind,
            accessibility=accessibility,
            position=doc.position(name_node if name_node is not None else node),
            declaration=span,
        )
        if kind is not MemberKind.PROPERTY:
            return [member]
        return [member, *self._accessors(doc, node, member)]

    def _accessors(self, doc: _Document, node: TSNode, prop: Member) -> list[Member]:
        accessor_list = node.child_by_field_name("accessors")
        if accessor_list is None:
            accessor_list = next(
                (c for c in node.named_children if c.type == "accessor_list"), None
            )
        if accessor_list is None:
            return []

        accessors: list[Member] = []
        for accessor in accessor_list.named_children:
            if accessor.type != "accessor_declaration":
                continue
            keyword = accessor.child_by_field_name("name")
            if keyword is None:
                keyword = next(
                    (c for c in accessor.children if c.type in {"get", "set", "init"}), None
                )
            label = _text(keyword) if keyword is not None else "accessor"
            own = _modifiers(accessor)
            accessibility = (
                declared_accessibility(own) if own & _ACCESS_WORDS else prop.accessibility
            )
            accessors.append(
                Member(
                    name=f"{prop.name}.{label}",
                    kind=MemberKind.PROPERTY_ACCESSOR,
                    accessibility=accessibility,
                    position=doc.position(accessor),
                )
            )
        return accessors
