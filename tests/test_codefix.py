"""Tests for membersort.codefix — arranging members by accessibility."""

from __future__ import annotations

import textwrap
import threading

from membersort.codefix import (
    FIX_TITLE,
    FixStatus,
    fix_document,
    fix_source,
    register_code_fixes,
)
from membersort.core.errors import InspectionUnavailable, TransformFailure
from membersort.core.model import (
    AccessibilityLevel,
    Member,
    MemberKind,
    SourcePosition,
    TypeScope,
)
from membersort.host.csharp import CSharpInspector
from membersort.rule import MEMBERS_SORT, Diagnostic, RuleDescriptor, analyze_source

TYPE_NAME = """\
using System;

namespace ConsoleApplication1
{
    class TypeName
    {
        private int CounterPrivate { get; set; }

        public int Counter { get; set; }
    }
}
"""

TYPE_NAME_FIXED = """\
using System;

namespace ConsoleApplication1
{
    class TypeName
    {
        public int Counter { get; set; }

        private int CounterPrivate { get; set; }
    }
}
"""


def _fix(source: str) -> str:
    result = fix_source(source)
    assert result.status is not FixStatus.FAILED, result.error
    return result.text


class TestRegisterCodeFixes:
    def test_one_action_per_diagnostic(self) -> None:
        diagnostics = analyze_source(TYPE_NAME).diagnostics
        actions = register_code_fixes(diagnostics)
        assert [a.title for a in actions] == [FIX_TITLE]
        assert FIX_TITLE == "Arrange members by accessibility"

    def test_other_rules_are_ignored(self) -> None:
        (diagnostic,) = analyze_source(TYPE_NAME).diagnostics
        other = RuleDescriptor("Other", "t", "{0}", "Naming")
        foreign = Diagnostic(
            rule=other,
            member_name="x",
            position=diagnostic.position,
            type_name="T",
            scope_id=0,
        )
        assert register_code_fixes([foreign]) == []

    def test_action_applies_fix(self) -> None:
        (action,) = register_code_fixes(analyze_source(TYPE_NAME).diagnostics)
        result = action.apply(TYPE_NAME)
        assert result.status is FixStatus.APPLIED
        assert result.text == TYPE_NAME_FIXED
        assert result.types_fixed == ("TypeName",)


class TestFixSource:
    def test_private_then_public(self) -> None:
        assert _fix(TYPE_NAME) == TYPE_NAME_FIXED

    def test_fixed_output_has_no_diagnostics(self) -> None:
        assert analyze_source(_fix(TYPE_NAME)).diagnostics == []

    def test_fix_is_idempotent(self) -> None:
        fixed = _fix(TYPE_NAME)
        result = fix_source(fixed)
        assert result.status is FixStatus.UNCHANGED
        assert result.text == fixed

    def test_clean_source_is_unchanged(self) -> None:
        result = fix_source(TYPE_NAME_FIXED)
        assert result.status is FixStatus.UNCHANGED
        assert not result.changed

    def test_comments_and_attributes_move_with_member(self) -> None:
        source = textwrap.dedent(
            """\
            class Widget
            {
                // Internal helper.
                private void Helper() { }

                /// <summary>Runs.</summary>
                [Obsolete]
                public void Run() { } // entry point
            }
            """
        )
        expected = textwrap.dedent(
            """\
            class Widget
            {
                /// <summary>Runs.</summary>
                [Obsolete]
                public void Run() { } // entry point

                // Internal helper.
                private void Helper() { }
            }
            """
        )
        assert _fix(source) == expected

    def test_fields_and_constructors_stay_in_place(self) -> None:
        source = textwrap.dedent(
            """\
            class Service
            {
                private void Stop() { }
                private readonly int _count;
                public Service() { }
                public void Start() { }
            }
            """
        )
        expected = textwrap.dedent(
            """\
            class Service
            {
                public void Start() { }
                private readonly int _count;
                public Service() { }
                private void Stop() { }
            }
            """
        )
        assert _fix(source) == expected

    def test_stable_order_among_equal_levels(self) -> None:
        source = textwrap.dedent(
            """\
            class Mixed
            {
                private void A() { }
                public void B() { }
                internal int C { get; set; }
                public void D() { }
                private void E() { }
            }
            """
        )
        expected = textwrap.dedent(
            """\
            class Mixed
            {
                public void B() { }
                public void D() { }
                internal int C { get; set; }
                private void A() { }
                private void E() { }
            }
            """
        )
        assert _fix(source) == expected

    def test_fix_all_handles_nested_types(self) -> None:
        source = textwrap.dedent(
            """\
            class Outer
            {
                private void Hidden() { }
                public void Shown() { }

                public class Inner
                {
                    private void A() { }
                    public void B() { }
                }
            }
            """
        )
        expected = textwrap.dedent(
            """\
            class Outer
            {
                public void Shown() { }
                private void Hidden() { }

                public class Inner
                {
                    public void B() { }
                    private void A() { }
                }
            }
            """
        )
        result = fix_source(source)
        assert result.status is FixStatus.APPLIED
        assert result.text == expected
        assert result.types_fixed == ("Outer", "Inner")

    def test_single_diagnostic_fixes_only_its_type(self) -> None:
        source = textwrap.dedent(
            """\
            class First
            {
                private void A() { }
                public void B() { }
            }

            class Second
            {
                private void C() { }
                public void D() { }
            }
            """
        )
        _first, second = analyze_source(source).diagnostics
        result = fix_document(source, [second])
        assert result.status is FixStatus.APPLIED
        assert "private void A() { }\n    public void B() { }" in result.text
        assert "public void D() { }\n    private void C() { }" in result.text


class _StaticInspector:
    def __init__(self, scopes: list[TypeScope], on_inspect: threading.Event | None = None) -> None:
        self.scopes = scopes
        self.on_inspect = on_inspect

    def inspect(self, source: str, *, path: str | None = None) -> list[TypeScope]:
        if self.on_inspect is not None:
            self.on_inspect.set()
        return self.scopes


class _BrokenInspector:
    def inspect(self, source: str, *, path: str | None = None) -> list[TypeScope]:
        msg = "symbols unavailable"
        raise InspectionUnavailable(msg)


def _scope_without_declarations() -> TypeScope:
    position = SourcePosition(1, 1)
    return TypeScope(
        name="Ghost",
        type_kind="class",
        position=position,
        scope_id=7,
        members=(
            Member("a", MemberKind.METHOD, AccessibilityLevel.PRIVATE, position),
            Member("b", MemberKind.METHOD, AccessibilityLevel.PUBLIC, position),
        ),
    )


class TestFixFailures:
    def _diagnostic(self, scope_id: int = 7) -> Diagnostic:
        return Diagnostic(
            rule=MEMBERS_SORT,
            member_name="b",
            position=SourcePosition(1, 1),
            type_name="Ghost",
            scope_id=scope_id,
        )

    def test_missing_declarations_surface_as_failure(self) -> None:
        inspector = _StaticInspector([_scope_without_declarations()])
        result = fix_document("class Ghost { }", [self._diagnostic()], inspector=inspector)
        assert result.status is FixStatus.FAILED
        assert isinstance(result.error, TransformFailure)
        assert result.text == "class Ghost { }"

    def test_unknown_scope_is_a_failure(self) -> None:
        result = fix_document(TYPE_NAME, [self._diagnostic(scope_id=9999)])
        assert result.status is FixStatus.FAILED
        assert isinstance(result.error, TransformFailure)
        assert result.text == TYPE_NAME

    def test_inspection_failure_surfaces(self) -> None:
        result = fix_document("x", [self._diagnostic()], inspector=_BrokenInspector())
        assert result.status is FixStatus.FAILED
        assert isinstance(result.error, InspectionUnavailable)

    def test_no_fixable_diagnostics(self) -> None:
        assert fix_document(TYPE_NAME, []).status is FixStatus.UNCHANGED


class TestCancellation:
    def test_cancelled_before_start(self) -> None:
        cancel = threading.Event()
        cancel.set()
        result = fix_source(TYPE_NAME, cancel=cancel)
        assert result.status is FixStatus.CANCELLED
        assert result.text == TYPE_NAME

    def test_cancelled_before_commit(self) -> None:
        diagnostics = analyze_source(TYPE_NAME).diagnostics
        cancel = threading.Event()
        real_scopes = CSharpInspector().inspect(TYPE_NAME)
        inspector = _StaticInspector(real_scopes, on_inspect=cancel)
        result = fix_document(TYPE_NAME, diagnostics, inspector=inspector, cancel=cancel)
        assert result.status is FixStatus.CANCELLED
        assert result.text == TYPE_NAME
