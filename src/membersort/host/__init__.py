"""Host layer: C# inspection and declaration editing behind narrow interfaces."""

from membersort.host.csharp import CSharpInspector, clear_cache, declared_accessibility
from membersort.host.editor import TextDeclarationEditor
from membersort.host.protocols import DeclarationEditor, MemberInspector

__all__ = [
    "CSharpInspector",
    "DeclarationEditor",
    "MemberInspector",
    "TextDeclarationEditor",
    "clear_cache",
    "declared_accessibility",
]
