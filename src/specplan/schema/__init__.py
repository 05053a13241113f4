"""Declarative schema of spec trees.

Defines immutable Pydantic models describing groups, examples and their
hooks as declared by a declaration script, and the visitor protocol used
to compile them.
"""

from .declarations import DeclarationVisitor, ExampleDeclaration, GroupDeclaration, HookKind

__all__ = (
    'DeclarationVisitor',
    'ExampleDeclaration',
    'GroupDeclaration',
    'HookKind',
)
