"""Core spec compiler.

This package turns declaration scripts into execution plans.

It provides:
- collection of DSL calls into an immutable declaration tree;
- focus/ignore resolution over the whole tree;
- a visitor compiling the tree into rank-ordered examples.

The primary public entry point is `compile_spec`.
"""

from .builder import ExampleBuilder
from .collector import DeclarationCollector
from .compiler import Script, compile_spec, compile_tree, read_spec, script_name
from .strategy import ExecutionStrategy, FocusedExecutionStrategy, select_strategy

__all__ = (
    'DeclarationCollector',
    'ExampleBuilder',
    'ExecutionStrategy',
    'FocusedExecutionStrategy',
    'Script',
    'compile_spec',
    'compile_tree',
    'read_spec',
    'script_name',
    'select_strategy',
)
