"""Compiler entry points.

Compilation runs in two passes. The declaration script is evaluated once
inside a registration session, producing an immutable declaration tree.
The tree is then visited by an `ExampleBuilder`, and the compiled examples
are sorted by rank and linked into an `ExecutionPlan`.
"""

from typing import TYPE_CHECKING
from warnings import warn

from specplan.config import SpecSettings
from specplan.errors import FocusedSpecWarning, FocusNotAllowed, SpecError, SpecInitializationFailed
from specplan.registration import session

from .builder import ExampleBuilder
from .collector import DeclarationCollector
from .strategy import select_strategy

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import Any

if TYPE_CHECKING:
    from specplan.examples import ExecutionPlan
    from specplan.schema import GroupDeclaration

#: Declaration script: a zero-argument callable or a class whose
#: construction evaluates the declarations.
type Script = Callable[[], Any] | type


def script_name(script: 'Script') -> str:
    """Return the default root description of a script.

    Args:
        script: Declaration script.

    Returns:
        Qualified name of the script, `module.qualname` when available.
    """
    qualname = getattr(script, '__qualname__', None) or getattr(script, '__name__', None)
    if not qualname:
        return repr(script)

    if module := getattr(script, '__module__', None):
        return f'{module}.{qualname}'

    return qualname  # type: ignore[no-any-return]


def read_spec(script: 'Script', *, name: str | None = None) -> 'GroupDeclaration':
    """Evaluate a declaration script into a declaration tree.

    Args:
        script: Declaration script.
        name: Description of the root group. Defaults to the script name.

    Returns:
        The root group declaration.

    Raises:
        IllegalContext: If a compilation is already active on the calling
            execution context.
        BlockAlreadyDefined: If two siblings share a description.
        SpecInitializationFailed: If the script raises or can not be called.
    """
    name = name or script_name(script)

    with session(DeclarationCollector(name)) as collector:
        try:
            script()

        except SpecError:
            raise

        except Exception as base:
            raise SpecInitializationFailed.from_error(name, base) from base

        return collector.build()


def compile_tree(tree: 'GroupDeclaration', *,
                 settings: SpecSettings | None = None) -> 'ExecutionPlan':
    """Compile a declaration tree into an execution plan.

    Args:
        tree: Root group declaration.
        settings: Compiler settings. Resolved from the environment if omitted.

    Returns:
        Examples sorted by rank and linked for hook de-duplication.

    Raises:
        FocusNotAllowed: If the tree is focused and focus is forbidden.
    """
    if settings is None:
        settings = SpecSettings()

    strategy = select_strategy(tree)
    if strategy.focused and not settings.allow_focus:
        raise FocusNotAllowed(f'Spec {tree.description!r} contains focused blocks')

    builder = ExampleBuilder(
        strategy,
        order=settings.order,
        seed=settings.seed,
        default_timeout=settings.default_timeout,
    )
    tree.accept(builder)

    plan = builder.build(tree.description)

    if strategy.focused and (skipped := len(plan.ignored)):
        warn(
            f'Spec {tree.description!r} contains focused blocks, {skipped} example(s) skipped',
            category=FocusedSpecWarning,
            stacklevel=2,
        )

    return plan


def compile_spec(script: 'Script', *,
                 name: str | None = None,
                 settings: SpecSettings | None = None) -> 'ExecutionPlan':
    """Compile a declaration script into an execution plan.

    Example:
        def stack_spec() -> None:
            before_each(reset)

            describe('when empty', lambda: (
                it('has no items', check_empty),
            ))

        plan = compile_spec(stack_spec)
        for example in plan:
            example.run()

    Args:
        script: Declaration script.
        name: Description of the root group. Defaults to the script name.
        settings: Compiler settings. Resolved from the environment if omitted.

    Returns:
        Examples sorted by rank and linked for hook de-duplication.

    Raises:
        IllegalContext: If a compilation is already active on the calling
            execution context.
        BlockAlreadyDefined: If two siblings share a description.
        SpecInitializationFailed: If the script raises or can not be called.
        FocusNotAllowed: If the tree is focused and focus is forbidden.
    """
    return compile_tree(read_spec(script, name=name), settings=settings)
