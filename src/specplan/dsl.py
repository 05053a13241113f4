"""Declaration DSL.

These functions are called from declaration scripts and register groups,
examples and hooks against the compilation session active on the calling
execution context. Calling any of them outside `compile_spec` raises
`IllegalContext`.

Groups and examples accept their body either as an argument or as a
decorated function:

    def calculator_spec() -> None:
        before_each(calculator.reset)

        @describe('addition')
        def _() -> None:
            it('adds two numbers', lambda: ...)

            @it('rejects strings', expected=TypeError)
            def _() -> None:
                calculator.add('1', 2)

Group bodies run immediately, in declaration order.
"""

from datetime import timedelta
from typing import TYPE_CHECKING, Any

from specplan.hooks import Hook, Var
from specplan.markers import Marker
from specplan.registration import current
from specplan.schema import ExampleDeclaration

if TYPE_CHECKING:
    from collections.abc import Callable

if TYPE_CHECKING:
    from specplan.hooks import Block
    from specplan.schema import HookKind

#: Timeout as a duration or a number of seconds.
type Timeout = timedelta | float | int

#: Result of a block function: the body itself, or a decorator when
#: the body is omitted.
type Declared = Any


def _group(name: str, description: str, marker: Marker,
           body: 'Block | None') -> Declared:
    collector = current(name)

    def declare(block: 'Block') -> 'Block':
        collector.group(description, marker, block, kind=name)
        return block

    if body is None:
        return declare

    return declare(body)


def _example(name: str, description: str, marker: Marker,  # noqa: PLR0913
             body: 'Block | None',
             expected: type[BaseException] | None,
             timeout: Timeout | None) -> Declared:
    collector = current(name)

    def declare(block: 'Block') -> 'Block':
        collector.add_example(
            ExampleDeclaration(
                description=description,
                marker=marker,
                body=block,
                expected=expected,
                timeout=timeout,
            ),
            kind=name,
        )
        return block

    if body is None:
        return declare

    return declare(body)


def _hook(kind: 'HookKind', block: 'Block') -> 'Block':
    hook = Hook.once(block) if kind in ('before_all', 'after_all') else Hook.per_example(block)
    current(kind).add_hook(kind, hook)

    return block


def describe(description: str, body: 'Block | None' = None) -> Declared:
    """Declare a group of examples.

    Args:
        description: Group description, unique among siblings.
        body: Block declaring the group contents. When omitted,
            a decorator is returned.
    """
    return _group('describe', description, Marker.DEFAULT, body)


def context(description: str, body: 'Block | None' = None) -> Declared:
    """Declare a group of examples; an alias of `describe`."""
    return _group('context', description, Marker.DEFAULT, body)


def fdescribe(description: str, body: 'Block | None' = None) -> Declared:
    """Declare a focused group.

    Once any block of a spec is focused, only focused blocks run.
    """
    return _group('fdescribe', description, Marker.FOCUSED, body)


def fcontext(description: str, body: 'Block | None' = None) -> Declared:
    """Declare a focused group; an alias of `fdescribe`."""
    return _group('fcontext', description, Marker.FOCUSED, body)


def xdescribe(description: str, body: 'Block | None' = None) -> Declared:
    """Declare an ignored group. Its examples are reported as ignored."""
    return _group('xdescribe', description, Marker.IGNORED, body)


def xcontext(description: str, body: 'Block | None' = None) -> Declared:
    """Declare an ignored group; an alias of `xdescribe`."""
    return _group('xcontext', description, Marker.IGNORED, body)


def it(description: str, body: 'Block | None' = None, *,
       expected: type[BaseException] | None = None,
       timeout: Timeout | None = None) -> Declared:
    """Declare an example.

    Args:
        description: Example description, unique among siblings.
        body: Example body. When omitted, a decorator is returned.
        expected: Exception type the body is expected to raise.
        timeout: Maximum duration, as a timedelta or seconds.
    """
    return _example('it', description, Marker.DEFAULT, body, expected, timeout)


def fit(description: str, body: 'Block | None' = None, *,
        expected: type[BaseException] | None = None,
        timeout: Timeout | None = None) -> Declared:
    """Declare a focused example."""
    return _example('fit', description, Marker.FOCUSED, body, expected, timeout)


def xit(description: str, body: 'Block | None' = None, *,
        expected: type[BaseException] | None = None,
        timeout: Timeout | None = None) -> Declared:
    """Declare an ignored example."""
    return _example('xit', description, Marker.IGNORED, body, expected, timeout)


def before_all(block: 'Block') -> 'Block':
    """Run a block once before the examples of the current group."""
    return _hook('before_all', block)


def before_each(block: 'Block') -> 'Block':
    """Run a block before every example of the current group."""
    return _hook('before_each', block)


def after_each(block: 'Block') -> 'Block':
    """Run a block after every example of the current group."""
    return _hook('after_each', block)


def after_all(block: 'Block') -> 'Block':
    """Run a block once after the examples of the current group."""
    return _hook('after_all', block)


def let[T](var: Var[T], factory: 'Callable[[], T]') -> Var[T]:
    """Reset a var before every example of the current group.

    Initializers run before any hook, outermost group first, so an
    inner `let` overrides an outer one.

    Args:
        var: Slot to initialize.
        factory: Callable producing the fresh value.

    Returns:
        The var itself.
    """
    current('let').add_initializer(Hook.per_example(var.initializer(factory)))

    return var
