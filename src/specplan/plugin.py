"""Pytest integration for compiled specs.

A compiled plan is exposed to pytest as a parametrized test function. The
script is passed explicitly; nothing is discovered:

    from specplan.plugin import parametrize, run_example

    @parametrize(stack_spec)
    def test_stack(example: Example) -> None:
        run_example(example)

Pytest keeps parameter order, so examples run in plan order and one-time
hooks fire once per group. Selecting a subset of examples (for example
with `-k`) may skip one-time hooks shared with deselected neighbours.
"""

from typing import TYPE_CHECKING

import pytest

from specplan.core import compile_spec

if TYPE_CHECKING:
    from specplan.config import SpecSettings
    from specplan.core import Script
    from specplan.examples import Example

IGNORED_REASON = 'ignored by spec'
ID_SEPARATOR = ' > '


def example_id(example: 'Example') -> str:
    """Build a pytest id from the description path, root excluded."""
    return ID_SEPARATOR.join(example.path[1:])


def parametrize(script: 'Script', *,
                name: str | None = None,
                settings: 'SpecSettings | None' = None,
                argname: str = 'example') -> pytest.MarkDecorator:
    """Compile a script into a `parametrize` mark.

    Ignored examples are marked as skipped.

    Args:
        script: Declaration script.
        name: Description of the root group.
        settings: Compiler settings.
        argname: Name of the test function argument.

    Returns:
        Mark decorator parametrizing `argname` with compiled examples.
    """
    plan = compile_spec(script, name=name, settings=settings)

    return pytest.mark.parametrize(argname, [
        pytest.param(
            example,
            id=example_id(example),
            marks=[pytest.mark.skip(reason=IGNORED_REASON)] if example.should_be_ignored else [],
        )
        for example in plan
    ])


def run_example(example: 'Example') -> None:
    """Run an example inside a pytest test.

    Raises:
        pytest.fail.Exception: If an expected exception is not raised.
        Any exception raised by the example.
    """
    if example.expected is None:
        example.run()
        return

    with pytest.raises(example.expected):
        example.run()
