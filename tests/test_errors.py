"""Tests for error formatting."""

from os import linesep

import pytest

from specplan.errors import (
    BlockAlreadyDefined,
    ErrorContext,
    ErrorFormatter,
    IllegalContext,
    SpecError,
    SpecInitializationFailed,
)


def test_format_without_context() -> None:
    """Keep the message as is without a context."""
    assert ErrorFormatter.format('Something failed') == 'Something failed'
    assert str(SpecError('Something failed')) == 'Something failed'


def test_format_with_location() -> None:
    """Append the location and a snippet of the failing block."""
    message = ErrorFormatter.format('Something failed', ErrorContext(
        spec='root',
        path=['group', 'nested'],
        block='example',
        kind='it',
    ))

    assert message.split(linesep) == [
        'Something failed',
        '    in spec "root"',
        "    at 'group' > 'nested'",
        '        ...',
        '        root:',
        '          group:',
        '            nested:',
        '            - it: example',
        '',
    ]


def test_format_without_block() -> None:
    """Append the location only when no block is known."""
    message = ErrorFormatter.format('Something failed', ErrorContext(spec='root'))

    assert message.split(linesep) == [
        'Something failed',
        '    in spec "root"',
        '',
    ]


def test_format_anonymous_spec() -> None:
    """Name unknown specs in the location."""
    message = ErrorFormatter.format('Something failed', ErrorContext(path=['group']))

    assert '    in spec "<anonymous spec>"' in message.split(linesep)


def test_block_already_defined() -> None:
    """Describe duplicates with their location."""
    error = BlockAlreadyDefined('same', context=ErrorContext(
        spec='root',
        path=[],
        block='same',
        kind='describe',
    ))

    lines = str(error).split(linesep)

    assert lines[0] == "Block 'same' is already defined"
    assert lines[1] == '    in spec "root"'
    assert lines[-2] == '        - describe: same'
    assert error.message == "Block 'same' is already defined"


def test_illegal_context_outside_spec() -> None:
    """Name the DSL function called outside a spec."""
    error = IllegalContext.outside_spec('before_each')

    assert str(error) == "'before_each' should not be invoked from outside a spec definition"
    assert error.context is None


def test_spec_initialization_failed() -> None:
    """Wrap the failing exception with the spec name."""
    base = ValueError('bad value')
    error = SpecInitializationFailed.from_error('root', base)

    assert error.context == {'spec': 'root', 'error': base}
    assert str(error).split(linesep) == [
        'Failed to evaluate spec',
        "    ValueError('bad value')",
        '    in spec "root"',
        '',
    ]


@pytest.mark.parametrize('context, expected', (
    pytest.param(ErrorContext(spec='root'), [], id='no block'),
    pytest.param(ErrorContext(spec='root', block='example'), ['...', 'root:', '- block: example'], id='default kind'),
    pytest.param(
        ErrorContext(spec='root', path=['group'], block='nested', kind='describe'),
        ['...', 'root:', '  group:', '  - describe: nested'],
        id='nested',
    ),
))
def test_outline_lines(context: ErrorContext, expected: list[str]) -> None:
    """Outline the failing block below its groups."""
    assert ErrorFormatter.outline_lines(context) == expected
