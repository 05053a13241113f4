"""Tests for declaration tree models."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from specplan import Marker, read_spec
from specplan.errors import BlockAlreadyDefined
from specplan.hooks import Hook, noop
from specplan.schema import ExampleDeclaration, GroupDeclaration

from tests.examples.specs import sample_spec


def test_example_declaration_defaults() -> None:
    """Create an example with default metadata."""
    example = ExampleDeclaration(description='example', body=noop)

    assert example.marker is Marker.DEFAULT
    assert example.expected is None
    assert example.timeout is None
    assert not example.has_focus()


@pytest.mark.parametrize('timeout, expected', (
    pytest.param(2, timedelta(seconds=2), id='int'),
    pytest.param(0.5, timedelta(milliseconds=500), id='float'),
    pytest.param(timedelta(minutes=1), timedelta(minutes=1), id='timedelta'),
))
def test_example_declaration_timeout(timeout: float | timedelta, expected: timedelta) -> None:
    """Interpret numeric timeouts as seconds."""
    example = ExampleDeclaration(description='example', body=noop, timeout=timeout)

    assert example.timeout == expected


@pytest.mark.parametrize('fields', (
    pytest.param({'description': '', 'body': noop}, id='empty description'),
    pytest.param({'description': 'example', 'body': None}, id='missing body'),
    pytest.param({'description': 'example', 'body': noop, 'timeout': 0}, id='zero timeout'),
    pytest.param({'description': 'example', 'body': noop, 'expected': 'ValueError'}, id='expected name'),
    pytest.param({'description': 'example', 'body': noop, 'retries': 3}, id='unknown field'),
))
def test_example_declaration_validation(fields: dict) -> None:
    """Reject invalid example declarations."""
    with pytest.raises(ValidationError):
        ExampleDeclaration(**fields)


def test_declarations_are_frozen() -> None:
    """Reject changes to declared blocks."""
    tree = read_spec(sample_spec, name='sample')

    with pytest.raises(ValidationError):
        tree.description = 'changed'  # type: ignore[misc]


def test_group_declaration_duplicates() -> None:
    """Reject a group built with duplicate children."""
    with pytest.raises(BlockAlreadyDefined, match=r"^Block 'same' is already defined$"):
        GroupDeclaration(
            description='group',
            children=(
                ExampleDeclaration(description='same', body=noop),
                GroupDeclaration(description='same'),
            ),
        )


def test_group_declaration_lookup() -> None:
    """Find direct children by description."""
    tree = read_spec(sample_spec, name='sample')

    group = tree.child('describe A')

    assert isinstance(group, GroupDeclaration)
    assert [child.description for child in group.children] == ['block A.1', 'block A.2', 'describe A.A']
    assert isinstance(group.child('block A.1'), ExampleDeclaration)

    with pytest.raises(KeyError):
        tree.child('block A.1')


def test_group_declaration_hooks() -> None:
    """Expose hooks by kind."""
    setup = Hook.once(noop)
    group = GroupDeclaration(description='group', before_all=(setup,))

    assert group.hooks('before_all') == (setup,)
    assert group.hooks('after_each') == ()


def test_group_declaration_focus() -> None:
    """Detect focus anywhere below a group."""
    focused = ExampleDeclaration(description='focused', body=noop, marker=Marker.FOCUSED)
    nested = GroupDeclaration(description='nested', children=(focused,))
    tree = GroupDeclaration(description='root', children=(nested,))

    assert tree.has_focus()
    assert not read_spec(sample_spec).has_focus()
