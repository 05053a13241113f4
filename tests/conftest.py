"""Tests configurations and fixtures."""

import os
from typing import TYPE_CHECKING

import pytest

from specplan.config import SpecSettings

if TYPE_CHECKING:
    from pytest_mock import MockerFixture, MockType


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove `SPECPLAN_*` variables from the environment.

    Settings are resolved from the environment whenever a test compiles
    without explicit settings; dropping the prefixed variables keeps
    every test on the documented defaults.
    """
    for name in tuple(os.environ):
        if name.startswith('SPECPLAN_'):
            monkeypatch.delenv(name)


@pytest.fixture
def recorder(mocker: 'MockerFixture') -> 'MockType':
    """Provide a mock recording calls of hooks and bodies in order.

    Every attribute of the recorder is a child mock usable as a block.
    Calls to children are collected in `recorder.mock_calls`, so the
    execution order of a compiled example can be asserted with
    `mocker.call.<name>()` entries.

    Returns:
        A parent mock whose children stand in for declared blocks.
    """
    return mocker.Mock()


@pytest.fixture
def random_settings() -> SpecSettings:
    """Provide settings shuffling siblings with a fixed seed."""
    return SpecSettings(order='random', seed=42)
