"""Tests for the reference example runner."""

from collections.abc import Callable  # noqa: TC003
from datetime import timedelta
from typing import TYPE_CHECKING

import pytest

from specplan import ExampleState, before_each, compile_spec, it, xit
from specplan.hooks import noop
from specplan.runner import ExampleRunner

from tests.examples.specs import sample_spec

if TYPE_CHECKING:
    from pytest_mock import MockerFixture, MockType

    from specplan import Example


def fail() -> None:
    raise AssertionError('values differ')


def crash() -> None:
    raise ValueError('broken')


def lookup() -> None:
    raise KeyError('missing')


def single(body: Callable[[], None], **options: object) -> 'Example':
    """Compile a spec with one example."""
    example, = compile_spec(lambda: it('example', body, **options), name='root')  # type: ignore[arg-type]
    return example


@pytest.mark.parametrize('body, expected, state, error', (
    pytest.param(noop, None, ExampleState.PASSED, None, id='passed'),
    pytest.param(fail, None, ExampleState.FAILED, "AssertionError('values differ')", id='assertion'),
    pytest.param(crash, None, ExampleState.ERRORED, "ValueError('broken')", id='error'),
    pytest.param(crash, ValueError, ExampleState.PASSED, None, id='expected error'),
    pytest.param(noop, ValueError, ExampleState.FAILED, 'Expected ValueError to be raised', id='missing error'),
    pytest.param(lookup, ValueError, ExampleState.ERRORED, "KeyError('missing')", id='unexpected error'),
))
def test_runner_classification(body: Callable[[], None], expected: type[Exception] | None,
                               state: ExampleState, error: str | None) -> None:
    """Map example outcomes to terminal states."""
    example = single(body, expected=expected)

    result = ExampleRunner().run(example)

    assert result.state is state
    assert result.error == error
    assert result.path == ('root', 'example')
    assert result.passed is (state is ExampleState.PASSED)
    assert result.duration >= timedelta(0)
    assert example.state is state


def test_runner_expected_exit() -> None:
    """Pass examples expecting exceptions outside the `Exception` hierarchy."""
    def leave() -> None:
        raise SystemExit(3)

    example = single(leave, expected=SystemExit)

    result = ExampleRunner().run(example)

    assert result.state is ExampleState.PASSED
    assert example.state is ExampleState.PASSED


def test_runner_unexpected_interrupt() -> None:
    """Finish interrupted examples as errors and propagate the interruption."""
    def interrupt() -> None:
        raise KeyboardInterrupt

    example = single(interrupt, expected=ValueError)

    with pytest.raises(KeyboardInterrupt):
        ExampleRunner().run(example)

    assert example.state is ExampleState.ERRORED


def test_runner_hook_failure(recorder: 'MockType') -> None:
    """Report failing hooks as errors."""
    recorder.setup.side_effect = RuntimeError('setup failed')

    def spec() -> None:
        before_each(recorder.setup)
        it('example', recorder.body)

    example, = compile_spec(spec)
    result = ExampleRunner().run(example)

    assert result.state is ExampleState.ERRORED
    assert recorder.body.call_count == 0


@pytest.mark.parametrize('stop, state', (
    pytest.param(0.5, ExampleState.PASSED, id='in time'),
    pytest.param(2.0, ExampleState.TIMED_OUT, id='too slow'),
))
def test_runner_timeout(mocker: 'MockerFixture', stop: float, state: ExampleState) -> None:
    """Measure durations against the example timeout."""
    clock = mocker.Mock(side_effect=[0.0, stop])
    example = single(noop, timeout=1)

    result = ExampleRunner(clock=clock).run(example)

    assert result.state is state
    assert result.duration == timedelta(seconds=stop)
    assert clock.call_count == 2


def test_runner_timeout_message(mocker: 'MockerFixture') -> None:
    """Explain timed out examples."""
    example = single(noop, timeout=1)

    result = ExampleRunner(clock=mocker.Mock(side_effect=[10.0, 12.5])).run(example)

    assert result.error == 'Example took 2.500s, timeout is 1.000s'


def test_runner_ignored_example(recorder: 'MockType') -> None:
    """Finish ignored examples without running them."""
    example, = compile_spec(lambda: xit('skipped', recorder.body))

    result = ExampleRunner().run(example)

    assert result.state is ExampleState.IGNORED
    assert result.duration == timedelta(0)
    assert example.state is ExampleState.IGNORED
    assert recorder.body.call_count == 0


def test_runner_plan() -> None:
    """Run a plan sequentially in plan order."""
    plan = compile_spec(sample_spec, name='sample')

    results = ExampleRunner().run_plan(plan)

    assert [result.path for result in results] == plan.paths
    assert all(result.passed for result in results)
    assert {example.state for example in plan} == {ExampleState.PASSED}
