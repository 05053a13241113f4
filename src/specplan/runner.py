"""Sequential execution of compiled plans.

The runner is a reference caller of the compiled example surface. It runs
examples one at a time in plan order and maps every attempt to a terminal
state. Timeouts are measured after the fact; a running body is never
interrupted.
"""

from datetime import timedelta
from time import perf_counter
from typing import TYPE_CHECKING

from pydantic import Field

from specplan.examples import ExampleState
from specplan.models import SchemaModel

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

if TYPE_CHECKING:
    from specplan.examples import Example


class ExampleResult(SchemaModel):
    """Outcome of one example execution."""

    path: tuple[str, ...] = Field(
        title='Description path',
        description='Container descriptions followed by the example description.',
    )

    state: ExampleState = Field(
        title='Terminal state',
    )

    duration: timedelta = Field(
        default=timedelta(0),
        title='Duration',
        description='Wall-clock duration of the whole attempt, hooks included.',
    )

    error: str | None = Field(
        default=None,
        title='Error',
        description='Representation of the exception explaining a non-passing state.',
    )

    @property
    def passed(self) -> bool:
        """Whether the example passed."""
        return self.state is ExampleState.PASSED


class ExampleRunner:
    """Runner executing examples and classifying their outcomes."""

    def __init__(self, clock: 'Callable[[], float]' = perf_counter) -> None:
        """Initialize a runner.

        Args:
            clock: Monotonic clock returning seconds.
        """
        self.clock = clock

    def run(self, example: 'Example') -> ExampleResult:
        """Run one example.

        Args:
            example: Compiled example.

        Returns:
            Result with the terminal state recorded on the example.

        Raises:
            BaseException: Interruptions such as `KeyboardInterrupt` that
                are not expected by the example, once it is finished as
                `ERRORED`.
        """
        if example.should_be_ignored:
            example.finish(ExampleState.IGNORED)
            return ExampleResult(path=example.path, state=ExampleState.IGNORED)

        error: BaseException | None = None

        started = self.clock()
        try:
            example.run()
        except Exception as base:  # noqa: BLE001
            error = base
        except BaseException as base:
            if example.expected is None or not isinstance(base, example.expected):
                example.finish(ExampleState.ERRORED)
                raise

            error = base
        duration = timedelta(seconds=self.clock() - started)

        state, message = self.classify(example, error)

        if example.timeout is not None and duration > example.timeout:
            state = ExampleState.TIMED_OUT
            message = f'Example took {duration.total_seconds():.3f}s, timeout is {example.timeout.total_seconds():.3f}s'

        example.finish(state)

        return ExampleResult(
            path=example.path,
            state=state,
            duration=duration,
            error=message,
        )

    @staticmethod
    def classify(example: 'Example',
                 error: BaseException | None) -> tuple[ExampleState, str | None]:
        """Map the exception escaping an example to a state.

        Args:
            example: Executed example.
            error: Exception raised by the run, if any.

        Returns:
            Terminal state and an optional explanation.
        """
        if example.expected is not None:
            if error is None:
                return ExampleState.FAILED, f'Expected {example.expected.__name__} to be raised'
            if isinstance(error, example.expected):
                return ExampleState.PASSED, None

        if error is None:
            return ExampleState.PASSED, None

        if isinstance(error, AssertionError):
            return ExampleState.FAILED, repr(error)

        return ExampleState.ERRORED, repr(error)

    def run_plan(self, examples: 'Iterable[Example]') -> list[ExampleResult]:
        """Run examples sequentially in the given order."""
        return [self.run(example) for example in examples]
