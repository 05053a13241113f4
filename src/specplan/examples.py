"""Compiled examples and execution plans.

An `Example` is the executable unit produced by the compiler. Examples are
stored in an `ExecutionPlan`, an indexed sequence sorted by rank. Each
example knows its position in the plan, which is how one-time hooks are
skipped when the neighbouring example already shares them.
"""

from collections.abc import Sequence
from enum import StrEnum
from operator import attrgetter
from os import linesep
from typing import TYPE_CHECKING, overload

from specplan.errors import IllegalState
from specplan.hooks import noop

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from datetime import timedelta

if TYPE_CHECKING:
    from specplan.hooks import Block, Hook
    from specplan.rank import Rank

RENDER_INDENT = '  '
IGNORED_SUFFIX = ' (ignored)'


class ExampleState(StrEnum):
    """Execution state of a compiled example."""

    PENDING = 'pending'
    RUNNING = 'running'
    PASSED = 'passed'
    FAILED = 'failed'
    ERRORED = 'errored'
    TIMED_OUT = 'timed_out'
    IGNORED = 'ignored'

    @property
    def terminal(self) -> bool:
        """Whether the state ends an execution attempt."""
        return self not in (ExampleState.PENDING, ExampleState.RUNNING)


class Example:
    """Example ready to be executed.

    Hook tuples are fixed at compilation time. The only mutable parts are
    the execution state and the position assigned by the owning plan.
    """

    def __init__(self, *,  # noqa: PLR0913
                 container_descriptions: tuple[str, ...],
                 description: str,
                 rank: 'Rank',
                 block: 'Block' = noop,
                 ignored: bool = False,
                 initializers: tuple['Hook', ...] = (),
                 before_all_hooks: tuple['Hook', ...] = (),
                 before_each_hooks: tuple['Hook', ...] = (),
                 after_each_hooks: tuple['Hook', ...] = (),
                 after_all_hooks: tuple['Hook', ...] = (),
                 expected: type[BaseException] | None = None,
                 timeout: 'timedelta | None' = None) -> None:
        """Initialize a compiled example.

        Args:
            container_descriptions: Descriptions of enclosing groups, root first.
            description: Example description.
            rank: Ordering key.
            block: Example body.
            ignored: Whether the example is reported as ignored and never executed.
            initializers: Var initializers, outermost first.
            before_all_hooks: One-time hooks, outermost first.
            before_each_hooks: Per-example hooks, outermost first.
            after_each_hooks: Per-example hooks, innermost first.
            after_all_hooks: One-time hooks, innermost first.
            expected: Exception type the body is expected to raise.
            timeout: Maximum duration of the example.
        """
        self.container_descriptions = container_descriptions
        self.description = description
        self.rank = rank

        self.block = block
        self.ignored = ignored

        self.initializers = initializers
        self.before_all_hooks = before_all_hooks
        self.before_each_hooks = before_each_hooks
        self.after_each_hooks = after_each_hooks
        self.after_all_hooks = after_all_hooks

        self.expected = expected
        self.timeout = timeout

        self._plan: ExecutionPlan | None = None
        self._index = 0
        self._state = ExampleState.PENDING

    def __repr__(self) -> str:
        return f'<Example {' > '.join(self.path)!r} {self._state}>'

    @property
    def path(self) -> tuple[str, ...]:
        """Container descriptions followed by the example description."""
        return (*self.container_descriptions, self.description)

    @property
    def should_be_ignored(self) -> bool:
        """Whether the example is skipped."""
        return self.ignored

    @property
    def is_expected_to_fail(self) -> bool:
        """Whether the body is expected to raise."""
        return self.expected is not None

    @property
    def should_fail_on_timeout(self) -> bool:
        """Whether the example carries a timeout."""
        return self.timeout is not None

    @property
    def previous(self) -> 'Example | None':
        """Example executed right before this one."""
        if self._plan is None or self._index == 0:
            return None

        return self._plan[self._index - 1]

    @property
    def next(self) -> 'Example | None':
        """Example executed right after this one."""
        if self._plan is None or self._index + 1 >= len(self._plan):
            return None

        return self._plan[self._index + 1]

    @property
    def state(self) -> ExampleState:
        """Current execution state."""
        return self._state

    def attach(self, plan: 'ExecutionPlan', index: int) -> None:
        """Record the position of this example in its plan."""
        self._plan = plan
        self._index = index

    def run(self) -> None:
        """Run this example and its hooks.

        Steps, in order: var initializers, one-time hooks not shared with
        the previous example, before-each hooks, the body, after-each
        hooks, one-time hooks not shared with the next example.

        Any exception stops the sequence and propagates unchanged.
        Ignored examples run nothing and move straight to `IGNORED`.

        Raises:
            IllegalState: If the example is already running.
        """
        if self.ignored:
            self._transition(ExampleState.IGNORED)
            return

        self._transition(ExampleState.RUNNING)

        for hook in self.initializers:
            hook()

        self._run_before_all_hooks()
        for hook in self.before_each_hooks:
            hook()

        self.block()

        for hook in self.after_each_hooks:
            hook()
        self._run_after_all_hooks()

    def finish(self, state: ExampleState) -> None:
        """Record the outcome of the current attempt.

        Args:
            state: Terminal state decided by the caller.

        Raises:
            IllegalState: If the state is not terminal or the example
                is not running (only `IGNORED` may finish a pending example).
        """
        if not state.terminal:
            raise IllegalState(f'Can not finish example with {state!s} state')

        self._transition(state)

    def _transition(self, state: ExampleState) -> None:
        current = self._state

        if state is ExampleState.RUNNING:
            allowed = current is not ExampleState.RUNNING
        elif state is ExampleState.IGNORED:
            allowed = current in (ExampleState.PENDING, ExampleState.RUNNING, ExampleState.IGNORED)
        else:
            allowed = current is ExampleState.RUNNING

        if not allowed:
            raise IllegalState(f'Example {self.description!r} can not move from {current!s} to {state!s}')

        self._state = state

    def _run_before_all_hooks(self) -> None:
        previous = self.previous
        for hook in self.before_all_hooks:
            if previous is None or hook not in previous.before_all_hooks:
                hook()

    def _run_after_all_hooks(self) -> None:
        following = self.next
        for hook in self.after_all_hooks:
            if following is None or hook not in following.after_all_hooks:
                hook()


class ExecutionPlan(Sequence[Example]):
    """Examples of one spec sorted by rank.

    The plan owns the adjacency of its examples: every example is told its
    index once sorting is done, so neighbours are looked up by position.
    """

    def __init__(self, name: str, examples: 'Iterable[Example]' = ()) -> None:
        """Sort examples and attach them to this plan.

        Args:
            name: Name of the compiled spec.
            examples: Compiled examples in any order.
        """
        self.name = name
        self._examples = tuple(sorted(examples, key=attrgetter('rank')))

        for index, example in enumerate(self._examples):
            example.attach(self, index)

    @overload
    def __getitem__(self, index: int) -> Example: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[Example, ...]: ...

    def __getitem__(self, index: int | slice) -> Example | tuple[Example, ...]:
        return self._examples[index]

    def __len__(self) -> int:
        return len(self._examples)

    def __iter__(self) -> 'Iterator[Example]':
        return iter(self._examples)

    def __repr__(self) -> str:
        return f'<ExecutionPlan {self.name!r} examples={len(self)}>'

    def __str__(self) -> str:
        return self.render()

    @property
    def paths(self) -> list[tuple[str, ...]]:
        """Description paths of all examples in plan order."""
        return [example.path for example in self._examples]

    @property
    def ignored(self) -> tuple[Example, ...]:
        """Examples that are skipped."""
        return tuple(example for example in self._examples if example.should_be_ignored)

    def render(self) -> str:
        """Render the plan as indented lines in execution order.

        A group line is emitted whenever the container path changes;
        an empty plan renders as its name.
        """
        if not self._examples:
            return self.name

        lines: list[str] = []
        current: tuple[str, ...] = ()

        for example in self._examples:
            path = example.container_descriptions

            common = 0
            while common < min(len(current), len(path)) and current[common] == path[common]:
                common += 1

            lines.extend(
                f'{RENDER_INDENT * depth}{path[depth]}'
                for depth in range(common, len(path))
            )
            current = path

            suffix = IGNORED_SUFFIX if example.should_be_ignored else ''
            lines.append(f'{RENDER_INDENT * len(path)}{example.description}{suffix}')

        return linesep.join(lines)
