"""Compilation of a declaration tree into ordered examples.

The builder is the visitor fed by `GroupDeclaration.accept`. It keeps one
level of bookkeeping per open group and turns every visited example into
a compiled `Example` carrying exactly the hooks in scope.

Hook ordering rules:
- before-all, before-each hooks and var initializers run outermost first,
  so their levels are appended at the back on every `start_group`;
- after-each and after-all hooks run innermost first, so their levels are
  prepended at the front and flattening front-to-back inverts nesting.
"""

from collections import deque
from typing import TYPE_CHECKING

from specplan.examples import Example, ExecutionPlan
from specplan.hooks import noop
from specplan.markers import Marker
from specplan.rank import RankGenerator

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import timedelta

if TYPE_CHECKING:
    from specplan.core.strategy import ExecutionStrategy
    from specplan.hooks import Hook
    from specplan.rank import Order
    from specplan.schema import ExampleDeclaration

#: Hook levels, one list per open group.
type HookLevels = deque[list[Hook]]


def flatten(levels: 'Iterable[list[Hook]]') -> tuple['Hook', ...]:
    """Concatenate hook levels front-to-back."""
    return tuple(hook for level in levels for hook in level)


class ExampleBuilder:
    """Visitor building compiled examples from a declaration tree.

    Attributes:
        strategy: Focus/ignore resolution rule for the whole tree.
        default_timeout: Timeout applied to examples declaring none.
    """

    def __init__(self, strategy: 'ExecutionStrategy', *,
                 order: 'Order' = 'defined', seed: int = 0,
                 default_timeout: 'timedelta | None' = None) -> None:
        """Initialize an empty builder.

        Args:
            strategy: Focus/ignore resolution rule.
            order: Ordering of siblings, see `RankGenerator`.
            seed: Seed of the random order.
            default_timeout: Timeout applied to examples declaring none.
        """
        self.strategy = strategy
        self.default_timeout = default_timeout

        self._descriptions: list[str] = []
        self._markers: list[Marker] = []

        self._initializers: HookLevels = deque()
        self._before_all: HookLevels = deque()
        self._before_each: HookLevels = deque()
        self._after_each: HookLevels = deque()
        self._after_all: HookLevels = deque()

        self._ranks = RankGenerator(order, seed)
        self._examples: list[Example] = []

    @property
    def container_marker(self) -> Marker:
        """Effective marker of the innermost open group."""
        if not self._markers:
            return Marker.DEFAULT

        return self._markers[-1]

    def start_group(self, description: str, marker: Marker) -> None:
        """Open the bookkeeping level of a group.

        The first non-default marker on the way down is inherited by every
        nested group, whatever their own markers.
        """
        inherited = self.container_marker
        self._markers.append(marker if inherited is Marker.DEFAULT else inherited)
        self._descriptions.append(description)

        self._initializers.append([])
        self._before_all.append([])
        self._before_each.append([])
        self._after_each.appendleft([])
        self._after_all.appendleft([])

        self._ranks.push_level()

    def end_group(self) -> None:
        """Close the bookkeeping level of the innermost group."""
        self._markers.pop()
        self._descriptions.pop()

        self._initializers.pop()
        self._before_all.pop()
        self._before_each.pop()
        self._after_each.popleft()
        self._after_all.popleft()

        self._ranks.pop_level()

    def before_all(self, hook: 'Hook') -> None:
        """Register a one-time hook of the innermost group."""
        self._before_all[-1].append(hook)

    def before_each(self, hook: 'Hook') -> None:
        """Register a per-example hook of the innermost group."""
        self._before_each[-1].append(hook)

    def after_each(self, hook: 'Hook') -> None:
        """Register a per-example hook of the innermost group."""
        self._after_each[0].append(hook)

    def after_all(self, hook: 'Hook') -> None:
        """Register a one-time hook of the innermost group."""
        self._after_all[0].append(hook)

    def let(self, initializer: 'Hook') -> None:
        """Register a var initializer of the innermost group."""
        self._initializers[-1].append(initializer)

    def example(self, declaration: 'ExampleDeclaration') -> None:
        """Compile an example with the hooks currently in scope.

        Ignored examples keep their position in the order but carry
        no hooks and a no-op body.
        """
        rank = self._ranks.generate()

        ignored = self.strategy.should_be_ignored(
            declaration.marker,
            self.container_marker,
        )

        if ignored:
            self._examples.append(Example(
                container_descriptions=tuple(self._descriptions),
                description=declaration.description,
                block=noop,
                ignored=True,
                rank=rank,
            ))
            return

        self._examples.append(Example(
            container_descriptions=tuple(self._descriptions),
            description=declaration.description,
            initializers=flatten(self._initializers),
            before_all_hooks=flatten(self._before_all),
            before_each_hooks=flatten(self._before_each),
            after_each_hooks=flatten(self._after_each),
            after_all_hooks=flatten(self._after_all),
            block=declaration.body,
            expected=declaration.expected,
            timeout=declaration.timeout or self.default_timeout,
            rank=rank,
        ))

    def build(self, name: str) -> ExecutionPlan:
        """Sort the compiled examples and link them into a plan.

        Args:
            name: Name of the compiled spec.
        """
        return ExecutionPlan(name, self._examples)
