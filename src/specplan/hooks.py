"""Hooks and shared fixture slots.

A hook wraps a zero-argument block declared with `before_all`,
`before_each`, `after_each` or `after_all`. A `Var` is a mutable slot
shared by the hooks and the body of an example, reset before every
example by the initializer registered with `let`.
"""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

#: Zero-argument side-effecting block.
type Block = Callable[[], Any]


def noop() -> None:
    """Empty block standing in for the body of ignored examples."""
    return None


class Hook:
    """Block scheduled relative to examples.

    One instance is created for every declaration call and shared by all
    examples inheriting it. Hooks compare by identity, so the same function
    registered in two groups yields two distinct hooks, while two examples
    of one group refer to the very same hook.
    """

    __slots__ = ('block', 'one_time')

    def __init__(self, block: Block, *, one_time: bool = False) -> None:
        """Initialize a hook.

        Args:
            block: Block to execute.
            one_time: Whether the hook runs once per contiguous run of
                examples sharing it (`before_all`, `after_all`) rather
                than around every example.
        """
        self.block = block
        self.one_time = one_time

    @classmethod
    def per_example(cls, block: Block) -> 'Hook':
        """Create a hook running around every example."""
        return cls(block)

    @classmethod
    def once(cls, block: Block) -> 'Hook':
        """Create a hook running once per contiguous run of examples."""
        return cls(block, one_time=True)

    def __call__(self) -> None:
        self.block()

    def __repr__(self) -> str:
        name = getattr(self.block, '__qualname__', repr(self.block))
        return f'Hook({name}, one_time={self.one_time})'


class Var[T]:
    """Shared mutable fixture slot.

    Values are usually assigned by an initializer registered with `let`
    and then read or replaced by hooks and example bodies:

        stack = Var[list[int]]()

        let(stack, list)
        before_each(lambda: stack.value.append(1))
        it('has one item', lambda: ...)

    Reading a slot that was never assigned raises `LookupError`.
    """

    __slots__ = ('_value', 'name')

    _unset: Any = object()

    def __init__(self, name: str | None = None) -> None:
        """Initialize an empty slot.

        Args:
            name: Optional name used in error messages.
        """
        self.name = name
        self._value: T = self._unset

    @property
    def value(self) -> T:
        """Current value of the slot."""
        if self._value is self._unset:
            raise LookupError(f'Var {self.name or '<unnamed>'!r} is not initialized')

        return self._value

    @value.setter
    def value(self, value: T) -> None:
        self._value = value

    def reset(self) -> None:
        """Forget the current value."""
        self._value = self._unset

    def initializer(self, factory: 'Callable[[], T]') -> Block:
        """Build a block assigning a fresh value produced by `factory`."""
        def initialize() -> None:
            self.value = factory()

        initialize.__qualname__ = f'let({self.name or 'var'})'

        return initialize
