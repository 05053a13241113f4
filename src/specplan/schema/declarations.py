"""Declaration tree models.

Groups and examples collected while a declaration script runs are frozen
into these models once their scope closes. The resulting tree is
immutable and is turned into compiled examples by a visitor.
"""

from collections.abc import Callable
from datetime import timedelta
from os import linesep
from typing import TYPE_CHECKING, Any, Literal, Protocol, Self

from pydantic import Field, field_validator, model_validator

from specplan.errors import BlockAlreadyDefined
from specplan.hooks import Hook
from specplan.markers import Marker
from specplan.models import SchemaModel
from specplan.names import Description  # noqa: TC001

if TYPE_CHECKING:
    from collections.abc import Iterator

#: Names of the hook lists of a group.
type HookKind = Literal['before_all', 'before_each', 'after_each', 'after_all']

RENDER_INDENT = '  '


class DeclarationVisitor(Protocol):
    """Protocol consumed by `GroupDeclaration.accept`.

    Calls follow stack discipline: every `start_group` is matched by one
    `end_group` and everything in between belongs to that group. Within a
    group, hooks and initializers are visited before its children.
    """

    def start_group(self, description: str, marker: Marker) -> None: ...  # noqa: D102

    def end_group(self) -> None: ...  # noqa: D102

    def before_all(self, hook: Hook) -> None: ...  # noqa: D102

    def before_each(self, hook: Hook) -> None: ...  # noqa: D102

    def after_each(self, hook: Hook) -> None: ...  # noqa: D102

    def after_all(self, hook: Hook) -> None: ...  # noqa: D102

    def let(self, initializer: Hook) -> None: ...  # noqa: D102

    def example(self, declaration: 'ExampleDeclaration') -> None: ...  # noqa: D102


def _suffix(marker: Marker) -> str:
    return '' if marker is Marker.DEFAULT else f' ({marker})'


class ExampleDeclaration(SchemaModel):
    """Declared example (an `it` block).

    The body is kept as given; the remaining fields are metadata consumed
    by the caller executing the compiled example.
    """

    description: Description

    marker: Marker = Field(
        default=Marker.DEFAULT,
        title='Execution marker',
        description='Focus or ignore disposition declared with `fit` or `xit`.',
    )

    body: Callable[[], Any] = Field(
        title='Example body',
        description='Zero-argument block executed as the example.',
    )

    expected: type[BaseException] | None = Field(
        default=None,
        title='Expected failure',
        description=(
            'Exception type the body is expected to raise. '
            'The example fails when the body completes normally.'
        ),
    )

    timeout: timedelta | None = Field(
        default=None,
        title='Timeout',
        description=(
            'Maximum duration of the example. '
            'Numbers are interpreted as seconds.'
        ),
    )

    @field_validator('timeout')
    @classmethod
    def check_timeout(cls, value: timedelta | None) -> timedelta | None:
        """Reject zero and negative timeouts.

        Raises:
            ValueError: If the timeout is not strictly positive.
        """
        if value is not None and value <= timedelta(0):
            raise ValueError('Timeout must be positive')

        return value

    def accept(self, visitor: DeclarationVisitor) -> None:
        """Feed this example to a visitor."""
        visitor.example(self)

    def has_focus(self) -> bool:
        """Whether this example is focused."""
        return self.marker.focused

    def render_lines(self, depth: int = 0) -> 'Iterator[str]':
        """Yield the rendering line of this example."""
        yield f'{RENDER_INDENT * depth}{self.description}{_suffix(self.marker)}'


class GroupDeclaration(SchemaModel):
    """Declared group (a `describe` or `context` block).

    Children keep declaration order; groups and examples interleave.
    Sibling descriptions are unique within the group.
    """

    description: Description

    marker: Marker = Field(
        default=Marker.DEFAULT,
        title='Execution marker',
        description='Focus or ignore disposition declared with `fdescribe` or `xdescribe`.',
    )

    before_all: tuple[Hook, ...] = ()
    before_each: tuple[Hook, ...] = ()
    after_each: tuple[Hook, ...] = ()
    after_all: tuple[Hook, ...] = ()

    initializers: tuple[Hook, ...] = Field(
        default=(),
        title='Var initializers',
        description='Blocks registered with `let`, run first for every example.',
    )

    children: tuple['GroupDeclaration | ExampleDeclaration', ...] = ()

    @model_validator(mode='after')
    def check_unique_children(self) -> Self:
        """Reject sibling blocks sharing a description.

        Raises:
            BlockAlreadyDefined: If two children share a description.
        """
        seen: set[str] = set()
        for child in self.children:
            if child.description in seen:
                raise BlockAlreadyDefined(child.description)
            seen.add(child.description)

        return self

    def accept(self, visitor: DeclarationVisitor) -> None:
        """Traverse this group top-down with a visitor.

        Args:
            visitor: Receiver of the traversal protocol calls.
        """
        visitor.start_group(self.description, self.marker)

        for hook in self.initializers:
            visitor.let(hook)
        for hook in self.before_all:
            visitor.before_all(hook)
        for hook in self.before_each:
            visitor.before_each(hook)
        for hook in self.after_each:
            visitor.after_each(hook)
        for hook in self.after_all:
            visitor.after_all(hook)

        for child in self.children:
            child.accept(visitor)

        visitor.end_group()

    def has_focus(self) -> bool:
        """Whether this group or anything below it is focused."""
        return self.marker.focused or any(child.has_focus() for child in self.children)

    def child(self, description: str) -> 'GroupDeclaration | ExampleDeclaration':
        """Find a direct child by description.

        Raises:
            KeyError: If no child has the description.
        """
        for item in self.children:
            if item.description == description:
                return item

        raise KeyError(description)

    def hooks(self, kind: HookKind) -> tuple[Hook, ...]:
        """Return the hooks of one kind."""
        return getattr(self, kind)  # type: ignore[no-any-return]

    def render_lines(self, depth: int = 0) -> 'Iterator[str]':
        """Yield rendering lines of this group and its children."""
        yield f'{RENDER_INDENT * depth}{self.description}{_suffix(self.marker)}'

        for item in self.children:
            yield from item.render_lines(depth + 1)

    def render(self) -> str:
        """Render the declaration tree as indented lines."""
        return linesep.join(self.render_lines())

    def __str__(self) -> str:
        return self.render()


GroupDeclaration.model_rebuild()
