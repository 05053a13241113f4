"""Collection of declarations emitted by a running script.

The collector is the object DSL functions register against. It keeps a
stack of open group scopes, checks sibling descriptions as blocks arrive
and freezes each scope into a `GroupDeclaration` when it closes.
"""

from typing import TYPE_CHECKING

from specplan.errors import BlockAlreadyDefined, ErrorContext, IllegalContext
from specplan.markers import Marker
from specplan.schema import ExampleDeclaration, GroupDeclaration

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import Any

if TYPE_CHECKING:
    from specplan.hooks import Hook
    from specplan.schema import HookKind


class GroupScope:
    """Mutable scope of a group whose body is being evaluated."""

    __slots__ = ('children', 'description', 'hooks', 'initializers', 'marker')

    def __init__(self, description: str, marker: Marker = Marker.DEFAULT) -> None:
        """Initialize an empty scope.

        Args:
            description: Group description.
            marker: Marker declared on the group.
        """
        self.description = description
        self.marker = marker

        self.hooks: dict[HookKind, list[Hook]] = {
            'before_all': [],
            'before_each': [],
            'after_each': [],
            'after_all': [],
        }
        self.initializers: list[Hook] = []
        self.children: dict[str, GroupDeclaration | ExampleDeclaration] = {}

    def freeze(self) -> GroupDeclaration:
        """Build the immutable declaration of this scope."""
        return GroupDeclaration(
            description=self.description,
            marker=self.marker,
            before_all=tuple(self.hooks['before_all']),
            before_each=tuple(self.hooks['before_each']),
            after_each=tuple(self.hooks['after_each']),
            after_all=tuple(self.hooks['after_all']),
            initializers=tuple(self.initializers),
            children=tuple(self.children.values()),
        )


class DeclarationCollector:
    """Receiver of DSL calls for one compilation session.

    The root scope is opened on creation and named after the spec.
    Nested group bodies are evaluated eagerly, in declaration order.
    """

    def __init__(self, description: str) -> None:
        """Initialize a collector with an open root scope.

        Args:
            description: Description of the root group.
        """
        self._scopes = [GroupScope(description)]

    @property
    def description(self) -> str:
        """Description of the root group."""
        return self._scopes[0].description

    @property
    def scope(self) -> GroupScope:
        """Innermost open scope."""
        return self._scopes[-1]

    def group(self, description: str, marker: Marker,
              body: 'Callable[[], Any]', *, kind: str = 'describe') -> None:
        """Declare a group and evaluate its body inside a new scope.

        A body raising an exception leaves no trace of the group: its scope
        is discarded and the exception propagates.

        Args:
            description: Group description.
            marker: Marker declared on the group.
            body: Block declaring the group contents.
            kind: DSL function name, used in error messages.

        Raises:
            BlockAlreadyDefined: If a sibling uses the same description.
        """
        self.open_group(description, marker, kind=kind)
        try:
            body()
        except BaseException:
            self.discard_group()
            raise

        self.close_group()

    def open_group(self, description: str, marker: Marker = Marker.DEFAULT, *,
                   kind: str = 'describe') -> None:
        """Open a nested group scope.

        Raises:
            BlockAlreadyDefined: If a sibling uses the same description.
        """
        self.ensure_unique(description, kind)
        self._scopes.append(GroupScope(description, marker))

    def close_group(self) -> None:
        """Close the innermost group scope and attach it to its parent.

        Raises:
            IllegalContext: If only the root scope is open.
        """
        if len(self._scopes) == 1:
            raise IllegalContext('No group is open')

        scope = self._scopes.pop()
        self.scope.children[scope.description] = scope.freeze()

    def discard_group(self) -> None:
        """Drop the innermost group scope without attaching it.

        Raises:
            IllegalContext: If only the root scope is open.
        """
        if len(self._scopes) == 1:
            raise IllegalContext('No group is open')

        self._scopes.pop()

    def add_example(self, declaration: ExampleDeclaration, *, kind: str = 'it') -> None:
        """Register an example in the innermost scope.

        Raises:
            BlockAlreadyDefined: If a sibling uses the same description.
        """
        self.ensure_unique(declaration.description, kind)
        self.scope.children[declaration.description] = declaration

    def add_hook(self, kind: 'HookKind', hook: 'Hook') -> None:
        """Register a hook in the innermost scope."""
        self.scope.hooks[kind].append(hook)

    def add_initializer(self, hook: 'Hook') -> None:
        """Register a var initializer in the innermost scope."""
        self.scope.initializers.append(hook)

    def ensure_unique(self, description: str, kind: str) -> None:
        """Check that no sibling in the innermost scope uses a description.

        Raises:
            BlockAlreadyDefined: If the description is taken.
        """
        if description not in self.scope.children:
            return

        raise BlockAlreadyDefined(description, context=ErrorContext(
            spec=self.description,
            path=[scope.description for scope in self._scopes[1:]],
            block=description,
            kind=kind,
        ))

    def build(self) -> GroupDeclaration:
        """Freeze the collected declarations into a tree.

        Raises:
            IllegalContext: If a nested group scope is still open.
        """
        if len(self._scopes) != 1:
            raise IllegalContext(f'Group {self.scope.description!r} is not closed')

        return self._scopes[0].freeze()
