"""Focus and ignore resolution.

The strategy is chosen once the whole declaration tree is known: a single
focused block anywhere switches every other branch off, including branches
declared before it.
"""

from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from specplan.markers import Marker
    from specplan.schema import GroupDeclaration


class ExecutionStrategy:
    """Default resolution: skip ignored examples and ignored groups."""

    #: Whether the strategy runs focused blocks only.
    focused: ClassVar[bool] = False

    @staticmethod
    def should_be_ignored(marker: 'Marker', container: 'Marker') -> bool:
        """Decide whether an example is skipped.

        Args:
            marker: Marker declared on the example.
            container: Effective marker of the enclosing group, inherited
                from the outermost group declaring a non-default one.

        Returns:
            True when the example must not execute.
        """
        return marker.ignored or container.ignored


class FocusedExecutionStrategy(ExecutionStrategy):
    """Focus resolution: run focused examples and focused groups only.

    Ignore markers of examples are overridden; a focused example runs
    even inside an ignored group.
    """

    focused: ClassVar[bool] = True

    @staticmethod
    def should_be_ignored(marker: 'Marker', container: 'Marker') -> bool:
        """Decide whether an example is skipped."""
        return not (marker.focused or container.focused)


def select_strategy(tree: 'GroupDeclaration') -> ExecutionStrategy:
    """Choose the resolution rule for a whole declaration tree."""
    if tree.has_focus():
        return FocusedExecutionStrategy()

    return ExecutionStrategy()
