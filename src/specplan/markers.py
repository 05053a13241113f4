"""Execution markers for groups and examples."""

from enum import StrEnum


class Marker(StrEnum):
    """Per-block execution disposition.

    Markers are set when a block is declared and never change afterwards.
    A focused block (`fdescribe`, `fit`) switches the whole spec into focus
    mode, an ignored block (`xdescribe`, `xit`) is skipped otherwise.
    """

    DEFAULT = 'default'
    FOCUSED = 'focused'
    IGNORED = 'ignored'

    @property
    def focused(self) -> bool:
        """Whether the marker requests focus."""
        return self is Marker.FOCUSED

    @property
    def ignored(self) -> bool:
        """Whether the marker requests the block to be skipped."""
        return self is Marker.IGNORED
