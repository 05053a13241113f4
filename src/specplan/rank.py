"""Deterministic ordering keys for compiled examples.

A rank is assigned to every group and example at declaration time. Ranks
are compared lexicographically, segment by segment, so the examples of one
group always stay contiguous and a group's rank sorts before the ranks of
everything declared inside it.
"""

from random import Random
from typing import Literal

#: Ordering strategy for siblings.
type Order = Literal['defined', 'random']

#: Single rank segment: a sort key and the declaration sequence number.
#: The key is constant for the defined order and drawn from a seeded
#: generator for the random order; the sequence number breaks ties.
type Segment = tuple[float, int]


class Rank:
    """Comparable path of per-level segments.

    Ranks only support ordering. Two examples never share a rank,
    and ranks must not be used to identify examples.
    """

    __slots__ = ('segments',)

    def __init__(self, segments: tuple[Segment, ...]) -> None:
        """Initialize a rank.

        Args:
            segments: Segments from the root level to the ranked block.
        """
        self.segments = segments

    def __lt__(self, other: 'Rank') -> bool:
        return self.segments < other.segments

    def __repr__(self) -> str:
        return f'Rank({'.'.join(str(seq) for _, seq in self.segments)})'

    @property
    def depth(self) -> int:
        """Nesting level of the ranked block."""
        return len(self.segments)


class RankGenerator:
    """Stateful generator handing out ranks during a tree traversal.

    The generator keeps one sequence counter per open nesting level.
    Every call to `generate` takes the next segment at the innermost
    level; `push_level` does the same for a group and opens a new level
    below it.
    """

    def __init__(self, order: Order = 'defined', seed: int = 0) -> None:
        """Initialize a rank generator.

        Args:
            order: `defined` keeps declaration order, `random` shuffles
                siblings while keeping every group contiguous.
            seed: Seed of the random order. The same seed always
                reproduces the same order for the same tree.
        """
        self._random = Random(seed) if order == 'random' else None  # noqa: S311

        self._prefix: list[Segment] = []
        self._counters: list[int] = [0]

    def generate(self) -> Rank:
        """Allocate the next rank at the innermost level."""
        sequence = self._counters[-1]
        self._counters[-1] += 1

        key = self._random.random() if self._random else 0.0

        return Rank((*self._prefix, (key, sequence)))

    def push_level(self) -> Rank:
        """Allocate a rank for a group and open a level below it.

        Returns:
            The rank of the group itself.
        """
        rank = self.generate()

        self._prefix = list(rank.segments)
        self._counters.append(0)

        return rank

    def pop_level(self) -> None:
        """Close the innermost level and return to its parent.

        Raises:
            IndexError: If no level was opened with `push_level`.
        """
        if not self._prefix:
            raise IndexError('No rank level to pop')

        self._prefix.pop()
        self._counters.pop()
