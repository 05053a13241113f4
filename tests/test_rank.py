"""Tests for ordering ranks."""

import pytest

from specplan.rank import Rank, RankGenerator


def test_rank_generator_defined_order() -> None:
    """Rank groups before their contents and siblings in declaration order."""
    ranks = RankGenerator()

    first = ranks.generate()
    group = ranks.push_level()
    nested = ranks.generate()
    ranks.pop_level()
    last = ranks.generate()

    assert sorted([last, nested, group, first]) == [first, group, nested, last]
    assert [rank.depth for rank in (first, group, nested, last)] == [1, 1, 2, 1]


def test_rank_generator_nested_levels() -> None:
    """Keep every nested level below its group and above later siblings."""
    ranks = RankGenerator()

    outer = ranks.push_level()
    inner = ranks.push_level()
    deepest = ranks.generate()
    ranks.pop_level()
    sibling = ranks.generate()
    ranks.pop_level()
    after = ranks.generate()

    assert outer < inner < deepest < sibling < after
    assert repr(deepest) == 'Rank(0.0.0)'
    assert repr(sibling) == 'Rank(0.1)'
    assert repr(after) == 'Rank(1)'


def test_rank_generator_pop_without_level() -> None:
    """Reject closing a level that was never opened."""
    ranks = RankGenerator()

    with pytest.raises(IndexError, match=r'^No rank level to pop$'):
        ranks.pop_level()


@pytest.mark.parametrize('seed', (0, 1, 42))
def test_rank_generator_random_is_reproducible(seed: int) -> None:
    """Reproduce random keys for the same seed."""
    def allocate() -> list[Rank]:
        ranks = RankGenerator('random', seed)
        allocated = [ranks.generate() for _ in range(5)]
        allocated.append(ranks.push_level())
        allocated.extend(ranks.generate() for _ in range(5))
        return allocated

    first = allocate()
    second = allocate()

    assert [rank.segments for rank in first] == [rank.segments for rank in second]


def test_rank_generator_random_keeps_groups_contiguous() -> None:
    """Keep nested ranks between their group and the next sibling."""
    ranks = RankGenerator('random', 7)

    siblings = [ranks.generate() for _ in range(10)]
    group = ranks.push_level()
    nested = [ranks.generate() for _ in range(10)]
    ranks.pop_level()
    siblings.extend(ranks.generate() for _ in range(10))

    ordered = sorted([*siblings, group, *nested])
    start = ordered.index(group)

    assert ordered[start + 1:start + 1 + len(nested)] == sorted(nested)
