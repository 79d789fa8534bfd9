"""Derive child stats from a concatenated collection's partition results."""

import logging
from collections.abc import Sequence
from typing import NamedTuple

from partition_stats.ordering import NATURAL, PartialOrdering
from partition_stats.stats.cache import StatsCache
from partition_stats.stats.merge import merge_partition_stats
from partition_stats.stats.types import DatasetStats, PartitionStat

logger = logging.getLogger(__name__)


class ChildPartitions(NamedTuple):
    """One source collection of a concatenation and how many partitions it spans."""

    collection_id: int
    num_partitions: int


def decompose_union[T](
    partition_stats: Sequence[PartitionStat[T]],
    children: Sequence[ChildPartitions],
    ordering: PartialOrdering[T] = NATURAL,
    *,
    cache: StatsCache,
    element_type: type | None = None,
) -> list[DatasetStats[T]]:
    """
    Cache each child's stats from its slice of the parent's partition results.

    Children are laid out back to back in the parent's partitions, in order.
    Children that are already cached keep their entry, and their slice is
    never merged, even when that entry is tagged with another element type.
    Returns the cached stats for every child.
    """
    total = sum(child.num_partitions for child in children)
    if total != len(partition_stats):
        raise ValueError(
            f"children span {total} partitions but the parent has {len(partition_stats)}"
        )

    results = []
    start = 0
    for child in children:
        end = start + child.num_partitions
        window = partition_stats[start:end]

        def merge_window(window=window) -> DatasetStats[T]:
            return merge_partition_stats(window, ordering, element_type)

        logger.debug(
            "Union child %d covers partitions [%d, %d)", child.collection_id, start, end
        )
        # Untyped lookup: a child cached under another element type keeps its
        # entry and must not fail the parent request.
        stats = cache.get_or_compute(child.collection_id, merge_window)
        if element_type is not None and stats.element_type not in (None, element_type):
            logger.debug(
                "Union child %d already cached as %s, not %s",
                child.collection_id,
                stats.element_type.__name__,
                element_type.__name__,
            )
        results.append(stats)
        start = end

    return results
