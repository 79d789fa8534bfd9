"""Ordered fold of per-partition results into collection stats."""

from collections.abc import Iterable

from partition_stats.ordering import NATURAL, PartialOrdering
from partition_stats.stats.types import DatasetStats, PartitionStat


def merge_partition_stats[T](
    partition_stats: Iterable[PartitionStat[T]],
    ordering: PartialOrdering[T] = NATURAL,
    element_type: type | None = None,
) -> DatasetStats[T]:
    """
    Combine per-partition results, given in partition order.

    The collection is sorted when every partition is locally sorted and each
    nonempty partition starts at or above the last element of the nearest
    nonempty partition before it. Empty partitions are skipped over when
    looking for that previous upper bound.
    """
    bounds = []
    sizes = []

    # Tracked with a flag so that None stays usable as an element.
    has_upper = False
    last_upper = None
    is_sorted = True

    for stat in partition_stats:
        if stat.bounds is not None:
            first, last = stat.bounds
            if is_sorted and has_upper and not ordering.lteq(last_upper, first):
                is_sorted = False
            last_upper = last
            has_upper = True

        if not stat.locally_sorted:
            is_sorted = False

        bounds.append(stat.bounds)
        sizes.append(stat.count)

    return DatasetStats(tuple(bounds), tuple(sizes), is_sorted, element_type)
