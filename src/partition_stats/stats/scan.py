"""Single-pass scan of one partition."""

from collections.abc import Iterable

from partition_stats.ordering import NATURAL, PartialOrdering
from partition_stats.stats.types import PartitionStat


def scan_partition[T](
    elements: Iterable[T],
    ordering: PartialOrdering[T] = NATURAL,
) -> PartitionStat[T]:
    """
    Record the bounds, size and local sortedness of one partition.

    The iterable is consumed exactly once, so one-shot streams are fine.
    Local sortedness only looks for a strictly decreasing adjacent pair
    (``ordering.gt``); incomparable neighbours do not break it.
    """
    iterator = iter(elements)
    try:
        first = next(iterator)
    except StopIteration:
        return PartitionStat(None, 0, True)

    previous = first
    count = 1
    locally_sorted = True
    for current in iterator:
        count += 1
        # Sticky: no more comparisons once a descent is seen.
        if locally_sorted and ordering.gt(previous, current):
            locally_sorted = False
        previous = current

    return PartitionStat((first, previous), count, locally_sorted)
