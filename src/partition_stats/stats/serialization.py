"""Compact pickle reducers for stats records shipped between workers."""

import copyreg
from collections.abc import MutableMapping

from partition_stats.stats.types import DatasetStats, PartitionStat


def _reduce_partition_stat(stat: PartitionStat) -> tuple:
    return PartitionStat, (stat.bounds, stat.count, stat.locally_sorted)


def _reduce_dataset_stats(stats: DatasetStats) -> tuple:
    # Memoised summaries are not shipped; they are recomputed on first access.
    return DatasetStats, (
        stats.partition_bounds,
        stats.partition_sizes,
        stats.is_sorted,
        stats.element_type,
    )


def register_pickle(dispatch_table: MutableMapping | None = None) -> None:
    """
    Register reducers for the stats records.

    With no argument the reducers go into the global ``copyreg`` table, which
    every pickler (including ``ProcessPoolExecutor``'s) consults. Pass a
    ``Pickler.dispatch_table`` to scope them to one pickler instead.
    """
    reducers = {
        PartitionStat: _reduce_partition_stat,
        DatasetStats: _reduce_dataset_stats,
    }
    if dispatch_table is None:
        for cls, reducer in reducers.items():
            copyreg.pickle(cls, reducer)
    else:
        dispatch_table.update(reducers)
