"""Per-partition and aggregate stats records."""

from dataclasses import dataclass
from functools import cached_property

from partition_stats.stats.summary import Stats

type Bounds[T] = tuple[T, T]


@dataclass(frozen=True, slots=True)
class PartitionStat[T]:
    """Result of scanning one partition.

    ``bounds`` holds the first and last element in encounter order and is
    None exactly when the partition is empty.
    """

    bounds: Bounds[T] | None
    count: int
    locally_sorted: bool


@dataclass(frozen=True)
class DatasetStats[T]:
    """Bounds, sizes and sortedness of a whole partitioned collection.

    Both sequences are indexed by partition. ``element_type`` tags the stats
    for checked cache lookups and may be None for untagged stats.
    """

    partition_bounds: tuple[Bounds[T] | None, ...]
    partition_sizes: tuple[int, ...]
    is_sorted: bool
    element_type: type | None = None

    @property
    def num_partitions(self) -> int:
        return len(self.partition_sizes)

    @property
    def num_elements(self) -> int:
        return sum(self.partition_sizes)

    @property
    def num_empty_partitions(self) -> int:
        return sum(1 for size in self.partition_sizes if size == 0)

    @cached_property
    def count_stats(self) -> Stats:
        return Stats.from_values(self.partition_sizes)

    @cached_property
    def non_empty_count_stats(self) -> Stats:
        return Stats.from_values(size for size in self.partition_sizes if size > 0)
