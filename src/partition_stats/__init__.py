"""Partition Stats - bounds, sizes and sortedness of partitioned collections."""

from partition_stats.collection.files import FileCollection
from partition_stats.collection.memory import InMemoryCollection
from partition_stats.collection.union import UnionCollection, union
from partition_stats.errors import CacheTypeMismatchError, PartitionStatsError
from partition_stats.ordering import NATURAL, KeyOrdering, NaturalOrdering, ReversedOrdering
from partition_stats.solver.compute import collection_stats, scan_collection
from partition_stats.stats.cache import StatsCache
from partition_stats.stats.types import DatasetStats, PartitionStat

__all__ = [
    "NATURAL",
    "CacheTypeMismatchError",
    "DatasetStats",
    "FileCollection",
    "InMemoryCollection",
    "KeyOrdering",
    "NaturalOrdering",
    "PartitionStat",
    "PartitionStatsError",
    "ReversedOrdering",
    "StatsCache",
    "UnionCollection",
    "collection_stats",
    "scan_collection",
    "union",
]
