"""Stats requests: scan a collection, merge, cache, and decompose unions."""

import logging
import time
from functools import partial

from partition_stats.collection.base import PartitionedCollection
from partition_stats.ordering import NATURAL, PartialOrdering
from partition_stats.solver.execution import (
    ExecutorClass,
    choose_executor,
    describe_executor,
)
from partition_stats.stats.cache import StatsCache
from partition_stats.stats.decompose import decompose_union
from partition_stats.stats.merge import merge_partition_stats
from partition_stats.stats.scan import scan_partition
from partition_stats.stats.types import DatasetStats, PartitionStat

logger = logging.getLogger(__name__)

# Marks "let choose_executor decide".
_AUTO = object()


def scan_collection[T](
    collection: PartitionedCollection[T],
    ordering: PartialOrdering[T] = NATURAL,
    *,
    workers: int | None = None,
    executor_class: ExecutorClass | object = _AUTO,
) -> list[PartitionStat[T]]:
    """
    Scan every partition of ``collection`` in parallel.

    Results come back in partition order once all partitions are done; the
    first worker failure is re-raised as is.
    """
    scan = partial(scan_partition, ordering=ordering)
    num_partitions = collection.num_partitions

    if executor_class is _AUTO:
        payload = (scan, collection.partition(0)) if num_partitions else (scan,)
        executor_class = choose_executor(num_partitions, payload, workers)

    logger.debug(
        "Scanning %d partitions of %s with executor=%s",
        num_partitions,
        collection.describe(),
        describe_executor(executor_class),
    )

    # Pools are not worth starting for zero or one partition.
    if executor_class is None or num_partitions <= 1:
        return collection.map_partitions(scan)

    with executor_class(max_workers=workers) as executor:
        return collection.map_partitions(scan, executor)


def collection_stats[T](
    collection: PartitionedCollection[T],
    ordering: PartialOrdering[T] = NATURAL,
    *,
    cache: StatsCache,
    element_type: type | None = None,
    workers: int | None = None,
    executor_class: ExecutorClass | object = _AUTO,
) -> DatasetStats[T]:
    """
    Return bounds, sizes and sortedness for ``collection``.

    Stats are computed at most once per collection id in ``cache``. When this
    call does the scan and the collection is a concatenation, every child's
    stats are cached too, derived from the same scan.

    Raises:
        CacheTypeMismatchError: ``element_type`` disagrees with the element
            type of stats already cached for this collection.
    """
    scanned: list[PartitionStat[T]] | None = None

    def compute() -> DatasetStats[T]:
        nonlocal scanned
        start = time.perf_counter()
        scanned = scan_collection(
            collection, ordering, workers=workers, executor_class=executor_class
        )
        stats = merge_partition_stats(scanned, ordering, element_type)
        logger.info(
            "Computed stats for %s: %d partitions, %d elements, sorted=%s in %.2fs",
            collection.describe(),
            stats.num_partitions,
            stats.num_elements,
            stats.is_sorted,
            time.perf_counter() - start,
        )
        return stats

    stats = cache.get_or_compute(collection.id, compute, element_type)

    if scanned is not None:
        children = collection.as_concatenation()
        if children:
            decompose_union(
                scanned, children, ordering, cache=cache, element_type=element_type
            )
            logger.debug(
                "Cached stats for %d children of %s", len(children), collection.describe()
            )

    return stats
