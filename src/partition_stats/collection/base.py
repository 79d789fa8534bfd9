"""Partitioned collection abstraction and identity assignment."""

import itertools
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator
from concurrent.futures import Executor
from functools import partial

from partition_stats.stats.decompose import ChildPartitions

_id_lock = threading.Lock()
_id_counter = itertools.count()


def next_collection_id() -> int:
    """Return a fresh identity, unique within this process."""
    with _id_lock:
        return next(_id_counter)


def _apply_to_partition[T, R](fn: Callable[[Iterator[T]], R], partition: Iterable[T]) -> R:
    return fn(iter(partition))


class PartitionedCollection[T](ABC):
    """
    An immutable collection split into independently readable partitions.

    Each instance receives a stable ``id`` on construction; stats are cached
    under that id, so a collection must not change after it is created.
    """

    def __init__(self, name: str | None = None):
        self.id = next_collection_id()
        self.name = name

    @property
    @abstractmethod
    def num_partitions(self) -> int: ...

    @abstractmethod
    def partition(self, index: int) -> Iterable[T]:
        """
        Return a re-iterable source for one partition.

        The source is picklable so it can be handed to a process worker, and
        it only reads data once iterated.
        """

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.num_partitions:
            raise ValueError(
                f"partition index {index} out of range for {self.num_partitions} partitions"
            )

    def map_partitions[R](
        self,
        fn: Callable[[Iterator[T]], R],
        executor: Executor | None = None,
    ) -> list[R]:
        """
        Apply ``fn`` to every partition and gather the results in partition order.

        Blocks until every partition is done. A failure in any partition is
        re-raised unchanged and no results are returned.
        """
        sources = [self.partition(i) for i in range(self.num_partitions)]
        task = partial(_apply_to_partition, fn)
        if executor is None:
            return [task(source) for source in sources]
        return list(executor.map(task, sources))

    def as_concatenation(self) -> list[ChildPartitions] | None:
        """Describe the source collections if this is an ordered concatenation."""
        return None

    def describe(self) -> str:
        return self.name or f"{type(self).__name__}#{self.id}"

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id} partitions={self.num_partitions}>"
