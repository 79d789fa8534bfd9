"""Collections held in memory, mostly for tests and small jobs."""

from collections.abc import Iterable, Sequence

from partition_stats.collection.base import PartitionedCollection


class InMemoryCollection[T](PartitionedCollection[T]):
    """A collection whose partitions are given as sequences."""

    def __init__(self, partitions: Iterable[Iterable[T]], name: str | None = None):
        super().__init__(name)
        self._partitions: tuple[tuple[T, ...], ...] = tuple(tuple(p) for p in partitions)

    @classmethod
    def from_items(
        cls,
        items: Sequence[T],
        num_partitions: int,
        name: str | None = None,
    ) -> "InMemoryCollection[T]":
        """
        Split ``items`` into ``num_partitions`` contiguous chunks.

        Chunk sizes differ by at most one, with the larger chunks first.
        """
        if num_partitions <= 0:
            raise ValueError(f"num_partitions must be positive, got {num_partitions}")

        base, extra = divmod(len(items), num_partitions)
        partitions = []
        start = 0
        for i in range(num_partitions):
            end = start + base + (1 if i < extra else 0)
            partitions.append(items[start:end])
            start = end
        return cls(partitions, name=name)

    @property
    def num_partitions(self) -> int:
        return len(self._partitions)

    def partition(self, index: int) -> tuple[T, ...]:
        self._check_index(index)
        return self._partitions[index]
