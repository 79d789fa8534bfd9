"""Ordered concatenation of collections."""

from partition_stats.collection.base import PartitionedCollection
from partition_stats.stats.decompose import ChildPartitions


class UnionCollection[T](PartitionedCollection[T]):
    """
    The partitions of several collections, back to back, in the given order.

    Nothing is shuffled or interleaved, so the stats of the union can be
    split back into stats for each child.
    """

    def __init__(self, children: list[PartitionedCollection[T]], name: str | None = None):
        super().__init__(name)
        self.children = list(children)
        # (child, local index) for each partition of the union.
        self._layout = [
            (child, index) for child in self.children for index in range(child.num_partitions)
        ]

    @property
    def num_partitions(self) -> int:
        return len(self._layout)

    def partition(self, index: int):
        self._check_index(index)
        child, local_index = self._layout[index]
        return child.partition(local_index)

    def as_concatenation(self) -> list[ChildPartitions]:
        return [ChildPartitions(child.id, child.num_partitions) for child in self.children]


def union[T](*collections: PartitionedCollection[T], name: str | None = None) -> UnionCollection[T]:
    """Concatenate ``collections`` into one collection."""
    return UnionCollection(list(collections), name=name)
