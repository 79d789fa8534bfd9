"""Exception types raised by partition-stats."""


class PartitionStatsError(Exception):
    """Base class for errors raised by this package."""


class CacheTypeMismatchError(PartitionStatsError, TypeError):
    """A cached entry holds stats for a different element type than requested."""

    def __init__(self, collection_id: int, expected: type, actual: type):
        self.collection_id = collection_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"stats cached for collection {collection_id} have element type "
            f"{actual.__name__}, expected {expected.__name__}"
        )
