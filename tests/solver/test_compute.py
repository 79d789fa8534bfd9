"""End-to-end tests for computing collection stats."""

from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor

import pytest

from partition_stats.collection.files import FileCollection
from partition_stats.collection.memory import InMemoryCollection
from partition_stats.collection.union import union
from partition_stats.errors import CacheTypeMismatchError
from partition_stats.ordering import NATURAL, KeyOrdering
from partition_stats.solver import compute
from partition_stats.solver.compute import collection_stats, scan_collection
from partition_stats.stats.cache import StatsCache
from partition_stats.stats.merge import merge_partition_stats
from partition_stats.stats.scan import scan_partition
from partition_stats.stats.summary import Stats
from partition_stats.stats.types import PartitionStat


@pytest.fixture(autouse=True)
def threaded_executor(monkeypatch):
    monkeypatch.setenv("PS_EXECUTOR", "threads")


class TestCollectionStats:
    """Test cases for collection_stats."""

    def test_unsorted_across_boundary(self) -> None:
        """3 > 2 across the second boundary makes the whole collection unsorted."""
        collection = InMemoryCollection([[1, 2], [3, 4], [2, 3]])

        stats = collection_stats(collection, cache=StatsCache())

        assert stats.is_sorted is False
        assert stats.partition_sizes == (2, 2, 2)
        assert stats.partition_bounds == ((1, 2), (3, 4), (2, 3))

    def test_sorted_with_empty_partition(self) -> None:
        collection = InMemoryCollection([[1, 2], [], [3, 5], [6]])

        stats = collection_stats(collection, cache=StatsCache())

        assert stats.is_sorted is True
        assert stats.partition_sizes == (2, 0, 2, 1)
        assert stats.partition_bounds == ((1, 2), None, (3, 5), (6, 6))
        assert stats.non_empty_count_stats == Stats.from_values([2, 2, 1])
        assert stats.count_stats.n == 4

    def test_serial_and_threaded_agree(self) -> None:
        collection = InMemoryCollection.from_items([5, 1, 2, 3, 9, 9, 10], 3)

        serial = collection_stats(collection, cache=StatsCache(), executor_class=None)
        threaded = collection_stats(
            collection, cache=StatsCache(), executor_class=ThreadPoolExecutor, workers=2
        )

        assert serial == threaded

    def test_custom_ordering(self) -> None:
        collection = InMemoryCollection([["a", "bb"], ["cc", "ddd"]])

        by_length = collection_stats(collection, KeyOrdering(len), cache=StatsCache())
        natural = collection_stats(collection, NATURAL, cache=StatsCache())

        assert by_length.is_sorted is True
        assert natural.is_sorted is True

        reordered = InMemoryCollection([["zz"], ["a", "bbb"]])
        assert collection_stats(reordered, KeyOrdering(len), cache=StatsCache()).is_sorted is False

    def test_computed_once_per_collection(self, monkeypatch) -> None:
        """A second request is served from the cache without rescanning."""
        scans = []
        original = compute.scan_collection

        def counting_scan(*args, **kwargs):
            scans.append(1)
            return original(*args, **kwargs)

        monkeypatch.setattr(compute, "scan_collection", counting_scan)
        cache = StatsCache()
        collection = InMemoryCollection([[1], [2]])

        first = collection_stats(collection, cache=cache)
        second = collection_stats(collection, cache=cache)

        assert first is second
        assert len(scans) == 1

    def test_element_type_mismatch(self) -> None:
        cache = StatsCache()
        collection = InMemoryCollection([[1, 2]])
        collection_stats(collection, cache=cache, element_type=int)

        with pytest.raises(CacheTypeMismatchError):
            collection_stats(collection, cache=cache, element_type=str)

    def test_worker_failure_propagates(self) -> None:
        """A failing partition surfaces unchanged and nothing is cached."""

        class Exploding:
            def lteq(self, a, b):
                return True

            def gt(self, a, b):
                raise RuntimeError("comparison failed")

        cache = StatsCache()
        collection = InMemoryCollection([[1, 2], [3, 4]])

        with pytest.raises(RuntimeError, match="comparison failed"):
            collection_stats(collection, Exploding(), cache=cache)
        assert collection.id not in cache


class TestUnionStats:
    """Test cases for union decomposition during collection_stats."""

    def test_children_are_cached_from_parent_scan(self, monkeypatch) -> None:
        a = InMemoryCollection([[1, 2], [3]])
        b = InMemoryCollection([[], [0, 4], [5, 6]])
        c = InMemoryCollection([[9, 8]])
        parent = union(a, b, c)
        cache = StatsCache()

        parent_stats = collection_stats(parent, cache=cache)

        assert parent_stats.is_sorted is False
        assert parent_stats.partition_sizes == (2, 1, 0, 2, 2, 2)
        for child in (a, b, c):
            assert child.id in cache

        # Children are now served without scanning.
        monkeypatch.setattr(compute, "scan_collection", pytest.fail)
        for child in (a, b, c):
            isolated = merge_partition_stats(
                [scan_partition(child.partition(i)) for i in range(child.num_partitions)]
            )
            assert collection_stats(child, cache=cache) == isolated

    def test_decomposition_does_not_change_parent_stats(self) -> None:
        a = InMemoryCollection([[1], [2]])
        b = InMemoryCollection([[3], [4]])
        parent = union(a, b)

        decomposed = collection_stats(parent, cache=StatsCache())
        plain = merge_partition_stats(scan_collection(parent, executor_class=None))

        assert decomposed == plain

    def test_precached_child_is_kept(self) -> None:
        a = InMemoryCollection([[1]])
        b = InMemoryCollection([[2]])
        cache = StatsCache()
        a_stats = collection_stats(a, cache=cache)

        collection_stats(union(a, b), cache=cache)

        assert cache.get(a.id) is a_stats
        assert b.id in cache

    def test_child_typed_differently_does_not_fail_parent(self) -> None:
        """Decomposition never changes what the parent request returns."""
        a = InMemoryCollection([[1, 2]])
        b = InMemoryCollection([[3.5]])
        cache = StatsCache()
        collection_stats(a, cache=cache, element_type=int)
        parent = union(a, b)

        stats = collection_stats(parent, cache=cache, element_type=float)

        assert stats.partition_sizes == (2, 1)
        assert stats.is_sorted is True
        assert cache.get(parent.id, float) is stats
        assert cache.get(a.id, int).element_type is int
        assert cache.get(b.id, float).partition_bounds == ((3.5, 3.5),)

    def test_cached_parent_skips_decomposition(self) -> None:
        """Children are only derived by the request that actually scanned."""
        a = InMemoryCollection([[1]])
        parent = union(a)
        cache = StatsCache()
        collection_stats(parent, cache=cache)
        cache.invalidate(a.id)

        collection_stats(parent, cache=cache)

        assert a.id not in cache

    def test_union_of_file_collections(self, tmp_path) -> None:
        left_dir = tmp_path / "left"
        right_dir = tmp_path / "right"
        left_dir.mkdir()
        right_dir.mkdir()
        (left_dir / "0.txt").write_text("1\n2\n", encoding="utf-8")
        (left_dir / "1.txt").write_text("", encoding="utf-8")
        (right_dir / "0.txt").write_text("10\n3\n", encoding="utf-8")

        left = FileCollection.from_directory(left_dir, converter=int)
        right = FileCollection.from_directory(right_dir, converter=int)
        cache = StatsCache()

        stats = collection_stats(union(left, right), cache=cache, element_type=int)

        assert stats.partition_sizes == (2, 0, 2)
        assert stats.is_sorted is False
        assert cache.get(left.id, int).is_sorted is True
        assert cache.get(right.id, int).is_sorted is False


def test_scan_collection_returns_partition_order() -> None:
    collection = InMemoryCollection([[2, 1], [], [3]])

    with_pool = scan_collection(collection, executor_class=ThreadPoolExecutor, workers=3)

    assert with_pool == [
        PartitionStat((2, 1), 2, False),
        PartitionStat(None, 0, True),
        PartitionStat((3, 3), 1, True),
    ]


def test_process_pool_over_file_union(tmp_path) -> None:
    """Partition sources, the ordering and the results all cross process boundaries."""
    left_dir = tmp_path / "left"
    right_dir = tmp_path / "right"
    left_dir.mkdir()
    right_dir.mkdir()
    (left_dir / "0.txt").write_text("1\n2\n", encoding="utf-8")
    (left_dir / "1.txt").write_text("", encoding="utf-8")
    (left_dir / "2.txt").write_text("3\n5\n", encoding="utf-8")
    (right_dir / "0.txt").write_text("6\n", encoding="utf-8")
    (right_dir / "1.txt").write_text("9\n7\n", encoding="utf-8")

    left = FileCollection.from_directory(left_dir, converter=int)
    right = FileCollection.from_directory(right_dir, converter=int)
    parent = union(left, right)
    cache = StatsCache()

    stats = collection_stats(
        parent,
        cache=cache,
        element_type=int,
        workers=2,
        executor_class=ProcessPoolExecutor,
    )

    assert stats.partition_sizes == (2, 0, 2, 1, 2)
    assert stats.partition_bounds == ((1, 2), None, (3, 5), (6, 6), (9, 7))
    assert stats.is_sorted is False
    assert cache.get(left.id, int).is_sorted is True
    assert cache.get(right.id, int).partition_sizes == (1, 2)

    serial = scan_collection(parent, executor_class=None)
    assert scan_collection(parent, workers=2, executor_class=ProcessPoolExecutor) == serial


def test_process_pool_over_in_memory_collection() -> None:
    collection = InMemoryCollection.from_items([1, 2, 3, 4, 4, 5, 0], 3)

    stats = collection_stats(
        collection, cache=StatsCache(), workers=2, executor_class=ProcessPoolExecutor
    )

    assert stats.partition_sizes == (3, 2, 2)
    assert stats.partition_bounds == ((1, 3), (4, 4), (5, 0))
    assert stats.is_sorted is False
