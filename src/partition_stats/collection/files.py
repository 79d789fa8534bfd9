"""Collections backed by one newline-delimited file per partition."""

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from partition_stats.collection.base import PartitionedCollection

# 1MB buffer for efficient I/O.
BUFFER_SIZE = 1024 * 1024


def is_blank(raw_line: bytes) -> bool:
    return not raw_line.strip()


def parse_line[T](raw_line: bytes, converter: Callable[[str], T]) -> T:
    """Convert one raw, non-blank line into an element, whatever it converts to."""
    return converter(raw_line.rstrip(b"\n\r").decode("utf-8"))


def iter_elements[T](lines: Iterable[bytes], converter: Callable[[str], T]) -> Iterator[T]:
    """Yield converted elements from raw lines, skipping blank ones."""
    for raw_line in lines:
        if not is_blank(raw_line):
            yield parse_line(raw_line, converter)


@dataclass(frozen=True)
class FilePartition:
    """One partition file; iterating streams its elements line by line."""

    path: Path
    converter: Callable[[str], Any] = str

    def __iter__(self) -> Iterator[Any]:
        with open(self.path, "rb", buffering=BUFFER_SIZE) as handle:
            yield from iter_elements(handle, self.converter)


class FileCollection[T](PartitionedCollection[T]):
    """
    A collection stored as files, one partition each, in the given order.

    ``converter`` turns each stripped line into an element; it must be
    picklable (a builtin such as ``int`` or a module-level function) when
    the collection is scanned with a process pool.
    """

    def __init__(
        self,
        paths: Iterable[str | Path],
        converter: Callable[[str], T] = str,
        name: str | None = None,
    ):
        super().__init__(name)
        self._partitions = tuple(FilePartition(Path(p), converter) for p in paths)

    @classmethod
    def from_directory(
        cls,
        directory: str | Path,
        pattern: str = "*",
        converter: Callable[[str], T] = str,
        name: str | None = None,
    ) -> "FileCollection[T]":
        """Use every file in ``directory`` matching ``pattern``, sorted by name."""
        directory = Path(directory)
        if not directory.is_dir():
            raise ValueError(f"not a directory: {directory}")

        paths = sorted(p for p in directory.glob(pattern) if p.is_file())
        return cls(paths, converter=converter, name=name or directory.name)

    @property
    def paths(self) -> list[Path]:
        return [p.path for p in self._partitions]

    @property
    def num_partitions(self) -> int:
        return len(self._partitions)

    def partition(self, index: int) -> FilePartition:
        self._check_index(index)
        return self._partitions[index]
