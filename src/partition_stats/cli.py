"""Command-line interface for partition stats."""

import argparse
import logging
import sys

from partition_stats.collection.base import PartitionedCollection
from partition_stats.collection.files import FileCollection
from partition_stats.collection.union import union
from partition_stats.solver.compute import collection_stats
from partition_stats.stats.cache import StatsCache
from partition_stats.stats.types import DatasetStats

ELEMENT_TYPES = {"str": str, "int": int, "float": float}


def configure_logging(level: int = logging.INFO) -> None:
    """Configure logging to write to stderr."""
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="partition-stats",
        description="Report partition bounds, sizes and sortedness of partitioned data.",
    )

    parser.add_argument(
        "directories",
        nargs="+",
        help="Directories holding one newline-delimited file per partition; "
        "several directories are concatenated in the given order",
    )

    parser.add_argument(
        "--type",
        dest="element_type",
        choices=sorted(ELEMENT_TYPES),
        default="str",
        help="How to parse each line before comparing (default: str)",
    )

    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Maximum number of scan workers (default: executor's choice)",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)",
    )

    return parser


def format_report(name: str, stats: DatasetStats) -> str:
    """Render one collection's stats as a text block."""
    sizes = ", ".join(str(size) for size in stats.partition_sizes)
    return "\n".join(
        [
            f"{name}:",
            f"  partitions: {stats.num_partitions} ({stats.num_empty_partitions} empty)",
            f"  elements: {stats.num_elements}",
            f"  sorted: {'yes' if stats.is_sorted else 'no'}",
            f"  sizes: [{sizes}]",
            f"  count stats: {stats.count_stats}",
            f"  nonempty count stats: {stats.non_empty_count_stats}",
        ]
    )


def main_report(
    directories: list[str],
    element_type: type = str,
    workers: int | None = None,
) -> None:
    """Compute stats for each directory (and their union) and print them to stdout."""
    cache = StatsCache()
    collections: list[PartitionedCollection] = [
        FileCollection.from_directory(directory, converter=element_type)
        for directory in directories
    ]

    reports: list[PartitionedCollection] = list(collections)
    if len(collections) > 1:
        # Scanning the union first fills the cache for every directory.
        combined = union(*collections, name="union")
        reports.insert(0, combined)

    for collection in reports:
        stats = collection_stats(
            collection, cache=cache, element_type=element_type, workers=workers
        )
        print(format_report(collection.describe(), stats))


def main() -> int:
    """Entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args()

    log_level = getattr(logging, args.log_level)
    configure_logging(log_level)

    if args.workers is not None and args.workers < 1:
        parser.error(f"--workers must be positive, got {args.workers}")

    try:
        main_report(
            directories=args.directories,
            element_type=ELEMENT_TYPES[args.element_type],
            workers=args.workers,
        )
    except ValueError as exc:
        parser.error(str(exc))

    return 0


if __name__ == "__main__":
    sys.exit(main())
