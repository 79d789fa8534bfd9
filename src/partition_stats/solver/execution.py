"""Choosing how the partitions of one stats request are scanned."""

import logging
import os
import pickle
import sys
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor

logger = logging.getLogger(__name__)

type ExecutorClass = type[ThreadPoolExecutor] | type[ProcessPoolExecutor] | None

# Environment variable forcing "threads", "processes" or "serial" scans.
PS_EXECUTOR_ENV = "PS_EXECUTOR"

_OVERRIDES: dict[str, ExecutorClass] = {
    "threads": ThreadPoolExecutor,
    "processes": ProcessPoolExecutor,
    "serial": None,
}


def is_gil_enabled() -> bool:
    try:
        return sys._is_gil_enabled()
    except AttributeError:
        return True


def _ships_to_processes(payload: tuple[object, ...]) -> bool:
    try:
        pickle.dumps(payload)
    except (pickle.PicklingError, AttributeError, TypeError):
        return False
    return True


def choose_executor(
    num_partitions: int,
    payload: tuple[object, ...] = (),
    workers: int | None = None,
) -> ExecutorClass:
    """
    Pick the executor class used to scan ``num_partitions`` partitions.

    A single partition, or a single worker, is scanned in the calling thread.
    Otherwise ``PS_EXECUTOR`` wins when set; without it, processes are used
    while the GIL is enabled and threads when it is not. ``payload`` is what a
    worker needs besides its partition (the ordering and a partition source);
    when it cannot be pickled, a process pool is downgraded to threads.
    """
    if num_partitions <= 1 or workers == 1:
        return None

    override = os.environ.get(PS_EXECUTOR_ENV, "").lower()
    if override in _OVERRIDES:
        executor_class = _OVERRIDES[override]
    elif is_gil_enabled():
        executor_class = ProcessPoolExecutor
    else:
        executor_class = ThreadPoolExecutor

    if executor_class is ProcessPoolExecutor and not _ships_to_processes(payload):
        logger.debug("Scan payload cannot be pickled, scanning with threads instead")
        return ThreadPoolExecutor
    return executor_class


def describe_executor(executor_class: ExecutorClass) -> str:
    if executor_class is None:
        return "serial"
    if executor_class is ThreadPoolExecutor:
        return "threads"
    return "processes"
