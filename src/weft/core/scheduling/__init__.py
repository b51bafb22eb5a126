"""Schedulers - how a leveled closure gets executed.

Classes:
    Scheduler: Shared run bookkeeping (artifacts, errors, tracing).
    ConcurrentScheduler: Each task waits only for its direct dependencies.
    SequentialScheduler: One task at a time in ascending level order.
"""

from __future__ import annotations

from weft.core.scheduling.base import Scheduler, load_dependency_values
from weft.core.scheduling.concurrent import ConcurrentScheduler
from weft.core.scheduling.sequential import SequentialScheduler
from weft.core.types import SchedulerKind


def get_scheduler(kind: SchedulerKind | str, max_concurrency: int | None = None) -> Scheduler:
    """Create the scheduler for ``kind``.

    Args:
        kind: SchedulerKind or its string value.
        max_concurrency: Passed to ConcurrentScheduler; ignored otherwise.

    Raises:
        ValueError: If kind is not a known scheduler.
    """
    kind = SchedulerKind(kind)
    if kind is SchedulerKind.SEQUENTIAL:
        return SequentialScheduler()
    return ConcurrentScheduler(max_concurrency=max_concurrency)


__all__ = [
    "ConcurrentScheduler",
    "Scheduler",
    "SequentialScheduler",
    "get_scheduler",
    "load_dependency_values",
]
