"""Concurrent scheduler - every task waits only for its direct dependencies."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from weft.core.scheduling.base import Scheduler
from weft.core.types import Outcome, SchedulerKind

if TYPE_CHECKING:
    from weft.core.graph.closure import ExecutionClosure
    from weft.core.task import Task
    from weft.core.trace import RunTrace


class ConcurrentScheduler(Scheduler):
    """Runs independent branches of a closure in parallel.

    One asyncio task (a "unit") is started per closure task. A unit waits
    for the units of its direct dependencies to settle, success or
    failure, then resolves its own task. A chain of n dependent tasks
    therefore takes n sequential steps however many unrelated tasks exist
    elsewhere in the closure.

    Args:
        max_concurrency: Maximum resolvers running at once (None = unbounded).
            The limit is taken only after a unit's dependencies settled,
            so waiting units never hold a slot.

    Example:
        >>> scheduler = ConcurrentScheduler(max_concurrency=4)
        >>> value = await scheduler.run(build_closure(root), input={"id": 7})
    """

    kind = SchedulerKind.CONCURRENT

    def __init__(self, max_concurrency: int | None = None) -> None:
        super().__init__()
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.max_concurrency = max_concurrency

    async def execute(
        self,
        closure: ExecutionClosure,
        input: Any,
        trace: RunTrace | None = None,
    ) -> dict[str, Outcome]:
        outcomes: dict[str, Outcome] = {}
        units: dict[str, asyncio.Task[Outcome]] = {}
        semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None

        async def unit(task: Task, waits: list[asyncio.Task[Outcome]]) -> Outcome:
            if waits:
                await asyncio.gather(*waits, return_exceptions=True)
            if semaphore is None:
                return await self.resolve_task(task, closure, outcomes, input, trace)
            async with semaphore:
                return await self.resolve_task(task, closure, outcomes, input, trace)

        # Ascending level guarantees every dependency's unit already exists
        for task in closure.ordered():
            waits = [units[dep_id] for dep_id in closure.direct_dependencies[task.id]]
            units[task.id] = asyncio.create_task(unit(task, waits), name=f"weft:{task.id}")

        # Everything in the closure is an ancestor of the root, so the
        # root settling means every unit has settled.
        await units[closure.root_id]
        return outcomes
