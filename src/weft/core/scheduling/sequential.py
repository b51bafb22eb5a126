"""Sequential scheduler - one task at a time, ascending level."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from weft.core.scheduling.base import Scheduler
from weft.core.types import Outcome, SchedulerKind

if TYPE_CHECKING:
    from weft.core.graph.closure import ExecutionClosure
    from weft.core.trace import RunTrace


class SequentialScheduler(Scheduler):
    """Runs a closure strictly in level order.

    Each resolver is awaited before the next one starts, even for tasks
    with no relationship to each other. Ties within a level run in
    discovery order. Suited to pipelines whose stages must not overlap.
    """

    kind = SchedulerKind.SEQUENTIAL

    async def execute(
        self,
        closure: ExecutionClosure,
        input: Any,
        trace: RunTrace | None = None,
    ) -> dict[str, Outcome]:
        outcomes: dict[str, Outcome] = {}
        for task in closure.ordered():
            await self.resolve_task(task, closure, outcomes, input, trace)
        return outcomes
