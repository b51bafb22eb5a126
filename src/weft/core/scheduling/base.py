"""Scheduler base - the part of a run both strategies share.

A scheduler takes a leveled ExecutionClosure and an input, runs every task
once, and hands back the outcome map. ``Scheduler.run`` wraps that with the
run bookkeeping: run id, trace, artifact recording, and turning the root's
failure into a raised TaskRunError.
"""

from __future__ import annotations

import inspect
import time
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from weft.core.artifacts import record_artifacts
from weft.core.errors import TaskRunError
from weft.core.logging_config import get_logger
from weft.core.run_logging import (
    generate_run_id,
    log_complete,
    log_error,
    log_start,
    log_warning,
)
from weft.core.trace import RunTrace, TaskTrace
from weft.core.types import Outcome, ResolverOptions, SchedulerKind

if TYPE_CHECKING:
    from weft.core.graph.closure import ExecutionClosure
    from weft.core.task import Task
    from weft.core.tree import DependencyTree


def load_dependency_values(tree: DependencyTree, outcomes: dict[str, Outcome]) -> dict[str, Any]:
    """Build a resolver's ``deps`` from recorded outcomes.

    The result has the tree's shape. A dependency that failed (or has no
    outcome) contributes None instead of aborting the dependent.
    """

    def value_of(task: Task) -> Any:
        outcome = outcomes.get(task.id)
        if outcome is None or not outcome.succeeded:
            return None
        return outcome.value

    return tree.map_tasks(value_of)


class Scheduler(ABC):
    """Executes an ExecutionClosure.

    Subclasses decide ordering in ``execute``; resolving a single task is
    shared through ``resolve_task`` so both record outcomes and traces the
    same way.
    """

    kind: SchedulerKind

    def __init__(self) -> None:
        self.logger = get_logger(type(self).__module__)

    @abstractmethod
    async def execute(
        self,
        closure: ExecutionClosure,
        input: Any,
        trace: RunTrace | None = None,
    ) -> dict[str, Outcome]:
        """Run every task in the closure once.

        Args:
            closure: Leveled closure to execute.
            input: Already-validated run input, passed to every resolver.
            trace: Optional trace to record task timings into.

        Returns:
            Dict of task_id -> Outcome for every task in the closure.
        """

    async def run(self, closure: ExecutionClosure, input: Any = None) -> Any:
        """Execute the closure for its root and record artifacts on the root.

        Args:
            closure: Leveled closure to execute.
            input: Already-validated run input.

        Returns:
            The root's value.

        Raises:
            TaskRunError: If the root's resolver failed.
        """
        root = closure.root
        run_id = generate_run_id()
        trace = RunTrace(run_id=run_id, root_id=root.id, scheduler=self.kind.value)
        run_start = time.monotonic()

        log_start(
            self.logger,
            root.id,
            "run_start",
            run_id=run_id,
            tasks=len(closure),
            levels=closure.depth,
        )

        outcomes = await self.execute(closure, input, trace)
        root_outcome = outcomes[root.id]
        trace.complete(error=root_outcome.error)
        record_artifacts(root, outcomes, run_id=run_id, trace=trace)

        failed = sum(1 for outcome in outcomes.values() if not outcome.succeeded)
        duration = time.monotonic() - run_start
        if root_outcome.succeeded:
            log_complete(self.logger, root.id, "run_complete", duration, run_id=run_id, failed=failed)
            return root_outcome.value

        log_error(self.logger, root.id, "run_failed", root_outcome.error or "", run_id=run_id)
        error = TaskRunError(root_outcome.error or "", task_id=root.id, outcome=root_outcome)
        if root_outcome.exception is not None:
            raise error from root_outcome.exception
        raise error

    async def resolve_task(
        self,
        task: Task,
        closure: ExecutionClosure,
        outcomes: dict[str, Outcome],
        input: Any,
        trace: RunTrace | None,
    ) -> Outcome:
        """Invoke one task's resolver and record its outcome.

        Dependencies must already have settled. Any exception from the
        context provider or the resolver becomes a failed Outcome.
        """
        level = closure.levels[task.id]
        deps = load_dependency_values(task.dependencies, outcomes)

        log_start(self.logger, task.id, "task_start", level=level)
        start_seq = trace.next_seq() if trace else 0
        start_time = datetime.now(UTC)
        start_mono = time.monotonic()

        try:
            options = ResolverOptions(ctx=task.context_provider(), input=input, deps=deps)
            result = task.resolver(options)
            if inspect.isawaitable(result):
                result = await result
            outcome = Outcome.success(result)
        except Exception as e:
            outcome = Outcome.failure(e)

        duration = time.monotonic() - start_mono
        outcomes[task.id] = outcome

        if outcome.succeeded:
            log_complete(self.logger, task.id, "task_complete", duration, level=level)
        else:
            log_warning(self.logger, task.id, "task_failed", level=level, error=outcome.error)

        if trace:
            trace.add_task(
                TaskTrace(
                    task_id=task.id,
                    level=level,
                    start_seq=start_seq,
                    end_seq=trace.next_seq(),
                    start_time=start_time,
                    end_time=datetime.now(UTC),
                    duration_ms=duration * 1000,
                    error=outcome.error,
                )
            )
        return outcome
