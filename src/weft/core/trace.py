"""Execution tracing for root runs.

Traces record what happened during a run:
- Which tasks ran, at which level, in what order
- Timing information per task
- Errors that occurred

Every event also takes a number from a per-run sequence counter, so the
relative order of starts and finishes can be checked without relying on
clock resolution.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Literal


@dataclass
class TaskTrace:
    """Trace record for a single task execution.

    Attributes:
        task_id: The task identifier.
        level: Topological level of the task in this run's closure.
        start_seq: Sequence number taken when the resolver was invoked.
        end_seq: Sequence number taken when the outcome was recorded.
        start_time: When the resolver was invoked.
        end_time: When the outcome was recorded.
        duration_ms: Resolver time in milliseconds.
        error: Failure message, None on success.
    """

    task_id: str
    level: int
    start_seq: int
    end_seq: int
    start_time: datetime
    end_time: datetime
    duration_ms: float
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "task_id": self.task_id,
            "level": self.level,
            "start_seq": self.start_seq,
            "end_seq": self.end_seq,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "duration_ms": self.duration_ms,
            "error": self.error,
        }


@dataclass
class RunTrace:
    """Trace record for one root run.

    Task traces are appended in completion order.

    Attributes:
        run_id: The run identifier.
        root_id: ID of the root task.
        scheduler: Which scheduler executed the run.
        start_time: When the run started.
        end_time: When the root settled (None while running).
        status: Run status; "failed" means the root failed.
        tasks: Task traces in completion order.
        error: The root's failure message.

    Example:
        >>> await task.run()
        >>> print(task.get_artifacts().trace.explain())
    """

    run_id: str
    root_id: str
    scheduler: str
    start_time: datetime = field(default_factory=lambda: datetime.now(UTC))
    end_time: datetime | None = None
    status: Literal["running", "completed", "failed"] = "running"
    tasks: list[TaskTrace] = field(default_factory=list)
    error: str | None = None
    _seq: itertools.count = field(default_factory=itertools.count, repr=False, compare=False)

    def next_seq(self) -> int:
        """Take the next number from the run's event sequence."""
        return next(self._seq)

    def add_task(self, task: TaskTrace) -> None:
        self.tasks.append(task)

    def get(self, task_id: str) -> TaskTrace | None:
        """Get the trace for a task, or None if it never ran."""
        for task in self.tasks:
            if task.task_id == task_id:
                return task
        return None

    def complete(self, error: str | None = None) -> None:
        """Mark the run as settled.

        Args:
            error: The root's failure message, if it failed.
        """
        self.end_time = datetime.now(UTC)
        if error:
            self.status = "failed"
            self.error = error
        else:
            self.status = "completed"

    @property
    def duration_ms(self) -> float | None:
        if self.end_time is None:
            return None
        return (self.end_time - self.start_time).total_seconds() * 1000

    def explain(self) -> str:
        """Generate human-readable execution summary.

        Returns:
            Multi-line string describing the run.
        """
        lines = [
            f"Run: {self.run_id} (root {self.root_id}, {self.scheduler})",
            f"Status: {self.status}",
        ]
        if self.duration_ms is not None:
            lines.append(f"Duration: {self.duration_ms:.0f}ms")
        lines.append(f"Tasks: {len(self.tasks)}")

        for task in sorted(self.tasks, key=lambda t: t.start_seq):
            indicator = "+" if task.succeeded else "x"
            lines.append(
                f"  [{indicator}] L{task.level} {task.task_id}: {task.duration_ms:.0f}ms"
            )
            if task.error:
                lines.append(f"      Error: {task.error}")

        if self.error:
            lines.append(f"Error: {self.error}")

        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "root_id": self.root_id,
            "scheduler": self.scheduler,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "status": self.status,
            "duration_ms": self.duration_ms,
            "tasks": [task.to_dict() for task in self.tasks],
            "error": self.error,
        }
