"""Artifact recording - the result tree a root keeps from its last run."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from weft.core.types import ArtifactSnapshot, Outcome, ResultTree

if TYPE_CHECKING:
    from weft.core.task import Task
    from weft.core.trace import RunTrace
    from weft.core.tree import DependencyTree


def build_result_tree(tree: DependencyTree, outcomes: dict[str, Outcome]) -> ResultTree:
    """Mirror ``tree`` with each task leaf replaced by its recorded Outcome.

    Leaves without a recorded outcome map to None.
    """
    return tree.map_tasks(lambda task: outcomes.get(task.id))


def record_artifacts(
    task: Task,
    outcomes: dict[str, Outcome],
    run_id: str | None = None,
    trace: RunTrace | None = None,
) -> ArtifactSnapshot:
    """Attach a fresh snapshot of this run to the root task.

    Replaces any previous snapshot; nothing is merged. The snapshot is for
    inspection only and is never read by later runs.

    Args:
        task: The root task of the run.
        outcomes: task_id -> Outcome for the run.
        run_id: Identifier of the run.
        trace: The run's trace.

    Returns:
        The new snapshot.
    """
    snapshot = ArtifactSnapshot(
        completed_at=datetime.now(UTC),
        results=build_result_tree(task.dependencies, outcomes),
        run_id=run_id,
        trace=trace,
    )
    task.artifacts = snapshot
    return snapshot
