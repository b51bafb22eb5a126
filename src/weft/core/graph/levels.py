"""Topological level assignment."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING

from weft.core.errors import CyclicDependencyError
from weft.core.logging_config import get_logger

if TYPE_CHECKING:
    from weft.core.task import Task

logger = get_logger(__name__)


def assign_levels(
    tasks: Mapping[str, Task],
    direct_dependencies: Mapping[str, Sequence[str]] | None = None,
) -> dict[str, int]:
    """Assign every task a topological level.

    Level 0 for tasks without dependencies, otherwise one more than the
    highest level among the direct dependencies. Works by repeated passes
    over the unleveled tasks rather than recursion, so shared
    sub-dependencies are leveled once and deep chains don't hit the
    recursion limit.

    Args:
        tasks: task_id -> Task for the whole closure.
        direct_dependencies: task_id -> direct dependency IDs. Computed
            from each task's dependency tree when omitted.

    Returns:
        Dict of task_id -> level.

    Raises:
        CyclicDependencyError: If a pass levels nothing while tasks remain
            (a cycle, or a dependency missing from ``tasks``).
    """
    if direct_dependencies is None:
        from weft.core.graph.closure import flatten_tree

        direct_dependencies = {
            task_id: list(flatten_tree(task.dependencies)) for task_id, task in tasks.items()
        }

    levels: dict[str, int] = {}
    # Closures discover dependents before their dependencies, so scanning
    # backwards levels a plain chain in a single pass.
    pending = list(reversed(list(tasks)))
    passes = 0

    while pending:
        passes += 1
        still_pending: list[str] = []
        for task_id in pending:
            deps = direct_dependencies.get(task_id, ())
            if not deps:
                levels[task_id] = 0
            elif all(dep_id in levels for dep_id in deps):
                levels[task_id] = 1 + max(levels[dep_id] for dep_id in deps)
            else:
                still_pending.append(task_id)

        if len(still_pending) == len(pending):
            logger.error("Leveling stalled after %d passes: %s", passes, still_pending)
            raise CyclicDependencyError(still_pending)
        pending = still_pending

    logger.debug("Leveled %d tasks in %d passes", len(levels), passes)
    return levels
