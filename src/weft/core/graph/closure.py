"""Flattening dependency trees and building a root's execution closure."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from weft.core.tree import DependencyTree

if TYPE_CHECKING:
    from weft.core.task import Task


def flatten_tree(tree: DependencyTree) -> dict[str, Task]:
    """Collect the distinct tasks in a dependency tree.

    Walks nested trees to any depth. A task reached through several keys
    or paths appears once; identity is the task id.

    Args:
        tree: The dependency tree to flatten.

    Returns:
        Dict of task_id -> Task in first-seen order.
    """
    flat: dict[str, Task] = {}
    for task in tree.iter_tasks():
        flat.setdefault(task.id, task)
    return flat


def collect_dependencies(tree: DependencyTree) -> dict[str, Task]:
    """Every task transitively reachable from ``tree``.

    Repeatedly flattens the trees of already-discovered tasks until nothing
    new turns up. Each task's tree is flattened once, so shared
    sub-dependencies cost nothing extra and a cycle cannot loop forever.

    Returns:
        Dict of task_id -> Task in discovery order.
    """
    discovered = flatten_tree(tree)
    frontier = list(discovered.values())
    while frontier:
        next_frontier: list[Task] = []
        for task in frontier:
            for dep_id, dep in flatten_tree(task.dependencies).items():
                if dep_id not in discovered:
                    discovered[dep_id] = dep
                    next_frontier.append(dep)
        frontier = next_frontier
    return discovered


@dataclass
class ExecutionClosure:
    """All tasks reachable from a root, with their topological levels.

    Attributes:
        root_id: ID of the root task.
        tasks: task_id -> Task in discovery order (root last).
        levels: task_id -> topological level.
        direct_dependencies: task_id -> IDs of its direct dependencies.
    """

    root_id: str
    tasks: dict[str, Task]
    levels: dict[str, int]
    direct_dependencies: dict[str, list[str]] = field(default_factory=dict)

    @property
    def root(self) -> Task:
        return self.tasks[self.root_id]

    @property
    def depth(self) -> int:
        """Number of levels in the closure."""
        return max(self.levels.values()) + 1

    def ordered(self) -> list[Task]:
        """Tasks in ascending level, ties broken by discovery order."""
        position = {task_id: i for i, task_id in enumerate(self.tasks)}
        return sorted(
            self.tasks.values(),
            key=lambda task: (self.levels[task.id], position[task.id]),
        )

    def by_level(self) -> Iterator[tuple[int, list[Task]]]:
        """Yield ``(level, tasks)`` groups in ascending level."""
        current: list[Task] = []
        current_level: int | None = None
        for task in self.ordered():
            level = self.levels[task.id]
            if current_level is not None and level != current_level:
                yield current_level, current
                current = []
            current_level = level
            current.append(task)
        if current_level is not None:
            yield current_level, current

    def __len__(self) -> int:
        return len(self.tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self.tasks


def build_closure(root: Task) -> ExecutionClosure:
    """Discover and level every task reachable from ``root``.

    Args:
        root: The task being run.

    Returns:
        The leveled closure, root included.

    Raises:
        CyclicDependencyError: If the reachable graph has a cycle.
    """
    from weft.core.graph.levels import assign_levels

    tasks = collect_dependencies(root.dependencies)
    # The root may already be here if something it depends on depends on
    # it; moving it to the end keeps discovery order dependencies-first.
    tasks.pop(root.id, None)
    tasks[root.id] = root

    direct = {task_id: list(flatten_tree(task.dependencies)) for task_id, task in tasks.items()}
    levels = assign_levels(tasks, direct)
    return ExecutionClosure(
        root_id=root.id,
        tasks=tasks,
        levels=levels,
        direct_dependencies=direct,
    )
