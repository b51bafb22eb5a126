"""Weft error types.

Custom exceptions for graph configuration problems and failed runs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from weft.core.types import Outcome


class WeftError(Exception):
    """Base error for weft operations."""


class ConfigError(WeftError, ValueError):
    """Invalid configuration value (environment or explicit)."""


class GraphConfigurationError(WeftError, ValueError):
    """The task graph itself is malformed.

    Raised before any resolver executes. This is a programming error in
    how the graph was constructed, not a runtime data error.
    """


class CyclicDependencyError(GraphConfigurationError):
    """A cycle was found while assigning topological levels.

    Attributes:
        task_ids: IDs of the tasks that could not be leveled.
    """

    def __init__(self, task_ids: list[str]) -> None:
        self.task_ids = list(task_ids)
        super().__init__(f"Cyclic dependency detected among tasks: {', '.join(self.task_ids)}")


class TaskRunError(WeftError):
    """The root task of a run failed.

    The message is the root's failure message. Non-root failures never
    raise this; they are recorded as failed outcomes only.

    Attributes:
        task_id: ID of the root task.
        outcome: The failed outcome recorded for the root.
    """

    def __init__(self, message: str, task_id: str, outcome: Outcome | None = None) -> None:
        super().__init__(message)
        self.task_id = task_id
        self.outcome = outcome


class InputValidationError(WeftError, ValueError):
    """The input validator rejected a run's input.

    Raised by ``Task.run`` before anything executes; the validator's own
    exception is chained as ``__cause__``.
    """
