"""Pure data types for weft.core.

These are simple dataclasses with no behavior coupling.
They can be serialized, passed around, and used anywhere.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from weft.core.trace import RunTrace

UNKNOWN_ERROR = "Unknown error"


def error_message(exc: BaseException) -> str:
    """Message of an exception, ``"Unknown error"`` when it has none.

    A single string argument is used as-is, so ``KeyError("x")`` gives
    ``x`` rather than its quoted ``str()``.
    """
    if len(exc.args) == 1 and isinstance(exc.args[0], str):
        return exc.args[0] or UNKNOWN_ERROR
    return str(exc) or UNKNOWN_ERROR


class SchedulerKind(Enum):
    """How a root run orders its tasks."""

    CONCURRENT = "concurrent"  # Each task waits only for its direct dependencies
    SEQUENTIAL = "sequential"  # One task at a time, ascending level


@dataclass(frozen=True)
class Outcome:
    """Result of one task's single execution attempt.

    Exactly one of ``value`` / ``error`` is meaningful, selected by
    ``succeeded``. Use :meth:`success` and :meth:`failure` to build one.

    Attributes:
        succeeded: Whether the resolver returned normally.
        value: The resolver's return value (None on failure).
        error: The failure message (None on success).
        exception: The original exception, if any. Not part of equality.
    """

    succeeded: bool
    value: Any = None
    error: str | None = None
    exception: BaseException | None = field(default=None, compare=False, repr=False)

    @classmethod
    def success(cls, value: Any) -> Outcome:
        return cls(succeeded=True, value=value)

    @classmethod
    def failure(cls, error: BaseException | str | None) -> Outcome:
        """Build a failed outcome from an exception or message.

        Empty messages fall back to ``"Unknown error"``.
        """
        if isinstance(error, BaseException):
            return cls(succeeded=False, error=error_message(error), exception=error)
        return cls(succeeded=False, error=error or UNKNOWN_ERROR)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict with only the populated variant."""
        if self.succeeded:
            return {"succeeded": True, "value": self.value}
        return {"succeeded": False, "error": self.error}


@dataclass(frozen=True)
class ResolverOptions:
    """Everything a resolver receives.

    Attributes:
        ctx: Value returned by the task's context provider for this run.
        input: The (already validated) run input.
        deps: Dependency values, shaped like the task's dependency tree.
            A dependency that failed shows up as None.
    """

    ctx: Any
    input: Any
    deps: dict[str, Any]


Resolver = Callable[[ResolverOptions], Union[Any, Awaitable[Any]]]
ContextProvider = Callable[[], Any]
InputValidator = Callable[[Any], Any]

# Nested dict mirroring a dependency tree, leaves are Outcomes (or None if
# the leaf never recorded one).
ResultTree = dict[str, Any]


@dataclass
class ArtifactSnapshot:
    """Observational record of a root's most recent run.

    Attributes:
        completed_at: When the run finished (UTC).
        results: Result tree mirroring the root's dependency tree.
        run_id: Identifier of the run that produced this snapshot.
        trace: Per-task timing for the run.
    """

    completed_at: datetime
    results: ResultTree
    run_id: str | None = None
    trace: RunTrace | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-friendly dict (outcomes rendered via to_dict)."""
        return {
            "completed_at": self.completed_at.isoformat(),
            "run_id": self.run_id,
            "results": _results_to_dict(self.results),
        }


def _results_to_dict(tree: ResultTree) -> dict[str, Any]:
    rendered: dict[str, Any] = {}
    for key, value in tree.items():
        if isinstance(value, Outcome):
            rendered[key] = value.to_dict()
        elif isinstance(value, dict):
            rendered[key] = _results_to_dict(value)
        else:
            rendered[key] = value
    return rendered
