"""Task - a named unit of computation with declared dependencies."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from weft.core.config import get_config
from weft.core.errors import InputValidationError
from weft.core.graph.closure import ExecutionClosure, build_closure
from weft.core.ids import generate_task_id
from weft.core.scheduling import Scheduler, get_scheduler
from weft.core.tree import DependencyTree
from weft.core.types import (
    ArtifactSnapshot,
    ContextProvider,
    InputValidator,
    Resolver,
    ResolverOptions,
    SchedulerKind,
    error_message,
)


async def maybe_await(value: Any) -> Any:
    """Await ``value`` if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


def _empty_context() -> dict[str, Any]:
    return {}


class Task:
    """A task in a dependency graph.

    The resolver receives a ResolverOptions with the context provider's
    value, the run input, and the values of everything in ``dependencies``
    (shaped like the tree). It may be sync or async.

    Any task can be run as a root: its whole closure is resolved, leveled,
    and executed from scratch every time.

    Attributes:
        id: Unique identifier (generated when not given).
        dependencies: The task's dependency tree.
        resolver: Computes the task's output.
        context_provider: Zero-argument callable, invoked once per task per run.
        input_validator: Applied to the raw input in ``run`` before execution.
        scheduler: Scheduler used when this task is the root. None means the
            configured default (WEFT_DEFAULT_SCHEDULER).
        max_concurrency: Resolver limit for concurrent runs rooted here.
            None means the configured default (WEFT_MAX_CONCURRENCY).
        artifacts: Snapshot of the most recent run rooted here.

    Example:
        >>> a = Task(lambda opts: {"n": 1})
        >>> b = Task(lambda opts: {"n": opts.deps["a"]["n"] + 1}, {"a": a})
        >>> await b.run()
        {'n': 2}
    """

    def __init__(
        self,
        resolver: Resolver,
        dependencies: DependencyTree | Mapping[str, Any] | None = None,
        *,
        context_provider: ContextProvider | None = None,
        input_validator: InputValidator | None = None,
        scheduler: SchedulerKind | str | None = None,
        max_concurrency: int | None = None,
        id: str | None = None,
    ) -> None:
        if not callable(resolver):
            raise TypeError("resolver must be callable")
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.id = id or generate_task_id()
        self.dependencies = DependencyTree.coerce(dependencies)
        self.resolver = resolver
        self.context_provider = context_provider or _empty_context
        self.input_validator = input_validator
        self.scheduler = SchedulerKind(scheduler) if scheduler is not None else None
        self.max_concurrency = max_concurrency
        self.artifacts: ArtifactSnapshot | None = None

    def closure(self) -> ExecutionClosure:
        """Resolve and level every task reachable from this one.

        Raises:
            CyclicDependencyError: If the reachable graph has a cycle.
        """
        return build_closure(self)

    def make_scheduler(self) -> Scheduler:
        """Scheduler for runs rooted at this task, falling back to config."""
        config = get_config()
        kind = self.scheduler or config.default_scheduler
        max_concurrency = (
            self.max_concurrency if self.max_concurrency is not None else config.max_concurrency
        )
        return get_scheduler(kind, max_concurrency=max_concurrency)

    async def run(self, input: Any = None, *, scheduler: Scheduler | None = None) -> Any:
        """Execute the closure rooted at this task.

        Args:
            input: Raw run input; passed through ``input_validator`` first
                when one is set.
            scheduler: Use this scheduler instead of ``make_scheduler()``.

        Returns:
            This task's output.

        Raises:
            InputValidationError: If the input validator raised.
            CyclicDependencyError: Before anything runs, if the graph has a cycle.
            TaskRunError: If this task's resolver failed. Failures of other
                tasks never raise; their dependents see None instead.
        """
        if self.input_validator is not None:
            try:
                input = await maybe_await(self.input_validator(input))
            except Exception as e:
                raise InputValidationError(error_message(e)) from e
        closure = self.closure()
        return await (scheduler or self.make_scheduler()).run(closure, input)

    def get_artifacts(self) -> ArtifactSnapshot | None:
        """Snapshot of the most recent run rooted here, or None if never run."""
        return self.artifacts

    def then(self, step: Callable[[Any], Any | Awaitable[Any]]) -> Task:
        """Derive a task that feeds this task's output through ``step``.

        The derived task has the same dependency tree and configuration and
        a fresh id. This task is not a dependency of it; its resolver is
        simply run first inside the derived task's resolver.

        Args:
            step: Sync or async function applied to this task's output.

        Returns:
            The derived task.
        """
        resolver = self.resolver

        async def chained(options: ResolverOptions) -> Any:
            output = await maybe_await(resolver(options))
            return await maybe_await(step(output))

        return Task(
            chained,
            self.dependencies,
            context_provider=self.context_provider,
            input_validator=self.input_validator,
            scheduler=self.scheduler,
            max_concurrency=self.max_concurrency,
        )

    def __hash__(self) -> int:
        return hash(self.id)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Task):
            return self.id == other.id
        return False

    def __repr__(self) -> str:
        return f"Task(id={self.id!r}, dependencies={list(self.dependencies)})"
