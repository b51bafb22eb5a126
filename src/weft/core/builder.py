"""Fluent builders for defining tasks.

Builders are immutable: every call returns a new builder, so a configured
builder can be shared and branched freely.

    >>> tasks = init_builder().context(lambda: {"api": client}).create()
    >>>
    >>> user = tasks.resolver(lambda opts: opts.ctx["api"].get_user())
    >>> orders = tasks.depend({"user": user}).resolver(
    ...     lambda opts: opts.ctx["api"].orders(opts.deps["user"]["id"])
    ... )
    >>> await orders.run()

Stream builders create tasks that run sequentially by default and are the
natural home for ``plugin``:

    >>> stream = init_stream_builder().create()
    >>> summary = stream.depend({"orders": orders}).plugin(
    ...     feed_input=lambda opts: opts.deps["orders"],
    ...     plugin=summarize,
    ... )
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from weft.core.task import Task, maybe_await
from weft.core.tree import DependencyTree
from weft.core.types import (
    ContextProvider,
    InputValidator,
    Resolver,
    ResolverOptions,
    SchedulerKind,
)


@dataclass(frozen=True)
class TaskBuilder:
    """Accumulates a task definition until a resolver finishes it.

    Attributes:
        context_provider: Context provider for created tasks.
        input_validator: Input validator for created tasks.
        scheduler: Scheduler for created tasks (None = configured default).
        max_concurrency: Resolver limit for concurrent runs.
        dependencies: Dependency tree for created tasks.
    """

    context_provider: ContextProvider | None = None
    input_validator: InputValidator | None = None
    scheduler: SchedulerKind | None = None
    max_concurrency: int | None = None
    dependencies: DependencyTree = field(default_factory=DependencyTree)

    def depend(self, dependencies: DependencyTree | Mapping[str, Any]) -> TaskBuilder:
        """Return a builder whose tasks depend on ``dependencies``.

        Replaces (does not merge with) any previously declared tree.
        """
        return replace(self, dependencies=DependencyTree.coerce(dependencies))

    def resolver(self, fn: Resolver) -> Task:
        """Finish the definition with a resolver, creating a task with a fresh id."""
        return Task(
            fn,
            self.dependencies,
            context_provider=self.context_provider,
            input_validator=self.input_validator,
            scheduler=self.scheduler,
            max_concurrency=self.max_concurrency,
        )

    def plugin(
        self,
        feed_input: Callable[[ResolverOptions], Any | Awaitable[Any]],
        plugin: Callable[[Any], Any | Awaitable[Any]],
    ) -> Task:
        """Finish the definition by adapting an external processing step.

        The task's resolver awaits ``feed_input(options)`` to extract the
        step's input from the resolved dependencies, then awaits
        ``plugin(step_input)``; its output is the task's output.

        Args:
            feed_input: Builds the plugin's input from ResolverOptions.
            plugin: The processing step.

        Returns:
            The new task.
        """

        async def resolve(options: ResolverOptions) -> Any:
            plugin_input = await maybe_await(feed_input(options))
            return await maybe_await(plugin(plugin_input))

        return self.resolver(resolve)


@dataclass(frozen=True)
class BuilderInitializer:
    """Shared configuration applied to every builder it creates.

    Attributes:
        context_provider: Zero-argument callable producing the resolver context.
        input_validator: Callable validating/transforming the raw run input.
        scheduler: Scheduler for created tasks (None = configured default).
    """

    context_provider: ContextProvider | None = None
    input_validator: InputValidator | None = None
    scheduler: SchedulerKind | None = None

    def context(self, provider: ContextProvider) -> BuilderInitializer:
        """Set the context provider."""
        return replace(self, context_provider=provider)

    def input(self, validator: InputValidator | None = None) -> BuilderInitializer:
        """Set (or clear, with no argument) the input validator."""
        return replace(self, input_validator=validator)

    def create(
        self,
        scheduler: SchedulerKind | str | None = None,
        max_concurrency: int | None = None,
    ) -> TaskBuilder:
        """Create a TaskBuilder with this configuration.

        Args:
            scheduler: Overrides the initializer's scheduler.
            max_concurrency: Resolver limit for concurrent runs.
        """
        kind = SchedulerKind(scheduler) if scheduler is not None else self.scheduler
        return TaskBuilder(
            context_provider=self.context_provider,
            input_validator=self.input_validator,
            scheduler=kind,
            max_concurrency=max_concurrency,
        )


def init_builder() -> BuilderInitializer:
    """Start configuring task builders (scheduler from config, concurrent by default)."""
    return BuilderInitializer()


def init_stream_builder() -> BuilderInitializer:
    """Start configuring builders whose tasks run sequentially."""
    return BuilderInitializer(scheduler=SchedulerKind.SEQUENTIAL)
