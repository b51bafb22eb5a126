"""Weft - dependency-graph execution for async pipelines.

Describe a computation as tasks that declare (possibly nested, possibly
shared) dependencies and a resolver. Weft resolves the graph, levels it,
and runs it concurrently or strictly in sequence.

Layers:
    core/       The engine (tasks, graph resolution, schedulers, artifacts)
    frontends/  User interfaces (CLI)

Quick Start:
    >>> from weft import init_builder
    >>>
    >>> tasks = init_builder().create()
    >>> a = tasks.resolver(lambda opts: {"n": 1})
    >>> b = tasks.depend({"a": a}).resolver(lambda opts: {"n": opts.deps["a"]["n"] + 1})
    >>> c = tasks.depend({"n": b}).resolver(lambda opts: {"n": opts.deps["n"]["n"] * 10})
    >>> await c.run()
    {'n': 20}
    >>> c.get_artifacts().results["n"]
    Outcome(succeeded=True, value={'n': 2}, error=None)
"""

from weft.__version__ import __version__
from weft.core import (
    ArtifactSnapshot,
    ConcurrentScheduler,
    CyclicDependencyError,
    DependencyTree,
    ExecutionClosure,
    InputValidationError,
    Outcome,
    ResolverOptions,
    SchedulerKind,
    SequentialScheduler,
    Task,
    TaskRunError,
    WeftError,
    init_builder,
    init_stream_builder,
)

__all__ = [
    "__version__",
    "Task",
    "DependencyTree",
    "ResolverOptions",
    "init_builder",
    "init_stream_builder",
    "ExecutionClosure",
    "ConcurrentScheduler",
    "SequentialScheduler",
    "SchedulerKind",
    "Outcome",
    "ArtifactSnapshot",
    "WeftError",
    "CyclicDependencyError",
    "InputValidationError",
    "TaskRunError",
]
