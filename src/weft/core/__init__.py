"""Core - dependency-graph execution engine.

This module contains no knowledge of:
- CLIs or presentation
- Transport or storage of results

It's just the engine:
- Tasks and their dependency trees
- Closure discovery and topological leveling
- Concurrent and sequential schedulers
- Artifact recording
"""

from weft.core.builder import (
    BuilderInitializer,
    TaskBuilder,
    init_builder,
    init_stream_builder,
)
from weft.core.config import WeftConfig, get_config, load_config, reset_config
from weft.core.errors import (
    ConfigError,
    CyclicDependencyError,
    GraphConfigurationError,
    InputValidationError,
    TaskRunError,
    WeftError,
)
from weft.core.graph import ExecutionClosure, assign_levels, build_closure, flatten_tree
from weft.core.scheduling import ConcurrentScheduler, Scheduler, SequentialScheduler
from weft.core.task import Task
from weft.core.trace import RunTrace, TaskTrace
from weft.core.tree import DependencyTree
from weft.core.types import (
    ArtifactSnapshot,
    Outcome,
    ResolverOptions,
    SchedulerKind,
)

__all__ = [
    # Tasks
    "Task",
    "DependencyTree",
    "ResolverOptions",
    # Builders
    "BuilderInitializer",
    "TaskBuilder",
    "init_builder",
    "init_stream_builder",
    # Graph
    "ExecutionClosure",
    "assign_levels",
    "build_closure",
    "flatten_tree",
    # Scheduling
    "Scheduler",
    "ConcurrentScheduler",
    "SequentialScheduler",
    "SchedulerKind",
    # Results
    "Outcome",
    "ArtifactSnapshot",
    "RunTrace",
    "TaskTrace",
    # Config
    "WeftConfig",
    "get_config",
    "load_config",
    "reset_config",
    # Errors
    "WeftError",
    "ConfigError",
    "GraphConfigurationError",
    "CyclicDependencyError",
    "InputValidationError",
    "TaskRunError",
]
