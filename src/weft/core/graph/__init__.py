"""Graph resolution - closure discovery and topological leveling.

Functions:
    flatten_tree: Distinct tasks in one dependency tree.
    collect_dependencies: Every task transitively reachable from a tree.
    build_closure: Leveled ExecutionClosure for a root task.
    assign_levels: Topological levels with cycle detection.
"""

from weft.core.graph.closure import (
    ExecutionClosure,
    build_closure,
    collect_dependencies,
    flatten_tree,
)
from weft.core.graph.levels import assign_levels

__all__ = [
    "ExecutionClosure",
    "assign_levels",
    "build_closure",
    "collect_dependencies",
    "flatten_tree",
]
