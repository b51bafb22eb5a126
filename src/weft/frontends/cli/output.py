"""Output formatting utilities for CLI commands."""

from __future__ import annotations

import json
import sys
from typing import TYPE_CHECKING, Any, NoReturn

import rich_click as click
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from weft.core.types import Outcome

if TYPE_CHECKING:
    from weft.core.graph.closure import ExecutionClosure
    from weft.core.types import ArtifactSnapshot, ResultTree


def output_json(data: Any, indent: int = 2) -> None:
    """Output data as formatted JSON (non-JSON values rendered with str)."""
    click.echo(json.dumps(data, indent=indent, default=str))


def error_exit(message: str, code: int = 1) -> NoReturn:
    """Print error message and exit with code."""
    click.echo(f"Error: {message}", err=True)
    sys.exit(code)


def plan_table(closure: ExecutionClosure) -> Table:
    """Table of a closure's tasks in execution order."""
    table = Table(title=f"Execution plan for {closure.root_id}")
    table.add_column("Level", justify="right")
    table.add_column("Task")
    table.add_column("Depends on")

    for task in closure.ordered():
        name = f"{task.id} (root)" if task.id == closure.root_id else task.id
        deps = ", ".join(closure.direct_dependencies[task.id]) or "-"
        table.add_row(str(closure.levels[task.id]), name, deps)
    return table


def plan_to_dict(closure: ExecutionClosure) -> dict[str, Any]:
    return {
        "root": closure.root_id,
        "tasks": [
            {
                "id": task.id,
                "level": closure.levels[task.id],
                "depends_on": closure.direct_dependencies[task.id],
            }
            for task in closure.ordered()
        ],
    }


def _add_results(node: Tree, results: ResultTree) -> None:
    for key, value in results.items():
        if isinstance(value, Outcome):
            if value.succeeded:
                node.add(f"[green]+[/green] {escape(key)}: {escape(repr(value.value))}")
            else:
                node.add(f"[red]x[/red] {escape(key)}: {escape(value.error or '')}")
        elif isinstance(value, dict):
            _add_results(node.add(f"{key}/"), value)
        else:
            node.add(f"[dim]?[/dim] {key}: not recorded")


def artifacts_tree(snapshot: ArtifactSnapshot) -> Tree:
    """Render an artifact snapshot's result tree."""
    tree = Tree(f"Artifacts ({snapshot.completed_at.isoformat()}, run {snapshot.run_id})")
    _add_results(tree, snapshot.results)
    return tree


def get_console(stderr: bool = False) -> Console:
    return Console(stderr=stderr, highlight=False, soft_wrap=True)
