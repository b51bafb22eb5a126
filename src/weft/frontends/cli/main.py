"""CLI entry point."""

from __future__ import annotations

import asyncio
import json

import rich_click as click

from weft.core.errors import WeftError
from weft.core.logging_config import configure_logging
from weft.core.scheduling import get_scheduler
from weft.frontends.cli.loader import TargetError, load_target
from weft.frontends.cli.output import (
    artifacts_tree,
    error_exit,
    get_console,
    output_json,
    plan_table,
    plan_to_dict,
)

# Configure rich-click styling
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.USE_MARKDOWN = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = "Try running '--help' for more information."
click.rich_click.MAX_WIDTH = 100


@click.group()
@click.version_option(package_name="weft")
@click.option("--log-level", default=None, help="Log level (default: WEFT_LOG_LEVEL or WARNING)")
def cli(log_level: str | None) -> None:
    """Weft - dependency-graph execution for async pipelines.

    **TARGET** names a task as `module:attribute` or `path/to/file.py:attribute`.

        weft plan mypkg.pipelines:report

        weft run mypkg.pipelines:report --input '{"user_id": 7}'
    """
    try:
        configure_logging(level=log_level, force=True)
    except WeftError as e:
        error_exit(str(e))


def _load(target: str):
    try:
        return load_target(target)
    except TargetError as e:
        error_exit(str(e))


@cli.command()
@click.argument("target")
@click.option("--json", "-j", "json_output", is_flag=True, help="Output as JSON")
def plan(target: str, json_output: bool) -> None:
    """Show the execution plan (levels and dependencies) without running.

    **Examples:**

        weft plan mypkg.pipelines:report

        weft plan ./pipeline.py:report --json
    """
    task = _load(target)
    try:
        closure = task.closure()
    except WeftError as e:
        error_exit(str(e))

    if json_output:
        output_json(plan_to_dict(closure))
    else:
        get_console().print(plan_table(closure))


@cli.command()
@click.argument("target")
@click.option("--input", "-i", "input_json", default=None, help="Run input as JSON")
@click.option("--json", "-j", "json_output", is_flag=True, help="Output as JSON")
@click.option("--artifacts", "-a", "show_artifacts", is_flag=True, help="Show the result tree")
@click.option(
    "--sequential/--concurrent",
    default=None,
    help="Override the task's scheduler",
)
@click.option("--max-concurrency", type=int, default=None, help="Limit concurrent resolvers")
def run(
    target: str,
    input_json: str | None,
    json_output: bool,
    show_artifacts: bool,
    sequential: bool | None,
    max_concurrency: int | None,
) -> None:
    """Run a task and print its output.

    Exits with status 1 when the task fails. Failures of its dependencies
    only show up in the artifacts (`--artifacts`).

    **Examples:**

        weft run mypkg.pipelines:report

        weft run ./pipeline.py:report --input '{"user_id": 7}' --artifacts
    """
    task = _load(target)

    try:
        input_value = json.loads(input_json) if input_json is not None else None
    except json.JSONDecodeError as e:
        error_exit(f"--input is not valid JSON: {e}")

    scheduler = None
    if sequential is not None or max_concurrency is not None:
        try:
            if sequential is None:
                kind = task.make_scheduler().kind
            else:
                kind = "sequential" if sequential else "concurrent"
            scheduler = get_scheduler(kind, max_concurrency=max_concurrency)
        except ValueError as e:
            error_exit(str(e))

    error: str | None = None
    output = None
    try:
        output = asyncio.run(task.run(input_value, scheduler=scheduler))
    except WeftError as e:
        error = str(e)

    snapshot = task.get_artifacts()
    if json_output:
        payload = {"succeeded": error is None, "output": output, "error": error}
        if show_artifacts and snapshot is not None:
            payload["artifacts"] = snapshot.to_dict()
        output_json(payload)
    else:
        console = get_console()
        if error is None:
            console.print(output, markup=False)
        if show_artifacts and snapshot is not None:
            console.print(artifacts_tree(snapshot))

    if error is not None:
        error_exit(error)


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
