"""Tests for the weft CLI."""

from __future__ import annotations

import json
import textwrap

import pytest
from click.testing import CliRunner

from weft.frontends.cli.loader import TargetError, load_target
from weft.frontends.cli.main import cli, plan, run

PIPELINE = textwrap.dedent(
    """
    from weft import DependencyTree, Task

    a = Task(lambda opts: {"n": 1}, id="a")
    b = Task(lambda opts: {"n": opts.deps["a"]["n"] + 1}, {"a": a}, id="b")
    c = Task(lambda opts: {"n": opts.deps["n"]["n"] * 10}, {"n": b}, id="c")

    echo = Task(lambda opts: opts.input, id="echo")
    parsed = Task(lambda opts: opts.input + 1, input_validator=int, id="parsed")


    def _boom(opts):
        raise RuntimeError("boom")


    broken = Task(_boom, {"a": a}, id="broken")

    loop_a = Task(lambda opts: None, id="loop_a")
    loop_b = Task(lambda opts: None, {"a": loop_a}, id="loop_b")
    loop_a.dependencies = DependencyTree({"b": loop_b})

    not_a_task = 42
    """
)


@pytest.fixture
def pipeline(tmp_path):
    """Path to a pipeline file defining a handful of tasks."""
    path = tmp_path / "pipeline.py"
    path.write_text(PIPELINE)
    return path


@pytest.fixture
def runner():
    return CliRunner()


class TestLoadTarget:
    """Tests for target loading."""

    def test_load_from_file(self, pipeline):
        """Test file.py:attribute loads the task."""
        assert load_target(f"{pipeline}:c").id == "c"

    def test_load_from_module(self):
        """Test module:attribute imports the module."""
        with pytest.raises(TargetError, match="is a"):
            load_target("weft.core.types:UNKNOWN_ERROR")

    @pytest.mark.parametrize("target", ["no_colon", ":c", "pipeline.py:"])
    def test_malformed(self, target):
        """Test malformed targets are rejected."""
        with pytest.raises(TargetError, match="Target must look like"):
            load_target(target)

    def test_missing_file(self, tmp_path):
        """Test a missing file is reported."""
        with pytest.raises(TargetError, match="File not found"):
            load_target(f"{tmp_path / 'nope.py'}:c")

    def test_missing_module(self):
        """Test an unimportable module is reported."""
        with pytest.raises(TargetError, match="Cannot import module"):
            load_target("weft_no_such_module:c")

    def test_missing_attribute(self, pipeline):
        """Test a missing attribute is reported."""
        with pytest.raises(TargetError, match="has no attribute"):
            load_target(f"{pipeline}:zzz")

    def test_not_a_task(self, pipeline):
        """Test non-task attributes are rejected."""
        with pytest.raises(TargetError, match="not a Task"):
            load_target(f"{pipeline}:not_a_task")


class TestCommandDefinitions:
    """Tests for command parameters."""

    def test_commands_registered(self):
        """Test plan and run are part of the group."""
        assert set(cli.commands) >= {"plan", "run"}

    def test_run_options(self):
        """Test run exposes its options."""
        names = [p.name for p in run.params]
        for name in ("target", "input_json", "json_output", "show_artifacts", "sequential"):
            assert name in names
        assert "max_concurrency" in names

    def test_plan_options(self):
        """Test plan exposes --json."""
        assert [p.name for p in plan.params] == ["target", "json_output"]


class TestPlanCommand:
    """Tests for weft plan."""

    def test_plan_json(self, runner, pipeline):
        """Test the JSON plan lists tasks by level."""
        result = runner.invoke(cli, ["plan", f"{pipeline}:c", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["root"] == "c"
        assert data["tasks"] == [
            {"id": "a", "level": 0, "depends_on": []},
            {"id": "b", "level": 1, "depends_on": ["a"]},
            {"id": "c", "level": 2, "depends_on": ["b"]},
        ]

    def test_plan_table(self, runner, pipeline):
        """Test the table marks the root."""
        result = runner.invoke(cli, ["plan", f"{pipeline}:c"])

        assert result.exit_code == 0, result.output
        assert "c (root)" in result.output
        assert "Level" in result.output

    def test_plan_cycle(self, runner, pipeline):
        """Test a cyclic graph exits with an error."""
        result = runner.invoke(cli, ["plan", f"{pipeline}:loop_b"])

        assert result.exit_code == 1
        assert "Cyclic dependency" in result.output

    def test_plan_bad_target(self, runner, pipeline):
        """Test a bad target exits with an error."""
        result = runner.invoke(cli, ["plan", f"{pipeline}:not_a_task"])

        assert result.exit_code == 1
        assert "Error:" in result.output


class TestRunCommand:
    """Tests for weft run."""

    def test_run_json(self, runner, pipeline):
        """Test a successful run prints JSON output."""
        result = runner.invoke(cli, ["run", f"{pipeline}:c", "--json"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {
            "succeeded": True,
            "output": {"n": 20},
            "error": None,
        }

    def test_run_json_artifacts(self, runner, pipeline):
        """Test --artifacts adds the result tree to JSON output."""
        result = runner.invoke(cli, ["run", f"{pipeline}:c", "--json", "--artifacts"])

        assert result.exit_code == 0, result.output
        artifacts = json.loads(result.output)["artifacts"]
        assert artifacts["results"] == {"n": {"succeeded": True, "value": {"n": 2}}}
        assert artifacts["run_id"]

    def test_run_text(self, runner, pipeline):
        """Test plain output prints the value."""
        result = runner.invoke(cli, ["run", f"{pipeline}:c"])

        assert result.exit_code == 0, result.output
        assert "'n': 20" in result.output

    def test_run_with_input(self, runner, pipeline):
        """Test --input is parsed as JSON and passed to resolvers."""
        result = runner.invoke(
            cli, ["run", f"{pipeline}:echo", "--input", '{"user_id": 7}', "--json"]
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["output"] == {"user_id": 7}

    def test_run_invalid_input(self, runner, pipeline):
        """Test invalid --input JSON exits with an error."""
        result = runner.invoke(cli, ["run", f"{pipeline}:echo", "--input", "{nope"])

        assert result.exit_code == 1
        assert "not valid JSON" in result.output

    def test_run_failure(self, runner, pipeline):
        """Test a failing root exits 1 with its message."""
        result = runner.invoke(cli, ["run", f"{pipeline}:broken", "--artifacts"])

        assert result.exit_code == 1
        assert "Error: boom" in result.output
        assert "a:" in result.output

    def test_run_failure_json(self, runner, pipeline):
        """Test a failing root still reports JSON before exiting."""
        result = runner.invoke(cli, ["run", f"{pipeline}:broken", "--json"])

        assert result.exit_code == 1
        assert '"succeeded": false' in result.output
        assert '"error": "boom"' in result.output

    def test_run_sequential(self, runner, pipeline):
        """Test --sequential and --max-concurrency are accepted."""
        for flags in (["--sequential"], ["--concurrent", "--max-concurrency", "1"]):
            result = runner.invoke(cli, ["run", f"{pipeline}:c", "--json", *flags])
            assert result.exit_code == 0, result.output
            assert json.loads(result.output)["output"] == {"n": 20}

    def test_run_invalid_max_concurrency(self, runner, pipeline):
        """Test --max-concurrency 0 is rejected."""
        result = runner.invoke(cli, ["run", f"{pipeline}:c", "--max-concurrency", "0"])

        assert result.exit_code == 1
        assert "at least 1" in result.output

    def test_run_cycle(self, runner, pipeline):
        """Test a cyclic target exits with an error."""
        result = runner.invoke(cli, ["run", f"{pipeline}:loop_b"])

        assert result.exit_code == 1
        assert "Cyclic dependency" in result.output

    def test_run_validated_input(self, runner, pipeline):
        """Test the task's input validator is applied to --input."""
        result = runner.invoke(cli, ["run", f"{pipeline}:parsed", "--input", '"41"', "--json"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["output"] == 42

    def test_run_rejected_input(self, runner, pipeline):
        """Test input rejected by the validator exits 1 with its message."""
        result = runner.invoke(cli, ["run", f"{pipeline}:parsed", "--input", '"abc"'])

        assert result.exit_code == 1
        assert "Error: invalid literal for int()" in result.output
        assert not isinstance(result.exception, ValueError)

    def test_run_invalid_config(self, runner, pipeline, monkeypatch):
        """Test a bad WEFT_* value exits 1 with a readable message."""
        monkeypatch.setenv("WEFT_DEFAULT_SCHEDULER", "parallel")

        result = runner.invoke(cli, ["run", f"{pipeline}:c"])

        assert result.exit_code == 1
        assert "Error: WEFT_DEFAULT_SCHEDULER" in result.output
