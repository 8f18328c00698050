"""Tests for the external agent executors."""

from pathlib import Path
from unittest.mock import patch

import pytest

from agentrouter.executors import (
    AgentUnavailableError,
    CodexExecutor,
    Executors,
    GeminiExecutor,
)
from agentrouter.executors.base import _truncate_output
from agentrouter.schemas import (
    CodexTaskType,
    Destination,
    ErrorKind,
    GeminiTaskType,
    ResearchDepth,
)


class TestCommandBuilding:
    """Test argv construction."""

    def test_codex_command(self, tmp_workspace):
        """Codex runs non-interactively via exec."""
        executor = CodexExecutor("codex", tmp_workspace)
        assert executor.build_command("do it") == ["codex", "exec", "--full-auto", "do it"]

    def test_codex_without_full_auto(self, tmp_workspace):
        """full_auto can be disabled."""
        executor = CodexExecutor("codex", tmp_workspace, full_auto=False)
        assert executor.build_command("do it") == ["codex", "exec", "do it"]

    def test_gemini_command(self, tmp_workspace):
        """Gemini takes the prompt via -p."""
        executor = GeminiExecutor("gemini", tmp_workspace)
        assert executor.build_command("look up") == ["gemini", "-p", "look up"]

    def test_executors_from_config(self, router_config):
        """Executors share the config's working directory and timeout."""
        executors = Executors.from_config(router_config)
        assert executors.codex.work_dir == router_config.work_dir
        assert executors.gemini.timeout_seconds == 10
        assert [e.destination for e in executors.all()] == [Destination.CODEX, Destination.GEMINI]


class TestAvailability:
    """Test CLI availability checks."""

    def test_missing_binary(self, missing_config):
        """Missing CLI is reported unavailable."""
        executors = Executors.from_config(missing_config)
        assert executors.codex.is_available() is False
        status = executors.codex.status()
        assert status.available is False
        assert status.path is None
        with pytest.raises(AgentUnavailableError):
            executors.codex.require_available()

    def test_present_binary(self, executors):
        """Installed CLI is reported with its path."""
        status = executors.gemini.status()
        assert status.available is True
        assert status.path == executors.gemini.binary


class TestRun:
    """Test subprocess execution."""

    def test_success_captures_output(self, executors):
        """Successful runs capture stdout."""
        result = executors.gemini.run("hello agent")
        assert result.success is True
        assert result.exit_code == 0
        assert "hello agent" in result.output
        assert result.error is None
        assert result.command_executed[1:] == ["-p", "hello agent"]

    def test_runs_in_work_dir(self, make_script, tmp_workspace):
        """Commands run in the configured working directory."""
        executor = GeminiExecutor(make_script("pwd-agent", "pwd"), tmp_workspace)
        result = executor.run("ignored")
        assert Path(result.output).resolve() == tmp_workspace.resolve()

    def test_non_zero_exit(self, make_script, tmp_workspace):
        """Non-zero exit is a failure carrying stderr."""
        executor = CodexExecutor(make_script("failing", "echo partial; echo boom >&2; exit 3"), tmp_workspace)
        result = executor.run("x")
        assert result.success is False
        assert result.error_kind == ErrorKind.NON_ZERO_EXIT
        assert result.exit_code == 3
        assert result.error == "boom"
        assert result.output == "partial"

    def test_undecodable_output_is_replaced(self, make_script, tmp_workspace):
        """Invalid UTF-8 from a successful run keeps the output."""
        executor = CodexExecutor(make_script("binary-out", "printf 'ok\\377\\n'; exit 0"), tmp_workspace)
        result = executor.run("x")
        assert result.success is True
        assert result.error_kind is None
        assert result.output == "ok\ufffd"

    def test_null_byte_in_prompt_is_launch_error(self, executors):
        """Prompts that cannot be passed as argv are reported, not raised."""
        result = executors.codex.run("a\0b")
        assert result.success is False
        assert result.error_kind == ErrorKind.LAUNCH_ERROR

    def test_non_zero_exit_without_stderr(self, make_script, tmp_workspace):
        """Silent failures still get an error message."""
        executor = CodexExecutor(make_script("silent", "exit 2"), tmp_workspace)
        result = executor.run("x")
        assert result.success is False
        assert "exited with code 2" in result.error

    def test_not_available(self, missing_config):
        """Missing CLI is reported without launching anything."""
        executors = Executors.from_config(missing_config)
        with patch("agentrouter.executors.base.subprocess.run") as mock_run:
            result = executors.codex.run("x")
        mock_run.assert_not_called()
        assert result.success is False
        assert result.error_kind == ErrorKind.NOT_AVAILABLE

    def test_launch_error(self, executors):
        """Spawn failures are reported, not raised."""
        with patch(
            "agentrouter.executors.base.subprocess.run",
            side_effect=OSError("Exec format error"),
        ):
            result = executors.codex.run("x")
        assert result.success is False
        assert result.error_kind == ErrorKind.LAUNCH_ERROR
        assert "Exec format error" in result.error

    def test_timeout(self, make_script, tmp_workspace):
        """Timeouts are reported as failures."""
        executor = GeminiExecutor(make_script("slow", "sleep 5"), tmp_workspace, timeout_seconds=1)
        result = executor.run("x")
        assert result.success is False
        assert result.error_kind == ErrorKind.TIMEOUT
        assert "timed out" in result.error

    def test_output_truncated(self, make_script, tmp_workspace):
        """Large output is truncated."""
        executor = GeminiExecutor(
            make_script("chatty", "head -c 5000 /dev/zero | tr '\\0' 'x'"),
            tmp_workspace,
            max_output_bytes=100,
        )
        result = executor.run("x")
        assert result.success is True
        assert result.output.startswith("x" * 100)
        assert "truncated" in result.output

    def test_truncate_keeps_small_output(self):
        """Small output passes through unchanged."""
        assert _truncate_output("short", 100) == "short"


class TestRunTask:
    """Test sub-type specific runs."""

    def test_codex_run_task_uses_template(self, executors):
        """Codex receives the sub-type prompt."""
        result = executors.codex.run_task("the parser", CodexTaskType.TEST)
        assert result.success is True
        assert "Write tests" in result.output
        assert "the parser" in result.output

    def test_gemini_compare(self, executors):
        """Gemini compare lists the options."""
        result = executors.gemini.run_task(
            "orms", GeminiTaskType.COMPARE, options=["sqlalchemy", "peewee"]
        )
        assert "sqlalchemy, peewee" in result.output

    def test_gemini_quick_research(self, executors):
        """Depth hint reaches the prompt."""
        result = executors.gemini.run_task("uv", depth=ResearchDepth.QUICK)
        assert "briefly" in result.output
