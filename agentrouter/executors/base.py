"""Subprocess wrapper shared by the external agent CLIs."""

from __future__ import annotations

import logging
import shutil
import subprocess
import time
from pathlib import Path

from agentrouter.config import DEFAULT_TIMEOUT, MAX_OUTPUT_BYTES
from agentrouter.schemas import AgentStatus, Destination, ErrorKind, ExecutionResult

logger = logging.getLogger(__name__)


class AgentUnavailableError(Exception):
    """Raised when an agent CLI is not installed."""

    pass


def _truncate_output(output: str, max_bytes: int = MAX_OUTPUT_BYTES) -> str:
    """Truncate output to max_bytes."""
    if len(output.encode("utf-8", errors="replace")) <= max_bytes:
        return output

    # Truncate by bytes, preserving valid UTF-8
    encoded = output.encode("utf-8", errors="replace")[:max_bytes]
    truncated = encoded.decode("utf-8", errors="ignore")
    return truncated + "\n... [output truncated]"


class CLIExecutor:
    """Runs one external agent CLI in a fixed working directory."""

    destination: Destination

    def __init__(
        self,
        binary: str,
        work_dir: Path | str,
        timeout_seconds: int = DEFAULT_TIMEOUT,
        max_output_bytes: int = MAX_OUTPUT_BYTES,
    ):
        self.binary = binary
        self.work_dir = Path(work_dir)
        self.timeout_seconds = timeout_seconds
        self.max_output_bytes = max_output_bytes

    @property
    def name(self) -> str:
        return self.destination.value

    def which(self) -> str | None:
        """Resolve the CLI on PATH."""
        return shutil.which(self.binary)

    def is_available(self) -> bool:
        """Check if the CLI is installed."""
        return self.which() is not None

    def require_available(self) -> str:
        """Return the CLI path or raise AgentUnavailableError."""
        path = self.which()
        if path is None:
            raise AgentUnavailableError(f"{self.binary} CLI is not installed or not on PATH")
        return path

    def status(self) -> AgentStatus:
        path = self.which()
        return AgentStatus(
            destination=self.destination,
            binary=self.binary,
            available=path is not None,
            path=path,
        )

    def build_command(self, prompt: str) -> list[str]:
        """Build the argv for a prompt."""
        raise NotImplementedError

    def run(self, prompt: str) -> ExecutionResult:
        """Run the CLI with a prompt and capture its output.

        Never raises: launch failures, timeouts and non-zero exits are
        reported on the returned ExecutionResult.
        """
        path = self.which()
        if path is None:
            logger.warning(f"{self.binary} not available")
            return ExecutionResult(
                success=False,
                error=f"{self.binary} CLI is not installed or not on PATH",
                error_kind=ErrorKind.NOT_AVAILABLE,
            )

        command = self.build_command(prompt)
        logger.info(f"Running {self.name} in {self.work_dir} (timeout: {self.timeout_seconds}s)")

        started = time.monotonic()
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                timeout=self.timeout_seconds,
                encoding="utf-8",
                errors="replace",
                cwd=self.work_dir,
            )

        except subprocess.TimeoutExpired:
            logger.warning(f"{self.name} timed out after {self.timeout_seconds}s")
            return ExecutionResult(
                success=False,
                error=f"{self.binary} timed out after {self.timeout_seconds} seconds",
                error_kind=ErrorKind.TIMEOUT,
                exit_code=-1,
                command_executed=command,
                duration_seconds=time.monotonic() - started,
            )

        # ValueError: embedded null byte in the prompt argument
        except (OSError, ValueError) as e:
            logger.error(f"Failed to launch {self.binary}: {e}")
            return ExecutionResult(
                success=False,
                error=str(e),
                error_kind=ErrorKind.LAUNCH_ERROR,
                command_executed=command,
                duration_seconds=time.monotonic() - started,
            )

        duration = time.monotonic() - started
        stdout = _truncate_output(result.stdout.strip(), self.max_output_bytes)
        stderr = _truncate_output(result.stderr.strip(), self.max_output_bytes)

        if result.returncode != 0:
            logger.warning(f"{self.name} exited with code {result.returncode}")
            return ExecutionResult(
                success=False,
                output=stdout,
                error=stderr or f"{self.binary} exited with code {result.returncode}",
                error_kind=ErrorKind.NON_ZERO_EXIT,
                exit_code=result.returncode,
                command_executed=command,
                duration_seconds=duration,
            )

        logger.info(f"{self.name} finished in {duration:.1f}s")
        return ExecutionResult(
            success=True,
            output=stdout,
            exit_code=0,
            command_executed=command,
            duration_seconds=duration,
        )
