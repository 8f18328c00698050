"""Runtime configuration for AgentRouter."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_CODEX_BINARY = "codex"
DEFAULT_GEMINI_BINARY = "gemini"

# External agents can take a while on larger tasks
DEFAULT_TIMEOUT = 300  # seconds

MAX_OUTPUT_BYTES = 100 * 1024  # 100KB

ENV_WORK_DIR = "AGENTROUTER_WORK_DIR"
ENV_CODEX_BINARY = "AGENTROUTER_CODEX_BIN"
ENV_GEMINI_BINARY = "AGENTROUTER_GEMINI_BIN"
ENV_TIMEOUT = "AGENTROUTER_TIMEOUT"


@dataclass
class RouterConfig:
    """Settings shared by the executors, the broker and the MCP server."""

    work_dir: Path = field(default_factory=Path.cwd)
    codex_binary: str = DEFAULT_CODEX_BINARY
    gemini_binary: str = DEFAULT_GEMINI_BINARY
    timeout_seconds: int = DEFAULT_TIMEOUT
    max_output_bytes: int = MAX_OUTPUT_BYTES

    def __post_init__(self) -> None:
        self.work_dir = Path(self.work_dir).expanduser().resolve()

    @classmethod
    def from_env(cls, **overrides) -> "RouterConfig":
        """Build a config from AGENTROUTER_* environment variables.

        Keyword overrides that are not None take precedence over the
        environment.
        """
        values: dict = {}

        work_dir = os.environ.get(ENV_WORK_DIR)
        if work_dir:
            values["work_dir"] = Path(work_dir)

        codex_binary = os.environ.get(ENV_CODEX_BINARY)
        if codex_binary:
            values["codex_binary"] = codex_binary

        gemini_binary = os.environ.get(ENV_GEMINI_BINARY)
        if gemini_binary:
            values["gemini_binary"] = gemini_binary

        timeout = os.environ.get(ENV_TIMEOUT)
        if timeout:
            try:
                values["timeout_seconds"] = int(timeout)
            except ValueError:
                logger.warning(
                    f"Ignoring invalid {ENV_TIMEOUT}={timeout!r}, using {DEFAULT_TIMEOUT}s"
                )

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
