"""External agent executors."""

from __future__ import annotations

from dataclasses import dataclass

from agentrouter.config import RouterConfig
from agentrouter.executors.base import AgentUnavailableError, CLIExecutor
from agentrouter.executors.codex import CodexExecutor
from agentrouter.executors.gemini import GeminiExecutor


@dataclass
class Executors:
    """The pair of external agents a dispatcher can use."""

    codex: CodexExecutor
    gemini: GeminiExecutor

    @classmethod
    def from_config(cls, config: RouterConfig) -> "Executors":
        common = {
            "work_dir": config.work_dir,
            "timeout_seconds": config.timeout_seconds,
            "max_output_bytes": config.max_output_bytes,
        }
        return cls(
            codex=CodexExecutor(config.codex_binary, **common),
            gemini=GeminiExecutor(config.gemini_binary, **common),
        )

    def all(self) -> list[CLIExecutor]:
        return [self.codex, self.gemini]


__all__ = [
    "AgentUnavailableError",
    "CLIExecutor",
    "CodexExecutor",
    "Executors",
    "GeminiExecutor",
]
