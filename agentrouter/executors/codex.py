"""Implementation agent backed by the Codex CLI."""

from __future__ import annotations

import logging

from agentrouter.executors.base import CLIExecutor
from agentrouter.prompt_engine import build_codex_prompt
from agentrouter.schemas import CodexTaskType, Destination, ExecutionResult

logger = logging.getLogger(__name__)


class CodexExecutor(CLIExecutor):
    """Runs ``codex exec`` non-interactively in the working directory."""

    destination = Destination.CODEX

    def __init__(self, *args, full_auto: bool = True, **kwargs):
        super().__init__(*args, **kwargs)
        self.full_auto = full_auto

    def build_command(self, prompt: str) -> list[str]:
        command = [self.binary, "exec"]
        if self.full_auto:
            command.append("--full-auto")
        command.append(prompt)
        return command

    def run_task(self, task: str, task_type: CodexTaskType = CodexTaskType.IMPLEMENT) -> ExecutionResult:
        """Build the prompt for a task type and run it."""
        logger.info(f"Delegating {task_type.value} task to codex")
        return self.run(build_codex_prompt(task, task_type))
