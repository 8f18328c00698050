"""Research agent backed by the Gemini CLI."""

from __future__ import annotations

import logging

from agentrouter.executors.base import CLIExecutor
from agentrouter.prompt_engine import build_gemini_prompt
from agentrouter.schemas import Destination, ExecutionResult, GeminiTaskType, ResearchDepth

logger = logging.getLogger(__name__)


class GeminiExecutor(CLIExecutor):
    """Runs ``gemini -p`` in the working directory."""

    destination = Destination.GEMINI

    def build_command(self, prompt: str) -> list[str]:
        return [self.binary, "-p", prompt]

    def run_task(
        self,
        query: str,
        task_type: GeminiTaskType = GeminiTaskType.RESEARCH,
        options: list[str] | None = None,
        depth: ResearchDepth = ResearchDepth.DETAILED,
    ) -> ExecutionResult:
        """Build the prompt for a task type and run it.

        Raises:
            InvalidArgumentError: If compare is requested without options
        """
        prompt = build_gemini_prompt(query, task_type, options=options, depth=depth)
        logger.info(f"Delegating {task_type.value} task to gemini")
        return self.run(prompt)
