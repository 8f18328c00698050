"""MCP server exposing AgentRouter tools to Claude."""

from __future__ import annotations

import logging
from functools import partial

import anyio
from mcp.server.fastmcp import FastMCP

from agentrouter.classifier import classify
from agentrouter.config import RouterConfig
from agentrouter.dispatch import delegate_to_codex, delegate_to_gemini, route
from agentrouter.executors import Executors
from agentrouter.formatting import (
    format_agent_status,
    format_decision,
    format_result,
)
from agentrouter.prompt_engine import InvalidArgumentError
from agentrouter.schemas import ResearchDepth

logger = logging.getLogger(__name__)


def _invalid(e: InvalidArgumentError) -> dict:
    return {
        "success": False,
        "error": str(e),
        "error_kind": "invalid_argument",
    }


def create_server(config: RouterConfig | None = None) -> FastMCP:
    """Build the MCP server with executors bound to a config."""
    config = config or RouterConfig.from_env()
    executors = Executors.from_config(config)
    mcp = FastMCP("agentrouter")

    @mcp.tool()
    async def classify_task(message: str) -> dict:
        """Decide whether a task should go to Codex, Gemini or stay internal.

        Returns target, confidence (0-1), reasoning and suggested_subtype.
        """
        decision = classify(message)
        return {
            **decision.model_dump(mode="json"),
            "summary": format_decision(decision),
        }

    @mcp.tool(name="delegate_to_codex")
    async def codex_tool(task: str, task_type: str = "implement") -> dict:
        """Delegate implementation work to the Codex CLI.

        Args:
            task: What to build, test, refactor or review
            task_type: One of 'implement', 'test', 'refactor', 'review'
        """
        try:
            result = await anyio.to_thread.run_sync(
                partial(delegate_to_codex, executors, task, task_type)
            )
        except InvalidArgumentError as e:
            return _invalid(e)
        return {**result.model_dump(mode="json"), "summary": format_result(result)}

    @mcp.tool(name="delegate_to_gemini")
    async def gemini_tool(
        query: str,
        task_type: str = "research",
        options: list[str] | None = None,
        depth: str = "detailed",
    ) -> dict:
        """Delegate research to the Gemini CLI.

        Args:
            query: Topic, question or subject
            task_type: One of 'research', 'compare', 'analyze', 'architecture'
            options: Options to compare (required for 'compare')
            depth: 'quick' or 'detailed' (research only)
        """
        try:
            research_depth = ResearchDepth(depth)
        except ValueError:
            return _invalid(InvalidArgumentError(f"Unknown depth '{depth}' (expected quick or detailed)"))

        try:
            result = await anyio.to_thread.run_sync(
                partial(
                    delegate_to_gemini,
                    executors,
                    query,
                    task_type,
                    options=options,
                    depth=research_depth,
                )
            )
        except InvalidArgumentError as e:
            return _invalid(e)
        return {**result.model_dump(mode="json"), "summary": format_result(result)}

    @mcp.tool()
    async def auto_route(
        message: str,
        execute: bool = True,
        options: list[str] | None = None,
    ) -> dict:
        """Classify a task and hand it to the best agent.

        Args:
            message: Task description
            execute: Run the chosen agent (False only classifies)
            options: Options to compare, when the task is a comparison
        """
        try:
            response = await anyio.to_thread.run_sync(
                partial(route, message, executors, execute=execute, options=options)
            )
        except InvalidArgumentError as e:
            return _invalid(e)

        parts = [format_decision(response.decision)]
        if response.result is not None:
            parts.append(format_result(response.result))
        return {**response.model_dump(mode="json"), "summary": "\n\n".join(parts)}

    @mcp.tool()
    async def check_agents() -> dict:
        """Report whether the Codex and Gemini CLIs are installed."""
        statuses = [executor.status() for executor in executors.all()]
        return {
            "agents": [s.model_dump(mode="json") for s in statuses],
            "work_dir": str(config.work_dir),
            "summary": format_agent_status(statuses),
        }

    logger.debug(f"MCP server ready (work_dir: {config.work_dir})")
    return mcp


if __name__ == "__main__":
    create_server().run()
