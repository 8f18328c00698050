"""Prompt generation for delegated agent tasks."""

from __future__ import annotations

from agentrouter.schemas import CodexTaskType, GeminiTaskType, ResearchDepth


class InvalidArgumentError(ValueError):
    """Raised when a delegation request is rejected before dispatch."""

    pass


def parse_codex_task_type(task_type: str | None) -> CodexTaskType:
    """Parse a codex sub-type, defaulting to implement."""
    if task_type is None:
        return CodexTaskType.IMPLEMENT
    try:
        return CodexTaskType(task_type)
    except ValueError:
        valid = ", ".join(t.value for t in CodexTaskType)
        raise InvalidArgumentError(
            f"Unknown codex task type '{task_type}' (expected one of: {valid})"
        ) from None


def parse_gemini_task_type(task_type: str | None) -> GeminiTaskType:
    """Parse a gemini sub-type, defaulting to research."""
    if task_type is None:
        return GeminiTaskType.RESEARCH
    try:
        return GeminiTaskType(task_type)
    except ValueError:
        valid = ", ".join(t.value for t in GeminiTaskType)
        raise InvalidArgumentError(
            f"Unknown gemini task type '{task_type}' (expected one of: {valid})"
        ) from None


def build_codex_prompt(task: str, task_type: CodexTaskType) -> str:
    """Build the prompt handed to the implementation agent.

    Args:
        task: Task description from the user
        task_type: Kind of implementation work

    Returns:
        Prompt string
    """
    if task_type == CodexTaskType.TEST:
        parts = [
            "Write tests for the following.",
            "Cover normal cases, edge cases and error handling.",
            "Run the tests and report the results.",
        ]
    elif task_type == CodexTaskType.REFACTOR:
        parts = [
            "Refactor the following code without changing its behavior.",
            "Focus on readability, duplication and naming.",
            "Summarize what you changed and why.",
        ]
    elif task_type == CodexTaskType.REVIEW:
        parts = [
            "Review the following code. Do not modify any files.",
            "Report bugs, security issues and maintainability problems,",
            "ordered by severity, with file and line references.",
        ]
    else:
        parts = [
            "Implement the following.",
            "Follow the conventions of the existing codebase.",
            "Summarize the files you created or changed.",
        ]

    return "\n".join(parts + ["", "Task:", task])


def build_gemini_prompt(
    query: str,
    task_type: GeminiTaskType,
    options: list[str] | None = None,
    depth: ResearchDepth = ResearchDepth.DETAILED,
) -> str:
    """Build the prompt handed to the research agent.

    Raises:
        InvalidArgumentError: If compare is requested without options
    """
    options = [o.strip() for o in (options or []) if o.strip()]

    if task_type == GeminiTaskType.COMPARE:
        if not options:
            raise InvalidArgumentError("compare requires at least one option to compare")
        parts = [
            f"Compare the following options: {', '.join(options)}.",
            "Cover features, performance, ecosystem, learning curve and maintenance status.",
            "Finish with a comparison table and a recommendation.",
            "",
            f"Context: {query}",
        ]
    elif task_type == GeminiTaskType.ANALYZE:
        parts = [
            "Analyze the following.",
            "Identify strengths, weaknesses and concrete improvement points.",
            "",
            f"Subject: {query}",
        ]
    elif task_type == GeminiTaskType.ARCHITECTURE:
        parts = [
            "Propose an architecture for the following.",
            "Describe components, data flow, technology choices and trade-offs.",
            "",
            f"Requirements: {query}",
        ]
    elif depth == ResearchDepth.QUICK:
        parts = [
            "Research the following and answer briefly.",
            "Give the key facts in a few bullet points.",
            "",
            f"Topic: {query}",
        ]
    else:
        parts = [
            "Research the following in detail.",
            "Include current best practices, concrete examples and sources.",
            "",
            f"Topic: {query}",
        ]

    return "\n".join(parts)
