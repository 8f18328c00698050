"""Markdown rendering of decisions and dispatch results."""

from __future__ import annotations

from agentrouter.schemas import (
    AgentStatus,
    ClassificationDecision,
    Destination,
    DispatchResult,
    DispatchStatus,
)

DESTINATION_LABELS = {
    Destination.INTERNAL: "Internal (handle directly)",
    Destination.CODEX: "Codex (implementation)",
    Destination.GEMINI: "Gemini (research)",
}


def format_percent(confidence: float) -> str:
    """Render a confidence in [0, 1] as a percentage."""
    return f"{round(confidence * 100)}%"


def format_decision(decision: ClassificationDecision) -> str:
    """Render a classification decision."""
    lines = [
        "## Task Classification",
        "",
        f"- **Destination**: {DESTINATION_LABELS[decision.target]}",
        f"- **Task type**: {decision.suggested_subtype}",
        f"- **Confidence**: {format_percent(decision.confidence)}",
        f"- **Reasoning**: {decision.reasoning}",
    ]
    return "\n".join(lines)


def format_result(result: DispatchResult) -> str:
    """Render a dispatch result."""
    label = DESTINATION_LABELS[result.target]

    if result.status == DispatchStatus.INTERNAL:
        return f"## {label}\n\n{result.output}"

    if result.status == DispatchStatus.MANUAL:
        return f"## {label}: manual action required\n\n{result.output}"

    if result.success:
        output = result.output or "(no output)"
        return f"## {label}: {result.task_type} completed\n\n{output}"

    lines = [f"## {label}: {result.task_type} failed", ""]
    if result.exit_code is not None:
        lines.append(f"Exit code: {result.exit_code}")
    lines.append(f"Error: {result.error or 'unknown error'}")
    if result.output:
        lines.extend(["", "Output:", result.output])
    return "\n".join(lines)


def format_agent_status(statuses: list[AgentStatus]) -> str:
    """Render availability of the agent CLIs."""
    lines = ["## Agent Availability", ""]
    for status in statuses:
        if status.available:
            lines.append(f"- {DESTINATION_LABELS[status.destination]}: available ({status.path})")
        else:
            lines.append(
                f"- {DESTINATION_LABELS[status.destination]}: not found "
                f"(install `{status.binary}` or set its path)"
            )
    return "\n".join(lines)
