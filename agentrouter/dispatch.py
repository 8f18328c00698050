"""Dispatch classified tasks to the matching external agent."""

from __future__ import annotations

import logging

from agentrouter.classifier import classify
from agentrouter.executors import Executors
from agentrouter.prompt_engine import parse_codex_task_type, parse_gemini_task_type
from agentrouter.schemas import (
    ClassificationDecision,
    DelegateResponse,
    Destination,
    DispatchResult,
    DispatchStatus,
    ErrorKind,
    ExecutionResult,
    ResearchDepth,
)

logger = logging.getLogger(__name__)


def manual_instruction(binary: str, message: str) -> str:
    """Instruction returned when an agent CLI is missing."""
    return (
        f"{binary} CLI is not available. Run this task manually:\n\n"
        f"{message}"
    )


def _to_dispatch_result(
    target: Destination,
    task_type: str,
    binary: str,
    message: str,
    result: ExecutionResult,
) -> DispatchResult:
    if result.error_kind == ErrorKind.NOT_AVAILABLE:
        return DispatchResult(
            target=target,
            task_type=task_type,
            status=DispatchStatus.MANUAL,
            success=False,
            output=manual_instruction(binary, message),
            error=result.error,
            error_kind=result.error_kind,
        )

    return DispatchResult(
        target=target,
        task_type=task_type,
        status=DispatchStatus.COMPLETED if result.success else DispatchStatus.FAILED,
        success=result.success,
        output=result.output,
        error=result.error,
        error_kind=result.error_kind,
        exit_code=result.exit_code,
    )


def delegate_to_codex(
    executors: Executors,
    task: str,
    task_type: str | None = None,
) -> DispatchResult:
    """Run an implementation task with Codex.

    Raises:
        InvalidArgumentError: If task_type is not a codex sub-type
    """
    parsed = parse_codex_task_type(task_type)
    result = executors.codex.run_task(task, parsed)
    return _to_dispatch_result(
        Destination.CODEX, parsed.value, executors.codex.binary, task, result
    )


def delegate_to_gemini(
    executors: Executors,
    query: str,
    task_type: str | None = None,
    options: list[str] | None = None,
    depth: ResearchDepth = ResearchDepth.DETAILED,
) -> DispatchResult:
    """Run a research task with Gemini.

    Raises:
        InvalidArgumentError: If task_type is not a gemini sub-type, or
            compare is requested without options
    """
    parsed = parse_gemini_task_type(task_type)
    result = executors.gemini.run_task(query, parsed, options=options, depth=depth)
    return _to_dispatch_result(
        Destination.GEMINI, parsed.value, executors.gemini.binary, query, result
    )


def dispatch(
    decision: ClassificationDecision,
    message: str,
    executors: Executors,
    options: list[str] | None = None,
    depth: ResearchDepth = ResearchDepth.DETAILED,
    task_type: str | None = None,
) -> DispatchResult:
    """Execute a classification decision.

    Internal decisions are not executed; the caller is told to handle the
    message itself.

    Args:
        decision: Decision from classify()
        message: Original message
        executors: Configured agent executors
        options: Options to compare (gemini compare only)
        depth: Research depth hint
        task_type: Overrides the decision's suggested sub-type

    Returns:
        DispatchResult describing the outcome
    """
    subtype = task_type or decision.suggested_subtype
    logger.info(f"Dispatching to {decision.target.value} ({subtype})")

    if decision.target == Destination.CODEX:
        return delegate_to_codex(executors, message, subtype)

    if decision.target == Destination.GEMINI:
        return delegate_to_gemini(executors, message, subtype, options=options, depth=depth)

    return DispatchResult(
        target=Destination.INTERNAL,
        task_type=subtype,
        status=DispatchStatus.INTERNAL,
        success=True,
        output=f"Handle this task directly:\n\n{message}",
    )


def forced_decision(target: Destination, task_type: str | None = None) -> ClassificationDecision:
    """Decision for a caller-chosen destination."""
    if target == Destination.CODEX:
        subtype = parse_codex_task_type(task_type).value
    elif target == Destination.GEMINI:
        subtype = parse_gemini_task_type(task_type).value
    else:
        subtype = task_type or "general"

    return ClassificationDecision(
        target=target,
        confidence=1.0,
        reasoning=f"Destination {target.value} requested explicitly",
        suggested_subtype=subtype,
    )


def route(
    message: str,
    executors: Executors,
    execute: bool = True,
    target: Destination | None = None,
    task_type: str | None = None,
    options: list[str] | None = None,
    depth: ResearchDepth = ResearchDepth.DETAILED,
) -> DelegateResponse:
    """Classify a message and optionally execute the decision.

    Raises:
        InvalidArgumentError: If the request is invalid for the destination
    """
    if target is not None:
        decision = forced_decision(target, task_type)
    else:
        decision = classify(message)

    if not execute:
        return DelegateResponse(decision=decision)

    result = dispatch(
        decision,
        message,
        executors,
        options=options,
        depth=depth,
        task_type=task_type,
    )
    return DelegateResponse(decision=decision, result=result)
