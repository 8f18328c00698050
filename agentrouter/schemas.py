"""Pydantic schemas for AgentRouter request/response contracts."""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class Destination(str, Enum):
    """Where a task is routed."""

    INTERNAL = "internal"
    CODEX = "codex"
    GEMINI = "gemini"


class CodexTaskType(str, Enum):
    """Sub-types handled by the implementation agent."""

    IMPLEMENT = "implement"
    TEST = "test"
    REFACTOR = "refactor"
    REVIEW = "review"


class GeminiTaskType(str, Enum):
    """Sub-types handled by the research agent."""

    RESEARCH = "research"
    COMPARE = "compare"
    ANALYZE = "analyze"
    ARCHITECTURE = "architecture"


class InternalTaskType(str, Enum):
    """Sub-types kept by the calling assistant."""

    GENERAL = "general"
    DESIGN = "design"
    EXPLAIN = "explain"


class ResearchDepth(str, Enum):
    """Depth hint for research prompts."""

    QUICK = "quick"
    DETAILED = "detailed"


class DispatchStatus(str, Enum):
    """Outcome of a dispatch."""

    COMPLETED = "completed"
    FAILED = "failed"
    MANUAL = "manual"
    INTERNAL = "internal"


class ErrorKind(str, Enum):
    """Failure categories reported by executors."""

    NOT_AVAILABLE = "not_available"
    NON_ZERO_EXIT = "non_zero_exit"
    LAUNCH_ERROR = "launch_error"
    TIMEOUT = "timeout"


# --- Classification ---


class ClassificationDecision(BaseModel):
    """Routing decision for a single message."""

    model_config = ConfigDict(frozen=True)

    target: Destination
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasoning: str
    suggested_subtype: str
    scores: dict[Destination, float] = Field(default_factory=dict)


# --- Execution results ---


class ExecutionResult(BaseModel):
    """Result of running an external agent CLI."""

    success: bool
    output: str = ""
    error: str | None = None
    error_kind: ErrorKind | None = None
    exit_code: int | None = None
    command_executed: list[str] = Field(default_factory=list)
    duration_seconds: float = 0.0


class DispatchResult(BaseModel):
    """Result of handing a decision to the dispatch layer."""

    target: Destination
    task_type: str
    status: DispatchStatus
    success: bool
    output: str = ""
    error: str | None = None
    error_kind: ErrorKind | None = None
    exit_code: int | None = None


# --- Broker request/response ---


class ClassifyRequest(BaseModel):
    """Request to classify a message."""

    message: str = Field(..., description="Free-text task description")


class DelegateRequest(BaseModel):
    """Request to route and execute a task."""

    message: str = Field(..., min_length=1, description="Task to delegate")
    target: Destination | None = Field(
        default=None,
        description="Force a destination instead of classifying",
    )
    task_type: str | None = Field(
        default=None,
        description="Sub-type override (e.g. 'test', 'compare')",
    )
    options: list[str] = Field(
        default_factory=list,
        description="Options to compare (gemini 'compare' only)",
    )
    depth: ResearchDepth = Field(default=ResearchDepth.DETAILED)
    dry_run: bool = Field(
        default=False,
        description="Classify only, do not invoke any agent",
    )


class DelegateResponse(BaseModel):
    """Response for a delegated task."""

    decision: ClassificationDecision
    result: DispatchResult | None = None


class AgentStatus(BaseModel):
    """Availability of one external agent CLI."""

    destination: Destination
    binary: str
    available: bool
    path: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    broker: Literal["healthy", "unhealthy"] = "healthy"
    agents: list[AgentStatus] = Field(default_factory=list)
    work_dir: str | None = None


class ErrorResponse(BaseModel):
    """Error response for failed requests."""

    detail: str
    error_code: str | None = None
