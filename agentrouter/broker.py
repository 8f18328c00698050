"""HTTP broker for AgentRouter classification and delegation."""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from agentrouter import __version__
from agentrouter.classifier import classify
from agentrouter.config import RouterConfig
from agentrouter.dispatch import route
from agentrouter.executors import Executors
from agentrouter.prompt_engine import InvalidArgumentError
from agentrouter.schemas import (
    ClassificationDecision,
    ClassifyRequest,
    DelegateRequest,
    DelegateResponse,
    ErrorResponse,
    HealthResponse,
)

logger = logging.getLogger(__name__)


def create_app(config: RouterConfig | None = None) -> FastAPI:
    """Build the broker app with executors bound to a config."""
    config = config or RouterConfig.from_env()
    executors = Executors.from_config(config)

    app = FastAPI(
        title="AgentRouter Broker",
        description="HTTP broker for routing tasks to external AI agents",
        version=__version__,
    )
    app.state.config = config
    app.state.executors = executors

    @app.post("/classify", response_model=ClassificationDecision)
    async def classify_endpoint(request: ClassifyRequest) -> ClassificationDecision:
        """Classify a message without executing anything."""
        return classify(request.message)

    @app.post("/delegate", response_model=DelegateResponse)
    async def delegate(request: DelegateRequest) -> DelegateResponse:
        """Classify a message (unless a target is forced) and run the agent.

        Args:
            request: DelegateRequest with the message and routing hints

        Returns:
            DelegateResponse with the decision and, unless dry_run, the result
        """
        logger.info(
            f"Received delegation request: target={request.target}, dry_run={request.dry_run}"
        )
        try:
            response = await run_in_threadpool(
                route,
                request.message,
                executors,
                execute=not request.dry_run,
                target=request.target,
                task_type=request.task_type,
                options=request.options,
                depth=request.depth,
            )
        except InvalidArgumentError as e:
            raise HTTPException(status_code=400, detail=str(e))

        if response.result is not None:
            logger.info(
                f"Completed delegation: target={response.result.target.value}, "
                f"status={response.result.status.value}"
            )
        return response

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Check broker status and agent availability."""
        return HealthResponse(
            broker="healthy",
            agents=[executor.status() for executor in executors.all()],
            work_dir=str(config.work_dir),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle uncaught exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                detail=str(exc),
                error_code="INTERNAL_ERROR",
            ).model_dump(),
        )

    return app
