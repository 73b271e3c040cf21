"""FastAPI application."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from backend.app.api.routes.ask import router as ask_router
from backend.app.api.routes.health import router as health_router
from backend.app.api.routes.metrics import router as metrics_router
from backend.app.config import SERVICE_NAME, SERVICE_VERSION, Settings, get_settings
from backend.app.llm.client import get_llm_client
from backend.app.orchestration.agent import BeachAgent
from backend.app.orchestration.cache import ResponseCache
from backend.app.tools.executor import ToolConfig, ToolInvoker
from backend.app.tools.registry import build_default_registry
from backend.app.utils.logging import StructuredToolLogger, configure_logging
from backend.app.utils.metrics import PrometheusAgentMetrics, PrometheusToolMetrics

logger = logging.getLogger(__name__)


def build_agent(settings: Settings, client: httpx.AsyncClient | None = None) -> BeachAgent:
    """Wire registry, invoker, cache and model into one agent."""
    registry = build_default_registry(settings, client)
    invoker = ToolInvoker(
        registry,
        config=ToolConfig.from_settings(settings),
        metrics=PrometheusToolMetrics(),
        logger=StructuredToolLogger(),
    )
    return BeachAgent(
        registry,
        invoker=invoker,
        model=get_llm_client(),
        cache=ResponseCache(sweep_threshold=settings.cache_sweep_threshold),
        metrics=PrometheusAgentMetrics(),
        template_seed=settings.template_seed,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    configure_logging(settings.log_level)
    client = httpx.AsyncClient(timeout=settings.http_timeout_s)
    app.state.agent = build_agent(settings, client)
    logger.info(f"{SERVICE_NAME} {SERVICE_VERSION} ready")
    try:
        yield
    finally:
        await client.aclose()


app = FastAPI(title="Hawaii Beach Agent API", version=SERVICE_VERSION, lifespan=lifespan)

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(ask_router)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Hawaii Beach Agent API", "version": SERVICE_VERSION}
