"""Prometheus metrics endpoint."""

from fastapi import APIRouter, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from backend.app.utils.metrics import response_cache_entries

router = APIRouter()


@router.get("/metrics")
async def metrics(request: Request) -> Response:
    """Prometheus scrape target.

    Counters and histograms are updated as answers are produced; the
    response_cache_entries gauge is read from the running agent's cache here,
    so it stays at its last value while no agent is attached.
    """
    agent = getattr(request.app.state, "agent", None)
    if agent is not None:
        response_cache_entries.set(len(agent.cache))
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
