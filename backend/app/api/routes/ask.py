"""Question answering endpoints - POST /ask plus cache inspection."""

import logging
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status

from backend.app.models.ask import MAX_QUESTION_LENGTH, AskRequest, AskResponse, CacheStats
from backend.app.orchestration.agent import BeachAgent

router = APIRouter(tags=["ask"])
logger = logging.getLogger(__name__)


def get_agent(request: Request) -> BeachAgent:
    """The agent built at startup."""
    agent: BeachAgent | None = getattr(request.app.state, "agent", None)
    if agent is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Agent not initialized"
        )
    return agent


@router.post("/ask", response_model=AskResponse)
async def ask(
    body: AskRequest, agent: Annotated[BeachAgent, Depends(get_agent)]
) -> AskResponse:
    """Answer a beach or surf question.

    Returns:
        AskResponse with the answer text

    Raises:
        HTTPException: 400 if the question is empty or longer than 500 characters
    """
    question = body.question.strip()
    if not question:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Question required")
    if len(question) > MAX_QUESTION_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Question too long (max {MAX_QUESTION_LENGTH} characters)",
        )

    logger.info(f"Question received ({len(question)} chars, {len(body.conversation)} turns)")
    answer = await agent.answer(question, body.conversation)
    return AskResponse(question=question, answer=answer, timestamp=datetime.now(UTC))


@router.get("/cache/stats", response_model=CacheStats)
async def cache_stats(agent: Annotated[BeachAgent, Depends(get_agent)]) -> CacheStats:
    """Response cache hit/miss counters and size."""
    return CacheStats.model_validate(agent.cache.stats())


@router.delete("/cache", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cache(agent: Annotated[BeachAgent, Depends(get_agent)]) -> None:
    """Drop every cached answer and reset the counters."""
    agent.cache.clear()
    logger.info("Response cache cleared")
