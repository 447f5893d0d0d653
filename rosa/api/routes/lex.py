"""Lex fulfillment endpoint – one POST per user utterance."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from rosa.intents.events import InvalidTurnEvent, TurnEvent
from rosa.orchestrator import TurnOrchestrator, build_orchestrator
from rosa.settings import get_settings
from rosa.storage.database import session_scope

router = APIRouter()


# ── deps ─────────────────────────────────────────────────────────────────

async def get_session(request: Request) -> AsyncIterator[AsyncSession]:
    async with session_scope(request.app.state.sessions) as session:
        yield session


SessionDep = Annotated[AsyncSession, Depends(get_session)]


def get_orchestrator(request: Request, session: SessionDep) -> TurnOrchestrator:
    return build_orchestrator(
        get_settings(),
        session,
        request.app.state.http,
        templates=request.app.state.templates,
    )


OrchestratorDep = Annotated[TurnOrchestrator, Depends(get_orchestrator)]


# ── routes ───────────────────────────────────────────────────────────────


@router.post("/lex/fulfillment")
async def lex_fulfillment(
    orchestrator: OrchestratorDep,
    payload: Annotated[dict[str, Any], Body()],
) -> dict[str, Any]:
    try:
        event = TurnEvent.from_lex(payload)
    except InvalidTurnEvent as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    try:
        reply = await orchestrator.handle(event)
    except Exception as exc:
        logger.exception(f"Turn failed for intent={event.intent_name}: {exc}")
        raise
    return reply.to_lex()
