"""Liveness check."""

from __future__ import annotations

from fastapi import APIRouter

from rosa import __version__
from rosa.settings import get_settings

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    settings = get_settings()
    return {"status": "ok", "version": __version__, "env": settings.env}
