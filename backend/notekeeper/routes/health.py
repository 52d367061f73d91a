"""
Notekeeper API - Health Check Route
====================================

What:  GET /health for monitoring and container health checks.
How:   Reports version, uptime and how many notes are held in memory. There
       are no external dependencies to check, so a responding process is
       healthy.
"""

import time

from fastapi import APIRouter, Depends

from notekeeper import __version__
from notekeeper.schemas.note import HealthResponse
from notekeeper.services.note_service import NoteService, get_note_service

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(
    service: NoteService = Depends(get_note_service),
) -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=__version__,
        note_count=service.store.count(),
        uptime_seconds=round(time.time() - _start_time, 2),
    )
