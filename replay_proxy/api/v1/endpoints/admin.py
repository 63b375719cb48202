"""Administrative endpoints: mode switching, statistics, history, recordings"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from ....core.exceptions import BadRequestError
from ....models.admin import (
    HistoryResponse,
    MessageResponse,
    RecordingsResponse,
    RecordingSummary,
    StatusResponse,
)
from ....models.interaction import Interaction
from ....models.mode import ModeRequest, ModeResponse
from ....services.mode_controller import ModeController
from ....services.statistics import ProxyStatistics, RequestHistory
from ....storage.repository import InteractionRepository
from ...deps import (
    get_history,
    get_mode_controller,
    get_repository,
    get_started_at,
    get_statistics,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


def format_uptime(seconds: float) -> str:
    """Format a duration as ``1h2m3s``, ``2m3s`` or ``3s``"""
    total = int(round(seconds))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)

    if hours > 0:
        return f"{hours}h{minutes}m{secs}s"
    if minutes > 0:
        return f"{minutes}m{secs}s"
    return f"{secs}s"


@router.get("/status", response_model=StatusResponse)
async def get_status(
    mode_controller: ModeController = Depends(get_mode_controller),
    statistics: ProxyStatistics = Depends(get_statistics),
    repository: InteractionRepository = Depends(get_repository),
    started_at: datetime = Depends(get_started_at)
) -> StatusResponse:
    """
    Current mode, counters and number of stored recordings.
    """
    snapshot = statistics.snapshot()
    uptime = (datetime.now(timezone.utc) - started_at).total_seconds()

    return StatusResponse(
        mode=mode_controller.get_mode(),
        record_count=snapshot.record_count,
        playback_hits=snapshot.playback_hits,
        playback_misses=snapshot.playback_misses,
        total_recordings=repository.count(),
        uptime=format_uptime(uptime)
    )


@router.get("/mode", response_model=ModeResponse, response_model_exclude_none=True)
async def get_mode(
    mode: Optional[str] = Query(None, description="Switch to this mode: 'record' or 'playback'"),
    mode_controller: ModeController = Depends(get_mode_controller)
) -> ModeResponse:
    """
    Get the current mode, or switch it when `mode` is given.

    **Errors:**
    - 400: Invalid mode
    """
    if mode:
        return _switch_mode(mode_controller, mode)
    return ModeResponse(mode=mode_controller.get_mode())


@router.post("/mode", response_model=ModeResponse)
async def set_mode(
    request: Request,
    mode_controller: ModeController = Depends(get_mode_controller)
) -> ModeResponse:
    """
    Switch the mode.

    **Request Body:**
    - `mode`: `record` or `playback`

    **Errors:**
    - 400: Unparseable body or invalid mode
    """
    try:
        payload = ModeRequest.model_validate(await request.json())
    except ValueError:
        raise BadRequestError("Invalid request body")

    return _switch_mode(mode_controller, payload.mode)


def _switch_mode(mode_controller: ModeController, mode: str) -> ModeResponse:
    new_mode = mode_controller.set_mode(mode)
    return ModeResponse(mode=new_mode, message=f"Switched to {new_mode.value} mode")


@router.get("/history", response_model=HistoryResponse)
async def get_request_history(history: RequestHistory = Depends(get_history)) -> HistoryResponse:
    """Requests proxied by this process, newest first (at most 1000)"""
    entries = history.entries()
    return HistoryResponse(count=len(entries), history=entries)


@router.get("/recordings", response_model=RecordingsResponse)
async def list_recordings(
    repository: InteractionRepository = Depends(get_repository)
) -> RecordingsResponse:
    """
    List all stored recordings, newest first.

    The `id` of each row is the request fingerprint and can be passed to
    `GET /admin/recording?id=...`.
    """
    recordings = [RecordingSummary.from_interaction(i) for i in repository.find_all()]
    return RecordingsResponse(count=len(recordings), recordings=recordings)


@router.delete("/recordings", response_model=MessageResponse)
async def clear_recordings(
    repository: InteractionRepository = Depends(get_repository)
) -> MessageResponse:
    """Delete every stored recording"""
    repository.clear()
    logger.info("All recordings cleared via admin API")
    return MessageResponse(message="All recordings cleared successfully")


@router.get("/recording", response_model=Interaction)
async def get_recording(
    id: Optional[str] = Query(None, description="Request fingerprint or interaction id"),
    repository: InteractionRepository = Depends(get_repository)
) -> Interaction:
    """
    Get one recording with full request and response.

    **Errors:**
    - 400: Missing id
    - 404: Recording not found
    """
    if not id:
        raise BadRequestError("Missing recording ID")
    return repository.find(id)
