"""
Proxy request dispatch.

Every proxied request goes through ``ProxyHandler.handle`` which holds a
single lock for the whole request, including the upstream call in record
mode. Requests are therefore processed strictly one at a time and history and
statistics are ordered by arrival.
"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import List, Tuple

from fastapi import Request, Response
from starlette.requests import ClientDisconnect

from ..core.exceptions import (
    BadRequestError,
    PlaybackFailedError,
    RecordFailedError,
    RecordingNotFoundError,
)
from ..models.admin import HistoryEntry
from ..models.interaction import Interaction, RecordedResponse
from ..models.mode import ProxyMode
from ..utils.headers import flatten_headers, group_headers
from ..utils.targets import build_target_url
from .mode_controller import ModeController
from .player import Player
from .recorder import Recorder
from .statistics import ProxyStatistics, RequestHistory

logger = logging.getLogger(__name__)

# Statuses that must not carry a body (and so no Content-Length)
NO_BODY_STATUSES = frozenset({204, 304})


class ProxyHandler:
    """Dispatches proxied requests to the Recorder or the Player"""

    def __init__(
        self,
        mode_controller: ModeController,
        recorder: Recorder,
        player: Player,
        statistics: ProxyStatistics,
        history: RequestHistory
    ):
        self.mode_controller = mode_controller
        self.recorder = recorder
        self.player = player
        self.statistics = statistics
        self.history = history
        self._lock = asyncio.Lock()

    async def handle(self, request: Request) -> Response:
        """
        Record or replay one proxied request.

        Raises:
            BadRequestError: Missing/invalid target or unreadable body (400)
            RecordingNotFoundError: Playback miss (404)
            RecordFailedError: Upstream or storage failure while recording (500)
            PlaybackFailedError: Storage failure while replaying (500)
        """
        async with self._lock:
            target = request.query_params.get("target")
            if not target:
                raise BadRequestError("Missing 'target' query parameter")

            try:
                build_target_url(target)
            except ValueError as e:
                raise BadRequestError(f"Invalid target URL: {e}")

            try:
                body = await request.body()
            except ClientDisconnect:
                raise BadRequestError("Failed to read request body")

            method = request.method
            headers = group_headers(request.headers.items(), exclude={"host"})
            mode = self.mode_controller.get_mode()
            start = time.monotonic()

            if mode == ProxyMode.RECORD:
                interaction = await self._record(method, target, headers, body)
            else:
                interaction = self._play(method, target, headers, body)

            self.history.add(HistoryEntry(
                id=interaction.fingerprint(),
                timestamp=datetime.now(timezone.utc),
                method=interaction.request.method,
                url=interaction.request.url,
                target=interaction.metadata.target,
                status=interaction.response.status_code,
                duration=int((time.monotonic() - start) * 1000),
                saved=mode == ProxyMode.RECORD
            ))

            return build_response(interaction.response)

    async def _record(self, method, target, headers, body) -> Interaction:
        try:
            interaction = await self.recorder.record(method, target, headers, body)
        except Exception as e:
            raise RecordFailedError(f"Record failed: {e}") from e

        self.statistics.increment_record()
        return interaction

    def _play(self, method, target, headers, body) -> Interaction:
        try:
            interaction = self.player.play(method, target, headers, body)
        except RecordingNotFoundError:
            self.statistics.increment_miss()
            raise
        except Exception as e:
            raise PlaybackFailedError(f"Playback failed: {e}") from e

        self.statistics.increment_hit()
        return interaction


def build_response(recorded: RecordedResponse) -> Response:
    """Write a recorded response back verbatim (every header value, status and body)"""
    body = recorded.body or b""
    response = Response(content=body, status_code=recorded.status_code)

    raw_headers: List[Tuple[bytes, bytes]] = [
        (name.lower().encode("latin-1"), _encode_header_value(value))
        for name, value in flatten_headers(recorded.headers)
    ]
    has_length = any(name == b"content-length" for name, _ in raw_headers)
    if not has_length and recorded.status_code >= 200 and recorded.status_code not in NO_BODY_STATUSES:
        raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    response.raw_headers = raw_headers
    return response


def _encode_header_value(value: str) -> bytes:
    try:
        return value.encode("latin-1")
    except UnicodeEncodeError:
        return value.encode("utf-8")
