"""Record mode: forward to the real target and persist the exchange"""

import logging
import time
from datetime import datetime, timezone
from typing import Optional

import httpx

from ..core.exceptions import UpstreamForwardError
from ..models.interaction import (
    Headers,
    Interaction,
    InteractionMetadata,
    RecordedRequest,
    RecordedResponse,
)
from ..storage.repository import InteractionRepository
from ..utils.headers import flatten_headers, group_headers
from ..utils.targets import build_target_url

logger = logging.getLogger(__name__)

# Recomputed by the HTTP client for the outbound request
FORWARD_EXCLUDED_HEADERS = frozenset({"host", "content-length"})


class Recorder:
    """Forwards requests to their real target and records the result"""

    def __init__(
        self,
        repository: InteractionRepository,
        timeout: float = 30.0,
        verify_tls: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.repository = repository
        self.timeout = timeout
        self.verify_tls = verify_tls
        self.transport = transport

    async def record(
        self,
        method: str,
        target: str,
        headers: Headers,
        body: Optional[bytes]
    ) -> Interaction:
        """
        Forward a request to its target and store the interaction.

        Args:
            method: HTTP method of the inbound request
            target: Target as passed to the proxy (``host/path`` or full URL)
            headers: Inbound request headers
            body: Inbound request body

        Returns:
            The stored interaction, whose response is written back to the caller

        Raises:
            UpstreamForwardError: If the target cannot be reached (nothing is stored)
            StorageError: If the interaction cannot be persisted
        """
        started_at = datetime.now(timezone.utc)
        start = time.monotonic()

        recorded_request = RecordedRequest.from_inbound(method, target, headers, body)

        try:
            target_url = build_target_url(target)
        except ValueError as e:
            raise UpstreamForwardError(f"failed to parse target URL: {e}") from e

        recorded_response = await self._forward(recorded_request, target_url)
        duration_ms = int((time.monotonic() - start) * 1000)

        interaction = Interaction(
            timestamp=started_at,
            request=recorded_request,
            response=recorded_response,
            metadata=InteractionMetadata(target=target, duration_ms=duration_ms)
        )

        self.repository.store(interaction)

        logger.info(
            f"⏺ RECORD: {method} {target} -> {recorded_response.status_code} "
            f"({duration_ms}ms, hash: {interaction.fingerprint()[:12]})"
        )
        return interaction

    async def _forward(self, recorded_request: RecordedRequest, target_url: str) -> RecordedResponse:
        """Execute the outbound call and snapshot the raw response"""
        forward_headers = group_headers(
            flatten_headers(recorded_request.headers),
            exclude=FORWARD_EXCLUDED_HEADERS
        )

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                verify=self.verify_tls,
                transport=self.transport
            ) as client:
                request = client.build_request(
                    recorded_request.method,
                    target_url,
                    headers=flatten_headers(forward_headers),
                    content=recorded_request.body
                )
                # No compression unless the caller asked for it
                if "Accept-Encoding" not in forward_headers and "Accept-Encoding" in request.headers:
                    del request.headers["Accept-Encoding"]

                logger.debug(f"Forwarding {recorded_request.method} {target_url}")
                response = await client.send(request, stream=True)
                try:
                    body = b"".join([chunk async for chunk in response.aiter_raw()])
                finally:
                    await response.aclose()

        except httpx.HTTPError as e:
            logger.error(f"✗ Failed to forward {recorded_request.method} {target_url}: {e}")
            raise UpstreamForwardError(f"failed to forward request: {e}") from e

        return RecordedResponse(
            status_code=response.status_code,
            headers=group_headers(response.headers.multi_items()),
            body=body
        )
