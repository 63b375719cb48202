"""Playback mode: answer from stored interactions"""

import logging
from typing import Optional

from ..core.exceptions import InteractionNotFoundError, RecordingNotFoundError
from ..models.interaction import Headers, Interaction, RecordedRequest
from ..storage.repository import InteractionRepository

logger = logging.getLogger(__name__)


class Player:
    """Looks up the stored interaction matching an inbound request"""

    def __init__(self, repository: InteractionRepository):
        self.repository = repository

    def play(
        self,
        method: str,
        target: str,
        headers: Headers,
        body: Optional[bytes]
    ) -> Interaction:
        """
        Find the recording for a request.

        The request is fingerprinted exactly as the Recorder fingerprints it,
        so only method, target and body take part in matching.

        Returns:
            The stored interaction, returned unmodified

        Raises:
            RecordingNotFoundError: If the request was never recorded
            StorageError: If the stored interaction cannot be read
        """
        recorded_request = RecordedRequest.from_inbound(method, target, headers, body)
        fingerprint = recorded_request.fingerprint()

        try:
            interaction = self.repository.find(fingerprint)
        except InteractionNotFoundError:
            logger.warning(f"✗ PLAYBACK MISS: {method} {target} (hash: {fingerprint})")
            raise RecordingNotFoundError(method, target, fingerprint)

        logger.info(f"▶ PLAYBACK: {method} {target} -> {interaction.response.status_code}")
        return interaction
