"""Error taxonomy for the replay proxy.

Every error carries the HTTP status it resolves to at the API boundary, where
it is rendered as ``{"error": "<message>"}``.
"""

from fastapi import status


class ProxyError(Exception):
    """Base class for all proxy errors"""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR


class BadRequestError(ProxyError):
    """Missing or malformed target, or an unreadable request body"""
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidModeError(ProxyError):
    """A mode other than 'record' or 'playback' was requested"""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, mode: str):
        self.mode = mode
        super().__init__(f"invalid mode: {mode} (must be 'record' or 'playback')")


class InteractionNotFoundError(ProxyError):
    """No stored interaction matches the given fingerprint or id"""
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Recording not found: {key}")


class RecordingNotFoundError(ProxyError):
    """Playback miss: the request has never been recorded"""
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, method: str, url: str, fingerprint: str):
        self.method = method
        self.url = url
        self.fingerprint = fingerprint
        super().__init__(f"No recording found for {method} {url} (hash: {fingerprint})")


class UpstreamForwardError(ProxyError):
    """The real target could not be reached in record mode"""


class StorageError(ProxyError):
    """Reading, writing or clearing recordings failed"""


class RecordFailedError(ProxyError):
    """Record-mode dispatch failed (upstream or storage)"""


class PlaybackFailedError(ProxyError):
    """Playback-mode dispatch failed for a reason other than a miss"""
