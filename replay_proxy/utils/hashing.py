"""Hashing utilities for request fingerprints"""

import hashlib
from typing import Optional


def fingerprint_request(method: str, url: str, body: Optional[bytes] = None) -> str:
    """
    Create the playback lookup key for a request.

    The key is SHA256(method + url + body) rendered as hex. Headers are not
    part of the key, so clients that add their own Accept or User-Agent
    headers still match the same recording.

    Args:
        method: HTTP method
        url: Target URL as given to the proxy
        body: Raw request body, if any

    Returns:
        64 character hex digest
    """
    digest = hashlib.sha256()
    digest.update(method.encode())
    digest.update(url.encode())
    if body:
        digest.update(body)
    return digest.hexdigest()
