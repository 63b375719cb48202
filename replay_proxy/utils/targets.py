"""Helpers for turning the ``target`` query parameter into URLs and paths"""

import re
from typing import List, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

_NON_WORD = re.compile(r"[^\w\-]")


def has_scheme(target: str) -> bool:
    """Check if a target already carries http:// or https://"""
    return target.startswith("http://") or target.startswith("https://")


def build_target_url(target: str) -> str:
    """
    Build the absolute URL a request is forwarded to.

    Targets without a scheme default to https. Query parameters arrive already
    decoded from the proxy's own query string, so they are re-encoded here
    (sorted by key) to produce a valid URL again.

    Raises:
        ValueError: If the target cannot be parsed or has no host
    """
    url = target if has_scheme(target) else f"https://{target}"
    parts = urlsplit(url)
    if not parts.hostname:
        raise ValueError(f"no host in target '{target}'")
    # Accessing .port validates it
    parts.port

    query = parts.query
    if query:
        pairs: List[Tuple[str, str]] = parse_qsl(query, keep_blank_values=True)
        query = urlencode(sorted(pairs, key=lambda pair: pair[0]))

    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def service_directory_name(target: str) -> str:
    """
    Derive the storage directory name for a target.

    Uses the host (and port) of the target with dots, colons and any other
    separator replaced by underscores, e.g. ``api.example.com:8080`` becomes
    ``api_example_com_8080``.
    """
    url = target if has_scheme(target) else f"https://{target}"
    try:
        netloc = urlsplit(url).netloc
    except ValueError:
        netloc = ""

    # Drop credentials if any
    netloc = netloc.rsplit("@", 1)[-1]
    if not netloc:
        return "unknown"
    return _NON_WORD.sub("_", netloc)
