"""Header normalization helpers"""

from typing import Dict, Iterable, List, Tuple

# Connection-level headers that must not be forwarded or replayed
HOP_BY_HOP_HEADERS = frozenset({
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "proxy-connection",
    "te",
    "trailer",
    "transfer-encoding",
    "upgrade",
})


def canonical_header_name(name: str) -> str:
    """Canonicalize a header name: ``x-tenant-id`` -> ``X-Tenant-Id``"""
    return "-".join(part.capitalize() for part in name.split("-"))


def group_headers(
    pairs: Iterable[Tuple[str, str]],
    exclude: Iterable[str] = ()
) -> Dict[str, List[str]]:
    """
    Fold raw (name, value) pairs into a name -> values mapping.

    Repeated headers keep every value in arrival order. Names listed in
    ``exclude`` (case-insensitive) and hop-by-hop headers are dropped.
    """
    skipped = HOP_BY_HOP_HEADERS | {name.lower() for name in exclude}
    grouped: Dict[str, List[str]] = {}
    for name, value in pairs:
        if name.lower() in skipped:
            continue
        grouped.setdefault(canonical_header_name(name), []).append(value)
    return grouped


def flatten_headers(headers: Dict[str, List[str]]) -> List[Tuple[str, str]]:
    """Expand a name -> values mapping back into (name, value) pairs"""
    return [(name, value) for name, values in headers.items() for value in values]
