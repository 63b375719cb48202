"""Catch-all proxy endpoint"""

from fastapi import APIRouter, Depends, Request, Response

from ....services.proxy_handler import ProxyHandler
from ...deps import get_proxy_handler

router = APIRouter(tags=["proxy"])

PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS", "TRACE"]


@router.api_route("/{path:path}", methods=PROXY_METHODS, include_in_schema=False)
async def proxy(
    request: Request,
    path: str,
    handler: ProxyHandler = Depends(get_proxy_handler)
) -> Response:
    """
    Record or replay a request to `target`.

    `ANY /<any-path>?target=<url-or-host-path>`

    The inbound path is ignored; method and body are forwarded (record mode)
    or matched (playback mode) as they are.

    **Errors:**
    - 400: Missing or invalid target, unreadable body
    - 404: No recording found (playback mode)
    - 500: Upstream, storage or other internal failure
    """
    return await handler.handle(request)
