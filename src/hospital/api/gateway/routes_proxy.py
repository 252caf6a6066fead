from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from src.hospital.api.deps import get_reverse_proxy
from src.hospital.errors import NotFoundError
from src.hospital.services.gateway.proxy import ReverseProxy

router = APIRouter(tags=["proxy"])

PROXIED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


# Catch-all; must be included after every other gateway router.
@router.api_route("/{path:path}", methods=PROXIED_METHODS, include_in_schema=False)
async def proxy_request(
    path: str,
    request: Request,
    reverse_proxy: ReverseProxy = Depends(get_reverse_proxy),
) -> Response:
    matched = reverse_proxy.match(request.url.path)
    if matched is None:
        raise NotFoundError("Route not found")
    route, remainder = matched
    return await reverse_proxy.forward(request, route, remainder)
