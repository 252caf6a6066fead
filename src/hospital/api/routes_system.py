from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Request

router = APIRouter(prefix="", tags=["system"])


@router.get("/health")
async def health_check(request: Request) -> dict:
    """Liveness probe. The gateway also reports its upstream base URLs."""

    body = {
        "status": "ok",
        "service": request.app.state.service_name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    proxy = getattr(request.app.state, "reverse_proxy", None)
    if proxy is not None:
        body["services"] = {route.service: route.base_url for route in proxy.routes}
    return body
