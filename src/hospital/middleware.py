from __future__ import annotations

import asyncio
import logging

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

logger = logging.getLogger("hospital.middleware")


class RequestTimeoutMiddleware(BaseHTTPMiddleware):
    """Answer 504 when a request runs longer than ``timeout_seconds``."""

    def __init__(self, app: ASGIApp, timeout_seconds: float) -> None:
        super().__init__(app)
        self._timeout = timeout_seconds

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await asyncio.wait_for(call_next(request), timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.error("%s %s exceeded %ss", request.method, request.url.path, self._timeout)
            return JSONResponse(status_code=504, content={"detail": "Request timed out"})
