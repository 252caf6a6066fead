from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple

import httpx
from fastapi import Request, Response

from src.hospital.errors import UpstreamTimeoutError, UpstreamUnavailableError

logger = logging.getLogger("hospital.gateway.proxy")

# Not forwarded upstream; httpx sets them for the outgoing request.
SKIPPED_REQUEST_HEADERS = frozenset({"host", "content-length", "transfer-encoding"})

# Framing headers the ASGI server recomputes for the response.
SKIPPED_RESPONSE_HEADERS = frozenset({"content-length", "transfer-encoding", "connection", "keep-alive"})


@dataclass(frozen=True)
class UpstreamRoute:
    prefix: str
    base_url: str
    service: str
    # Upstream paths only the gateway itself may call; never forwarded.
    private_paths: FrozenSet[str] = frozenset()

    def strip(self, path: str) -> Optional[str]:
        """Return ``path`` without the prefix, or ``None`` if it does not match.

        Matching is on whole path segments: ``/admin`` and ``/admin/x`` match
        ``/admin`` but ``/administrator`` does not.
        """

        prefix = self.prefix.rstrip("/")
        lowered = path.lower()
        if lowered == prefix.lower():
            return "/"
        if lowered.startswith(prefix.lower() + "/"):
            return path[len(prefix):]
        return None

    def is_private(self, remainder: str) -> bool:
        # Collapse "//", "." and ".." so spelling variants cannot slip through.
        normalized = posixpath.normpath("/" + remainder.lstrip("/")).lower()
        return normalized in {p.lower() for p in self.private_paths}


class ReverseProxy:
    """Forwards requests to the backend owning the matched path prefix.

    One attempt per request, no retries. The upstream body is passed through
    as raw bytes so compressed payloads reach the client unchanged.
    """

    def __init__(self, client: httpx.AsyncClient, routes: Sequence[UpstreamRoute]) -> None:
        self._client = client
        self._routes: List[UpstreamRoute] = list(routes)

    @property
    def routes(self) -> List[UpstreamRoute]:
        return list(self._routes)

    def match(self, path: str) -> Optional[Tuple[UpstreamRoute, str]]:
        for route in self._routes:
            remainder = route.strip(path)
            if remainder is None:
                continue
            if route.is_private(remainder):
                logger.info("Refused to proxy private path %s", path)
                return None
            return route, remainder
        return None

    async def forward(self, request: Request, route: UpstreamRoute, remainder: str) -> Response:
        url = route.base_url.rstrip("/") + "/" + remainder.lstrip("/")
        query = request.url.query
        if query:
            url += "?" + query

        outgoing = self._client.build_request(
            request.method,
            url,
            headers=list(_filter_headers(request.headers.raw, SKIPPED_REQUEST_HEADERS)),
            content=await request.body(),
        )
        logger.info("Proxying %s %s -> %s", request.method, request.url.path, route.service)

        try:
            upstream = await self._client.send(outgoing, stream=True)
        except httpx.TimeoutException as exc:
            logger.error("Timeout proxying to %s: %s", url, exc.__class__.__name__)
            raise UpstreamTimeoutError(route.service) from exc
        except httpx.TransportError as exc:
            logger.error("Error proxying to %s: %s", url, exc.__class__.__name__)
            raise UpstreamUnavailableError(route.service) from exc

        try:
            body = b"".join([chunk async for chunk in upstream.aiter_raw()])
        except httpx.TimeoutException as exc:
            raise UpstreamTimeoutError(route.service) from exc
        except httpx.TransportError as exc:
            raise UpstreamUnavailableError(route.service) from exc
        finally:
            await upstream.aclose()

        response = Response(content=body, status_code=upstream.status_code)
        response.raw_headers.extend(_filter_headers(upstream.headers.raw, SKIPPED_RESPONSE_HEADERS))
        return response


def _filter_headers(raw: Iterable[Tuple[bytes, bytes]], skipped: frozenset) -> Iterable[Tuple[bytes, bytes]]:
    for name, value in raw:
        lowered = name.lower()
        if lowered.decode("latin-1") not in skipped:
            yield lowered, value
