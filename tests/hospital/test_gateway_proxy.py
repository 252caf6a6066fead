import gzip
import json

import httpx
from fastapi import status
from httpx import ASGITransport, AsyncClient

from src.hospital import admin_main, gateway_main


class RecordingUpstream:
    """MockTransport handler that records requests and answers with a streamed body.

    The proxy reads upstream bodies as raw streams, so every reply is built
    fresh around an unread ``httpx.ByteStream``.
    """

    def __init__(
        self,
        status_code: int = 200,
        body: bytes = b'{"ok": true}',
        headers: dict = None,
        error: Exception = None,
    ) -> None:
        self.requests = []
        self._status_code = status_code
        self._body = body
        self._headers = {"Content-Type": "application/json", **(headers or {})}
        self._error = error

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._error is not None:
            raise self._error
        return httpx.Response(self._status_code, headers=self._headers, stream=httpx.ByteStream(self._body))


def _client(settings, upstream: RecordingUpstream) -> AsyncClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
    app = gateway_main.create_app(settings, http_client=http_client)
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://gateway")


async def test_admin_prefix_is_stripped_and_body_returned_unchanged(settings):
    payload = [{"id": 1, "nombre": "Hospital Central"}]
    upstream = RecordingUpstream(body=json.dumps(payload).encode(), headers={"X-Upstream": "admin"})

    async with _client(settings, upstream) as client:
        response = await client.get("/admin/centros")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == payload
    assert response.headers["x-upstream"] == "admin"
    assert str(upstream.requests[0].url) == "http://admin.internal/centros"


async def test_consultas_forwarding_keeps_method_headers_query_and_body(settings):
    upstream = RecordingUpstream(201, body=b'{"id": 9}')
    body = {"paciente": "Juan", "fecha": "2024-05-10T09:00:00Z"}

    async with _client(settings, upstream) as client:
        response = await client.post(
            "/consultas/consultas",
            params={"centro_id": "2", "q": "a b"},
            content=json.dumps(body),
            headers={"Authorization": "Bearer abc", "Content-Type": "application/json", "X-Trace": "t-1"},
        )

    assert response.status_code == status.HTTP_201_CREATED
    forwarded = upstream.requests[0]
    assert forwarded.method == "POST"
    assert forwarded.url.host == "consultas.internal"
    assert forwarded.url.path == "/consultas"
    assert forwarded.url.params["centro_id"] == "2"
    assert forwarded.url.params["q"] == "a b"
    assert forwarded.headers["authorization"] == "Bearer abc"
    assert forwarded.headers["x-trace"] == "t-1"
    assert json.loads(forwarded.content) == body


async def test_prefix_alone_maps_to_upstream_root(settings):
    upstream = RecordingUpstream()
    async with _client(settings, upstream) as client:
        await client.get("/admin")

    assert upstream.requests[0].url.path == "/"


async def test_compressed_body_passes_through_raw(settings):
    raw = gzip.compress(b'{"compressed": true}')
    upstream = RecordingUpstream(body=raw, headers={"Content-Encoding": "gzip"})

    async with _client(settings, upstream) as client:
        response = await client.get("/admin/centros")

    assert response.headers["content-encoding"] == "gzip"
    assert response.json() == {"compressed": True}


async def test_upstream_errors_are_passed_through(settings):
    upstream = RecordingUpstream(404, body=b'{"detail": "Center not found"}')
    async with _client(settings, upstream) as client:
        response = await client.get("/admin/centros/99")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"detail": "Center not found"}


async def test_unreachable_backend_is_503_naming_the_service(settings):
    upstream = RecordingUpstream(error=httpx.ConnectError("connection refused"))
    async with _client(settings, upstream) as client:
        response = await client.get("/consultas/consultas")

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    body = response.json()
    assert body["service"] == "consultas-api"
    assert "detail" in body and "timestamp" in body


async def test_backend_timeout_is_504(settings):
    upstream = RecordingUpstream(error=httpx.ReadTimeout("too slow"))
    async with _client(settings, upstream) as client:
        response = await client.get("/admin/centros")

    assert response.status_code == status.HTTP_504_GATEWAY_TIMEOUT
    assert response.json()["service"] == "admin-api"


async def test_unknown_paths_are_404_and_not_proxied(settings):
    upstream = RecordingUpstream()
    async with _client(settings, upstream) as client:
        for path in ("/administrator", "/consultasx/1", "/", "/nothing/here"):
            response = await client.get(path)
            assert response.status_code == status.HTTP_404_NOT_FOUND, path

    assert upstream.requests == []


async def test_health_lists_upstreams(settings):
    async with _client(settings, RecordingUpstream()) as client:
        response = await client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["status"] == "ok"
    assert body["services"] == {"admin-api": "http://admin.internal", "consultas-api": "http://consultas.internal"}


async def test_credential_endpoints_are_not_reachable_through_the_gateway(settings):
    upstream = RecordingUpstream()
    body = {"username": "root", "password": "s3cret", "correo": "root@hospital.com"}
    async with _client(settings, upstream) as client:
        for path in (
            "/admin/usuarios/validate",
            "/admin/usuarios/by-email",
            "/admin/usuarios/validate/",
            "/admin//usuarios/by-email",
            "/ADMIN/Usuarios/Validate",
        ):
            response = await client.post(path, json=body)
            assert response.status_code == status.HTTP_404_NOT_FOUND, path

        neighbour = await client.get("/admin/usuarios/7")

    assert neighbour.status_code == status.HTTP_200_OK
    assert [request.url.path for request in upstream.requests] == ["/usuarios/7"]


async def test_gateway_logs_in_but_refuses_to_relay_credential_checks(settings):
    admin_app = admin_main.create_app(settings)
    http_client = httpx.AsyncClient(transport=ASGITransport(app=admin_app))
    gateway = gateway_main.create_app(settings, http_client=http_client)

    async with AsyncClient(transport=ASGITransport(app=admin_app), base_url="http://admin") as admin:
        setup = await admin.post(
            "/setup/admin",
            json={"username": "root", "password": "s3cret", "correo": "root@hospital.com"},
        )
        assert setup.status_code == status.HTTP_201_CREATED

    async with AsyncClient(transport=ASGITransport(app=gateway), base_url="http://gateway") as client:
        login = await client.post("/api/auth/login", json={"username": "root", "password": "s3cret"})
        relayed = await client.post("/admin/usuarios/validate", json={"username": "root", "password": "s3cret"})
        lookup = await client.post("/admin/usuarios/by-email", json={"correo": "root@hospital.com"})

    assert login.status_code == status.HTTP_200_OK
    assert login.json()["user"]["username"] == "root"
    assert relayed.status_code == status.HTTP_404_NOT_FOUND
    assert "root" not in relayed.text
    assert lookup.status_code == status.HTTP_404_NOT_FOUND
    assert "root" not in lookup.text
