from __future__ import annotations

import json

import httpx
import pytest

from qc_client import ApiError, MemoryTokenStore, QcClient, StoredCredentials
from qc_client.config_types import ENV_API_URL

ROOT = "http://qc.test"


class _Backend:
    def __init__(self, routes: dict[tuple[str, str], tuple[int, object]]) -> None:
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self.routes.get((request.method, request.url.path), (404, {"success": False, "error": "no route"}))
        return httpx.Response(status, json=body)


def _client(store: MemoryTokenStore, backend: _Backend) -> QcClient:
    return QcClient(ROOT, StoredCredentials(store), transport=httpx.MockTransport(backend))


def test_login_returns_token_from_scoped_endpoint() -> None:
    backend = _Backend({("POST", "/api/auth/login"): (200, {"success": True, "token": "jwt-1", "name": "ann"})})
    client = _client(MemoryTokenStore(), backend)

    assert client.auth_login(name="ann", password="pw") == "jwt-1"
    assert json.loads(backend.requests[0].content) == {"name": "ann", "password": "pw"}


def test_login_without_token_is_an_error() -> None:
    backend = _Backend({("POST", "/api/auth/login"): (200, {"success": True})})
    client = _client(MemoryTokenStore(), backend)

    with pytest.raises(ApiError):
        client.auth_login(name="ann", password="pw")


def test_me_goes_through_direct_transport_and_unwraps() -> None:
    backend = _Backend({("GET", "/api/auth/me"): (200, {"success": True, "data": {"name": "ann", "role": "admin"}})})
    client = _client(MemoryTokenStore("tok"), backend)

    assert client.me() == {"name": "ann", "role": "admin"}
    assert backend.requests[0].headers["Authorization"] == "Bearer tok"


def test_defects_list_maps_filters_and_items() -> None:
    backend = _Backend(
        {
            ("GET", "/api/defects"): (
                200,
                {"success": True, "count": 1, "total": 7, "data": [{"_id": "d1", "type": "scratch"}]},
            )
        }
    )
    client = _client(MemoryTokenStore("tok"), backend)

    data = client.defects_list(severity="high", root_cause="tooling", start_date="2024-01-01", page=2, limit=5)

    assert data["items"] == [{"_id": "d1", "type": "scratch"}]
    assert data["total"] == 7
    params = dict(backend.requests[0].url.params)
    assert params == {"severity": "high", "rootCause": "tooling", "startDate": "2024-01-01", "page": "2", "limit": "5"}


def test_users_endpoints_use_api_prefix_on_direct_transport() -> None:
    backend = _Backend({("DELETE", "/api/users/u1"): (200, {"success": True, "data": {}})})
    client = _client(MemoryTokenStore("tok"), backend)

    assert client.user_delete("u1") == {}
    assert backend.requests[0].url == httpx.URL(f"{ROOT}/api/users/u1")


def test_ai_detect_uploads_image_as_multipart(tmp_path) -> None:
    image = tmp_path / "part.jpg"
    image.write_bytes(b"\xff\xd8\xff")
    backend = _Backend(
        {("POST", "/api/ai/detect"): (200, {"success": True, "data": {"detection": {"hasDefect": True}}})}
    )
    client = _client(MemoryTokenStore("tok"), backend)

    assert client.ai_detect(str(image)) == {"detection": {"hasDefect": True}}
    req = backend.requests[0]
    assert req.headers["Content-Type"].startswith("multipart/form-data")
    assert b'name="image"; filename="part.jpg"' in req.content


def test_inspection_images_upload_all_files(tmp_path) -> None:
    paths = []
    for name in ("a.png", "b.png"):
        p = tmp_path / name
        p.write_bytes(b"img")
        paths.append(str(p))
    backend = _Backend({("POST", "/api/inspections/i1/images"): (200, {"success": True, "data": {"count": 2}})})
    client = _client(MemoryTokenStore("tok"), backend)

    assert client.inspection_upload_images("i1", paths) == {"count": 2}
    assert backend.requests[0].content.count(b'name="images"') == 2


def test_unauthorized_call_clears_token_for_following_calls() -> None:
    store = MemoryTokenStore("stale")
    backend = _Backend({("GET", "/api/analytics"): (401, {"success": False, "error": "expired"})})
    client = _client(store, backend)

    with pytest.raises(ApiError) as exc:
        client.analytics()
    assert exc.value.status_code == 401
    assert store.get() is None

    with pytest.raises(ApiError):
        client.activities_list(limit=5)
    assert "Authorization" not in backend.requests[-1].headers


def test_root_defaults_to_environment(monkeypatch) -> None:
    monkeypatch.setenv(ENV_API_URL, "http://env.test/")
    client = QcClient(None, StoredCredentials(MemoryTokenStore()))
    try:
        assert client.root == "http://env.test"
        assert client.api.config.base_url == "http://env.test/api"
        assert client.direct.config.base_url == "http://env.test"
    finally:
        client.close()


def test_root_falls_back_to_localhost(monkeypatch) -> None:
    monkeypatch.delenv(ENV_API_URL, raising=False)
    client = QcClient(None, StoredCredentials(MemoryTokenStore()))
    try:
        assert client.root == "http://localhost:5000"
    finally:
        client.close()


def test_register_drops_empty_fields() -> None:
    backend = _Backend({("POST", "/api/auth/register"): (201, {"success": True, "token": "jwt-2"})})
    client = _client(MemoryTokenStore(), backend)

    data = client.auth_register(name="bo", email="bo@plant.test", password="pw", role="inspector")

    assert data["token"] == "jwt-2"
    assert json.loads(backend.requests[0].content) == {
        "name": "bo",
        "email": "bo@plant.test",
        "password": "pw",
        "role": "inspector",
    }
