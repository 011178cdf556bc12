"""Tests for filedrop.app — the full request flow through the ASGI app."""

import json

import pytest

from filedrop.app import App
from filedrop.config import FileDropConfig
from filedrop.errors import ConfigurationError
from filedrop.middleware.static import NO_CACHE
from filedrop.testing import TestClient

BUTTONS = {
    "donation_button": {"active": "true", "link": "https://example.com/donate"},
    "twitter_button": {"active": "false"},
}

DOCUMENT_PATHS = ["/", "/home", "/root", "/sharing"]


class TestConfigRoute:
    async def test_returns_signaling_server_and_buttons(self, make_app) -> None:
        app = make_app(port=8080, signaling_server="wss://signal.example.com/server", buttons=BUTTONS)

        async with TestClient(app) as client:
            response = await client.get("/config")

        assert response.status == 200
        assert response.content_type.startswith("application/json")
        assert json.loads(response.text) == {
            "signalingServer": "wss://signal.example.com/server",
            "buttons": BUTTONS,
        }

    async def test_default_signaling_server_is_false(self, make_app) -> None:
        async with TestClient(make_app()) as client:
            response = await client.get("/config")

        assert json.loads(response.text) == {"signalingServer": False, "buttons": {}}

    async def test_ignores_query_and_headers(self, make_app) -> None:
        app = make_app(signaling_server="wss://a.example/server")

        async with TestClient(app) as client:
            plain = await client.get("/config")
            noisy = await client.get(
                "/config?signalingServer=evil", headers={"X-Forwarded-For": "1.2.3.4"}
            )

        assert plain.body == noisy.body


class TestDocumentRoutes:
    @pytest.mark.parametrize("path", ["/", "/home", "/root"])
    async def test_landing_page(self, make_app, path) -> None:
        async with TestClient(make_app()) as client:
            response = await client.get(path)

        assert response.status == 200
        assert response.text == "<h1>Landing</h1>"
        assert "text/html" in response.content_type
        assert "no-store" in (response.header("cache-control") or "")

    async def test_sharing_page(self, make_app) -> None:
        async with TestClient(make_app()) as client:
            response = await client.get("/sharing")

        assert response.status == 200
        assert response.text == "<h1>Sharing</h1>"

    async def test_head_landing_page(self, make_app) -> None:
        async with TestClient(make_app()) as client:
            response = await client.head("/")

        assert response.status == 200
        assert response.body == b""
        assert response.header("content-length") == str(len("<h1>Landing</h1>"))


class TestDocumentCaching:
    @pytest.mark.parametrize("path", DOCUMENT_PATHS)
    async def test_cache_disabled(self, make_app, path) -> None:
        async with TestClient(make_app()) as client:
            response = await client.get(path)

        assert response.status == 200
        cc = [v for name, v in response.headers if name == "cache-control"]
        assert cc == [NO_CACHE]

    @pytest.mark.parametrize("path", DOCUMENT_PATHS)
    async def test_no_validators(self, make_app, path) -> None:
        async with TestClient(make_app()) as client:
            response = await client.get(path)

        assert response.header("etag") is None
        assert response.header("last-modified") is None

    @pytest.mark.parametrize("path", DOCUMENT_PATHS)
    async def test_cache_disabled_with_rate_limit(self, make_app, path) -> None:
        async with TestClient(make_app(rate_limit=1)) as client:
            response = await client.get(path)

        assert response.header("cache-control") == NO_CACHE
        assert response.header("ratelimit-limit") == "1000"


class TestRedirects:
    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("GET", "/unknown/path"),
            ("POST", "/"),
            ("POST", "/config"),
            ("DELETE", "/sharing"),
            ("GET", "/home/"),
        ],
    )
    async def test_unmatched_requests_redirect_home(self, make_app, method, path) -> None:
        async with TestClient(make_app()) as client:
            response = await client.request(method, path)

        assert response.status == 301
        assert response.header("location") == "/"


class TestIpRoute:
    async def test_available_with_rate_limit_and_debug_mode(self, make_app) -> None:
        app = make_app(rate_limit=1, debug_mode=True)

        async with TestClient(app, client=("10.0.0.1", 40000)) as client:
            response = await client.get("/ip", headers={"X-Forwarded-For": "203.0.113.7"})

        assert response.status == 200
        assert response.text == "203.0.113.7"
        assert response.content_type.startswith("text/plain")

    async def test_reflects_hop_count(self, make_app) -> None:
        app = make_app(rate_limit=2, debug_mode=True)
        headers = {"X-Forwarded-For": "203.0.113.7, 10.0.0.2"}

        async with TestClient(app, client=("10.0.0.3", 40000)) as client:
            response = await client.get("/ip", headers=headers)

        assert response.text == "203.0.113.7"

    @pytest.mark.parametrize(
        "overrides",
        [{}, {"debug_mode": True}, {"rate_limit": 1}],
    )
    async def test_not_routed_otherwise(self, make_app, overrides) -> None:
        async with TestClient(make_app(**overrides)) as client:
            response = await client.get("/ip")

        assert response.status == 301
        assert response.header("location") == "/"


class TestAppConstruction:
    def test_missing_public_dir(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError, match="does not exist"):
            App(FileDropConfig(public_dir=tmp_path / "missing"))

    def test_route_order(self, make_app) -> None:
        app = make_app(rate_limit=1, debug_mode=True)

        assert [route.name for route in app.router.routes] == ["ip", "config", "landing", "sharing"]

    def test_rate_limit_only_when_configured(self, make_app) -> None:
        assert make_app().rate_limit is None
        assert make_app(rate_limit=3).rate_limit.trusted_hops == 3

    async def test_default_bundle(self) -> None:
        async with TestClient(App()) as client:
            response = await client.get("/")

        assert response.status == 200
        assert "<html" in response.text


class TestLifespan:
    async def test_startup_and_shutdown(self, make_app) -> None:
        app = make_app()
        messages = iter([{"type": "lifespan.startup"}, {"type": "lifespan.shutdown"}])
        sent = []

        async def receive():
            return next(messages)

        async def send(message):
            sent.append(message["type"])

        await app({"type": "lifespan"}, receive, send)

        assert sent == ["lifespan.startup.complete", "lifespan.shutdown.complete"]
