"""トークン認証ミドルウェアのユニットテスト。"""

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from docengine.middleware import TokenAuthMiddleware


async def _ok(request: Request) -> PlainTextResponse:
    return PlainTextResponse("ok")


def _client(url_token: str) -> TestClient:
    app = Starlette(
        routes=[Route("/health", _ok), Route("/mcp", _ok)],
        middleware=[Middleware(TokenAuthMiddleware, url_token=url_token)],
    )
    return TestClient(app)


class TestTokenAuthMiddleware:
    def test_no_token_configured_allows_all(self) -> None:
        assert _client("").get("/mcp").status_code == 200

    def test_missing_token_rejected(self) -> None:
        response = _client("secret").get("/mcp")
        assert response.status_code == 401
        assert response.json() == {
            "error": "Unauthorized",
            "message": "doc-engine token is missing or invalid",
        }
        assert response.headers["www-authenticate"] == 'Bearer realm="doc-engine"'

    def test_wrong_token_rejected(self) -> None:
        assert _client("secret").get("/mcp?token=guess").status_code == 401

    def test_query_token_allowed(self) -> None:
        assert _client("secret").get("/mcp?token=secret").status_code == 200

    def test_bearer_header_allowed(self) -> None:
        response = _client("secret").get("/mcp", headers={"Authorization": "Bearer secret"})
        assert response.status_code == 200

    def test_other_auth_scheme_ignored(self) -> None:
        response = _client("secret").get("/mcp", headers={"Authorization": "Basic secret"})
        assert response.status_code == 401

    def test_health_skips_auth(self) -> None:
        assert _client("secret").get("/health").status_code == 200
