"""MCPエンドポイントのトークン認証ミドルウェア。"""

import hmac
import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)


class TokenAuthMiddleware(BaseHTTPMiddleware):
    """DOC_ENGINE_URL_TOKEN によるアクセス制御。

    トークンが設定されている場合、/health 以外のリクエストは
    ``?token=...`` クエリパラメータか ``Authorization: Bearer ...`` ヘッダーで
    同じトークンを提示する必要がある。未設定なら全て通す。
    """

    SKIP_PATHS = frozenset({"/health"})

    def __init__(self, app: ASGIApp, url_token: str = "") -> None:
        super().__init__(app)
        self.url_token = url_token

    def _presented_token(self, request: Request) -> str:
        scheme, _, credentials = request.headers.get("authorization", "").partition(" ")
        if scheme.lower() == "bearer" and credentials:
            return credentials.strip()
        return request.query_params.get("token", "")

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not self.url_token or request.url.path in self.SKIP_PATHS:
            return await call_next(request)

        presented = self._presented_token(request)
        if not hmac.compare_digest(presented.encode(), self.url_token.encode()):
            logger.warning("Rejected unauthenticated request to %s", request.url.path)
            return JSONResponse(
                {"error": "Unauthorized", "message": "doc-engine token is missing or invalid"},
                status_code=401,
                headers={"WWW-Authenticate": 'Bearer realm="doc-engine"'},
            )
        return await call_next(request)
