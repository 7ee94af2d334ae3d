"""FastMCPベースのMCPサーバーエントリポイント。"""

import logging

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import JSONResponse

from docengine.checks.loader import load_rule_set
from docengine.config import EngineConfig
from docengine.prompts.workflow import register_workflow_prompts
from docengine.resources.rules import register_rule_resources
from docengine.services.scan import ScanService
from docengine.services.spec import SpecService
from docengine.tools.scan import register_scan_tools
from docengine.tools.spec import register_spec_tools

logger = logging.getLogger(__name__)


def create_server(config: EngineConfig | None = None) -> FastMCP:
    """doc-engine MCPサーバーを作成し、ツール・リソース・プロンプトを登録する。

    ルール定義はここで1回だけ読み込み、以降は同じRuleSetを共有する。

    Args:
        config: エンジン設定。Noneの場合はデフォルト設定を使用。

    Returns:
        設定済みのFastMCPインスタンス。

    Raises:
        RuleLoadError: ルール定義の読み込みに失敗した場合。
    """
    if config is None:
        config = EngineConfig()

    mcp = FastMCP("doc-engine")

    rule_set = load_rule_set(config.effective_rules_path)

    # サービス層
    scan_service = ScanService(rules=rule_set)
    spec_service = SpecService()

    # MCPインターフェース登録
    register_scan_tools(mcp, scan_service, config)
    register_spec_tools(mcp, spec_service)
    register_rule_resources(mcp, config.default_rules_path)
    register_workflow_prompts(mcp)

    # ヘルスチェックエンドポイント
    @mcp.custom_route("/health", methods=["GET"])
    async def health_check(request: Request) -> JSONResponse:
        return JSONResponse({"status": "ok", "rules": len(rule_set)})

    return mcp


def run_http(config: EngineConfig) -> None:
    """streamable-HTTPでMCPサーバーを起動する。"""
    import uvicorn
    from starlette.middleware import Middleware

    from docengine.middleware import TokenAuthMiddleware

    mcp = create_server(config)
    app = mcp.http_app(
        transport="streamable-http",
        middleware=[Middleware(TokenAuthMiddleware, url_token=config.url_token)],
    )
    logger.info("Serving doc-engine MCP on %s:%d", config.host, config.port)
    uvicorn.run(app, host=config.host, port=config.port)
