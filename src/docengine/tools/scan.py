"""コンプライアンススキャンのMCPツール定義。"""

from pathlib import Path
from typing import Any

from fastmcp import FastMCP

from docengine.checks.loader import dump_rules, load_rule_set
from docengine.config import EngineConfig
from docengine.models.errors import DocEngineError
from docengine.models.rules import ProjectScope, ProjectType
from docengine.services.scan import ScanConfig, ScanService, parse_check_filter


def register_scan_tools(mcp: FastMCP, scan_service: ScanService, config: EngineConfig) -> None:
    """スキャン関連のMCPツールを登録する。"""

    @mcp.tool()
    async def scan_project(
        path: str,
        project_type: ProjectType | None = None,
        project_scope: ProjectScope | None = None,
        checks: str | None = None,
        rules_path: str | None = None,
    ) -> dict[str, Any]:
        """プロジェクトのドキュメント構成をルールに照らしてスキャンする。

        結果は実行順のチェック結果（pass / fail / skip）と集計を含みます。
        前提チェックがfailしたチェックはskipとして報告されます。

        Args:
            path: スキャンするプロジェクトルートの絶対パス。
            project_type: プロジェクト分類（"open_source" / "internal"）。省略時はLICENSEから判定。
            project_scope: プロジェクト規模（"small" / "medium" / "large"）。
            checks: 実行するチェックID（例: "1-5,9"）。省略時は全チェック。
            rules_path: 既定以外のルール定義ファイルを使う場合のパス。
        """
        try:
            scan_config = ScanConfig(
                project_type=project_type or config.project_type,
                project_scope=project_scope or config.project_scope,
                checks=parse_check_filter(checks) if checks else None,
                rules_path=Path(rules_path) if rules_path else None,
            )
            report = scan_service.scan(Path(path), scan_config)
            return report.model_dump(mode="json")
        except DocEngineError as e:
            return {"error": type(e).__name__, "message": str(e)}

    @mcp.tool()
    async def list_rules(rules_path: str | None = None) -> dict[str, Any]:
        """読み込み済みのルール一覧を実行順で取得する。

        Args:
            rules_path: 既定以外のルール定義ファイルを読む場合のパス。
        """
        try:
            rule_set = load_rule_set(Path(rules_path)) if rules_path else scan_service.rules
            result = dump_rules(rule_set)
            result["total"] = len(rule_set)
            return result
        except DocEngineError as e:
            return {"error": type(e).__name__, "message": str(e)}
