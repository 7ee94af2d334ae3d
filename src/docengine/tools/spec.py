"""specファイル検証のMCPツール定義。"""

from pathlib import Path
from typing import Any

from fastmcp import FastMCP

from docengine.models.errors import DocEngineError
from docengine.services.spec import SpecService


def register_spec_tools(mcp: FastMCP, spec_service: SpecService) -> None:
    """spec関連のMCPツールを登録する。"""

    @mcp.tool()
    async def validate_specs(path: str) -> dict[str, Any]:
        """プロジェクト内の全specファイルを解析・スキーマ検証する。

        YAML（.spec.yaml など）とMarkdown（.spec など）の両形式が対象です。
        解析エラー・スキーマエラー・ID重複が診断として返されます。

        Args:
            path: プロジェクトルートの絶対パス。
        """
        try:
            report = spec_service.validate(Path(path))
            result = report.model_dump(mode="json")
            result["has_errors"] = report.has_errors
            return result
        except DocEngineError as e:
            return {"error": type(e).__name__, "message": str(e)}

    @mcp.tool()
    async def cross_reference_specs(path: str) -> dict[str, Any]:
        """spec間の参照（依存・SDLCチェーン・インベントリ・トレース）を検証する。

        Args:
            path: プロジェクトルートの絶対パス。
        """
        try:
            report = spec_service.cross_reference(Path(path))
            result = report.model_dump(mode="json")
            result["has_failures"] = report.has_failures
            return result
        except DocEngineError as e:
            return {"error": type(e).__name__, "message": str(e)}
