"""ルール定義のMCPリソース。"""

from pathlib import Path

from fastmcp import FastMCP


def register_rule_resources(mcp: FastMCP, rules_path: Path) -> None:
    """ルール定義関連のMCPリソースを登録する。"""

    @mcp.resource("docengine://rules/default")
    async def default_rules() -> str:
        """既定のルール定義ドキュメント（YAML）を取得する。

        各ルールのID・カテゴリ・重大度・判定方法・依存関係が含まれます。
        """
        with open(rules_path, encoding="utf-8") as f:
            return f.read()
