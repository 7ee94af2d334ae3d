"""ワークフロー統合MCPプロンプト定義。"""

from fastmcp import FastMCP


def register_workflow_prompts(mcp: FastMCP) -> None:
    """ワークフロー系のMCPプロンプトを登録する。"""

    def _scan_phase(path: str) -> str:
        return (
            "## Step 1: 構成スキャン\n\n"
            f"1. `scan_project` ツールを `path=\"{path}\"` で実行してください。\n"
            "2. `summary` の passed / failed / skipped を利用者に提示してください。\n"
            "3. `fail` の結果は `violations` のパスとメッセージを一覧にしてください。\n"
            "4. `skip` の結果のうち `dependency check N failed` のものは、"
            "前提チェックNを直せば評価されることを説明してください。\n\n"
        )

    def _spec_phase(path: str) -> str:
        return (
            "## Step 2: specファイル検証\n\n"
            f"1. `validate_specs` ツールを `path=\"{path}\"` で実行してください。\n"
            "2. `parse_error` は構文の問題、`schema_error` は必須フィールドやID形式の問題です。\n"
            f"3. `cross_reference_specs` ツールを `path=\"{path}\"` で実行してください。\n"
            "4. 失敗したアサーションをカテゴリ（dependency, sdlc_chain, inventory, "
            "test_trace, arch_trace, related_docs）ごとに整理してください。\n\n"
        )

    def _notes() -> str:
        return (
            "## 注意事項\n\n"
            "- ルールの内容は `docengine://rules/default` リソースで確認できます。\n"
            "- severityが error の違反を優先し、warning / info は推奨事項として扱ってください。\n"
            "- 修正案は該当ファイルのパスとともに提示してください。ファイルを勝手に書き換えてはいけません。\n"
        )

    @mcp.prompt()
    async def compliance_audit_workflow(path: str) -> str:
        """プロジェクトのドキュメント監査ワークフロー。

        構成スキャン→spec検証→相互参照チェックの順に結果をまとめます。
        """
        return (
            "# ドキュメントコンプライアンス監査ワークフロー\n\n"
            f"プロジェクト `{path}` のドキュメント構成とspecファイルを監査します。\n\n"
            + _scan_phase(path)
            + _spec_phase(path)
            + _notes()
        )
