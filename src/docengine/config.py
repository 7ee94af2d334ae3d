"""doc-engineの設定管理。"""

from pathlib import Path

from pydantic_settings import BaseSettings

from docengine.models.rules import ProjectScope, ProjectType

_PACKAGE_ROOT = Path(__file__).parent
_REPO_ROOT = _PACKAGE_ROOT.parent.parent


class EngineConfig(BaseSettings):
    """エンジン設定。環境変数から読み込み可能。"""

    model_config = {"env_prefix": "DOC_ENGINE_"}

    config_dir: Path = _REPO_ROOT / "config"
    rules_path: Path | None = None

    # プロジェクト分類 (未指定時はLICENSEから自動判定)
    project_type: ProjectType | None = None
    project_scope: ProjectScope = "large"

    # MCPサーバー
    host: str = "0.0.0.0"
    port: int = 8000
    url_token: str = ""

    log_level: str = "WARNING"

    @property
    def default_rules_path(self) -> Path:
        return self.config_dir / "rules" / "default.yaml"

    @property
    def effective_rules_path(self) -> Path:
        """実際に読み込むルール定義ドキュメントのパス。"""
        return self.rules_path if self.rules_path is not None else self.default_rules_path
