"""テスト共通フィクスチャ。"""

from collections.abc import Callable
from pathlib import Path

import pytest

from docengine.checks.base import CheckContext
from docengine.checks.loader import load_rule_set
from docengine.config import EngineConfig
from docengine.models.rules import RuleSet
from docengine.storage.scanner import ProjectFiles, scan_project_files

ProjectFactory = Callable[[dict[str, str]], Path]


@pytest.fixture
def config_dir() -> Path:
    """設定ファイルディレクトリ。"""
    return Path(__file__).parent.parent / "config"


@pytest.fixture
def default_rules(config_dir: Path) -> RuleSet:
    """既定のルール定義。"""
    return load_rule_set(config_dir / "rules" / "default.yaml")


@pytest.fixture
def engine_config(config_dir: Path) -> EngineConfig:
    """テスト用EngineConfig。"""
    return EngineConfig(config_dir=config_dir)


@pytest.fixture
def make_project(tmp_path: Path) -> ProjectFactory:
    """{相対パス: 内容} からプロジェクトを作成するファクトリ。

    呼び出しごとに別のルートディレクトリを作成する。
    """
    created: list[Path] = []

    def _make(files: dict[str, str]) -> Path:
        root = tmp_path / f"project{len(created)}"
        root.mkdir()
        created.append(root)
        for rel, content in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return root

    return _make


@pytest.fixture
def make_context(make_project: ProjectFactory) -> Callable[..., CheckContext]:
    """ファイル構成からCheckContextを作成するファクトリ。"""

    def _make(
        files: dict[str, str], project_type: str = "internal", project_scope: str = "large"
    ) -> CheckContext:
        project_files: ProjectFiles = scan_project_files(make_project(files))
        return CheckContext(
            files=project_files,
            project_type=project_type,  # type: ignore[arg-type]
            project_scope=project_scope,  # type: ignore[arg-type]
        )

    return _make
