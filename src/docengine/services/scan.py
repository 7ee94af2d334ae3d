"""プロジェクトのコンプライアンススキャンを行うサービス。"""

import logging
from pathlib import Path

from pydantic import BaseModel

from docengine.checks.base import CheckContext
from docengine.checks.loader import load_rule_set
from docengine.checks.registry import build_checks
from docengine.checks.runner import run_checks
from docengine.models.errors import CheckFilterError, FileReadError
from docengine.models.results import ScanReport, summarize
from docengine.models.rules import ProjectScope, ProjectType, RuleSet
from docengine.storage.scanner import ProjectFiles, scan_project_files

logger = logging.getLogger(__name__)

LICENSE_FILES: tuple[str, ...] = ("LICENSE", "LICENSE.md", "LICENSE.txt")

# 大文字化したライセンス本文に含まれていればOSSとみなす
OSS_LICENSE_MARKERS: tuple[str, ...] = (
    "MIT LICENSE",
    "APACHE LICENSE",
    "GNU GENERAL PUBLIC LICENSE",
    "GNU LESSER GENERAL PUBLIC",
    "BSD ",
    "MOZILLA PUBLIC LICENSE",
    "ISC LICENSE",
    "BOOST SOFTWARE LICENSE",
    "THE UNLICENSE",
    "CREATIVE COMMONS",
    "EUROPEAN UNION PUBLIC",
    "OPEN SOFTWARE LICENSE",
    "ARTISTIC LICENSE",
    "ZLIB LICENSE",
    "DO WHAT THE FUCK YOU WANT",
)


class ScanConfig(BaseModel):
    """1回のスキャンの設定。"""

    project_type: ProjectType | None = None
    project_scope: ProjectScope = "large"
    checks: list[int] | None = None
    rules_path: Path | None = None


def detect_project_type(files: ProjectFiles) -> ProjectType:
    """ルートのLICENSEファイルからプロジェクト分類を判定する。"""
    for name in LICENSE_FILES:
        if not files.is_file(name):
            continue
        try:
            text = files.read_text(name).upper()
        except FileReadError:
            continue
        if any(marker in text for marker in OSS_LICENSE_MARKERS):
            return "open_source"
    return "internal"


def parse_check_filter(expression: str) -> list[int]:
    """`1-5,9` 形式のチェックID指定を展開する。

    Raises:
        CheckFilterError: 書式が不正な場合。
    """
    ids: list[int] = []
    for part in expression.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            if "-" in part:
                start_text, end_text = part.split("-", 1)
                start, end = int(start_text), int(end_text)
                if start > end:
                    raise CheckFilterError(expression)
                ids.extend(range(start, end + 1))
            else:
                ids.append(int(part))
        except ValueError as e:
            raise CheckFilterError(expression) from e
    if not ids:
        raise CheckFilterError(expression)
    return sorted(set(ids))


class ScanService:
    """ルール集合に基づいてプロジェクトをスキャンする。"""

    def __init__(self, rules: RuleSet) -> None:
        self._rules = rules

    @property
    def rules(self) -> RuleSet:
        return self._rules

    def scan(self, root: Path, config: ScanConfig | None = None) -> ScanReport:
        """プロジェクトをスキャンしてレポートを返す。

        Args:
            root: プロジェクトルート。
            config: スキャン設定。Noneの場合はデフォルト設定を使用。

        Returns:
            実行順のチェック結果と集計。

        Raises:
            RuleLoadError: ルール定義ファイルの指定があり、読み込みに失敗した場合。
            ProjectPathError: rootがディレクトリでない場合。
        """
        if config is None:
            config = ScanConfig()

        rule_set = load_rule_set(config.rules_path) if config.rules_path else self._rules
        checks = build_checks(rule_set)
        files = scan_project_files(root)

        project_type = config.project_type or detect_project_type(files)
        context = CheckContext(
            files=files, project_type=project_type, project_scope=config.project_scope
        )
        logger.info(
            "Scanning %s (%s, %s scope) with %d rules",
            root,
            project_type,
            config.project_scope,
            len(rule_set),
        )
        entries = run_checks(checks, context, config.checks)
        return ScanReport(
            results=entries,
            summary=summarize(entries),
            project_type=project_type,
            project_scope=config.project_scope,
        )
