"""チェック結果・スキャンレポート関連のデータモデル。"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from docengine.models.rules import ProjectScope, ProjectType, Severity


class Violation(BaseModel):
    """チェックが検出した個別の違反。"""

    model_config = ConfigDict(frozen=True)

    check_id: int
    path: str | None = None
    message: str
    severity: Severity


class Pass(BaseModel):
    """チェック合格。"""

    model_config = ConfigDict(frozen=True)

    status: Literal["pass"] = "pass"


class Fail(BaseModel):
    """チェック不合格。1件以上の違反を持つ。"""

    model_config = ConfigDict(frozen=True)

    status: Literal["fail"] = "fail"
    violations: tuple[Violation, ...]


class Skip(BaseModel):
    """チェック未実行（対象外・前提チェック失敗・評価不能）。"""

    model_config = ConfigDict(frozen=True)

    status: Literal["skip"] = "skip"
    reason: str


CheckResult = Annotated[Pass | Fail | Skip, Field(discriminator="status")]


class CheckEntry(BaseModel):
    """ルールのメタデータ付きチェック結果。"""

    id: int
    category: str
    description: str
    severity: Severity
    result: CheckResult


class ScanSummary(BaseModel):
    """スキャン結果の集計。"""

    total: int
    passed: int
    failed: int
    skipped: int


class ScanReport(BaseModel):
    """スキャン全体の結果。resultsは実行順。"""

    results: list[CheckEntry]
    summary: ScanSummary
    project_type: ProjectType
    project_scope: ProjectScope

    @property
    def has_failures(self) -> bool:
        return self.summary.failed > 0


def summarize(entries: list[CheckEntry]) -> ScanSummary:
    """チェック結果リストから集計を作成する。"""
    passed = sum(1 for e in entries if isinstance(e.result, Pass))
    failed = sum(1 for e in entries if isinstance(e.result, Fail))
    skipped = sum(1 for e in entries if isinstance(e.result, Skip))
    return ScanSummary(total=len(entries), passed=passed, failed=failed, skipped=skipped)
