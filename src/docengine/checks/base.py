"""チェックの共通インターフェース。"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import cached_property

from docengine.models.results import CheckResult, Fail, Pass, Violation
from docengine.models.rules import ProjectScope, ProjectType, RuleDefinition
from docengine.specs.parser import SpecCorpus, load_corpus
from docengine.storage.scanner import ProjectFiles


@dataclass(frozen=True)
class CheckContext:
    """1回のスキャンで全チェックが共有する読み取り専用コンテキスト。"""

    files: ProjectFiles
    project_type: ProjectType
    project_scope: ProjectScope

    @cached_property
    def spec_corpus(self) -> SpecCorpus:
        """解析済みのspec一式。スキャン中の初回参照時に一度だけ解析する。"""
        return load_corpus(self.files)


class Check(ABC):
    """ルール定義1件に対応する実行可能なチェック。"""

    def __init__(self, rule: RuleDefinition) -> None:
        self._rule = rule

    @property
    def rule(self) -> RuleDefinition:
        return self._rule

    @property
    def id(self) -> int:
        return self._rule.id

    @property
    def category(self) -> str:
        return self._rule.category

    @property
    def description(self) -> str:
        return self._rule.description

    @abstractmethod
    def run(self, context: CheckContext) -> CheckResult:
        """チェックを実行する。評価できない場合も例外は送出しない。"""

    def violation(self, path: str | None, message: str) -> Violation:
        return Violation(
            check_id=self._rule.id, path=path, message=message, severity=self._rule.severity
        )

    def outcome(self, violations: list[Violation]) -> CheckResult:
        """違反があればFail、なければPassを返す。"""
        if violations:
            return Fail(violations=tuple(violations))
        return Pass()
