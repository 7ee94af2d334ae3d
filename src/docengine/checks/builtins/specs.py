"""specファイルの検証・相互参照をスキャンに組み込むbuiltinチェック。"""

from docengine.checks.base import Check, CheckContext
from docengine.models.results import CheckResult, Skip
from docengine.specs.crossref import cross_reference
from docengine.validators.spec import SpecValidator


class SpecSchemaValid(Check):
    """specファイルの解析エラー・スキーマエラーを違反として報告する。"""

    def run(self, context: CheckContext) -> CheckResult:
        corpus = context.spec_corpus
        if not corpus.discovered:
            return Skip(reason="No spec files found")
        report = SpecValidator().report(corpus)
        return self.outcome(
            [
                self.violation(
                    d.file,
                    f"Line {d.line}: {d.message}" if d.line is not None else d.message,
                )
                for d in report.diagnostics
            ]
        )


class SpecCrossReferences(Check):
    """相互参照アサーションの失敗を違反として報告する。"""

    def run(self, context: CheckContext) -> CheckResult:
        corpus = context.spec_corpus
        if not corpus.discovered:
            return Skip(reason="No spec files found")
        report = cross_reference(corpus)
        return self.outcome(
            [
                self.violation(None, f"[{f.category}] {f.description}: {f.details}")
                for f in report.failures()
            ]
        )
