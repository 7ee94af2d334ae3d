"""specファイルのスキーマ検証ロジック。"""

import re
from collections import defaultdict

from docengine.models.specs import (
    ArchSpec,
    BrdSpec,
    DeploySpec,
    FeatureRequestSpec,
    MarkdownSpec,
    ParsedSpec,
    SpecDiagnostic,
    SpecValidationReport,
    TestSpec,
)
from docengine.specs.markdown import parse_link
from docengine.specs.parser import SpecCorpus

FEATURE_REQUEST_ID_RE = re.compile(r"^[A-Z][A-Z0-9]*-\d{3,}$")


class SpecValidator:
    """種別ごとの必須フィールドとIDの一意性を検証する。"""

    def validate(self, corpus: SpecCorpus) -> list[SpecDiagnostic]:
        """解析済みの全specを検証する。

        Args:
            corpus: 解析済みのspec一式。

        Returns:
            検出されたschema_error診断のリスト。問題がない場合は空リスト。
        """
        diagnostics: list[SpecDiagnostic] = []
        for path, spec in corpus.documents.items():
            diagnostics.extend(
                SpecDiagnostic(file=path, kind="schema_error", message=message)
                for message in self._check_document(spec)
            )
        diagnostics.extend(self._check_duplicate_ids(corpus))
        return diagnostics

    def report(self, corpus: SpecCorpus) -> SpecValidationReport:
        """解析時の診断と検証結果をまとめたレポートを作成する。"""
        diagnostics = [*corpus.diagnostics, *self.validate(corpus)]
        invalid = {d.file for d in diagnostics}
        total = len(corpus.discovered)
        invalid_count = sum(1 for d in corpus.discovered if d.path in invalid)
        return SpecValidationReport(
            files=corpus.discovered,
            diagnostics=diagnostics,
            total=total,
            valid=total - invalid_count,
            invalid=invalid_count,
        )

    def _check_document(self, spec: ParsedSpec) -> list[str]:
        if isinstance(spec, MarkdownSpec):
            return self._check_markdown(spec)

        problems: list[str] = []
        for name in ("schema_version", "title"):
            if not getattr(spec, name):
                problems.append(f"Missing required field '{name}'")
        if spec.origin is not None and spec.origin.kind != spec.kind:
            problems.append(
                f"Kind '{spec.kind}' does not match file name (expected '{spec.origin.kind}')"
            )

        match spec:
            case BrdSpec():
                problems.extend(self._check_brd(spec))
            case FeatureRequestSpec():
                problems.extend(self._check_feature_request(spec))
            case ArchSpec():
                problems.extend(_require(spec, "spec", "components"))
            case TestSpec():
                problems.extend(_require(spec, "spec", "test_cases"))
                for i, case in enumerate(spec.test_cases or []):
                    if not case.id:
                        problems.append(f"test_cases[{i}]: missing required field 'id'")
                    if not case.verifies:
                        problems.append(f"test_cases[{i}]: missing required field 'verifies'")
            case DeploySpec():
                problems.extend(_require(spec, "spec", "environments"))
        return problems

    def _check_brd(self, spec: BrdSpec) -> list[str]:
        if spec.domains is None:
            return ["Missing required field 'domains'"]
        problems = []
        for i, domain in enumerate(spec.domains):
            for name in ("name", "spec_count", "specs"):
                if getattr(domain, name) is None:
                    problems.append(f"domains[{i}]: missing required field '{name}'")
        return problems

    def _check_feature_request(self, spec: FeatureRequestSpec) -> list[str]:
        problems = []
        if not spec.id:
            problems.append("Missing required field 'id'")
        elif not FEATURE_REQUEST_ID_RE.match(spec.id):
            problems.append(f"ID '{spec.id}' does not match the PREFIX-### format")
        problems.extend(_require(spec, "status", "priority", "requirements"))
        for i, requirement in enumerate(spec.requirements or []):
            if not requirement.id:
                problems.append(f"requirements[{i}]: missing required field 'id'")
        return problems

    def _check_markdown(self, spec: MarkdownSpec) -> list[str]:
        problems = []
        if spec.title is None:
            problems.append("Missing top-level heading")
        if spec.version is None:
            problems.append("Missing **Version:** label")
        if spec.status is None:
            problems.append("Missing **Status:** label")
        return problems

    def _check_duplicate_ids(self, corpus: SpecCorpus) -> list[SpecDiagnostic]:
        """同じIDを宣言しているファイルを、IDごとに1件の診断にまとめる。"""
        owners: dict[str, list[str]] = defaultdict(list)
        for path, spec in corpus.documents.items():
            declared = declared_id(spec)
            if declared and path not in owners[declared]:
                owners[declared].append(path)

        diagnostics = []
        for identifier, paths in sorted(owners.items()):
            if len(paths) < 2:
                continue
            diagnostics.append(
                SpecDiagnostic(
                    file=paths[0],
                    kind="schema_error",
                    message=f"Duplicate ID '{identifier}' declared in: {', '.join(paths)}",
                )
            )
        return diagnostics


def declared_id(spec: ParsedSpec) -> str | None:
    """文書が宣言するID（YAMLの `id`、Markdownの `**Related:**`）。

    Markdownの設計・テスト・デプロイ文書の `**Related:**` は追跡先の参照なので宣言とみなさない。
    """
    if isinstance(spec, MarkdownSpec):
        if spec.origin.kind not in ("feature_request", "brd"):
            return None
        link = parse_link(spec.related)
        if link is not None and link.text != link.target:
            return link.text or None
        return spec.related
    return spec.id


def _require(spec: ParsedSpec, *names: str) -> list[str]:
    return [f"Missing required field '{name}'" for name in names if getattr(spec, name) is None]
