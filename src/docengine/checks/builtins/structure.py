"""ディレクトリ構成に関するbuiltinチェック。"""

import re

from docengine.checks.base import Check, CheckContext
from docengine.models.errors import FileReadError
from docengine.models.results import CheckResult, Fail, Pass, Skip, Violation

_PHASE_DIR_RE = re.compile(r"^(\d+)-")
_CHECKBOX_RE = re.compile(r"- \[[ xX]\]")

CHECKLIST_PATH = "docs/3-design/compliance/compliance_checklist.md"
MAX_PHASE_NUMBER = 7
MIN_CHECKBOXES = 10


def _module_doc_parents(context: CheckContext) -> tuple[set[str], set[str]]:
    """`doc/` と `docs/` を持つモジュール（親ディレクトリ）を集める。"""
    doc_parents: set[str] = set()
    docs_parents: set[str] = set()
    for path in context.files.files:
        parts = path.split("/")[:-1]
        for i, part in enumerate(parts):
            if i == 0:
                continue
            if part == "doc":
                doc_parents.add("/".join(parts[:i]))
            elif part == "docs":
                docs_parents.add("/".join(parts[:i]))
    return doc_parents, docs_parents


def phase_dirs(context: CheckContext) -> list[tuple[int, str]]:
    """docs/直下の `N-name` 形式のフェーズディレクトリを番号順に返す。"""
    result = []
    for name in context.files.subdirs("docs"):
        m = _PHASE_DIR_RE.match(name)
        if m:
            result.append((int(m.group(1)), name))
    return sorted(result)


class ModuleDocsPlural(Check):
    """モジュールのドキュメントフォルダは `docs/`（複数形）を使う。"""

    def run(self, context: CheckContext) -> CheckResult:
        doc_parents, _ = _module_doc_parents(context)
        return self.outcome(
            [
                self.violation(
                    f"{parent}/doc", f"Module '{parent}' uses doc/ (singular); should use docs/"
                )
                for parent in sorted(doc_parents)
            ]
        )


class ModuleDocsNotBoth(Check):
    """同じモジュールに `doc/` と `docs/` が共存しない。"""

    def run(self, context: CheckContext) -> CheckResult:
        doc_parents, docs_parents = _module_doc_parents(context)
        return self.outcome(
            [
                self.violation(parent, f"Module '{parent}' has both doc/ and docs/")
                for parent in sorted(doc_parents & docs_parents)
            ]
        )


class SdlcPhaseNumbering(Check):
    def run(self, context: CheckContext) -> CheckResult:
        if not context.files.is_dir("docs"):
            return Skip(reason="docs/ directory does not exist")
        return self.outcome(
            [
                self.violation(
                    f"docs/{name}", f"Phase directory '{name}' has number > {MAX_PHASE_NUMBER}"
                )
                for number, name in phase_dirs(context)
                if number > MAX_PHASE_NUMBER
            ]
        )


class SdlcPhaseOrder(Check):
    def run(self, context: CheckContext) -> CheckResult:
        if not context.files.is_dir("docs"):
            return Skip(reason="docs/ directory does not exist")
        phases = phase_dirs(context)
        violations = []
        for (prev_number, prev_name), (number, name) in zip(phases, phases[1:]):
            if number <= prev_number:
                violations.append(
                    self.violation(
                        f"docs/{name}", f"Phase '{name}' is out of order (follows '{prev_name}')"
                    )
                )
        return self.outcome(violations)


class ChecklistCompleteness(Check):
    def run(self, context: CheckContext) -> CheckResult:
        if not context.files.is_file(CHECKLIST_PATH):
            return Skip(reason="Compliance checklist not found")
        try:
            content = context.files.read_text(CHECKLIST_PATH)
        except FileReadError as e:
            return Skip(reason=str(e))

        count = len(_CHECKBOX_RE.findall(content))
        if count >= MIN_CHECKBOXES:
            return Pass()
        return Fail(
            violations=(
                self.violation(
                    CHECKLIST_PATH,
                    f"Checklist has only {count} checkboxes; expected comprehensive coverage",
                ),
            )
        )


class OpenSourceCommunityFiles(Check):
    def run(self, context: CheckContext) -> CheckResult:
        violations: list[Violation] = []
        for name in ("CODE_OF_CONDUCT.md", "SUPPORT.md"):
            if not context.files.is_file(name):
                violations.append(self.violation(name, f"{name} does not exist"))
        return self.outcome(violations)


class OpenSourceGithubTemplates(Check):
    def run(self, context: CheckContext) -> CheckResult:
        violations: list[Violation] = []
        if not context.files.is_dir(".github/ISSUE_TEMPLATE"):
            violations.append(
                self.violation(
                    ".github/ISSUE_TEMPLATE", ".github/ISSUE_TEMPLATE/ directory does not exist"
                )
            )
        if not context.files.is_file(".github/PULL_REQUEST_TEMPLATE.md"):
            violations.append(
                self.violation(
                    ".github/PULL_REQUEST_TEMPLATE.md",
                    ".github/PULL_REQUEST_TEMPLATE.md does not exist",
                )
            )
        return self.outcome(violations)


class TemplatesPopulated(Check):
    def run(self, context: CheckContext) -> CheckResult:
        if not context.files.is_dir("docs/templates"):
            return Skip(reason="docs/templates/ does not exist")
        if any(f.endswith(".md") for f in context.files.files_under("docs/templates")):
            return Pass()
        return Fail(
            violations=(
                self.violation(
                    "docs/templates", "docs/templates/ exists but contains no template files"
                ),
            )
        )
