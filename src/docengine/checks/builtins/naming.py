"""docs/配下のファイル命名規則に関するbuiltinチェック。"""

import posixpath
import re

from docengine.checks.base import Check, CheckContext
from docengine.models.results import CheckResult, Skip

_PHASE_PREFIX_RE = re.compile(r"^\d+-")
_GUIDE_RE = re.compile(r"^[a-z_]+_[a-z]+_guide\.md$")

ADR_PREFIX = "docs/3-design/adr/"

# 慣例的に大文字で書かれるファイル
_CONVENTIONAL_NAMES: frozenset[str] = frozenset(
    {"README.md", "CHANGELOG.md", "CONTRIBUTING.md", "SECURITY.md"}
)


def docs_markdown(context: CheckContext) -> list[str]:
    return [f for f in context.files.files_under("docs") if f.endswith(".md")]


def _named_docs(context: CheckContext) -> list[tuple[str, str]] | None:
    """命名規則の対象となる (パス, ファイル名) を返す。docs/に.mdが無ければNone。"""
    files = docs_markdown(context)
    if not files:
        return None
    result = []
    for path in files:
        if path.startswith(ADR_PREFIX):
            continue
        filename = posixpath.basename(path)
        if filename in _CONVENTIONAL_NAMES:
            continue
        result.append((path, filename))
    return result


class SnakeLowerCase(Check):
    def run(self, context: CheckContext) -> CheckResult:
        named = _named_docs(context)
        if named is None:
            return Skip(reason="No .md files in docs/")
        return self.outcome(
            [
                self.violation(path, f"Filename '{filename}' contains uppercase characters")
                for path, filename in named
                if filename.removesuffix(".md") != filename.removesuffix(".md").lower()
            ]
        )


class FilenameUnderscores(Check):
    def run(self, context: CheckContext) -> CheckResult:
        named = _named_docs(context)
        if named is None:
            return Skip(reason="No .md files in docs/")
        violations = []
        for path, filename in named:
            stem = filename.removesuffix(".md")
            if "-" in stem and not _PHASE_PREFIX_RE.match(stem):
                violations.append(
                    self.violation(path, f"Filename '{filename}' contains hyphens; use underscores")
                )
        return self.outcome(violations)


class FilenameNoSpaces(Check):
    def run(self, context: CheckContext) -> CheckResult:
        named = _named_docs(context)
        if named is None:
            return Skip(reason="No .md files in docs/")
        return self.outcome(
            [
                self.violation(path, f"Filename '{filename}' contains spaces")
                for path, filename in named
                if " " in filename
            ]
        )


class GuideNaming(Check):
    """guide/フォルダ内のファイルは `name_{phase}_guide.md` 形式。"""

    def run(self, context: CheckContext) -> CheckResult:
        guides = [f for f in context.files.files if "guide/" in f and f.endswith(".md")]
        if not guides:
            return Skip(reason="No guide files found")
        violations = []
        for path in guides:
            filename = posixpath.basename(path)
            if filename == "README.md":
                continue
            if not _GUIDE_RE.match(filename):
                violations.append(
                    self.violation(
                        path,
                        f"Guide file '{filename}' doesn't follow name_{{phase}}_guide.md convention",
                    )
                )
        return self.outcome(violations)


class TestingFilePlacement(Check):
    __test__ = False

    def run(self, context: CheckContext) -> CheckResult:
        violations = []
        for path in context.files.files_under("docs"):
            filename = posixpath.basename(path)
            if "_testing_" in filename and "5-testing" not in path:
                violations.append(
                    self.violation(path, f"Testing file '{filename}' found outside 5-testing/")
                )
        return self.outcome(violations)
