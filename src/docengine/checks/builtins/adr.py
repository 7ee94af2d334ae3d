"""ADR（Architecture Decision Record）に関するbuiltinチェック。"""

import posixpath
import re

from docengine.checks.base import Check, CheckContext
from docengine.models.errors import FileReadError
from docengine.models.results import CheckResult, Pass, Skip

_ADR_NAME_RE = re.compile(r"^\d{3}-[a-z0-9_-]+\.md$")
_ADR_NUMBERED_RE = re.compile(r"^\d{3}-")

ADR_DIR = "docs/3-design/adr"
_INDEX_NAMES: tuple[str, ...] = ("README.md", "index.md")


def _adr_files(context: CheckContext) -> list[str]:
    return [f for f in context.files.files_under(ADR_DIR) if f.endswith(".md")]


class AdrNaming(Check):
    def run(self, context: CheckContext) -> CheckResult:
        if not context.files.is_dir(ADR_DIR):
            return Skip(reason="ADR directory does not exist")
        files = _adr_files(context)
        if not files:
            return Skip(reason="No ADR files found")

        violations = []
        for path in files:
            filename = posixpath.basename(path)
            if filename in _INDEX_NAMES:
                continue
            if not _ADR_NAME_RE.match(filename):
                violations.append(
                    self.violation(
                        path, f"ADR file '{filename}' doesn't follow NNN-title.md naming convention"
                    )
                )
        return self.outcome(violations)


class AdrIndexCompleteness(Check):
    """全てのADRがインデックス（README.mdまたはindex.md）から参照されている。"""

    def run(self, context: CheckContext) -> CheckResult:
        if not context.files.is_dir(ADR_DIR):
            return Skip(reason="ADR directory does not exist")
        index_path = next(
            (f"{ADR_DIR}/{name}" for name in _INDEX_NAMES if context.files.is_file(f"{ADR_DIR}/{name}")),
            None,
        )
        if index_path is None:
            return Skip(reason="No ADR index file found")
        try:
            index = context.files.read_text(index_path)
        except FileReadError as e:
            return Skip(reason=str(e))

        adrs = [
            posixpath.basename(f)
            for f in _adr_files(context)
            if _ADR_NUMBERED_RE.match(posixpath.basename(f))
        ]
        if not adrs:
            return Pass()
        return self.outcome(
            [
                self.violation(ADR_DIR, f"ADR '{name}' not referenced in index")
                for name in adrs
                if name not in index
            ]
        )
