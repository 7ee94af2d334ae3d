"""ドキュメント本文（TLDR・用語集）に関するbuiltinチェック。"""

import re
from abc import abstractmethod

from docengine.checks.base import Check, CheckContext
from docengine.checks.builtins.naming import docs_markdown
from docengine.models.errors import FileReadError
from docengine.models.results import CheckResult, Skip, Violation

_TLDR_RE = re.compile(r"\*\*TLDR\*\*|## TLDR|## TL;DR", re.IGNORECASE)
_TERM_RE = re.compile(r"^\*\*([^*]+)\*\*")
_VALID_TERM_RE = re.compile(r"^\*\*[^*]+\*\*\s*[-—–:]\s+\S")
_DEFINITION_RE = re.compile(r"^\*\*([^*]+)\*\*\s*[-—–:]\s*(.*)")
_ACRONYM_RE = re.compile(r"^[A-Z]{2,}$")

GLOSSARY_PATH = "docs/glossary.md"
TLDR_LINE_THRESHOLD = 200


def _tldr_scan(context: CheckContext) -> list[tuple[str, int, bool]] | None:
    """docs/配下の各.mdについて (パス, 行数, TLDR有無) を返す。"""
    files = docs_markdown(context)
    if not files:
        return None
    result = []
    for path in files:
        try:
            content = context.files.read_text(path)
        except FileReadError:
            continue
        result.append((path, len(content.splitlines()), _TLDR_RE.search(content) is not None))
    return result


class TldrRequired(Check):
    def run(self, context: CheckContext) -> CheckResult:
        scanned = _tldr_scan(context)
        if scanned is None:
            return Skip(reason="No .md files in docs/")
        return self.outcome(
            [
                self.violation(path, f"File has {lines} lines but no TLDR section")
                for path, lines, has_tldr in scanned
                if lines >= TLDR_LINE_THRESHOLD and not has_tldr
            ]
        )


class TldrUnnecessary(Check):
    def run(self, context: CheckContext) -> CheckResult:
        scanned = _tldr_scan(context)
        if scanned is None:
            return Skip(reason="No .md files in docs/")
        return self.outcome(
            [
                self.violation(
                    path, f"File has only {lines} lines but has a TLDR section (unnecessary)"
                )
                for path, lines, has_tldr in scanned
                if lines < TLDR_LINE_THRESHOLD and has_tldr
            ]
        )


class _GlossaryCheck(Check):
    def run(self, context: CheckContext) -> CheckResult:
        if not context.files.is_file(GLOSSARY_PATH):
            return Skip(reason=f"{GLOSSARY_PATH} not found")
        try:
            content = context.files.read_text(GLOSSARY_PATH)
        except FileReadError as e:
            return Skip(reason=str(e))
        return self.outcome(self.inspect([line.strip() for line in content.splitlines()]))

    @abstractmethod
    def inspect(self, lines: list[str]) -> list[Violation]:
        """用語集の各行（前後の空白除去済み）から違反を抽出する。"""


class GlossaryFormat(_GlossaryCheck):
    """用語定義は `**Term** - Definition` 形式で書く。"""

    def inspect(self, lines: list[str]) -> list[Violation]:
        return [
            self.violation(
                GLOSSARY_PATH,
                f"Line {i}: Term definition doesn't follow '**Term** - Definition' format",
            )
            for i, line in enumerate(lines, start=1)
            if _TERM_RE.match(line) and not _VALID_TERM_RE.match(line)
        ]


class GlossaryAlphabetized(_GlossaryCheck):
    def inspect(self, lines: list[str]) -> list[Violation]:
        terms = [m.group(1).lower() for line in lines if (m := _TERM_RE.match(line))]
        return [
            self.violation(GLOSSARY_PATH, f"Term '{term}' should come before '{prev}'")
            for prev, term in zip(terms, terms[1:])
            if term < prev
        ]


class GlossaryAcronyms(_GlossaryCheck):
    def inspect(self, lines: list[str]) -> list[Violation]:
        violations = []
        for i, line in enumerate(lines, start=1):
            m = _DEFINITION_RE.match(line)
            if not m or not _ACRONYM_RE.match(m.group(1)):
                continue
            # 小文字を含む語があれば展開形があるとみなす
            if not any(ch.islower() for ch in m.group(2)):
                violations.append(
                    self.violation(
                        GLOSSARY_PATH, f"Line {i}: Acronym '{m.group(1)}' lacks expansion in definition"
                    )
                )
        return violations
