"""ハブドキュメントとナビゲーションに関するbuiltinチェック。"""

import re

from docengine.checks.base import Check, CheckContext
from docengine.models.errors import FileReadError
from docengine.models.results import CheckResult, Fail, Pass, Skip

_PHASE_NAME_RE = re.compile(r"^\d+-[a-z_]+$")
_DEEP_LINK_RE = re.compile(r"\]\(docs/\d+-[^)]+\)")

HUB_PATH = "docs/README.md"
W3H_KEYWORDS: tuple[str, ...] = ("who", "what", "why", "how")


def _read(context: CheckContext, path: str) -> str | Skip:
    if not context.files.is_file(path):
        return Skip(reason=f"{path} not found")
    try:
        return context.files.read_text(path)
    except FileReadError as e:
        return Skip(reason=str(e))


class W3hHub(Check):
    """ハブドキュメントにWho/What/Why/Howの各セクションがある。"""

    def run(self, context: CheckContext) -> CheckResult:
        content = _read(context, HUB_PATH)
        if isinstance(content, Skip):
            return content

        lowered = content.lower()
        missing = [
            keyword
            for keyword in W3H_KEYWORDS
            if not re.search(rf"#{{1,3}}\s+.*{keyword}", content, re.IGNORECASE)
            and f"**{keyword}**" not in lowered
        ]
        if not missing:
            return Pass()
        return Fail(
            violations=(
                self.violation(HUB_PATH, f"Hub document missing W3H sections: {', '.join(missing)}"),
            )
        )


class HubLinksPhases(Check):
    def run(self, context: CheckContext) -> CheckResult:
        content = _read(context, HUB_PATH)
        if isinstance(content, Skip):
            return content

        phases = [name for name in context.files.subdirs("docs") if _PHASE_NAME_RE.match(name)]
        return self.outcome(
            [
                self.violation(HUB_PATH, f"Hub does not link to phase directory '{name}'")
                for name in phases
                if name not in content
            ]
        )


class NoDeepLinks(Check):
    """ルートREADMEはdocs/のフェーズディレクトリへ直接リンクしない。"""

    def run(self, context: CheckContext) -> CheckResult:
        content = _read(context, "README.md")
        if isinstance(content, Skip):
            return content
        return self.outcome(
            [
                self.violation("README.md", f"Line {i}: Root README deep-links into docs/ subdirectory")
                for i, line in enumerate(content.splitlines(), start=1)
                if _DEEP_LINK_RE.search(line)
            ]
        )
