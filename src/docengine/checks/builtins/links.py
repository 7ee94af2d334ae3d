"""docs/内のMarkdownリンク解決に関するbuiltinチェック。"""

import posixpath
import re
from collections.abc import Iterator

from docengine.checks.base import Check, CheckContext
from docengine.checks.builtins.naming import docs_markdown
from docengine.models.errors import FileReadError
from docengine.models.results import CheckResult, Skip, Violation

_LINK_RE = re.compile(r"\[([^\]]*)\]\(([^)]+)\)")
_EXTERNAL_PREFIXES: tuple[str, ...] = ("http://", "https://", "mailto:", "#")


def iter_local_links(context: CheckContext, path: str) -> Iterator[tuple[str, str, bool]]:
    """ファイル内のローカルリンクを (リンク先, 解決後パス, 絶対指定か) で列挙する。"""
    try:
        content = context.files.read_text(path)
    except FileReadError:
        return
    file_dir = posixpath.dirname(path)
    for m in _LINK_RE.finditer(content):
        target = m.group(2).strip()
        if target.startswith(_EXTERNAL_PREFIXES):
            continue
        target_path = target.split("#", 1)[0]
        if not target_path:
            continue
        if target_path.startswith("/"):
            yield target, target_path.lstrip("/"), True
        else:
            yield target, posixpath.normpath(posixpath.join(file_dir, target_path)), False


class _LinkCheck(Check):
    def run(self, context: CheckContext) -> CheckResult:
        files = docs_markdown(context)
        if not files:
            return Skip(reason="No .md files in docs/")
        violations: list[Violation] = []
        for path in files:
            for target, resolved, absolute in iter_local_links(context, path):
                if self.applies(target, absolute) and not context.files.exists(resolved):
                    violations.append(self.violation(path, self.message(target)))
        return self.outcome(violations)

    def applies(self, target: str, absolute: bool) -> bool:
        return True

    def message(self, target: str) -> str:
        return f"Broken link: '{target}' does not exist"


class LinkResolution(_LinkCheck):
    """docs/内の.mdへのリンクが存在するファイルを指す。"""

    def applies(self, target: str, absolute: bool) -> bool:
        return target.split("#", 1)[0].endswith(".md")


class RelativeLinkResolution(_LinkCheck):
    def applies(self, target: str, absolute: bool) -> bool:
        return not absolute

    def message(self, target: str) -> str:
        return f"Broken relative link: '{target}' does not exist"
