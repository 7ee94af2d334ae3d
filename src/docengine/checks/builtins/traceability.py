"""SDLCフェーズ間のトレーサビリティに関するbuiltinチェック。"""

import posixpath
import re

from docengine.checks.base import Check, CheckContext
from docengine.models.errors import FileReadError
from docengine.models.results import CheckResult, Skip

_DESIGN_REQ_RE = re.compile(r"requirements\.md|FR-\d|STK-\d|SRS|1-requirements", re.IGNORECASE)
_PLAN_ARCH_RE = re.compile(r"architecture\.md|3-design|architectural", re.IGNORECASE)

# フェーズディレクトリ → 期待される成果物ファイル名の断片
PHASE_ARTIFACTS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("docs/1-requirements", ("requirements", "srs")),
    ("docs/2-planning", ("plan", "implementation")),
    ("docs/3-design", ("architecture.md",)),
)


class PhaseArtifactPresence(Check):
    def run(self, context: CheckContext) -> CheckResult:
        existing = [(d, p) for d, p in PHASE_ARTIFACTS if context.files.is_dir(d)]
        if not existing:
            return Skip(reason="No SDLC phase directories exist")

        violations = []
        for directory, fragments in existing:
            names = [
                posixpath.basename(f).lower()
                for f in context.files.files_under(directory)
                if posixpath.dirname(f) == directory
            ]
            if not any(fragment in name for name in names for fragment in fragments):
                expected = "' or '".join(fragments)
                violations.append(
                    self.violation(
                        directory,
                        f"Phase directory '{directory}' exists but is missing expected artifact "
                        f"containing '{expected}'",
                    )
                )
        return self.outcome(violations)


class _ReferenceCheck(Check):
    directory: str
    excluded: tuple[str, ...] = ()
    pattern: re.Pattern[str]
    message: str

    def run(self, context: CheckContext) -> CheckResult:
        if not context.files.is_dir(self.directory):
            return Skip(reason=f"{self.directory}/ does not exist")
        files = [
            f
            for f in context.files.files_under(self.directory)
            if f.endswith(".md")
            and f != f"{self.directory}/README.md"
            and not f.startswith(self.excluded)
        ]
        if not files:
            return Skip(reason=f"No qualifying .md files in {self.directory}/")

        violations = []
        for path in files:
            try:
                content = context.files.read_text(path)
            except FileReadError:
                continue
            if not self.pattern.search(content):
                violations.append(self.violation(path, self.message.format(path=path)))
        return self.outcome(violations)


class DesignTracesRequirements(_ReferenceCheck):
    directory = "docs/3-design"
    excluded = ("docs/3-design/adr/", "docs/3-design/compliance/")
    pattern = _DESIGN_REQ_RE
    message = (
        "Design document '{path}' does not reference requirements "
        "(expected pattern: requirements.md, FR-N, STK-N, SRS, or 1-requirements)"
    )


class PlanTracesDesign(_ReferenceCheck):
    directory = "docs/2-planning"
    pattern = _PLAN_ARCH_RE
    message = (
        "Planning document '{path}' does not reference architecture "
        "(expected pattern: architecture.md, 3-design, or architectural)"
    )
