"""スキャン結果・spec検証結果のテキスト整形。"""

from docengine.models.results import CheckEntry, Fail, Pass, ScanReport, Skip
from docengine.models.rules import RuleSet
from docengine.models.specs import CrossRefFail, CrossRefReport, SpecValidationReport

_STATUS_LABELS = {"pass": "[PASS]", "fail": "[FAIL]", "skip": "[SKIP]"}


def _group_by_category(entries: list[CheckEntry]) -> dict[str, list[CheckEntry]]:
    # カテゴリは最初に現れた順で並べる
    groups: dict[str, list[CheckEntry]] = {}
    for entry in entries:
        groups.setdefault(entry.category, []).append(entry)
    return groups


def _render_entry(entry: CheckEntry) -> list[str]:
    result = entry.result
    lines = [f"  {_STATUS_LABELS[result.status]} {entry.id}: {entry.description}"]
    match result:
        case Fail(violations=violations):
            for v in violations:
                location = f"{v.path}: " if v.path else ""
                lines.append(f"      -> {location}{v.message}")
        case Skip(reason=reason):
            lines.append(f"      ({reason})")
        case Pass():
            pass
    return lines


def render_scan(report: ScanReport) -> str:
    """ScanReportをカテゴリ別のテキストに整形する。"""
    lines = [
        f"Project type: {report.project_type}",
        f"Project scope: {report.project_scope}",
        "",
    ]
    for category, entries in _group_by_category(report.results).items():
        lines.append(f"{category}:")
        for entry in entries:
            lines.extend(_render_entry(entry))
        lines.append("")

    s = report.summary
    lines.append(f"{s.passed}/{s.total} passed, {s.failed} failed, {s.skipped} skipped")
    return "\n".join(lines)


def render_validation(report: SpecValidationReport) -> str:
    """spec検証結果をテキストに整形する。"""
    lines: list[str] = []
    for d in report.diagnostics:
        location = f"{d.file}:{d.line}" if d.line is not None else d.file
        lines.append(f"  [{d.kind}] {location}: {d.message}")
    if lines:
        lines.append("")
    lines.append(f"{report.valid}/{report.total} spec files valid, {report.invalid} invalid")
    return "\n".join(lines)


def render_cross_reference(report: CrossRefReport) -> str:
    """相互参照結果をカテゴリ別のテキストに整形する。"""
    lines: list[str] = []
    for category, results in report.categories.items():
        if not results:
            continue
        lines.append(f"{category}:")
        for r in results:
            lines.append(f"  {_STATUS_LABELS[r.status]} {r.description}")
            if isinstance(r, CrossRefFail):
                lines.append(f"      -> {r.details}")
        lines.append("")
    lines.append(f"{report.passed}/{report.total} passed, {report.failed} failed")
    return "\n".join(lines)


def render_rules(rule_set: RuleSet) -> str:
    """ルール一覧を実行順に1行ずつ整形する。"""
    lines = []
    for rule in rule_set.rules:
        extras = []
        if rule.applies_to:
            extras.append(rule.applies_to)
        if rule.scope:
            extras.append(f"scope={rule.scope}")
        if rule.depends_on:
            extras.append("depends_on=" + ",".join(str(d) for d in rule.depends_on))
        suffix = f" ({'; '.join(extras)})" if extras else ""
        lines.append(
            f"{rule.id:>4} [{rule.severity}] {rule.category}/{rule.shape.type}: "
            f"{rule.description}{suffix}"
        )
    return "\n".join(lines)
