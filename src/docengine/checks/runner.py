"""チェックの実行とスキップ伝播。"""

import logging
from collections.abc import Collection

from docengine.checks.base import Check, CheckContext
from docengine.models.results import CheckEntry, CheckResult, Fail, Skip
from docengine.models.rules import SCOPE_ORDER, RuleDefinition

logger = logging.getLogger(__name__)


def _filter_reason(rule: RuleDefinition, context: CheckContext) -> str | None:
    """プロジェクト分類・スコープが合わない場合のスキップ理由。"""
    if rule.applies_to is not None and rule.applies_to != context.project_type:
        return f"Skipped: requires {rule.applies_to} project (detected {context.project_type})"
    if rule.scope is not None and SCOPE_ORDER[rule.scope] > SCOPE_ORDER[context.project_scope]:
        return f"Skipped: requires {rule.scope} scope (configured {context.project_scope})"
    return None


def run_checks(
    checks: list[Check],
    context: CheckContext,
    selected: Collection[int] | None = None,
) -> list[CheckEntry]:
    """トポロジカル順に並んだチェックを実行する。

    前提チェックの結果がFailの場合、依存チェックは実行せずSkipとする。
    selectedで除外されたチェックは結果に含めず、依存チェックの実行も妨げない。

    Args:
        checks: 実行順に並んだチェック。
        context: 全チェックで共有するスキャンコンテキスト。
        selected: 実行するチェックIDの集合。Noneの場合は全て実行する。

    Returns:
        実行順のチェック結果。
    """
    results: dict[int, CheckResult] = {}
    entries: list[CheckEntry] = []

    for check in checks:
        rule = check.rule
        if selected is not None and rule.id not in selected:
            continue

        result: CheckResult
        reason = _filter_reason(rule, context)
        if reason is not None:
            result = Skip(reason=reason)
        else:
            failed = next(
                (dep for dep in rule.depends_on if isinstance(results.get(dep), Fail)), None
            )
            if failed is not None:
                logger.debug("Check %d skipped: dependency check %d failed", rule.id, failed)
                result = Skip(reason=f"dependency check {failed} failed")
            else:
                result = check.run(context)

        logger.debug("Check %d: %s", rule.id, result.status)
        results[rule.id] = result
        entries.append(
            CheckEntry(
                id=rule.id,
                category=rule.category,
                description=rule.description,
                severity=rule.severity,
                result=result,
            )
        )
    return entries
