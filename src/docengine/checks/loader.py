"""YAMLルール定義ドキュメントの読み込み。"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from docengine.checks.graph import topological_order
from docengine.models.errors import RuleLoadError, UnknownHandlerError
from docengine.models.rules import SHAPE_TYPES, BuiltinHandler, RuleDefinition, RuleSet

logger = logging.getLogger(__name__)

# ルールレコードのうち形状以外の共通フィールド
_COMMON_FIELDS: frozenset[str] = frozenset(
    {"id", "category", "description", "severity", "applies_to", "project_type", "scope", "depends_on"}
)


def load_rule_set(path: Path) -> RuleSet:
    """ルール定義ファイルを読み込み、検証済みのRuleSetを返す。

    Raises:
        RuleLoadError: ファイルが読めない、または内容が不正な場合。
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise RuleLoadError(f"Cannot read rules file '{path}': {e}") from e
    return parse_rules(text, source=str(path))


def parse_rules(text: str, source: str = "<string>") -> RuleSet:
    """YAML文字列からRuleSetを構築する。

    全ルールの検証、ID重複・未知の依存先の検出、依存グラフの
    トポロジカルソートまでを行う。いずれかに失敗した場合はチェックを
    一つも生成しない。

    Args:
        text: ルール定義ドキュメント（YAML）。
        source: エラーメッセージ用の読み込み元表示。

    Returns:
        トポロジカル順に並んだRuleSet。

    Raises:
        RuleLoadError: ドキュメントが不正な場合。
        UnknownHandlerError: builtinルールが未知のハンドラを指定した場合。
        CyclicDependencyError: depends_onが循環している場合。
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise RuleLoadError(f"Invalid YAML in {source}: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("rules"), list):
        raise RuleLoadError(f"{source}: expected a mapping with a 'rules' list")

    rules: list[RuleDefinition] = []
    seen: set[int] = set()
    for index, record in enumerate(data["rules"]):
        rule = _parse_record(record, index)
        if rule.id in seen:
            raise RuleLoadError("duplicate rule id", rule_id=rule.id)
        seen.add(rule.id)
        rules.append(rule)

    for rule in rules:
        for parent_id in rule.depends_on:
            if parent_id not in seen:
                raise RuleLoadError(f"depends_on references unknown rule {parent_id}", rule_id=rule.id)

    ordered = topological_order(rules)
    logger.info("Loaded %d rules from %s", len(ordered), source)
    return RuleSet(rules=tuple(ordered), source=source)


def _parse_record(record: Any, index: int) -> RuleDefinition:
    """フラットなルールレコードを共通フィールドと形状フィールドに分けて検証する。"""
    if not isinstance(record, dict):
        raise RuleLoadError(f"rule #{index + 1} is not a mapping")

    rule_id = record.get("id")
    label_id = rule_id if isinstance(rule_id, int) and not isinstance(rule_id, bool) else None

    shape_type = record.get("type")
    if not isinstance(shape_type, str) or shape_type not in SHAPE_TYPES:
        raise RuleLoadError(f"unknown rule type '{shape_type}'", rule_id=label_id)

    if shape_type == "builtin":
        handler = record.get("handler")
        if handler is None:
            raise RuleLoadError("builtin rule requires 'handler'", rule_id=label_id)
        if not isinstance(handler, str) or handler not in BuiltinHandler._value2member_map_:
            raise UnknownHandlerError(str(handler), rule_id=label_id)

    common = {k: v for k, v in record.items() if k in _COMMON_FIELDS}
    shape = {k: v for k, v in record.items() if k not in _COMMON_FIELDS}
    if common.get("depends_on") is None:
        common.pop("depends_on", None)

    try:
        return RuleDefinition.model_validate({**common, "shape": shape})
    except ValidationError as e:
        raise RuleLoadError(_describe_validation_error(e), rule_id=label_id) from e


def _describe_validation_error(error: ValidationError) -> str:
    parts = []
    for detail in error.errors():
        location = ".".join(str(p) for p in detail["loc"] if p != "shape")
        parts.append(f"{location or 'record'}: {detail['msg']}")
    return "; ".join(parts)


def dump_rules(rule_set: RuleSet) -> dict[str, Any]:
    """RuleSetをルール定義ドキュメントと同じフラットな形式に戻す。"""
    records = []
    for rule in rule_set.rules:
        record: dict[str, Any] = {
            "id": rule.id,
            "category": rule.category,
            "description": rule.description,
            "severity": rule.severity,
        }
        record.update(rule.shape.model_dump(mode="json", exclude_defaults=False))
        if rule.applies_to is not None:
            record["applies_to"] = rule.applies_to
        if rule.scope is not None:
            record["scope"] = rule.scope
        if rule.depends_on:
            record["depends_on"] = list(rule.depends_on)
        records.append(record)
    return {"rules": records}
