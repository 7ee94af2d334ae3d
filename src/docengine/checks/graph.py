"""depends_onから構築するルール依存グラフ。"""

import heapq

from docengine.models.errors import CyclicDependencyError
from docengine.models.rules import RuleDefinition


def topological_order(rules: list[RuleDefinition]) -> list[RuleDefinition]:
    """依存関係を満たす実行順にルールを並べ替える。

    前提ルールは必ず依存ルールより前に並ぶ。依存関係のないルール同士は
    ID昇順で並ぶ。

    Args:
        rules: ID重複がなく、depends_onが全て既知IDを指すルール一覧。

    Returns:
        トポロジカル順のルール一覧。

    Raises:
        CyclicDependencyError: depends_onが循環している場合。
    """
    by_id = {rule.id: rule for rule in rules}
    indegree = {rule.id: len(set(rule.depends_on)) for rule in rules}
    children: dict[int, list[int]] = {rule.id: [] for rule in rules}
    for rule in rules:
        for parent_id in set(rule.depends_on):
            children[parent_id].append(rule.id)

    ready = [rule_id for rule_id, degree in indegree.items() if degree == 0]
    heapq.heapify(ready)
    ordered: list[RuleDefinition] = []
    while ready:
        rule_id = heapq.heappop(ready)
        ordered.append(by_id[rule_id])
        for child_id in children[rule_id]:
            indegree[child_id] -= 1
            if indegree[child_id] == 0:
                heapq.heappush(ready, child_id)

    if len(ordered) != len(rules):
        raise CyclicDependencyError(_cycle_members(by_id, indegree))
    return ordered


def _cycle_members(by_id: dict[int, RuleDefinition], indegree: dict[int, int]) -> list[int]:
    """ソートできずに残ったルールのうち、実際に循環を構成するIDを返す。"""
    remaining = {rule_id for rule_id, degree in indegree.items() if degree > 0}

    # 循環の下流にあるだけのルールを除外する
    changed = True
    while changed:
        changed = False
        for rule_id in sorted(remaining):
            reaches_back = any(
                parent_id in remaining for parent_id in by_id[rule_id].depends_on
            )
            has_child = any(
                rule_id in by_id[other].depends_on for other in remaining if other != rule_id
            ) or rule_id in by_id[rule_id].depends_on
            if not reaches_back or not has_child:
                remaining.discard(rule_id)
                changed = True
    return sorted(remaining)
