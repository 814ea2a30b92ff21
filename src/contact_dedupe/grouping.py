from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence
from typing import Any, TypeVar

from contact_dedupe.models import DuplicateGroup, DuplicateScore
from contact_dedupe.scoring import calculate_duplicate_score

T = TypeVar("T")

DEFAULT_THRESHOLD = 0.6
SEED_STRATEGY = "seed"
TRANSITIVE_STRATEGY = "transitive"
STRATEGIES = (SEED_STRATEGY, TRANSITIVE_STRATEGY)


def find_duplicate_groups(
    records: Sequence[T],
    threshold: float = DEFAULT_THRESHOLD,
    strategy: str = SEED_STRATEGY,
    scoring_records: Sequence[Any] | None = None,
) -> list[DuplicateGroup[T]]:
    """Group records whose pairwise duplicate score reaches ``threshold``.

    ``seed`` compares every later record against the first unassigned one
    only, so A~B and B~C does not pull C into A's group unless A~C.
    ``transitive`` links every pair above the threshold with a union-find.

    ``scoring_records`` lets callers score cleaned copies (same order and
    length as ``records``) while the groups hold the original objects.
    Groups are sorted by descending score.
    """
    if strategy not in STRATEGIES:
        raise ValueError(f"Unknown grouping strategy {strategy!r}; expected one of {STRATEGIES}")
    if scoring_records is None:
        scoring_records = records
    elif len(scoring_records) != len(records):
        raise ValueError("scoring_records must have the same length as records")

    if len(records) < 2:
        return []

    if strategy == TRANSITIVE_STRATEGY:
        groups = _transitive_groups(records, scoring_records, threshold)
    else:
        groups = _seed_groups(records, scoring_records, threshold)
    return sorted(groups, key=lambda g: g.score, reverse=True)


def _seed_groups(
    records: Sequence[T],
    scoring_records: Sequence[Any],
    threshold: float,
) -> list[DuplicateGroup[T]]:
    groups: list[DuplicateGroup[T]] = []
    processed: set[int] = set()

    for i in range(len(records)):
        if i in processed:
            continue

        member_indexes = [i]
        group_score = 0.0
        reasons: list[str] = []

        for j in range(i + 1, len(records)):
            if j in processed:
                continue
            result = calculate_duplicate_score(scoring_records[i], scoring_records[j])
            if result.score >= threshold:
                member_indexes.append(j)
                group_score = max(group_score, result.score)
                _extend_unique(reasons, result.reasons)

        if len(member_indexes) > 1:
            processed.update(member_indexes)
            members = [records[index] for index in member_indexes]
            groups.append(DuplicateGroup(group=members, score=group_score, reasons=reasons))

    return groups


def _transitive_groups(
    records: Sequence[T],
    scoring_records: Sequence[Any],
    threshold: float,
) -> list[DuplicateGroup[T]]:
    uf = _UnionFind()
    links: list[tuple[int, DuplicateScore]] = []

    for i in range(len(records)):
        for j in range(i + 1, len(records)):
            result = calculate_duplicate_score(scoring_records[i], scoring_records[j])
            if result.score >= threshold:
                uf.union(i, j)
                links.append((i, result))

    if not links:
        return []

    score_map: dict[int, float] = defaultdict(float)
    reason_map: dict[int, list[str]] = defaultdict(list)
    for i, result in links:
        root = uf.find(i)
        score_map[root] = max(score_map[root], result.score)
        _extend_unique(reason_map[root], result.reasons)

    groups: list[DuplicateGroup[T]] = []
    # Roots are the lowest member index, so this follows input order.
    for root, members in sorted(uf.groups().items()):
        if len(members) < 2:
            continue
        groups.append(
            DuplicateGroup(
                group=[records[index] for index in sorted(members)],
                score=score_map[root],
                reasons=reason_map[root],
            )
        )
    return groups


class _UnionFind:
    def __init__(self) -> None:
        self._parent: dict[int, int] = {}

    def find(self, item: int) -> int:
        if item not in self._parent:
            self._parent[item] = item
            return item
        if self._parent[item] != item:
            self._parent[item] = self.find(self._parent[item])
        return self._parent[item]

    def union(self, left: int, right: int) -> None:
        root_left = self.find(left)
        root_right = self.find(right)
        if root_left == root_right:
            return
        if root_right < root_left:
            root_left, root_right = root_right, root_left
        self._parent[root_right] = root_left

    def groups(self) -> dict[int, list[int]]:
        grouped: dict[int, list[int]] = defaultdict(list)
        for item in list(self._parent):
            grouped[self.find(item)].append(item)
        return grouped


def _extend_unique(target: list[str], values: Sequence[str]) -> None:
    for value in values:
        if value not in target:
            target.append(value)
