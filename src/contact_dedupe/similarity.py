"""String distance primitives and field-specific similarity heuristics.

Every function here is total: ``None`` is read as an empty string and no
input raises. Scores are floats in ``[0, 1]``.
"""

from __future__ import annotations

import re

PHONE_SIGNIFICANT_DIGITS = 9
PHONE_MIN_DIGITS = 5
PHONE_CONTAINS_SCORE = 0.9

NAME_PARTIAL_WEIGHT = 0.8
NAME_MIN_TOKEN_LENGTH = 2

EMAIL_LOCAL_WEIGHT = 0.9
EMAIL_DOMAIN_BONUS = 0.1

_NON_DIGIT = re.compile(r"[^0-9]")


def levenshtein_distance(left: str | None, right: str | None) -> int:
    """Case-insensitive edit distance (insert, delete, substitute)."""
    left = (left or "").lower()
    right = (right or "").lower()
    if left == right:
        return 0
    if not left:
        return len(right)
    if not right:
        return len(left)

    prev = list(range(len(right) + 1))
    for i, c1 in enumerate(left, start=1):
        curr = [i]
        for j, c2 in enumerate(right, start=1):
            cost = 0 if c1 == c2 else 1
            curr.append(min(curr[j - 1] + 1, prev[j] + 1, prev[j - 1] + cost))
        prev = curr
    return prev[-1]


def string_similarity(left: str | None, right: str | None) -> float:
    left = left or ""
    right = right or ""
    if not left and not right:
        return 1.0
    if not left or not right:
        return 0.0

    max_length = max(len(left), len(right))
    if max_length == 0:
        return 1.0
    return 1.0 - levenshtein_distance(left, right) / max_length


def name_similarity(name1: str | None, name2: str | None) -> float:
    """Name similarity tolerant to swapped order and partial names.

    "Jean Dupont" and "Dupont Jean" score 1 through the reversed comparison;
    a shared first or last name alone is worth at most 0.8.
    """
    n1 = (name1 or "").lower().strip()
    n2 = (name2 or "").lower().strip()
    if n1 == n2:
        return 1.0

    direct = string_similarity(n1, n2)

    parts1 = n1.split()
    parts2 = n2.split()

    reversed_similarity = 0.0
    if len(parts1) >= 2 and len(parts2) >= 2:
        reversed_similarity = string_similarity(" ".join(reversed(parts1)), n2)

    partial = 0.0
    for part1 in parts1:
        if len(part1) < NAME_MIN_TOKEN_LENGTH:
            continue
        for part2 in parts2:
            if len(part2) < NAME_MIN_TOKEN_LENGTH:
                continue
            partial = max(partial, string_similarity(part1, part2))

    return max(direct, reversed_similarity, partial * NAME_PARTIAL_WEIGHT)


def email_similarity(email1: str | None, email2: str | None) -> float:
    e1 = (email1 or "").lower().strip()
    e2 = (email2 or "").lower().strip()
    if e1 == e2:
        return 1.0

    local1, domain1 = _split_email(e1)
    local2, domain2 = _split_email(e2)

    domain_bonus = EMAIL_DOMAIN_BONUS if domain1 == domain2 else 0.0
    local_similarity = string_similarity(local1, local2)
    overall_similarity = string_similarity(e1, e2)

    return max(overall_similarity, local_similarity * EMAIL_LOCAL_WEIGHT + domain_bonus)


def normalize_phone(phone: str | None) -> str:
    """Digits only, keeping the subscriber part (last 9 digits)."""
    digits = _NON_DIGIT.sub("", phone or "")
    return digits[-PHONE_SIGNIFICANT_DIGITS:]


def phone_similarity(phone1: str | None, phone2: str | None) -> float:
    if not phone1 or not phone2:
        return 0.0

    p1 = normalize_phone(phone1)
    p2 = normalize_phone(phone2)
    if p1 == p2:
        return 1.0
    if len(p1) < PHONE_MIN_DIGITS or len(p2) < PHONE_MIN_DIGITS:
        return 0.0
    if p1 in p2 or p2 in p1:
        return PHONE_CONTAINS_SCORE
    return string_similarity(p1, p2)


def _split_email(email: str) -> tuple[str, str | None]:
    # A missing domain compares equal to another missing domain.
    parts = email.split("@")
    domain = parts[1] if len(parts) > 1 else None
    return parts[0], domain
