from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from contact_dedupe.models import DuplicateGroup, MergeSuggestion, field_value, phone_field, record_id, text_field


def suggest_merge(group: DuplicateGroup[Any] | Sequence[Any]) -> MergeSuggestion:
    """Pre-fill a merge of a duplicate group with its most complete data.

    The first record is kept as the primary; the longest name, the primary's
    email and the first phone found are proposed. Extra attributes take the
    first non-empty value in group order.
    """
    members = list(group.group) if isinstance(group, DuplicateGroup) else list(group)
    if not members:
        raise ValueError("Cannot suggest a merge for an empty group")

    primary = members[0]

    name = ""
    for member in members:
        candidate = text_field(member, "name")
        if len(candidate) > len(name):
            name = candidate

    phone = next((phone_field(m) for m in members if phone_field(m)), None)

    attributes: dict[str, Any] = {}
    for member in members:
        for key, value in (field_value(member, "attributes") or {}).items():
            if key not in attributes and value not in (None, ""):
                attributes[key] = value

    return MergeSuggestion(
        primary_id=record_id(primary),
        name=name,
        email=text_field(primary, "email"),
        phone=phone,
        attributes=attributes,
        discarded_ids=[record_id(member) for member in members[1:]],
    )
