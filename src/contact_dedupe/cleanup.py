from __future__ import annotations

import unicodedata
from collections.abc import Callable, Sequence
from typing import Any

from contact_dedupe.models import ContactRecord, field_value, phone_field, text_field

CONTACT_FIELDS = ("name", "email", "phone")


class FunctionalCleaner:
    """Composable cleaner applying per-field transforms to contact records.

    Returns new ``ContactRecord`` copies; mappings and record objects passed in
    are never modified.
    """

    def __init__(self, transforms: dict[str, Callable[[str], str]] | None = None) -> None:
        unknown = set(transforms or {}) - set(CONTACT_FIELDS)
        if unknown:
            raise ValueError(f"Cannot clean unknown fields: {sorted(unknown)}")
        self._transforms = transforms or {}

    def clean(self, records: Sequence[Any]) -> list[ContactRecord]:
        cleaned: list[ContactRecord] = []
        for record in records:
            values: dict[str, Any] = {
                "name": text_field(record, "name"),
                "email": text_field(record, "email"),
                "phone": phone_field(record),
            }
            for field, transform in self._transforms.items():
                value = values[field]
                if value is None:
                    continue
                values[field] = transform(str(value))

            attributes = field_value(record, "attributes")
            cleaned.append(
                ContactRecord(
                    id=text_field(record, "id"),
                    name=values["name"],
                    email=values["email"],
                    phone=values["phone"],
                    attributes=dict(attributes) if attributes else {},
                )
            )
        return cleaned


def fold_accents(value: str) -> str:
    """Drop combining marks: "José Koné" -> "Jose Kone"."""
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def collapse_whitespace(value: str) -> str:
    return " ".join(value.split())


def accent_folding_cleaner() -> FunctionalCleaner:
    return FunctionalCleaner(
        transforms={
            "name": lambda value: collapse_whitespace(fold_accents(value)),
            "email": fold_accents,
        }
    )
