from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Mapping, Sequence

from contact_dedupe.models import ContactRecord


class FieldTag(StrEnum):
    EMAIL = "EMAIL"
    ID = "ID"
    NAME = "NAME"
    PHONE = "PHONE"


@dataclass(frozen=True)
class RecordSchema:
    """Maps export/import column headers to contact fields.

    Each tag lists its column aliases in priority order.
    """

    tag_to_columns: Mapping[FieldTag, tuple[str, ...]]

    @classmethod
    def from_mapping(cls, mapping: Mapping[FieldTag, Sequence[str]]) -> "RecordSchema":
        frozen = {tag: tuple(columns) for tag, columns in mapping.items()}
        return cls(tag_to_columns=frozen)

    def columns_for(self, tag: FieldTag) -> tuple[str, ...]:
        return self.tag_to_columns.get(tag, ())

    def values_for(self, attributes: Mapping[str, object], tag: FieldTag) -> list[str]:
        values: list[str] = []
        for column in self.columns_for(tag):
            value = attributes.get(column)
            if value is None:
                continue
            text = str(value).strip()
            if text:
                values.append(text)
        return values

    def first_value(self, attributes: Mapping[str, object], tag: FieldTag) -> str:
        values = self.values_for(attributes, tag)
        return values[0] if values else ""

    def mapped_columns(self) -> set[str]:
        return {column for columns in self.tag_to_columns.values() for column in columns}

    def to_record(self, row: Mapping[str, object], fallback_id: str) -> ContactRecord:
        mapped = self.mapped_columns()
        return ContactRecord(
            id=self.first_value(row, FieldTag.ID) or fallback_id,
            name=self.first_value(row, FieldTag.NAME),
            email=self.first_value(row, FieldTag.EMAIL),
            phone=self.first_value(row, FieldTag.PHONE) or None,
            attributes={k: v for k, v in row.items() if k not in mapped},
        )


CONTACT_SCHEMA = RecordSchema.from_mapping(
    {
        FieldTag.ID: ["id", "ID", "RECORD_ID"],
        FieldTag.NAME: ["Nom", "name", "Name"],
        FieldTag.EMAIL: ["Email", "email", "E-mail"],
        FieldTag.PHONE: ["Téléphone", "phone", "Phone", "Tel"],
    }
)

CONTACT_COLUMNS = ["id", "name", "email", "phone"]
