from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass(slots=True)
class ContactRecord:
    """A tenant, owner, acquirer or prospect as fetched from the back office."""

    id: str
    name: str
    email: str
    phone: str | None = None
    attributes: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class DuplicateScore:
    """Pairwise score with the per-field scores it was derived from."""

    score: float
    name_score: float
    email_score: float
    phone_score: float
    reasons: list[str] = field(default_factory=list)


@dataclass(slots=True)
class DuplicateGroup(Generic[T]):
    """Records that likely refer to the same person, in discovery order."""

    group: list[T]
    score: float
    reasons: list[str] = field(default_factory=list)


@dataclass(slots=True)
class MergeSuggestion:
    primary_id: str
    name: str
    email: str
    phone: str | None
    attributes: dict[str, Any] = field(default_factory=dict)
    discarded_ids: list[str] = field(default_factory=list)


@dataclass(slots=True)
class ImportCheck:
    """Outcome of checking one incoming row against existing records."""

    row: Any
    errors: list[str] = field(default_factory=list)
    reasons: list[str] = field(default_factory=list)
    similar: tuple[str, float] | None = None

    @property
    def is_duplicate(self) -> bool:
        return bool(self.reasons)

    @property
    def is_valid(self) -> bool:
        return not self.errors and not self.is_duplicate


def field_value(record: Any, name: str) -> Any:
    """Read a field from either a mapping row or a record object."""
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def text_field(record: Any, name: str) -> str:
    value = field_value(record, name)
    if value is None:
        return ""
    return str(value)


def record_id(record: Any) -> str:
    return text_field(record, "id")


def phone_field(record: Any) -> str | None:
    """Phone as text; numeric values from loosely-typed rows are stringified."""
    value = field_value(record, "phone")
    if value is None:
        return None
    return str(value)
