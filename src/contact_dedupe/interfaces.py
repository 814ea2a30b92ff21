from __future__ import annotations

from typing import Any, Protocol, Sequence

from contact_dedupe.models import ContactRecord


class RecordCleaner(Protocol):
    """Normalize record fields before they are scored."""

    def clean(self, records: Sequence[Any]) -> list[ContactRecord]:
        ...
