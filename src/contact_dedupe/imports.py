from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import Any

from contact_dedupe.grouping import DEFAULT_THRESHOLD
from contact_dedupe.models import ImportCheck, phone_field, record_id, text_field
from contact_dedupe.scoring import calculate_duplicate_score
from contact_dedupe.similarity import PHONE_MIN_DIGITS, normalize_phone

logger = logging.getLogger(__name__)

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

NAME_REQUIRED = "Nom requis"
EMAIL_REQUIRED = "Email requis"
EMAIL_INVALID = "Email invalide"
EMAIL_TAKEN = "Email déjà utilisé par {name}"
PHONE_TAKEN = "Téléphone déjà utilisé par {name}"


def check_import(
    incoming: Sequence[Any],
    existing: Sequence[Any],
    threshold: float = DEFAULT_THRESHOLD,
) -> list[ImportCheck]:
    """Validate rows about to be imported and flag those already on file.

    Exact email (case-insensitive) and normalized phone matches against
    ``existing`` mark a row as duplicate. The best fuzzy match at or above
    ``threshold`` is reported in ``similar`` without blocking the row.
    """
    by_email: dict[str, Any] = {}
    by_phone: dict[str, Any] = {}
    for record in existing:
        email = text_field(record, "email").strip().lower()
        if email:
            by_email.setdefault(email, record)
        phone = normalize_phone(phone_field(record))
        if len(phone) >= PHONE_MIN_DIGITS:
            by_phone.setdefault(phone, record)

    checks: list[ImportCheck] = []
    for row in incoming:
        check = ImportCheck(row=row)
        name = text_field(row, "name").strip()
        email = text_field(row, "email").strip().lower()

        if not name:
            check.errors.append(NAME_REQUIRED)
        if not email:
            check.errors.append(EMAIL_REQUIRED)
        elif not _EMAIL_PATTERN.match(email):
            check.errors.append(EMAIL_INVALID)

        match = by_email.get(email) if email else None
        if match is not None:
            check.reasons.append(EMAIL_TAKEN.format(name=text_field(match, "name")))

        phone = normalize_phone(phone_field(row))
        match = by_phone.get(phone) if len(phone) >= PHONE_MIN_DIGITS else None
        if match is not None:
            check.reasons.append(PHONE_TAKEN.format(name=text_field(match, "name")))

        check.similar = _best_similar(row, existing, threshold)
        checks.append(check)

    logger.info(
        "Checked %d incoming rows against %d existing records: %d duplicates, %d invalid",
        len(checks),
        len(existing),
        sum(1 for c in checks if c.is_duplicate),
        sum(1 for c in checks if c.errors),
    )
    return checks


def _best_similar(row: Any, existing: Sequence[Any], threshold: float) -> tuple[str, float] | None:
    best: tuple[str, float] | None = None
    for record in existing:
        score = calculate_duplicate_score(row, record).score
        if score >= threshold and (best is None or score > best[1]):
            best = (record_id(record), score)
    return best
