"""Duplicate detection for tenant, owner and prospect contact records."""

from contact_dedupe.grouping import find_duplicate_groups
from contact_dedupe.models import ContactRecord, DuplicateGroup, DuplicateScore
from contact_dedupe.scoring import calculate_duplicate_score
from contact_dedupe.similarity import (
    email_similarity,
    levenshtein_distance,
    name_similarity,
    normalize_phone,
    phone_similarity,
    string_similarity,
)

__all__ = [
    "ContactRecord",
    "DuplicateGroup",
    "DuplicateScore",
    "calculate_duplicate_score",
    "email_similarity",
    "find_duplicate_groups",
    "levenshtein_distance",
    "name_similarity",
    "normalize_phone",
    "phone_similarity",
    "string_similarity",
]
