from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from contact_dedupe.cleanup import accent_folding_cleaner
from contact_dedupe.config import DetectorSettings
from contact_dedupe.grouping import DEFAULT_THRESHOLD, SEED_STRATEGY, find_duplicate_groups
from contact_dedupe.interfaces import RecordCleaner
from contact_dedupe.models import DuplicateGroup, DuplicateScore, record_id
from contact_dedupe.scoring import calculate_duplicate_score

logger = logging.getLogger(__name__)


class DuplicateDetector:
    """Local runner: optional cleaning, pairwise scoring and grouping."""

    def __init__(
        self,
        threshold: float = DEFAULT_THRESHOLD,
        strategy: str = SEED_STRATEGY,
        cleaner: RecordCleaner | None = None,
    ) -> None:
        self._threshold = threshold
        self._strategy = strategy
        self._cleaner = cleaner

    @classmethod
    def from_settings(cls, settings: DetectorSettings) -> "DuplicateDetector":
        return cls(
            threshold=settings.threshold,
            strategy=settings.strategy,
            cleaner=accent_folding_cleaner() if settings.fold_accents else None,
        )

    @property
    def threshold(self) -> float:
        return self._threshold

    @property
    def strategy(self) -> str:
        return self._strategy

    def run(self, records: Sequence[Any]) -> list[DuplicateGroup[Any]]:
        scoring_records = self._cleaner.clean(records) if self._cleaner else None
        groups = find_duplicate_groups(
            records,
            threshold=self._threshold,
            strategy=self._strategy,
            scoring_records=scoring_records,
        )

        for group in groups:
            logger.debug(
                "Duplicate group score=%.3f ids=%s reasons=%s",
                group.score,
                [record_id(member) for member in group.group],
                group.reasons,
            )
        logger.info(
            "Scanned %d records (threshold=%.2f, strategy=%s): %d duplicate groups, %d records involved",
            len(records),
            self._threshold,
            self._strategy,
            len(groups),
            sum(len(group.group) for group in groups),
        )
        return groups

    def score_pair(self, left: Any, right: Any) -> DuplicateScore:
        if self._cleaner:
            left, right = self._cleaner.clean([left, right])
        return calculate_duplicate_score(left, right)
