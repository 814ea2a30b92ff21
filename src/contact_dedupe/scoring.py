from __future__ import annotations

import math
from typing import Any

from contact_dedupe.models import DuplicateScore, phone_field, text_field
from contact_dedupe.similarity import email_similarity, name_similarity, phone_similarity

NAME_WEIGHT = 0.4
EMAIL_WEIGHT = 0.4
PHONE_WEIGHT = 0.2

REASON_THRESHOLD = 0.8
EXACT_EMAIL_SCORE = 1.0
EXACT_PHONE_SCORE = 0.95

BOOST_SCORE = 0.85
BOOST_NAME_THRESHOLD = 0.7
BOOST_EMAIL_THRESHOLD = 0.7
BOOST_PHONE_THRESHOLD = 0.8

# Message templates shown to operators next to a duplicate group.
NAME_REASON = "Noms similaires ({percent}%)"
EMAIL_REASON = "Emails similaires ({percent}%)"
PHONE_REASON = "Téléphones similaires ({percent}%)"


def calculate_duplicate_score(record1: Any, record2: Any) -> DuplicateScore:
    """Score how likely two records describe the same person.

    An exact email match is conclusive (1.0) and an exact phone match nearly so
    (0.95). Otherwise the field scores are blended 0.4/0.4/0.2 and boosted to
    0.85 when the name agrees together with the email or the phone.
    """
    name_score = name_similarity(text_field(record1, "name"), text_field(record2, "name"))
    email_score = email_similarity(text_field(record1, "email"), text_field(record2, "email"))
    phone_score = phone_similarity(phone_field(record1), phone_field(record2))

    reasons: list[str] = []
    if name_score >= REASON_THRESHOLD:
        reasons.append(NAME_REASON.format(percent=_percent(name_score)))
    if email_score >= REASON_THRESHOLD:
        reasons.append(EMAIL_REASON.format(percent=_percent(email_score)))
    if phone_score >= REASON_THRESHOLD:
        reasons.append(PHONE_REASON.format(percent=_percent(phone_score)))

    if email_score == 1:
        score = EXACT_EMAIL_SCORE
    elif phone_score == 1:
        score = EXACT_PHONE_SCORE
    else:
        score = name_score * NAME_WEIGHT + email_score * EMAIL_WEIGHT + phone_score * PHONE_WEIGHT
        if name_score >= BOOST_NAME_THRESHOLD and email_score >= BOOST_EMAIL_THRESHOLD:
            score = max(score, BOOST_SCORE)
        if name_score >= BOOST_NAME_THRESHOLD and phone_score >= BOOST_PHONE_THRESHOLD:
            score = max(score, BOOST_SCORE)

    return DuplicateScore(
        score=score,
        name_score=name_score,
        email_score=email_score,
        phone_score=phone_score,
        reasons=reasons,
    )


def _percent(value: float) -> int:
    # Rounds half up.
    return math.floor(value * 100 + 0.5)
