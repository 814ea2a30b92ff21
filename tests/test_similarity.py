import pytest

from contact_dedupe.similarity import (
    email_similarity,
    levenshtein_distance,
    name_similarity,
    normalize_phone,
    phone_similarity,
    string_similarity,
)


def test_levenshtein_distance_counts_single_character_edits() -> None:
    assert levenshtein_distance("kitten", "sitting") == 3
    assert levenshtein_distance("", "abc") == 3
    assert levenshtein_distance("abc", "") == 3


def test_levenshtein_distance_is_case_insensitive() -> None:
    assert levenshtein_distance("DUPONT", "dupont") == 0


@pytest.mark.parametrize("left,right", [("jean", "marie"), ("dupont", "koné"), ("0700000001", "700000002")])
def test_levenshtein_distance_is_symmetric_and_zero_on_itself(left: str, right: str) -> None:
    assert levenshtein_distance(left, right) == levenshtein_distance(right, left)
    assert levenshtein_distance(left, left) == 0


def test_string_similarity_edge_cases() -> None:
    assert string_similarity("", "") == 1
    assert string_similarity(None, None) == 1
    assert string_similarity("abc", "") == 0
    assert string_similarity("", "abc") == 0
    assert string_similarity("abc", "abc") == 1
    assert string_similarity("abc", "abd") == pytest.approx(2 / 3)


def test_name_similarity_handles_reversed_order() -> None:
    assert name_similarity("Jean Dupont", "Dupont Jean") >= 0.9
    assert name_similarity("  JEAN dupont ", "jean Dupont") == 1


def test_name_similarity_partial_match_is_weighted() -> None:
    # Only the first name matches: 0.8 x 1.0.
    assert name_similarity("Jean Dupont", "Jean Martin") == pytest.approx(0.8)


def test_name_similarity_treats_missing_names_as_empty() -> None:
    assert name_similarity(None, "") == 1
    assert name_similarity(None, "Awa") == 0


def test_email_similarity_same_local_part_other_domain() -> None:
    assert email_similarity("john@x.com", "john@y.com") >= 0.9 - 1e-9


def test_email_similarity_exact_match_ignores_case_and_spaces() -> None:
    assert email_similarity(" John@X.com ", "john@x.com") == 1


def test_email_similarity_prefers_whole_address_when_higher() -> None:
    # Whole address: 1 - 2/15; local part: 0.9 * (1 - 2/6) + 0.1.
    assert email_similarity("jean@test.com", "jean.d@test.com") == pytest.approx(13 / 15)


def test_email_similarity_without_domain_gets_domain_bonus() -> None:
    assert email_similarity("abc", "abd") == pytest.approx(0.9 * (2 / 3) + 0.1)


def test_normalize_phone_keeps_last_nine_digits() -> None:
    assert normalize_phone("+225 07 00 00 00 00") == "700000000"
    assert normalize_phone("0700000000") == "700000000"
    assert normalize_phone("12-34") == "1234"
    assert normalize_phone(None) == ""


def test_phone_similarity_after_normalization() -> None:
    assert phone_similarity("+225 07 00 00 00 00", "0700000000") == 1


def test_phone_similarity_missing_phone_has_no_signal() -> None:
    assert phone_similarity(None, "0700000000") == 0
    assert phone_similarity("0700000000", "") == 0


def test_phone_similarity_short_numbers_are_ignored() -> None:
    assert phone_similarity("1234", "1235") == 0


def test_phone_similarity_partial_entry() -> None:
    assert phone_similarity("07 00 00 00 00", "00 00 00 00") == pytest.approx(0.9)


def test_phone_similarity_falls_back_to_digit_distance() -> None:
    assert phone_similarity("0700000001", "0700000002") == pytest.approx(8 / 9)
