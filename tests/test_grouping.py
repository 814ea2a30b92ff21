import copy

import pytest

from contact_dedupe.datasets import ReferenceDatasetGenerator
from contact_dedupe.grouping import find_duplicate_groups


def _ids(group) -> list[str]:
    return [record["id"] if isinstance(record, dict) else record.id for record in group.group]


def test_no_groups_for_empty_or_single_input() -> None:
    assert find_duplicate_groups([]) == []
    assert find_duplicate_groups([{"id": "1", "name": "Jean", "email": "jean@test.com"}]) == []


def test_reversed_name_and_shared_phone_are_grouped() -> None:
    records = [
        {"id": "1", "name": "Jean Dupont", "email": "jean@test.com", "phone": "0700000001"},
        {"id": "2", "name": "Dupont Jean", "email": "jean.d@test.com", "phone": "0700000001"},
        {"id": "3", "name": "Marie Koné", "email": "marie@test.com", "phone": "0600000002"},
    ]

    groups = find_duplicate_groups(records)

    assert len(groups) == 1
    assert _ids(groups[0]) == ["1", "2"]
    assert groups[0].score == 0.95
    assert groups[0].reasons == [
        "Noms similaires (100%)",
        "Emails similaires (87%)",
        "Téléphones similaires (100%)",
    ]
    assert groups[0].group[0] is records[0]


def test_groups_sorted_by_descending_score() -> None:
    records = [
        {"id": "b1", "name": "Awa Traoré", "email": "awa.traore@gmail.com", "phone": "0701020304"},
        {"id": "b2", "name": "Traoré Awa", "email": "atraore@yahoo.fr", "phone": "+225 07 01 02 03 04"},
        {"id": "a1", "name": "Koffi Kouassi", "email": "koffi.k@orange.ci", "phone": None},
        {"id": "a2", "name": "K. Kouassi", "email": "KOFFI.K@orange.ci", "phone": "0509080706"},
    ]

    groups = find_duplicate_groups(records)

    assert [g.score for g in groups] == [1.0, 0.95]
    assert [_ids(g) for g in groups] == [["a1", "a2"], ["b1", "b2"]]


def test_seed_strategy_only_compares_against_the_seed() -> None:
    records = [
        {"id": "A", "name": "Jean Dupont", "email": "jd@a.com", "phone": "0700000001"},
        {"id": "B", "name": "Paul Martin", "email": "pm@b.com", "phone": "0700000001"},
        {"id": "C", "name": "Claire Bamba", "email": "pm@b.com", "phone": None},
    ]

    seed_groups = find_duplicate_groups(records)
    transitive_groups = find_duplicate_groups(records, strategy="transitive")

    assert [_ids(g) for g in seed_groups] == [["A", "B"]]
    assert seed_groups[0].score == 0.95
    assert [_ids(g) for g in transitive_groups] == [["A", "B", "C"]]
    assert transitive_groups[0].score == 1.0


@pytest.mark.parametrize("strategy", ["seed", "transitive"])
def test_record_never_appears_in_two_groups(strategy: str) -> None:
    records = ReferenceDatasetGenerator(seed=3).generate(size=150, duplicate_rate=0.3)

    groups = find_duplicate_groups(records, strategy=strategy)
    grouped_ids = [record.id for group in groups for record in group.group]

    assert groups
    assert len(grouped_ids) == len(set(grouped_ids))
    assert all(len(group.group) >= 2 for group in groups)
    scores = [group.score for group in groups]
    assert scores == sorted(scores, reverse=True)


def test_threshold_one_keeps_only_exact_email_matches() -> None:
    records = [
        {"id": "1", "name": "Jean Dupont", "email": "jean@test.com", "phone": "0700000001"},
        {"id": "2", "name": "Dupont Jean", "email": "jean.d@test.com", "phone": "0700000001"},
        {"id": "3", "name": "Awa Traoré", "email": "awa@gmail.com"},
        {"id": "4", "name": "Awa T", "email": "awa@gmail.com"},
    ]

    groups = find_duplicate_groups(records, threshold=1.0)

    assert [_ids(g) for g in groups] == [["3", "4"]]


def test_input_records_are_not_mutated() -> None:
    records = [
        {"id": "1", "name": " Jean Dupont ", "email": "JEAN@test.com", "phone": "+225 0700000001"},
        {"id": "2", "name": "Dupont Jean", "email": "jean@test.com", "phone": None},
    ]
    snapshot = copy.deepcopy(records)

    find_duplicate_groups(records)

    assert records == snapshot


def test_invalid_arguments_raise() -> None:
    records = [{"id": "1", "name": "a", "email": "a"}, {"id": "2", "name": "b", "email": "b"}]

    with pytest.raises(ValueError):
        find_duplicate_groups(records, strategy="union")
    with pytest.raises(ValueError):
        find_duplicate_groups(records, scoring_records=records[:1])


def test_numeric_phone_is_read_as_text() -> None:
    records = [
        {"id": "1", "name": "Yao Kouassi", "email": "yao@gmail.com", "phone": 700000001},
        {"id": "2", "name": "Bamba Awa", "email": "awa.bamba@orange.ci", "phone": "0700000001"},
    ]

    groups = find_duplicate_groups(records)

    assert [_ids(g) for g in groups] == [["1", "2"]]
    assert groups[0].score == 0.95


def test_records_without_id_are_grouped_by_position() -> None:
    records = [
        {"name": "Awa Traoré", "email": "awa@gmail.com"},
        {"name": "Awa T", "email": "awa@gmail.com"},
        {"name": "Koffi Bamba", "email": "koffi@yahoo.fr"},
        {"name": "K. Bamba", "email": "koffi@yahoo.fr"},
    ]

    groups = find_duplicate_groups(records)

    assert [g.group for g in groups] == [records[:2], records[2:]]
