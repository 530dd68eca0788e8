from __future__ import annotations

import pytest

from bomrecon.models.comparison_result import ResultStatus
from bomrecon.services.reconciler import compare


def _statuses(results):
    return [r.status for r in results]


def test_aggregated_group_equal(make_table, full_mappings):
    original = make_table([{"Codice": "A", "Qta": "3"}, {"Codice": "A", "Qta": "7"}])
    partial = make_table([{"Codice": "A", "Qta": "10"}])

    results = compare(original, partial, full_mappings, aggregate=True, ignore_revision=True)

    assert _statuses(results) == [ResultStatus.QUANTITY_EQUAL]
    assert results[0].original_quantity == 10.0


def test_aggregated_mismatch_is_exploded_per_row(make_table, full_mappings):
    original = make_table([{"Codice": "A", "Qta": "3"}, {"Codice": "A", "Qta": "4"}])
    partial = make_table([{"Codice": "A", "Qta": "10"}])

    results = compare(original, partial, full_mappings, aggregate=True, ignore_revision=True)

    assert _statuses(results) == [ResultStatus.QUANTITY_DIFFERENT] * 2
    assert [r.original_quantity for r in results] == [3.0, 4.0]
    assert all(r.partial_quantity == 10.0 for r in results)


def test_exploded_row_can_match_the_target_total(make_table, full_mappings):
    original = make_table([{"Codice": "A", "Qta": "10"}, {"Codice": "A", "Qta": "1"}])
    partial = make_table([{"Codice": "A", "Qta": "10"}])
    results = compare(original, partial, full_mappings, aggregate=True, ignore_revision=True)
    assert _statuses(results) == [ResultStatus.QUANTITY_EQUAL, ResultStatus.QUANTITY_DIFFERENT]


def test_exploded_group_keeps_invalid_rows(make_table, full_mappings):
    original = make_table([{"Codice": "A", "Qta": "3"}, {"Codice": "A", "Qta": "x"}])
    partial = make_table([{"Codice": "A", "Qta": "10"}])

    results = compare(original, partial, full_mappings, aggregate=True, ignore_revision=True)

    assert _statuses(results) == [ResultStatus.QUANTITY_DIFFERENT, ResultStatus.INVALID_QUANTITY]
    assert results[1].original_quantity == "x"
    assert results[1].partial_quantity == 10.0


def test_aggregated_absent_with_invalid_rows(make_table, full_mappings):
    original = make_table([{"Codice": "B", "Qta": "2"}, {"Codice": "B", "Qta": "x"}])
    results = compare(original, make_table([]), full_mappings, aggregate=True, ignore_revision=True)
    assert _statuses(results) == [ResultStatus.ABSENT, ResultStatus.INVALID_QUANTITY]
    assert results[0].original_quantity == 2.0


def test_aggregated_absent_all_invalid(make_table, full_mappings):
    original = make_table([{"Codice": "B", "Qta": "x"}])
    results = compare(original, make_table([]), full_mappings, aggregate=True, ignore_revision=True)
    assert _statuses(results) == [ResultStatus.INVALID_QUANTITY]


def test_aggregated_revision_fallback(make_table, full_mappings):
    original = make_table([
        {"Codice": "X", "Qta": "2", "Rev": "A"},
        {"Codice": "X", "Qta": "3", "Rev": "A"},
    ])
    partial = make_table([{"Codice": "X", "Qta": "5", "Rev": "B"}])

    results = compare(original, partial, full_mappings, aggregate=True, ignore_revision=False)

    assert _statuses(results) == [ResultStatus.REVISION_DIFFERENT]
    assert results[0].original_quantity == 5.0
    assert results[0].partial_revision == "B"


def test_group_takes_fields_from_first_row(make_table, full_mappings):
    original = make_table([
        {"Codice": "A", "Qta": "1", "Descrizione": "Primo"},
        {"Codice": "A", "Qta": "1", "Descrizione": "Secondo"},
    ])
    partial = make_table([{"Codice": "A", "Qta": "2"}])
    results = compare(original, partial, full_mappings, aggregate=True, ignore_revision=True)
    assert results[0].original_description == "Primo"


@pytest.mark.parametrize("ignore_revision", [True, False])
def test_absent_in_original_does_not_depend_on_aggregation(make_table, full_mappings, ignore_revision):
    original = make_table([
        {"Codice": "A", "Qta": "1", "Rev": "1"},
        {"Codice": "A", "Qta": "2", "Rev": "1"},
        {"Codice": "B", "Qta": "x", "Rev": "1"},
        {"Codice": "C", "Qta": "4", "Rev": "2"},
        {"Codice": "E", "Qta": "1", "Rev": "1"},
    ])
    partial = make_table([
        {"Codice": "A", "Qta": "3", "Rev": "1"},
        {"Codice": "B", "Qta": "1", "Rev": "1"},
        {"Codice": "C", "Qta": "4", "Rev": "3"},
        {"Codice": "D", "Qta": "9", "Rev": "1"},
        {"Codice": "F", "Qta": "1", "Rev": ""},
    ])

    def only_in_partial(aggregate):
        results = compare(original, partial, full_mappings, aggregate=aggregate, ignore_revision=ignore_revision)
        return sorted(
            (r.partial_code, r.partial_revision)
            for r in results
            if r.status is ResultStatus.ABSENT_IN_ORIGINAL
        )

    assert only_in_partial(False) == only_in_partial(True) == [("D", "1"), ("F", "")]
