import pandas as pd
import pytest

from modules.claims.aggregator import (
    ClaimValidationError, EmptyInputError, group_claims_by_tid, validate_claims,
    validate_claims_or_raise,
)
from modules.claims.normalizer import preprocess_claims


def grouped(rows):
    return group_claims_by_tid(preprocess_claims(rows))


def test_validate_reports_missing_tid(make_row):
    row = make_row()
    del row['TID']
    result = validate_claims([row])
    assert result.valid is False
    assert result.error == "Missing required columns: TID"


def test_validate_lists_missing_columns_in_required_order(make_row):
    row = make_row()
    for col in ('Approved Amount', 'Status', 'Patient Name'):
        del row[col]
    result = validate_claims([row])
    assert result.error == "Missing required columns: Patient Name, Status, Approved Amount"


def test_validate_only_checks_first_record(make_row):
    second = make_row()
    del second['TID']
    assert validate_claims([make_row(), second]).valid is True


def test_validate_empty_input():
    assert validate_claims([]).model_dump() == {'valid': False, 'error': 'No data found'}
    assert validate_claims(pd.DataFrame()).valid is False


def test_validate_or_raise_errors(make_row):
    with pytest.raises(EmptyInputError):
        validate_claims_or_raise([])

    row = make_row()
    del row['Pkg Rate']
    with pytest.raises(ClaimValidationError) as exc:
        validate_claims_or_raise([row])
    assert exc.value.missing == ['Pkg Rate']
    assert not isinstance(exc.value, EmptyInputError)


def test_rows_sharing_tid_become_one_claim(make_row):
    claims = grouped([
        make_row(tid=5, pkg_code="A1", pkg_rate="10000", approved="9000"),
        make_row(tid=5, pkg_code="A2", pkg_rate="20000", approved="15000"),
    ])
    assert len(claims) == 1
    claim = claims[0]
    assert claim.tid == "5"
    assert claim.pkg_rate == 30000
    assert claim.approved_amount == 24000
    assert [c.pkg_code for c in claim.components] == ["A1", "A2"]
    assert [c.component_pkg_rate for c in claim.components] == [10000, 20000]


def test_rows_without_tid_are_dropped(make_row):
    claims = grouped([
        make_row(tid=None),
        make_row(tid=""),
        make_row(tid="77"),
    ])
    assert [c.tid for c in claims] == ["77"]


def test_claims_keep_first_seen_order(make_row):
    claims = grouped([make_row(tid="B"), make_row(tid="A"), make_row(tid="B"), make_row(tid="10")])
    assert [c.tid for c in claims] == ["B", "A", "10"]


def test_numeric_and_text_tids_group_together(make_row):
    claims = grouped([make_row(tid=1), make_row(tid="1")])
    assert len(claims) == 1
    assert len(claims[0].components) == 2


def test_integral_float_tids_group_with_integers(make_row):
    claims = grouped([make_row(tid=1), make_row(tid=1.0), make_row(tid="1")])
    assert len(claims) == 1
    assert claims[0].tid == "1"
    assert len(claims[0].components) == 3


def test_float_tid_column_with_gaps_keeps_integer_ids(make_row):
    df = preprocess_claims([make_row(tid="x"), make_row(tid="x")])
    df['TID'] = [42.0, float('nan')]
    claims = group_claims_by_tid(pd.concat([df, df.iloc[[0]]], ignore_index=True))
    assert [c.tid for c in claims] == ["42"]
    assert len(claims[0].components) == 2
    assert [c.tid for c in grouped([make_row(tid=2.5)])] == ["2.5"]


def test_query_and_days_take_maximum(make_row):
    claims = grouped([
        make_row(tid="9", query="1", days="10"),
        make_row(tid="9", query="3", days="4"),
        make_row(tid="9", query="0", days="7"),
    ])
    assert claims[0].query_raised == 3
    assert claims[0].days_to_payment == 10


def test_descriptive_fields_come_from_first_row(make_row):
    claims = grouped([
        make_row(tid="9", status="Pending", admitted="2025-01-01"),
        make_row(tid="9", status="Claim Paid", admitted="2025-02-01", approved="500"),
    ])
    claim = claims[0]
    assert claim.status == "Pending"
    assert claim.date_of_admission.month == 1
    # Paid amount follows each row's own status
    assert claim.actual_paid_amount == 500


def test_claim_rate_equals_component_sum(make_row):
    rates = ["1,234.56", "0.1", "0.2", "98,765.4321", "-15"]
    claims = grouped([make_row(tid="X", pkg_rate=r) for r in rates])
    claim = claims[0]
    assert claim.pkg_rate == pytest.approx(
        sum(c.component_pkg_rate for c in claim.components), rel=1e-6
    )


def test_grouping_validates_input():
    with pytest.raises(EmptyInputError):
        group_claims_by_tid(pd.DataFrame())
