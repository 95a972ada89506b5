# modules/claims/aggregator.py
from typing import Any, List, Optional

import numpy as np
import pandas as pd

from modules.claims.normalizer import Rows, is_missing, parse_date, to_frame
from modules.claims.schemas import Claim, ComponentRecord, ValidationResult

REQUIRED_COLS = [
    'TID', 'Patient Name', 'Hospital Name', 'Status', 'Pkg Rate', 'Approved Amount'
]


class ClaimValidationError(ValueError):
    """Claims table cannot be processed; aborts the current run only."""

    def __init__(self, message: str, missing: Optional[List[str]] = None):
        super().__init__(message)
        self.missing = missing or []


class EmptyInputError(ClaimValidationError):
    pass


def _sample_columns(data: Rows) -> Optional[List[str]]:
    """Columns of the first record, or None when there are no records."""
    if isinstance(data, pd.DataFrame):
        return None if data.empty else list(data.columns)
    rows = list(data)
    return list(rows[0].keys()) if rows else None


def validate_claims_or_raise(data: Rows):
    columns = _sample_columns(data)
    if columns is None:
        raise EmptyInputError("No data found")

    missing = [c for c in REQUIRED_COLS if c not in columns]
    if missing:
        raise ClaimValidationError(
            f"Missing required columns: {', '.join(missing)}", missing=missing
        )


def validate_claims(data: Rows) -> ValidationResult:
    try:
        validate_claims_or_raise(data)
    except ClaimValidationError as e:
        return ValidationResult(valid=False, error=str(e))
    return ValidationResult(valid=True)


def _has_tid(value: Any) -> bool:
    if is_missing(value) or value is False:
        return False
    if isinstance(value, str):
        return value != ''
    if isinstance(value, (int, float, np.integer, np.floating)):
        return value != 0
    return True


def _tid_key(value: Any) -> str:
    # 1, 1.0 and "1" name the same claim
    if isinstance(value, (float, np.floating)) and float(value).is_integer():
        return str(int(value))
    return str(value)


def _text(value: Any) -> Optional[str]:
    return None if is_missing(value) else str(value)


def group_claims_by_tid(df: pd.DataFrame) -> List[Claim]:
    """
    Roll normalized rows up into one Claim per TID, in first-seen order.
    Rows without a TID are skipped.
    """
    df = to_frame(df)
    validate_claims_or_raise(df)

    keyed = df[df['TID'].map(_has_tid).astype(bool)]
    claims = []
    for _, rows in keyed.groupby(keyed['TID'].map(_tid_key), sort=False):
        first = rows.iloc[0]
        components = [
            ComponentRecord(
                pkg_code=_text(row.get('Pkg Code')),
                pkg_name=_text(row.get('Pkg Name')),
                component_pkg_rate=row['Pkg Rate'],
                component_approved_amount=row['Approved Amount'],
            )
            for _, row in rows.iterrows()
        ]
        claims.append(Claim(
            tid=_tid_key(first['TID']),
            patient_name=_text(first['Patient Name']),
            hospital_name=_text(first['Hospital Name']),
            status=_text(first['Status']),
            date_of_admission=parse_date(first.get('Date of Admission')),
            date_of_discharge=parse_date(first.get('Date of Discharge')),
            payment_date=parse_date(first.get('Payment Date')),
            pkg_rate=float(sum(c.component_pkg_rate for c in components)),
            approved_amount=float(sum(c.component_approved_amount for c in components)),
            actual_paid_amount=float(rows['Actual Paid Amount'].sum()),
            query_raised=max(0.0, float(rows['Query Raised'].max())),
            days_to_payment=float(rows['Days to Payment'].max()),
            components=components,
        ))

    return claims
