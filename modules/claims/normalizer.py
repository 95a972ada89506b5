# modules/claims/normalizer.py
import math
import re
from datetime import date, datetime, timezone
from typing import Any, Iterable, Mapping, Optional, Union

import numpy as np
import pandas as pd

CLAIM_COLUMNS = [
    'TID', 'Patient Name', 'Hospital Name', 'Status', 'Pkg Code', 'Pkg Name',
    'Pkg Rate', 'Approved Amount', 'Query Raised', 'Date of Admission',
    'Date of Discharge', 'Payment Date', 'Days to Payment'
]
NUMBER_COLUMNS = ['Pkg Rate', 'Approved Amount', 'Query Raised']
DATE_COLUMNS = ['Date of Admission', 'Date of Discharge', 'Payment Date']

PAID_STATUS = 'Claim Paid'

_NON_NUMERIC = re.compile(r'[^0-9.-]')
_LEADING_FLOAT = re.compile(r'-?(?:\d+(?:\.\d*)?|\.\d+)')
# e.g. ' 17,February , 2025 12:00 AM'
_DAY_MONTH_YEAR = re.compile(r'^(\d{1,2}),([A-Za-z]+)\s*,\s*(\d{4})\s*(.*)$')

Rows = Union[pd.DataFrame, Iterable[Mapping[str, Any]]]


def is_missing(value: Any) -> bool:
    if value is None or value is pd.NaT or value is pd.NA:
        return True
    return isinstance(value, float) and math.isnan(value)


def to_frame(data: Rows) -> pd.DataFrame:
    if isinstance(data, pd.DataFrame):
        return data
    return pd.DataFrame(list(data), dtype=object)


def status_text(df: pd.DataFrame) -> pd.Series:
    """Status column with non-text cells replaced by ''."""
    if 'Status' not in df.columns:
        return pd.Series('', index=df.index, dtype=object)
    return df['Status'].map(lambda s: s if isinstance(s, str) else '').astype(object)


def parse_number(value: Any) -> float:
    """Lenient numeric parse of currency-like text. Returns 0.0 for anything unparseable."""
    if is_missing(value) or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float, np.integer, np.floating)):
        result = float(value)
        return result if math.isfinite(result) else 0.0

    match = _LEADING_FLOAT.match(_NON_NUMERIC.sub('', str(value)))
    if not match:
        return 0.0
    result = float(match.group())
    if not math.isfinite(result):
        return 0.0
    return result or 0.0


def _to_datetime(text: str) -> Optional[datetime]:
    try:
        parsed = pd.to_datetime(text, errors='coerce')
    except (ValueError, TypeError, OverflowError):
        return None
    if is_missing(parsed) or not isinstance(parsed, pd.Timestamp):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.tz_convert('UTC').tz_localize(None)
    return parsed.to_pydatetime()


def parse_date(value: Any) -> Optional[datetime]:
    """
    Parse a date cell. Typed dates pass through; text is tried against the
    '<day>,<Month> , <Year> <time>' export format first, then generic parsing.
    Returns None when nothing matches.
    """
    if is_missing(value):
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value.to_pydatetime() if isinstance(value, pd.Timestamp) else value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None

    trimmed = value.strip()
    if not trimmed:
        return None

    match = _DAY_MONTH_YEAR.match(trimmed)
    if match:
        day, month, year, time = match.groups()
        parsed = _to_datetime(f"{day} {month} {year} {time or '00:00 AM'}")
        if parsed is not None:
            return parsed

    return _to_datetime(trimmed)


def _is_blank(value: Any) -> bool:
    if is_missing(value) or isinstance(value, str) and value == '':
        return True
    return isinstance(value, (int, float, np.integer, np.floating)) and value == 0


def preprocess_claims(data: Rows) -> pd.DataFrame:
    """
    Coerce raw claim rows into typed columns and derive 'Days to Payment'
    and 'Actual Paid Amount'. Never fails on malformed cells.
    """
    df = to_frame(data).copy()
    for col in CLAIM_COLUMNS:
        if col not in df.columns:
            df[col] = None

    raw_days = df['Days to Payment']

    for col in NUMBER_COLUMNS:
        df[col] = df[col].map(parse_number).astype(float)

    for col in DATE_COLUMNS:
        df[col] = pd.to_datetime(df[col].map(parse_date).astype(object), errors='coerce')

    # Days between discharge and payment, used only when no explicit value was given
    elapsed = (df['Payment Date'] - df['Date of Discharge']).dt.days
    computed = elapsed.clip(lower=0).fillna(0).astype(float)
    explicit = ~raw_days.map(_is_blank).astype(bool)
    df['Days to Payment'] = np.where(
        explicit, raw_days.map(parse_number).astype(float), computed
    ).astype(float)

    paid = status_text(df).str.contains(PAID_STATUS, regex=False)
    df['Actual Paid Amount'] = df['Approved Amount'].where(paid.astype(bool), 0.0)

    return df
