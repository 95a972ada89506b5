# modules/claims/metrics.py
"""
KPIs for the proposal report.

Two granularities are used on purpose. Counts, claim value, approved amount,
rates and averages are computed over aggregated claims (one per TID, status
taken from the claim's first row). totalPaidAmount, rejectedClaimsAmount,
approvedUnpaidAmount and revenueStuckInQuery are summed over the raw
normalized rows, so a claim whose component rows carry different statuses
contributes only its matching rows.

Status matching is case-sensitive for the paid/approved/pending/rejected
classifications and case-insensitive for the approved-unpaid and query-stuck
amounts. Both rules are existing report behaviour and are kept as-is.
"""
import math
from datetime import datetime
from typing import List, Optional

import pandas as pd

from modules.claims.normalizer import PAID_STATUS, Rows, status_text, to_frame
from modules.claims.schemas import Claim, DenialReason, MetricsSnapshot

REJECTED_STATUSES = ['Claim Rejected (Supervisor)', 'Claim Rejected (Analyser)']
APPROVED_STATUS = 'Approved'
PENDING_STATUS = 'Pending'

HIGH_VALUE_CLAIM = 100000
DEFAULT_LENGTH_OF_STAY = 4
DEFAULT_DAYS_TO_PAYMENT = 45
DEFAULT_MONTHS_SPAN = 12
HEALTH_SCORE_CAP = 90

# Illustrative breakdown shown in every proposal; not derived from the data.
DENIAL_REASONS = [
    DenialReason(reason='Missing or incorrect documentation', percentage=35),
    DenialReason(reason='Authorization issues', percentage=25),
    DenialReason(reason='Coding errors', percentage=20),
    DenialReason(reason='Eligibility verification failures', percentage=12),
    DenialReason(reason='Timely filing issues', percentage=8),
]

CLAIM_FIELDS = [
    'status', 'pkg_rate', 'approved_amount', 'query_raised', 'days_to_payment',
    'date_of_admission', 'date_of_discharge'
]

ROW_DEFAULTS = {'Pkg Rate': 0.0, 'Approved Amount': 0.0, 'Date of Admission': None}


def _pct(part: float, whole: float) -> float:
    return float(part / whole * 100) if whole > 0 else 0.0


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_short_date(value: datetime) -> str:
    """en-IN short date, e.g. 17/2/2025."""
    return f"{value.day}/{value.month}/{value.year}"


def claims_frame(claims: List[Claim]) -> pd.DataFrame:
    frame = pd.DataFrame(
        [c.model_dump(include=set(CLAIM_FIELDS)) for c in claims], columns=CLAIM_FIELDS
    )
    frame['status'] = frame['status'].fillna('').astype(object)
    for col in ['pkg_rate', 'approved_amount', 'query_raised', 'days_to_payment']:
        frame[col] = frame[col].astype(float)
    for col in ['date_of_admission', 'date_of_discharge']:
        frame[col] = pd.to_datetime(frame[col], errors='coerce')
    return frame


def _row_sum(records: pd.DataFrame, mask: pd.Series, column: str) -> float:
    return float(records.loc[mask.astype(bool), column].sum())


def _admission_bounds(records: pd.DataFrame):
    admissions = pd.to_datetime(records['Date of Admission'], errors='coerce').dropna()
    if admissions.empty:
        return None, None
    return admissions.min().to_pydatetime(), admissions.max().to_pydatetime()


def _months_span(min_date: Optional[datetime], max_date: Optional[datetime]) -> int:
    if not (min_date and max_date):
        return DEFAULT_MONTHS_SPAN
    return max(1, math.ceil((max_date - min_date) / pd.Timedelta(days=30)))


def calculate_proposal_metrics(records: Rows, claims: List[Claim]) -> MetricsSnapshot:
    """
    Build the metrics snapshot from normalized rows and their aggregated claims.

    Args:
        records: normalized rows (output of preprocess_claims)
        claims: claims grouped from the same rows (output of group_claims_by_tid)
    """
    records = to_frame(records)
    for col, default in ROW_DEFAULTS.items():
        if col not in records.columns:
            records = records.assign(**{col: default})
    frame = claims_frame(claims)
    status = frame['status']

    total_claims = len(frame)
    total_claim_value = float(frame['pkg_rate'].sum())
    total_approved_amount = float(frame['approved_amount'].sum())

    paid_claims = int(status.str.contains(PAID_STATUS, regex=False).sum())
    rejected_claims = int(status.isin(REJECTED_STATUSES).sum())
    pending_claims = int(status.str.contains(PENDING_STATUS, regex=False).sum())
    approved_claims = int(status.str.contains(APPROVED_STATUS, regex=False).sum())

    claims_with_query = int((frame['query_raised'] > 0).sum())
    claims_without_query = int((frame['query_raised'] == 0).sum())

    # Row-level sums
    row_status = status_text(records)
    lowered = row_status.str.lower()
    total_paid_amount = _row_sum(
        records, row_status.str.contains(PAID_STATUS, regex=False), 'Approved Amount'
    )
    rejected_claims_amount = _row_sum(
        records, row_status.isin(REJECTED_STATUSES), 'Pkg Rate'
    )
    approved_unpaid_amount = _row_sum(
        records,
        lowered.str.contains('approved', regex=False) & lowered.str.contains('supervisor', regex=False),
        'Approved Amount',
    )
    revenue_stuck_in_query = _row_sum(
        records, lowered.str.contains('claim query', regex=False), 'Pkg Rate'
    )

    denial_rate = _pct(rejected_claims, total_claims)
    query_incidence = _pct(claims_with_query, total_claims)
    first_pass_rate = _pct(claims_without_query, total_claims)
    collection_efficiency = _pct(total_paid_amount, total_approved_amount)
    revenue_leakage_rate = _pct(rejected_claims_amount, total_claim_value)
    high_value_claims_percentage = _pct(
        int((frame['pkg_rate'] > HIGH_VALUE_CLAIM).sum()), total_claims
    )

    average_claim_amount = (
        round_half_up(total_claim_value / total_claims) if total_claims > 0 else 0
    )

    with_dates = frame['date_of_admission'].notna() & frame['date_of_discharge'].notna()
    stays = (
        frame.loc[with_dates, 'date_of_discharge'] - frame.loc[with_dates, 'date_of_admission']
    ).dt.days.clip(lower=0)
    avg_length_of_stay = float(stays.mean()) if len(stays) else float(DEFAULT_LENGTH_OF_STAY)

    payment_days = frame.loc[frame['days_to_payment'] > 0, 'days_to_payment']
    if len(payment_days):
        avg_days_to_payment = float(payment_days.mean())
    else:
        avg_days_to_payment = avg_length_of_stay or float(DEFAULT_DAYS_TO_PAYMENT)

    min_date, max_date = _admission_bounds(records)
    date_range_text = (
        f"{format_short_date(min_date)} to {format_short_date(max_date)}"
        if min_date and max_date else 'N/A'
    )

    health_score = min(
        HEALTH_SCORE_CAP,
        (100 - denial_rate) * 0.4 + collection_efficiency * 0.4 + (100 - query_incidence) * 0.2,
    )

    return MetricsSnapshot(
        total_claims=total_claims,
        paid_claims=paid_claims,
        approved_claims=approved_claims,
        rejected_claims=rejected_claims,
        pending_claims=pending_claims,
        total_claim_value=total_claim_value,
        total_approved_amount=total_approved_amount,
        total_paid_amount=total_paid_amount,
        average_claim_amount=average_claim_amount,
        rejected_claims_amount=rejected_claims_amount,
        approved_unpaid_amount=approved_unpaid_amount,
        revenue_stuck_in_query=revenue_stuck_in_query,
        denial_rate=denial_rate,
        query_incidence=query_incidence,
        first_pass_rate=first_pass_rate,
        collection_efficiency=collection_efficiency,
        revenue_leakage_rate=revenue_leakage_rate,
        high_value_claims_percentage=high_value_claims_percentage,
        avg_length_of_stay=avg_length_of_stay,
        avg_days_to_payment=avg_days_to_payment,
        claims_with_query=claims_with_query,
        claims_without_query=claims_without_query,
        min_date=min_date,
        max_date=max_date,
        date_range_text=date_range_text,
        denial_reasons=DENIAL_REASONS,
        health_score=float(health_score),
        months_span=_months_span(min_date, max_date),
    )
