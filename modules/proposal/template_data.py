# modules/proposal/template_data.py
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from config.settings import get_settings
from modules.claims.metrics import format_short_date, round_half_up
from modules.claims.schemas import MetricsSnapshot
from modules.proposal.schemas import ProposalParams, ProposalTemplateData, ROIProjection

CRORE = 10000000
LAKH = 100000

# Targets we promise; a hospital already beating them doesn't get the section
DENIAL_RATE_TARGET = 3
FIRST_PASS_RATE_TARGET = 70
CLEAN_CLAIM_TARGET = 95
FIRST_PASS_TARGET = 90
DAYS_TO_PAYMENT_TARGET = 30

DEFAULT_DENIAL_REASONS = [
    ('Documentation issues', 35),
    ('Authorization issues', 25),
    ('Coding errors', 20),
    ('Eligibility issues', 12),
    ('Timely filing issues', 8),
]


def to_fixed(value: float, digits: int) -> str:
    """Fixed-point text rounding ties away from zero."""
    quantum = Decimal(1).scaleb(-digits)
    fixed = Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)
    # Only a negative input keeps the sign on a zero result: -0.04 -> "-0.0", -0.0 -> "0.0"
    return str(abs(fixed) if fixed == 0 and not value < 0 else fixed)


def _group_indian(num: float) -> str:
    """en-IN grouping: 12,34,567.891 (at most three fraction digits)."""
    text = to_fixed(abs(num), 3).rstrip('0').rstrip('.')
    whole, _, fraction = text.partition('.')
    if len(whole) > 3:
        head, groups = whole[:-3], [whole[-3:]]
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ','.join(groups)
    sign = '-' if num < 0 and text != '0' else ''
    return sign + whole + ('.' + fraction if fraction else '')


def format_indian_number(num: Optional[float], max_length: int = 12) -> str:
    if not num:
        return '0'

    if num >= CRORE:
        formatted = f"{to_fixed(num / CRORE, 2)} Cr"
    elif num >= LAKH:
        formatted = f"{to_fixed(num / LAKH, 2)} L"
    else:
        formatted = _group_indian(num)

    if len(formatted) > max_length:
        if num >= CRORE:
            formatted = f"{to_fixed(num / CRORE, 1)} Cr"
        elif num >= LAKH:
            formatted = f"{to_fixed(num / LAKH, 1)} L"

    return formatted


def truncate_text(text: Optional[str], max_length: int = 50) -> Optional[str]:
    if not text or len(text) <= max_length:
        return text
    return text[:max_length - 3] + '...'


def should_show_metric(current_value: float, target: float, metric_type: str) -> bool:
    # Lower is better for denials and query resolution, higher for first pass
    if metric_type in ('denialRate', 'queryResolution'):
        return current_value >= target
    if metric_type == 'firstPassRate':
        return current_value <= target
    return True


def build_template_data(
    metrics: MetricsSnapshot,
    projections: ROIProjection,
    params: Optional[ProposalParams] = None,
    today: Optional[date] = None,
) -> ProposalTemplateData:
    params = params or ProposalParams()
    settings = get_settings()
    today = today or date.today()

    hospital_name = params.hospital_name or 'Hospital'
    reasons = [(r.reason, r.percentage) for r in metrics.denial_reasons]
    reasons += DEFAULT_DENIAL_REASONS[len(reasons):]
    denial_fields = {}
    for i, (reason, percentage) in enumerate(reasons[:5], start=1):
        denial_fields[f'denial_reason{i}'] = reason
        denial_fields[f'denial_percentage{i}'] = percentage

    projection_fields = {
        name: format_indian_number(value)
        for name, value in projections.model_dump(
            exclude={'payback_period', 'roi_multiple'}
        ).items()
    }

    return ProposalTemplateData(
        hospital_name=truncate_text(hospital_name, 40),
        hospital_location=truncate_text(
            params.hospital_location or f"{hospital_name}, Location", 60
        ),
        contact_person=truncate_text(params.contact_person or '', 30),
        email=truncate_text(params.email or '', 40),
        title=truncate_text(params.title or '', 30),
        proposal_date=format_short_date(today),
        contact_email=params.vendor_contact_email or settings.VENDOR_CONTACT_EMAIL,
        contact_phone=params.vendor_contact_phone or settings.VENDOR_CONTACT_PHONE,
        team_member_name=params.vendor_team_member or settings.VENDOR_TEAM_MEMBER,
        show_denial_metric=should_show_metric(metrics.denial_rate, DENIAL_RATE_TARGET, 'denialRate'),
        show_first_pass_metric=should_show_metric(
            metrics.first_pass_rate, FIRST_PASS_RATE_TARGET, 'firstPassRate'
        ),
        show_query_metric=True,
        revenue_leakage=format_indian_number(metrics.rejected_claims_amount),
        denial_rate=to_fixed(metrics.denial_rate, 1),
        roi_multiple=projections.roi_multiple,
        total_claims=_group_indian(metrics.total_claims),
        analysis_start_date=format_short_date(metrics.min_date) if metrics.min_date else 'N/A',
        analysis_end_date=format_short_date(metrics.max_date) if metrics.max_date else 'N/A',
        average_claim_amount=(
            format_indian_number(round_half_up(metrics.average_claim_amount))
            if metrics.average_claim_amount > 0 else '50,000'
        ),
        clean_claim_rate=to_fixed(metrics.first_pass_rate, 0),
        clean_claim_opportunity=to_fixed(max(0, CLEAN_CLAIM_TARGET - metrics.first_pass_rate), 0),
        avg_length_of_stay=(
            round_half_up(metrics.avg_length_of_stay) if metrics.avg_length_of_stay else 4
        ),
        avg_days_to_payment=(
            f"{round_half_up(metrics.avg_days_to_payment)} days"
            if metrics.avg_days_to_payment > 0 else '45 days'
        ),
        days_reduction=max(0, metrics.avg_days_to_payment - DAYS_TO_PAYMENT_TARGET),
        first_pass_rate=to_fixed(metrics.first_pass_rate, 0),
        first_pass_opportunity=to_fixed(max(0, FIRST_PASS_TARGET - metrics.first_pass_rate), 0),
        leakage_rate=to_fixed(metrics.revenue_leakage_rate, 1),
        leakage_amount=format_indian_number(metrics.rejected_claims_amount),
        payback_period=projections.payback_period,
        monthly_claim_value=format_indian_number(metrics.total_claim_value / metrics.months_span),
        calculated_annual_impact=format_indian_number(projections.total_benefit_expected),
        **denial_fields,
        **projection_fields,
    )
