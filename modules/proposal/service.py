# modules/proposal/service.py
from typing import Optional

from loguru import logger

from modules.claims.aggregator import (
    ClaimValidationError, group_claims_by_tid, validate_claims_or_raise
)
from modules.claims.metrics import calculate_proposal_metrics
from modules.claims.normalizer import Rows, to_frame, preprocess_claims
from modules.claims.schemas import MetricsSnapshot
from modules.proposal.projection import calculate_roi_projections
from modules.proposal.schemas import ProposalParams, ProposalResult
from modules.proposal.template_data import build_template_data

DEFAULT_DAYS_TO_PAYMENT = 45
DEFAULT_AVERAGE_CLAIM_AMOUNT = 50000  # ₹50,000

def with_reporting_defaults(metrics: MetricsSnapshot) -> MetricsSnapshot:
    """Copy of the snapshot with display fallbacks for empty payment days / claim amount."""
    updates = {}
    if not metrics.avg_days_to_payment:
        updates['avg_days_to_payment'] = DEFAULT_DAYS_TO_PAYMENT
    if not metrics.average_claim_amount:
        updates['average_claim_amount'] = DEFAULT_AVERAGE_CLAIM_AMOUNT
    return metrics.model_copy(update=updates) if updates else metrics

def run_claims_analysis(rows: Rows) -> MetricsSnapshot:
    df = to_frame(rows)
    validate_claims_or_raise(df)

    processed = preprocess_claims(df)
    claims = group_claims_by_tid(processed)
    skipped = int(len(processed) - sum(len(c.components) for c in claims))
    if skipped:
        logger.info(f"Skipped {skipped} rows without a TID")
    logger.info(f"Grouped {len(processed):,} rows into {len(claims):,} claims")

    return calculate_proposal_metrics(processed, claims)

def process_claims_for_proposal(rows: Rows, params: Optional[ProposalParams] = None) -> ProposalResult:
    params = params or ProposalParams()
    try:
        metrics = run_claims_analysis(rows)
    except ClaimValidationError as e:
        logger.warning(f"Claims data rejected: {e}")
        return ProposalResult(success=False, error=str(e))

    metrics = with_reporting_defaults(metrics)
    roi_projections = calculate_roi_projections(metrics)
    template_data = build_template_data(metrics, roi_projections, params)

    logger.info(
        f"Proposal data ready for {template_data.hospital_name}: "
        f"{metrics.total_claims} claims, denial rate {metrics.denial_rate:.1f}%, "
        f"expected benefit {roi_projections.total_benefit_expected:,.0f}"
    )
    return ProposalResult(
        success=True,
        metrics=metrics,
        roi_projections=roi_projections,
        template_data=template_data,
    )
