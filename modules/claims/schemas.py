# modules/claims/schemas.py
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime

class ContractModel(BaseModel):
    """Frozen model serialized with the camelCase names the report renderer binds to."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

class ValidationResult(ContractModel):
    valid: bool
    error: Optional[str] = None

class ComponentRecord(ContractModel):
    pkg_code: Optional[str] = None
    pkg_name: Optional[str] = None
    component_pkg_rate: float = 0.0
    component_approved_amount: float = 0.0

class Claim(ContractModel):
    tid: str
    patient_name: Optional[str] = None
    hospital_name: Optional[str] = None
    status: Optional[str] = None
    date_of_admission: Optional[datetime] = None
    date_of_discharge: Optional[datetime] = None
    payment_date: Optional[datetime] = None
    pkg_rate: float = 0.0
    approved_amount: float = 0.0
    actual_paid_amount: float = 0.0
    query_raised: float = 0.0
    days_to_payment: float = 0.0
    components: List[ComponentRecord] = []

class DenialReason(ContractModel):
    reason: str
    percentage: int

class MetricsSnapshot(ContractModel):
    # Counts (claim granularity)
    total_claims: int
    paid_claims: int
    approved_claims: int
    rejected_claims: int
    pending_claims: int

    # Financials; totalPaidAmount, rejectedClaimsAmount, approvedUnpaidAmount
    # and revenueStuckInQuery are summed over rows, the rest over claims
    total_claim_value: float
    total_approved_amount: float
    total_paid_amount: float
    average_claim_amount: int
    rejected_claims_amount: float
    approved_unpaid_amount: float
    revenue_stuck_in_query: float

    # KPIs, percentages in [0, 100] when inputs are non-negative
    denial_rate: float
    query_incidence: float
    first_pass_rate: float
    collection_efficiency: float
    revenue_leakage_rate: float
    high_value_claims_percentage: float

    # Processing
    avg_length_of_stay: float
    avg_days_to_payment: float
    claims_with_query: int
    claims_without_query: int

    # Date range over admission dates
    min_date: Optional[datetime] = None
    max_date: Optional[datetime] = None
    date_range_text: str = "N/A"

    denial_reasons: List[DenialReason]
    health_score: float
    months_span: int
