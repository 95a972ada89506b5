# modules/proposal/schemas.py
from pydantic import Field
from typing import Any, Dict, List, Optional

from modules.claims.schemas import ContractModel, MetricsSnapshot

class ROIProjection(ContractModel):
    denial_prevention_conservative: float
    denial_prevention_expected: float
    denial_prevention_optimistic: float

    collections_conservative: float
    collections_expected: float
    collections_optimistic: float

    efficiency_conservative: float
    efficiency_expected: float
    efficiency_optimistic: float

    total_benefit_conservative: float
    total_benefit_expected: float
    total_benefit_optimistic: float

    payback_period: int
    roi_multiple: float

class ProposalParams(ContractModel):
    hospital_name: Optional[str] = None
    hospital_location: Optional[str] = None
    contact_person: Optional[str] = None
    email: Optional[str] = None
    title: Optional[str] = None
    vendor_contact_email: Optional[str] = None
    vendor_contact_phone: Optional[str] = None
    vendor_team_member: Optional[str] = None

class ProposalTemplateData(ContractModel):
    """Every field the proposal template binds to, with its fallback value."""

    # Basic info
    hospital_name: str = 'Hospital'
    hospital_location: str = 'Hospital, Location'
    contact_person: str = ''
    email: str = ''
    title: str = ''
    proposal_date: str

    # Vendor contact
    contact_email: str
    contact_phone: str
    team_member_name: str

    # Conditional sections
    show_denial_metric: bool = True
    show_first_pass_metric: bool = True
    show_query_metric: bool = True

    # Key metrics
    revenue_leakage: str = '0'
    denial_rate: str = '0.0'
    roi_multiple: float = 3.5

    # Analysis window
    total_claims: str = '0'
    analysis_start_date: str = 'N/A'
    analysis_end_date: str = 'N/A'
    average_claim_amount: str = '50,000'

    # Performance
    clean_claim_rate: str = '0'
    clean_claim_opportunity: str = '0'
    avg_length_of_stay: int = 4
    avg_days_to_payment: str = '45 days'
    days_reduction: float = 0.0
    first_pass_rate: str = '0'
    first_pass_opportunity: str = '0'
    leakage_rate: str = '0.0'
    leakage_amount: str = '0'

    # Denial reasons
    denial_reason1: str = 'Documentation issues'
    denial_percentage1: int = 35
    denial_reason2: str = 'Authorization issues'
    denial_percentage2: int = 25
    denial_reason3: str = 'Coding errors'
    denial_percentage3: int = 20
    denial_reason4: str = 'Eligibility issues'
    denial_percentage4: int = 12
    denial_reason5: str = 'Timely filing issues'
    denial_percentage5: int = 8

    # ROI projections, display formatted
    denial_prevention_conservative: str = '0'
    denial_prevention_expected: str = '0'
    denial_prevention_optimistic: str = '0'
    collections_conservative: str = '0'
    collections_expected: str = '0'
    collections_optimistic: str = '0'
    efficiency_conservative: str = '0'
    efficiency_expected: str = '0'
    efficiency_optimistic: str = '0'
    total_benefit_conservative: str = '0'
    total_benefit_expected: str = '0'
    total_benefit_optimistic: str = '0'
    payback_period: int = 4

    # Hospital profile
    monthly_claim_value: str = '0'
    primary_departments: str = 'Emergency, ICU, General Medicine, Surgery'
    monthly_patient_volume: str = '2,500 patients'
    insurance_mix: str = 'RGHS: 40%, PMJAY: 30%, Private: 20%, Cash: 10%'
    current_processing_time: str = '45-60 minutes'
    current_reconciliation_time: str = '5-7 days'
    calculated_annual_impact: str = '0'

    # Worked example in the financial section
    denial_reduction_current: str = '₹7.5 Lakhs'
    denial_reduction_optimized: str = '₹1.5 Lakhs'
    denial_reduction_savings: str = '₹6.0 Lakhs'
    denial_reduction_annual: str = '₹72.0 Lakhs'
    first_pass_current: str = '₹20 Lakhs'
    first_pass_optimized: str = '₹15 Lakhs'
    first_pass_savings: str = '₹2.5 Lakhs'
    first_pass_annual: str = '₹30.0 Lakhs'
    ar_reduction_current: str = '₹83.3 Lakhs'
    ar_reduction_optimized: str = '₹53.3 Lakhs'
    ar_reduction_savings: str = '₹3.0 Lakhs'
    ar_reduction_annual: str = '₹36.0 Lakhs'
    admin_efficiency_current: str = '₹4.0 Lakhs'
    admin_efficiency_optimized: str = '₹1.0 Lakhs'
    admin_efficiency_savings: str = '₹3.0 Lakhs'
    admin_efficiency_annual: str = '₹36.0 Lakhs'
    total_monthly_impact: str = '₹14.5 Lakhs'
    total_annual_impact: str = '₹1.74 Crores'

    # Filled in by the sales team
    reconciliation_gaps: str = '[CURRENT RECONCILIATION GAPS]'
    terminology_gaps: str = '[CLAIMS TEAM KNOWLEDGE GAPS]'
    package_errors: str = '[PACKAGE BOOKING ERRORS]'
    documentation_challenges: str = '[DOCUMENTATION CHALLENGES]'
    authorization_time: str = '[AUTHORIZATION PROCESSING TIME]'
    compliance_issues: str = '[SCHEME COMPLIANCE ISSUES]'

    # Timeline
    contract_date: str = 'Within 15 days'
    implementation_start_date: str = 'Within 30 days'
    pilot_completion_date: str = 'Within 90 days'

class ProposalResult(ContractModel):
    success: bool
    error: Optional[str] = None
    metrics: Optional[MetricsSnapshot] = None
    roi_projections: Optional[ROIProjection] = None
    template_data: Optional[ProposalTemplateData] = None

class ClaimsPayload(ContractModel):
    rows: List[Dict[str, Any]] = Field(default_factory=list)

class ProposalRequest(ClaimsPayload):
    params: ProposalParams = Field(default_factory=ProposalParams)
