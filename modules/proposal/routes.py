# modules/proposal/routes.py
from fastapi import APIRouter, HTTPException
from loguru import logger
from config.settings import get_settings
from modules.claims.aggregator import validate_claims
from modules.claims.schemas import ValidationResult
from modules.proposal.service import process_claims_for_proposal
from modules.proposal.schemas import ClaimsPayload, ProposalRequest, ProposalResult

router = APIRouter(prefix="/proposal", tags=["Proposal"])

def _check_size(payload: ClaimsPayload):
    max_rows = get_settings().MAX_ROWS
    if len(payload.rows) > max_rows:
        raise HTTPException(413, f"Too many rows: {len(payload.rows):,} (limit {max_rows:,})")

@router.post("/validate", response_model=ValidationResult, response_model_exclude_none=True)
async def validate_claims_data(req: ClaimsPayload):
    _check_size(req)
    return validate_claims(req.rows)

@router.post("/metrics", response_model=ProposalResult)
async def get_proposal_metrics(req: ProposalRequest):
    if not req.params.hospital_name:
        raise HTTPException(400, "Missing required field: hospitalName is required")
    _check_size(req)

    logger.info(f"Proposal metrics requested for {req.params.hospital_name} ({len(req.rows):,} rows)")
    result = process_claims_for_proposal(req.rows, req.params)
    if not result.success:
        raise HTTPException(400, result.error)
    return result
