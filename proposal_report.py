import argparse
import sys
from pathlib import Path

from loguru import logger

from config.settings import get_settings
from core.data_loader import load_claims_file
from core.logger import setup_logging
from modules.proposal.schemas import ProposalParams
from modules.proposal.service import process_claims_for_proposal

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Claims Proposal Metrics")
    parser.add_argument('--input', type=str, required=True, help='Path to claims export (CSV/XLSX)')
    parser.add_argument('--hospital-name', type=str, required=True, help='Hospital the proposal is for')
    parser.add_argument('--hospital-location', type=str, default=None)
    parser.add_argument('--contact-person', type=str, default=None)
    parser.add_argument('--email', type=str, default=None)
    parser.add_argument('--title', type=str, default=None)
    parser.add_argument('--output', type=str, default=None, help='Write proposal data as JSON to this file')
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_DIR)

    try:
        df = load_claims_file(args.input)
    except (OSError, ValueError) as e:
        logger.error(f"Could not read {args.input}: {e}")
        return 1

    params = ProposalParams(
        hospital_name=args.hospital_name,
        hospital_location=args.hospital_location,
        contact_person=args.contact_person,
        email=args.email,
        title=args.title,
    )
    result = process_claims_for_proposal(df, params)
    if not result.success:
        logger.error(result.error)
        return 1

    payload = result.model_dump_json(by_alias=True, indent=2)
    if args.output:
        Path(args.output).parent.mkdir(parents=True, exist_ok=True)
        Path(args.output).write_text(payload, encoding='utf-8')
        logger.info(f"Proposal data written to {args.output}")

    metrics, roi = result.metrics, result.roi_projections
    print(f"\nClaims analysed: {metrics.total_claims} ({metrics.date_range_text})")
    print(f"Denial rate: {metrics.denial_rate:.1f}%  Collection efficiency: {metrics.collection_efficiency:.1f}%")
    print(f"Health score: {metrics.health_score:.0f}/100")
    print("\nAnnual benefit (conservative / expected / optimistic):")
    print(f"  {result.template_data.total_benefit_conservative} / "
          f"{result.template_data.total_benefit_expected} / "
          f"{result.template_data.total_benefit_optimistic}")
    print(f"Payback period: {roi.payback_period} months")
    return 0

if __name__ == "__main__":
    sys.exit(main())
