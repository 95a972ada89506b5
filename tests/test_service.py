import json

import pandas as pd
import pytest
from fastapi.testclient import TestClient

from config.settings import get_settings
from core.data_loader import load_claims_file
from main import app
from modules.claims.aggregator import EmptyInputError
from modules.proposal.schemas import ProposalParams
from modules.proposal.service import (
    process_claims_for_proposal, run_claims_analysis, with_reporting_defaults,
)
from proposal_report import main as report_main

client = TestClient(app)


def test_process_claims_for_proposal(make_row):
    rows = [make_row(tid="1"), make_row(tid="2", status="Pending")]
    result = process_claims_for_proposal(rows, ProposalParams(hospital_name="City Care"))
    assert result.success is True
    assert result.error is None
    assert result.metrics.total_claims == 2
    assert result.roi_projections.payback_period == 4
    assert result.template_data.hospital_name == "City Care"


def test_process_claims_reports_validation_errors(make_row):
    row = make_row()
    del row['Hospital Name']
    result = process_claims_for_proposal([row])
    assert result.success is False
    assert result.error == "Missing required columns: Hospital Name"
    assert result.metrics is None

    assert process_claims_for_proposal([]).error == "No data found"


def test_reporting_defaults_return_a_new_snapshot(make_row):
    metrics = run_claims_analysis([make_row(tid=None)])
    assert metrics.average_claim_amount == 0

    reported = with_reporting_defaults(metrics)
    assert reported.average_claim_amount == 50000
    assert metrics.average_claim_amount == 0
    assert with_reporting_defaults(reported) is reported


def test_root():
    resp = client.get("/")
    assert resp.status_code == 200


def test_validate_route(make_row):
    row = make_row()
    del row['TID']
    resp = client.post("/proposal/validate", json={"rows": [row]})
    assert resp.status_code == 200
    assert resp.json() == {"valid": False, "error": "Missing required columns: TID"}

    resp = client.post("/proposal/validate", json={"rows": [make_row()]})
    assert resp.json() == {"valid": True}


def test_metrics_route(make_row):
    payload = {
        "rows": [make_row(tid="1"), make_row(tid="1", pkg_code="SG040")],
        "params": {"hospitalName": "City Care", "contactPerson": "Dr. Rao"},
    }
    resp = client.post("/proposal/metrics", json=payload)
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["metrics"]["totalClaims"] == 1
    assert body["metrics"]["totalClaimValue"] == 45600
    assert body["roiProjections"]["roiMultiple"] == 3.5
    assert body["templateData"]["contactPerson"] == "Dr. Rao"


def test_metrics_route_requires_hospital_name(make_row):
    resp = client.post("/proposal/metrics", json={"rows": [make_row()], "params": {}})
    assert resp.status_code == 400
    assert "hospitalName" in resp.json()["detail"]


def test_metrics_route_rejects_invalid_rows():
    resp = client.post(
        "/proposal/metrics",
        json={"rows": [{"TID": "1"}], "params": {"hospitalName": "H"}},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"].startswith("Missing required columns: Patient Name")


def test_routes_enforce_row_limit(make_row, monkeypatch):
    monkeypatch.setenv("MAX_ROWS", "1")
    get_settings.cache_clear()
    try:
        resp = client.post("/proposal/validate", json={"rows": [make_row(), make_row()]})
        assert resp.status_code == 413
    finally:
        monkeypatch.delenv("MAX_ROWS")
        get_settings.cache_clear()


def test_load_claims_csv(tmp_path, make_row):
    path = tmp_path / "claims.csv"
    pd.DataFrame([make_row(tid="1"), make_row(tid="2", query="")]).to_csv(path, index=False)

    df = load_claims_file(path)
    assert len(df) == 2
    assert df.iloc[0]['TID'] == '1'
    assert df.iloc[1]['Query Raised'] == ''
    assert df.iloc[0]['Pkg Rate'] == '22,800'


def test_load_claims_xlsx(tmp_path, make_row):
    path = tmp_path / "claims.xlsx"
    pd.DataFrame([make_row(tid="1")]).to_excel(path, index=False)

    df = load_claims_file(path)
    assert df.iloc[0]['Patient Name'] == 'Asha Devi'
    assert df.iloc[0]['Date of Admission'] == ''


def test_load_claims_rejects_unknown_suffix_and_empty_files(tmp_path):
    with pytest.raises(ValueError):
        load_claims_file(tmp_path / "claims.txt")

    empty = tmp_path / "empty.csv"
    empty.write_text("TID,Patient Name,Hospital Name,Status,Pkg Rate,Approved Amount\n")
    with pytest.raises(EmptyInputError):
        load_claims_file(empty)


def test_report_cli(tmp_path, make_row):
    source = tmp_path / "claims.csv"
    pd.DataFrame([make_row(tid="1"), make_row(tid="2", status="Claim Rejected (Analyser)")]).to_csv(
        source, index=False
    )
    output = tmp_path / "out" / "proposal.json"

    code = report_main([
        "--input", str(source), "--hospital-name", "City Care", "--output", str(output),
    ])
    assert code == 0
    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["metrics"]["rejectedClaims"] == 1
    assert data["templateData"]["hospitalName"] == "City Care"


def test_report_cli_fails_on_bad_input(tmp_path):
    source = tmp_path / "claims.csv"
    source.write_text("TID,Status\n1,Claim Paid\n")
    assert report_main(["--input", str(source), "--hospital-name", "H"]) == 1


def test_report_cli_rejects_legacy_excel(tmp_path):
    source = tmp_path / "claims.xls"
    source.write_bytes(b"\xd0\xcf\x11\xe0")
    assert report_main(["--input", str(source), "--hospital-name", "H"]) == 1

    with pytest.raises(ValueError, match="Unsupported claims file type: .xls"):
        load_claims_file(source)
