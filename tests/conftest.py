import pytest


def _row(**fields):
    row = {
        'TID': '1001',
        'Patient Name': 'Asha Devi',
        'Hospital Name': 'City Care Hospital',
        'Status': 'Claim Paid',
        'Pkg Code': 'SG039A',
        'Pkg Name': 'Cholecystectomy',
        'Pkg Rate': '22,800',
        'Approved Amount': '22,800',
        'Query Raised': '0',
        'Date of Admission': '',
        'Date of Discharge': '',
        'Payment Date': '',
        'Days to Payment': '',
    }
    # keyword-safe aliases for the spaced column names
    aliases = {
        'tid': 'TID', 'status': 'Status', 'pkg_rate': 'Pkg Rate',
        'approved': 'Approved Amount', 'query': 'Query Raised',
        'admitted': 'Date of Admission', 'discharged': 'Date of Discharge',
        'paid_on': 'Payment Date', 'days': 'Days to Payment', 'pkg_code': 'Pkg Code',
    }
    for key, value in fields.items():
        row[aliases.get(key, key)] = value
    return row


@pytest.fixture
def make_row():
    return _row
