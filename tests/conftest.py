"""
Shared fixtures for the SEPA utilities test suite.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


@pytest_asyncio.fixture
async def async_client():
    """HTTP client bound to the FastAPI app without a network socket."""
    from sepa_utilities.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def sample_collection() -> dict:
    """Credit transfer payment collection (pain.001) with optional fields."""
    return {
        "pmtInfId": "PaymentID-1234",
        "dbtr": "Name of Debtor2",
        "iban": "DE21500500001234567897",
        "bic": "BELADEBEXXX",
        "ccy": "EUR",
        "btchBookg": "true",
        "reqdExctnDt": "2013-11-25",
        "ultmtDebtr": "Ultimate Debtor Name",
    }


@pytest.fixture
def sample_direct_debit() -> dict:
    """Single direct debit payment (pain.008) including amendment fields."""
    return {
        "pmtId": "TransferID-1235-1",
        "instdAmt": 2.34,
        "mndtId": "Mandate-Id",
        "dtOfSgntr": "2010-04-12",
        "bic": "BELADEBEXXX",
        "dbtr": "Name of Debtor",
        "iban": "DE87200500001234567890",
        "amdmntInd": "false",
        "elctrncSgntr": "test",
        "ultmtDbtr": "Ultimate Debtor Name",
        "rmtInf": "Remittance Information",
        "orgnlMndtId": "Original-Mandat-ID",
        "orgnlCdtrSchmeId_nm": "Creditor-Identifier Name",
        "orgnlCdtrSchmeId_id": "DE98AAA09999999999",
        "orgnlDbtrAcct_iban": "DE87200500001234567890",
        "orgnlDbtrAgt": "SMNDA",
    }
