"""
Integration tests for the SEPA validation HTTP endpoints.

Tests /v1/sepa field checks, required keys, cross checks, the calendar
and the health probes.
"""

import pytest
from httpx import AsyncClient

from sepa_utilities.api import validation


class TestCheckEndpoint:
    """Test POST /v1/sepa/check."""

    @pytest.mark.asyncio
    async def test_valid_iban(self, async_client: AsyncClient):
        """Normalized IBAN is returned."""
        response = await async_client.post(
            "/v1/sepa/check",
            json={"field": "iban", "value": "DE21 7005 1995 0000 0072 29"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is True
        assert data["value"] == "DE21700519950000007229"
        assert data["field"] == "iban"

    @pytest.mark.asyncio
    async def test_invalid_value_is_not_an_http_error(self, async_client: AsyncClient):
        """Invalid values come back in the body."""
        response = await async_client.post(
            "/v1/sepa/check",
            json={"field": "iban", "value": "DE21700529950000007229"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is False
        assert data["value"] is None
        assert data["errors"]

    @pytest.mark.asyncio
    async def test_amount_as_decimal_string(self, async_client: AsyncClient):
        """Amounts are exact decimal strings."""
        response = await async_client.post(
            "/v1/sepa/check",
            json={"field": "instdAmt", "value": "1.234,56"},
        )
        assert response.json()["value"] == "1234.56"

    @pytest.mark.asyncio
    async def test_version_and_options(self, async_client: AsyncClient):
        """Version by name and camelCase options."""
        response = await async_client.post(
            "/v1/sepa/check",
            json={"field": "mndtId", "value": "MandtId 123", "version": "PAIN_008_001_02_GBIC"},
        )
        assert response.json()["valid"] is True

        response = await async_client.post(
            "/v1/sepa/check",
            json={"field": "bic", "value": "ASDFGHJ0", "options": {"forceLongBic": True}},
        )
        assert response.json()["value"] == "ASDFGHJ0XXX"

    @pytest.mark.asyncio
    async def test_unknown_version_is_invalid(self, async_client: AsyncClient):
        response = await async_client.post(
            "/v1/sepa/check",
            json={"field": "mndtId", "value": "Mandate-Id", "version": 12345},
        )
        assert response.status_code == 200
        assert response.json()["valid"] is False

    @pytest.mark.asyncio
    async def test_default_version_does_not_override_options(self, async_client: AsyncClient, monkeypatch):
        """A version given in options wins over the configured default."""
        monkeypatch.setattr(validation.settings, "default_version", "PAIN_008_003_02")

        response = await async_client.post(
            "/v1/sepa/check",
            json={"field": "mndtId", "value": "MandtId 123", "options": {"version": "PAIN_008_001_02"}},
        )
        assert response.json()["valid"] is True

        response = await async_client.post(
            "/v1/sepa/check",
            json={"field": "mndtId", "value": "MandtId 123"},
        )
        assert response.json()["valid"] is False

    @pytest.mark.asyncio
    async def test_malformed_body(self, async_client: AsyncClient):
        """Missing field name is rejected by request validation."""
        response = await async_client.post("/v1/sepa/check", json={"value": "x"})
        assert response.status_code == 422


class TestSanitizeEndpoints:
    """Test sanitize, check-and-sanitize and check-all."""

    @pytest.mark.asyncio
    async def test_sanitize(self, async_client: AsyncClient):
        response = await async_client.post(
            "/v1/sepa/sanitize",
            json={"field": "cdtr", "value": "Jürgen Müller", "flags": 1},
        )
        assert response.json()["value"] == "Juergen Mueller"

    @pytest.mark.asyncio
    async def test_sanitize_negative_flags(self, async_client: AsyncClient):
        response = await async_client.post(
            "/v1/sepa/sanitize",
            json={"field": "cdtr", "value": "x", "flags": -1},
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_check_and_sanitize(self, async_client: AsyncClient):
        response = await async_client.post(
            "/v1/sepa/check-and-sanitize",
            json={"field": "dbtr", "value": "Ärger GmbH"},
        )
        data = response.json()
        assert data["valid"] is True
        assert data["value"] == "Arger GmbH"

    @pytest.mark.asyncio
    async def test_check_all(self, async_client: AsyncClient, sample_direct_debit: dict):
        response = await async_client.post(
            "/v1/sepa/check-all",
            json={"fields": sample_direct_debit},
        )
        data = response.json()
        assert data["valid"] is True
        assert data["invalidFields"] == []
        assert data["values"]["instdAmt"] == "2.34"

    @pytest.mark.asyncio
    async def test_check_all_reports_fields(self, async_client: AsyncClient, sample_collection: dict):
        sample_collection["iban"] = "ASDF"
        response = await async_client.post(
            "/v1/sepa/check-all",
            json={"fields": sample_collection},
        )
        data = response.json()
        assert data["valid"] is False
        assert data["invalidFields"] == ["iban"]


class TestRequiredKeysEndpoint:
    """Test POST /v1/sepa/required-keys and GET /v1/sepa/versions."""

    @pytest.mark.asyncio
    async def test_complete_collection(self, async_client: AsyncClient, sample_collection: dict):
        response = await async_client.post(
            "/v1/sepa/required-keys",
            json={"version": 100203, "collection": sample_collection},
        )
        data = response.json()
        assert data["valid"] is True
        assert data["version"] == "PAIN_001_002_03"
        assert data["messageType"] == "pain.001.002.03"
        assert data["missingCollectionKeys"] == []

    @pytest.mark.asyncio
    async def test_missing_keys(self, async_client: AsyncClient):
        response = await async_client.post(
            "/v1/sepa/required-keys",
            json={"version": "PAIN_008_001_02", "payment": {"pmtId": "X", "instdAmt": 1}},
        )
        data = response.json()
        assert data["valid"] is False
        assert data["missingPaymentKeys"] == ["mndtId", "dtOfSgntr", "dbtr", "iban"]

    @pytest.mark.asyncio
    async def test_unknown_version(self, async_client: AsyncClient):
        response = await async_client.post(
            "/v1/sepa/required-keys",
            json={"version": 12345, "collection": {}},
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_versions(self, async_client: AsyncClient):
        response = await async_client.get("/v1/sepa/versions")
        assert response.status_code == 200
        versions = {item["name"]: item for item in response.json()}
        assert len(versions) == 11
        assert versions["PAIN_008_003_02"]["localInstruments"] == ["B2B", "COR1", "CORE"]
        assert versions["PAIN_001_001_03"]["transactionType"] == "CREDIT_TRANSFER"


class TestCrossCheckEndpoint:
    """Test POST /v1/sepa/iban/cross-check."""

    @pytest.mark.asyncio
    async def test_matching(self, async_client: AsyncClient):
        response = await async_client.post(
            "/v1/sepa/iban/cross-check",
            json={"iban": "GB29NWBK60161331926819", "bic": "1234GG12XXX"},
        )
        data = response.json()
        assert data["bicMatchesIban"] is True
        assert data["national"] is None

    @pytest.mark.asyncio
    async def test_counterparty(self, async_client: AsyncClient):
        response = await async_client.post(
            "/v1/sepa/iban/cross-check",
            json={
                "iban": "DE87200500001234567890",
                "bic": "BELADEBEXXX",
                "counterpartyIban": "FR1420041010050500013M02606",
            },
        )
        data = response.json()
        assert data["bicMatchesIban"] is True
        assert data["national"] is False
        assert data["eea"] is True


class TestCalendarEndpoints:
    """Test the TARGET2 calendar endpoints."""

    @pytest.mark.asyncio
    async def test_target_day(self, async_client: AsyncClient):
        response = await async_client.get("/v1/sepa/calendar/target-day", params={"date": "2014-12-25"})
        assert response.json() == {"date": "2014-12-25", "isTargetDay": False}

    @pytest.mark.asyncio
    async def test_next_target_day(self, async_client: AsyncClient):
        response = await async_client.get(
            "/v1/sepa/calendar/next-target-day",
            params={"start": "2014-10-15", "offset": 3},
        )
        assert response.status_code == 200
        assert response.json()["date"] == "2014-10-20"

    @pytest.mark.asyncio
    async def test_next_target_day_bad_input(self, async_client: AsyncClient):
        response = await async_client.get(
            "/v1/sepa/calendar/next-target-day",
            params={"start": "2014-10-15", "offset": -1},
        )
        assert response.status_code == 400

        response = await async_client.get(
            "/v1/sepa/calendar/next-target-day",
            params={"start": "15.10.2014"},
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_execution_date(self, async_client: AsyncClient):
        response = await async_client.get(
            "/v1/sepa/calendar/execution-date",
            params={"date": "23.10.2014", "minOffset": 8, "today": "15.10.2014", "format": "%d.%m.%Y"},
        )
        data = response.json()
        assert data["date"] == "2014-10-27"
        assert data["adjusted"] is True
        assert data["minOffset"] == 8

    @pytest.mark.asyncio
    async def test_easter(self, async_client: AsyncClient):
        response = await async_client.get("/v1/sepa/calendar/easter/2070")
        data = response.json()
        assert data["easterSunday"] == "2070-03-30"
        assert data["goodFriday"] == "2070-03-28"
        assert data["easterMonday"] == "2070-03-31"

    @pytest.mark.asyncio
    async def test_easter_out_of_range(self, async_client: AsyncClient):
        response = await async_client.get("/v1/sepa/calendar/easter/0")
        assert response.status_code == 400


class TestHealth:
    """Test service probes."""

    @pytest.mark.asyncio
    async def test_health(self, async_client: AsyncClient):
        response = await async_client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_ready(self, async_client: AsyncClient):
        response = await async_client.get("/health/ready")
        assert response.json()["status"] == "ready"

    @pytest.mark.asyncio
    async def test_root(self, async_client: AsyncClient):
        response = await async_client.get("/")
        assert response.json()["documentation"] == "/docs"
