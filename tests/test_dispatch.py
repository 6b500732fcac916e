"""
Unit tests for field name based dispatch.

Tests check / sanitize / check_and_sanitize, whole record checks, nested
input lookup, required keys and version helpers.
"""

from decimal import Decimal

import pytest

from sepa_utilities.sepa import dispatch
from sepa_utilities.sepa.constants import SchemaVersion, TransactionType
from sepa_utilities.sepa.dispatch import CheckOptions, FieldKind
from sepa_utilities.sepa.transliteration import SanitizeFlags


class TestCheck:
    """Test check() routing."""

    def test_unknown_field(self):
        result = dispatch.check("tetstfield", "random input")
        assert not result.valid
        assert result.errors

    def test_field_name_is_case_insensitive(self):
        assert dispatch.check("iban", "DE21700519950000007229").value == "DE21700519950000007229"
        assert dispatch.check("IbAN", "DE21700519950000007229").value == "DE21700519950000007229"

    def test_result_carries_field_name(self):
        assert dispatch.check("IbAN", "DE21700519950000007229").field == "IbAN"

    def test_field_kind_member(self):
        assert dispatch.check(FieldKind.CCY, "eur").value == "EUR"

    def test_currency(self):
        assert dispatch.check("ccy", "Eur").value == "EUR"
        for value in ("Eu", "€", "euro"):
            assert not dispatch.check("ccy", value)

    def test_amount(self):
        assert dispatch.check("instdamt", "1.234,56").value == Decimal("1234.56")
        assert not dispatch.check("instdamt", "0.005")

    def test_boolean_false_is_valid(self):
        result = dispatch.check("btchBookg", "false")
        assert result.valid
        assert result.value == "false"

    def test_sequence_type(self):
        assert dispatch.check("seqtp", "RCUR").value == "RCUR"
        assert not dispatch.check("seqtp", "TEST")

    def test_dates(self):
        assert dispatch.check("dtofsgntr", "2014-10-19").value == "2014-10-19"
        assert dispatch.check("reqdColltnDt", "2014-10-19")
        assert not dispatch.check("reqdExctnDt", "19.10.2014")

    def test_passthrough_fields(self):
        assert dispatch.check("orgnlDbtrAgt", "SMNDA").value == "SMNDA"
        assert dispatch.check("ref", "anything").value == "anything"

    def test_names(self):
        assert dispatch.check("cdtr", "Name of Creditor")
        assert not dispatch.check("cdtr", "")
        assert not dispatch.check("dbtr", "x" * 71)
        assert dispatch.check("ultmtCdtr", "").value == ""

    def test_text_lengths(self):
        assert dispatch.check("rmtInf", "x" * 140)
        assert not dispatch.check("rmtInf", "x" * 141)
        assert dispatch.check("elctrncSgntr", "x" * 1025)
        assert not dispatch.check("orgid_id", "x" * 36)


class TestCheckOptions:
    """Test option handling."""

    def test_camel_case_mapping(self):
        result = dispatch.check("iban", "DE21700529950000007229", {"checkByCheckSum": False})
        assert result.value == "DE21700529950000007229"

    def test_snake_case_model(self):
        options = CheckOptions(force_long_bic=True, force_long_bic_str="ABC")
        assert dispatch.check("bic", "ASDFGHJ0", options).value == "ASDFGHJ0ABC"

    def test_bic_aliases(self):
        assert dispatch.check("orgnlDbtrAgt_bic", "ASDFGHJ0").value == "ASDFGHJ0"
        assert dispatch.check("orgid_bob", "ASDFGHJ0").value == "ASDFGHJ0"

    def test_empty_bic(self):
        assert not dispatch.check("bic", "")
        assert dispatch.check("bic", "", {"allowEmptyBic": True}).value == ""

    def test_version_by_name(self):
        options = CheckOptions(version="pain.008.003.02")
        assert options.version is SchemaVersion.PAIN_008_003_02

    def test_unknown_version_is_invalid(self):
        assert not dispatch.check("mndtid", "Mandate-Id", version=12345)
        assert not dispatch.check("mndtid", "Mandate-Id", {"version": "nonsense"})

    def test_unusable_options(self):
        assert not dispatch.check("iban", "DE21700519950000007229", ["not", "options"])


class TestVersionDependentChecks:
    """Test fields whose rules depend on the schema version."""

    def test_mandate_id_whitespace(self):
        assert dispatch.check("orgnlmndtid", "MandtId123").value == "MandtId123"
        assert dispatch.check(
            "orgnlmndtid", "MandtId123", version=SchemaVersion.PAIN_008_001_02_GBIC
        ).value == "MandtId123"
        assert not dispatch.check("orgnlmndtid", "MandtId 123")
        assert dispatch.check(
            "orgnlmndtid", "MandtId 123", version=SchemaVersion.PAIN_008_001_02_GBIC
        ).value == "MandtId 123"
        assert dispatch.check("mndtId", "MandtId 123", version=SchemaVersion.PAIN_008_001_02)
        assert not dispatch.check("mndtId", "MandtId 123", version=SchemaVersion.PAIN_008_003_02)

    def test_local_instrument(self):
        assert dispatch.check("lclInstrm", "CORE")
        assert not dispatch.check("lclInstrm", "COR1")
        assert dispatch.check("lclInstrm", "COR1", version=SchemaVersion.PAIN_008_003_02)

    def test_initiating_party_id(self):
        assert dispatch.check("initgPtyId", "ID-1234").value == "ID-1234"
        assert not dispatch.check(
            "initgPtyId", "ID-1234", version=SchemaVersion.PAIN_008_001_02_AUSTRIAN_003
        )


class TestAddresses:
    """Test address lines and postal addresses."""

    def test_single_line(self):
        assert dispatch.check("adrLine", "Main Street 1").value == "Main Street 1"

    def test_two_lines(self):
        result = dispatch.check("adrLine", ["Main Street 1", "12345 City"])
        assert result.value == ["Main Street 1", "12345 City"]

    def test_too_many_lines(self):
        assert not dispatch.check("adrLine", ["a", "b", "c"])
        assert not dispatch.check("adrLine", [])

    def test_postal_address(self):
        result = dispatch.check("pstlAdr", {"ctry": "de", "adrLine": ["Main Street 1", "City"]})
        assert result.value == {"ctry": "DE", "adrLine": ["Main Street 1", "City"]}

    def test_postal_address_aliases(self):
        assert dispatch.check("cdtrPstlAdr", {"ctry": "FR"})
        assert dispatch.check("dbtrPstlAdr", {"adrLine": "Main Street 1"})

    def test_postal_address_unknown_key(self):
        assert not dispatch.check("pstlAdr", {"ctry": "DE", "city": "Berlin"})

    def test_postal_address_invalid_part(self):
        assert not dispatch.check("pstlAdr", {"ctry": "XX"})
        assert not dispatch.check("pstlAdr", {})
        assert not dispatch.check("pstlAdr", "DE")


class TestSanitize:
    """Test sanitize() and check_and_sanitize()."""

    def test_name(self):
        assert dispatch.sanitize("cdtr", "Jürgen Müller & Söhne").value == "Jurgen Muller Sohne"

    def test_flags(self):
        result = dispatch.sanitize("cdtr", "Jürgen Müller", SanitizeFlags.ALT_REPLACEMENT_GERMAN)
        assert result.value == "Juergen Mueller"

    def test_truncation(self):
        assert dispatch.sanitize("rmtInf", "x" * 200).value == "x" * 140
        assert dispatch.sanitize("orgid_id", "x" * 50).value == "x" * 35

    def test_empty_result(self):
        assert not dispatch.sanitize("cdtr", "&&")
        assert dispatch.sanitize("ultmtCdtr", "&&").value == ""

    def test_legacy_spellings(self):
        assert dispatch.sanitize("ultmtDebtr", "Ärger").value == "Arger"
        assert dispatch.sanitize("ultmtCdrt", "Ärger").value == "Arger"

    def test_address_lines(self):
        assert dispatch.sanitize("adrLine", ["Straße 1", "Köln"]).value == ["Strase 1", "Koln"]
        assert not dispatch.sanitize("adrLine", ["a", "b", "c"])

    def test_not_sanitizable(self):
        assert not dispatch.sanitize("iban", "DE21 7005")
        assert not dispatch.sanitize("cdtr", 42)

    def test_check_and_sanitize(self):
        assert dispatch.check_and_sanitize("dbtr", "Name of Debtor").value == "Name of Debtor"
        assert dispatch.check_and_sanitize("dbtr", "Ärger GmbH").value == "Arger GmbH"

    def test_check_and_sanitize_failure(self):
        result = dispatch.check_and_sanitize("iban", "ASDF")
        assert not result.valid
        assert result.field == "iban"


class TestCheckAndSanitizeAll:
    """Test whole record checks."""

    def test_valid_collection(self, sample_collection):
        report = dispatch.check_and_sanitize_all(sample_collection)
        assert report.valid
        assert report.values["btchBookg"] == "true"

    def test_valid_direct_debit(self, sample_direct_debit):
        report = dispatch.check_and_sanitize_all(sample_direct_debit)
        assert report.valid
        assert report.values["instdAmt"] == Decimal("2.34")

    def test_invalid_field_is_reported(self, sample_collection):
        sample_collection["iban"] = "ASDF"
        report = dispatch.check_and_sanitize_all(sample_collection)
        assert not report.valid
        assert report.invalid_fields == ["iban"]
        assert "iban" not in report.values

    def test_sanitized_values(self, sample_collection):
        sample_collection["dbtr"] = "Größe AG"
        report = dispatch.check_and_sanitize_all(sample_collection)
        assert report.values["dbtr"] == "Grose AG"

    def test_requires_mapping(self):
        with pytest.raises(TypeError):
            dispatch.check_and_sanitize_all(["iban"])


class TestNestedInput:
    """Test key path lookup."""

    def test_check_input(self):
        data = {"debtor": {"iban": "DE21700519950000007229"}}
        assert dispatch.check_input("iban", data, ["debtor", "iban"]).valid

    def test_missing_path(self):
        assert not dispatch.check_input("iban", {"debtor": {}}, ["debtor", "iban"])
        assert not dispatch.check_input("iban", {"debtor": None}, ["debtor", "iban"])

    def test_single_key(self):
        assert dispatch.sanitize_input("cdtr", {"cdtr": "Müller"}, "cdtr").value == "Muller"

    def test_check_and_sanitize_input(self):
        data = {"collection": {"dbtr": "Ärger"}}
        assert dispatch.check_and_sanitize_input("dbtr", data, ("collection", "dbtr")).value == "Arger"


class TestRequiredKeys:
    """Test required keys per schema version."""

    def test_collection_keys(self, sample_collection):
        without_bic = {k: v for k, v in sample_collection.items() if k != "bic"}
        assert dispatch.check_required_collection_keys(sample_collection, SchemaVersion.PAIN_001_002_03)
        assert not dispatch.check_required_collection_keys(without_bic, SchemaVersion.PAIN_001_002_03)
        assert dispatch.check_required_collection_keys(without_bic, SchemaVersion.PAIN_001_003_03)

    def test_payment_keys(self, sample_direct_debit):
        assert dispatch.check_required_payment_keys(sample_direct_debit, SchemaVersion.PAIN_008_002_02)

    def test_missing_keys(self):
        missing = dispatch.missing_required_collection_keys({"pmtInfId": "X"}, SchemaVersion.PAIN_008_001_02_CH_03)
        assert missing == ["lclInstrm", "seqTp", "cdtr", "iban", "lsv"]

    def test_none_counts_as_missing(self, sample_direct_debit):
        sample_direct_debit["mndtId"] = None
        assert dispatch.missing_required_payment_keys(sample_direct_debit, 800102) == ["mndtId"]

    def test_keys_are_case_sensitive(self):
        data = {"pmtinfid": "X", "dbtr": "Name", "iban": "DE21700519950000007229"}
        assert not dispatch.check_required_collection_keys(data, SchemaVersion.PAIN_001_001_03)

    def test_unknown_version(self, sample_collection):
        assert not dispatch.check_required_collection_keys(sample_collection, 12345)
        assert dispatch.missing_required_payment_keys({}, 12345) is None

    def test_every_version_has_keys(self):
        for version in SchemaVersion:
            assert version in dispatch.REQUIRED_COLLECTION_KEYS
            assert version in dispatch.REQUIRED_PAYMENT_KEYS


class TestKeyHelpers:
    """Test contains_all_keys and contains_not_any_key."""

    def test_contains_all_keys(self):
        assert not dispatch.contains_all_keys({"a": 1, "b": 2, "d": 2}, ["a", "b", "c"])
        assert dispatch.contains_all_keys({"a": 1, "b": 2, "d": 2}, ["a", "b", "d"])
        assert not dispatch.contains_all_keys({"a": None}, ["a"])

    def test_contains_not_any_key(self):
        assert dispatch.contains_not_any_key({"a": 1, "b": 2, "d": 2}, ["e", "f", "g"])
        assert not dispatch.contains_not_any_key({"a": 1, "b": 2, "d": 2}, ["e", "f", "b"])


class TestVersionHelpers:
    """Test version_to_string and version_to_transaction_type."""

    @pytest.mark.parametrize("version, expected", [
        (SchemaVersion.PAIN_001_001_03, "pain.001.001.03"),
        (SchemaVersion.PAIN_001_001_03_GBIC, "pain.001.001.03"),
        (SchemaVersion.PAIN_001_002_03, "pain.001.002.03"),
        (SchemaVersion.PAIN_001_003_03, "pain.001.003.03"),
        (SchemaVersion.PAIN_008_001_02, "pain.008.001.02"),
        (SchemaVersion.PAIN_008_001_02_GBIC, "pain.008.001.02"),
        (SchemaVersion.PAIN_008_001_02_AUSTRIAN_003, "pain.008.001.02"),
        (SchemaVersion.PAIN_008_002_02, "pain.008.002.02"),
        (SchemaVersion.PAIN_008_003_02, "pain.008.003.02"),
    ])
    def test_version_to_string(self, version, expected):
        assert dispatch.version_to_string(version) == expected

    def test_version_to_string_unknown(self):
        assert dispatch.version_to_string(12345) is None

    def test_transaction_type(self):
        assert dispatch.version_to_transaction_type(100103) is TransactionType.CREDIT_TRANSFER
        assert dispatch.version_to_transaction_type("PAIN_008_001_02_CH_03") is TransactionType.DIRECT_DEBIT
        assert dispatch.version_to_transaction_type(None) is None
