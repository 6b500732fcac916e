"""
SEPA Field Validators

Structural validation for the values that go into pain.001 / pain.008 files:
IBAN, BIC, creditor identifier, amounts, codes, identifiers, text and dates.

A valid value does not have to exist: nothing here asks a bank or directory
whether an account or institution is real. Every check returns a
ValidationResult carrying the normalized value.
"""

import logging
import re
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from .checksum import checksum_is_valid, letters_to_digits
from .constants import (
    BIC_IBAN_COUNTRY_CODE_EXCEPTIONS,
    BIC_PATTERN,
    CATEGORY_PURPOSE_CODES,
    CREDITOR_IDENTIFIER_PATTERN,
    CURRENCY_PATTERN,
    EEA_COUNTRIES,
    EXCEPTIONAL_BICS,
    IBAN_COUNTRY_SHAPES,
    IBAN_PATTERN,
    LOCAL_INSTRUMENTS_BY_VERSION,
    PURPOSE_CODES,
    RESTRICTED_IDENTIFICATION_SEPA1_PATTERN,
    RESTRICTED_IDENTIFICATION_SEPA2_PATTERN,
    SEPA_CHARSET_PATTERN,
    SEQUENCE_TYPES,
    SchemaVersion,
)
from .results import ValidationResult

logger = logging.getLogger(__name__)

WHITESPACE = re.compile(r"\s+")
NON_ALPHANUMERIC = re.compile(r"[^A-Z0-9]")

AMOUNT_MIN = Decimal("0.01")
AMOUNT_MAX = Decimal("999999999.99")
CENT = Decimal("0.01")

# 1234.56 / 1,234.56 / 1,234,567 / .50 / 5.
DOT_DECIMAL_AMOUNT = re.compile(r"^[+-]?(\d{1,3}(,\d{3})+(\.\d*)?|\d*\.\d+|\d+\.?\d*)$")

TRUE_VALUES = frozenset({"1", "true", "on", "yes"})
FALSE_VALUES = frozenset({"0", "false", "off", "no"})

DATE_FORMAT = "%Y-%m-%d"
CREATE_DATE_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S"


def remove_whitespace(value: str) -> str:
    return WHITESPACE.sub("", value)


# =============================================================================
# Account and Institution Identifiers
# =============================================================================

def check_iban(
    iban: Any,
    check_by_format: bool = True,
    check_by_checksum: bool = True,
) -> ValidationResult:
    """
    Validate an IBAN.

    Whitespace is removed and letters upper cased before checking. The
    country specific shape is only enforced for countries in the shape table.

    Args:
        iban: Raw IBAN.
        check_by_format: Match the country specific structure.
        check_by_checksum: Verify the MOD 97-10 check digits.

    Returns:
        ValidationResult with the compact upper case IBAN.
    """
    if not isinstance(iban, str):
        return ValidationResult.invalid(error="IBAN must be a string")

    iban = remove_whitespace(iban).upper()

    if not IBAN_PATTERN.match(iban):
        return ValidationResult.invalid(error="IBAN has an invalid structure")

    if check_by_format:
        shape = IBAN_COUNTRY_SHAPES.get(iban[:2])
        if shape is not None and not shape.match(iban):
            return ValidationResult.invalid(error=f"IBAN does not match the format for {iban[:2]}")

    if check_by_checksum:
        # Move country code and check digits to the end
        rearranged = letters_to_digits(iban[4:] + iban[:4])
        if not checksum_is_valid(rearranged):
            return ValidationResult.invalid(error="IBAN checksum mismatch")

    return ValidationResult.ok(iban)


def check_bic(
    bic: Any,
    allow_empty_bic: bool = False,
    force_long_bic: bool = False,
    force_long_bic_str: Optional[str] = None,
) -> ValidationResult:
    """
    Validate a BIC (8 or 11 characters).

    Args:
        bic: Raw BIC.
        allow_empty_bic: An empty BIC is valid and returned as "".
        force_long_bic: Extend 8 character BICs with force_long_bic_str.
        force_long_bic_str: Branch code appended to short BICs (default "XXX").
    """
    if not isinstance(bic, str):
        return ValidationResult.invalid(error="BIC must be a string")

    bic = remove_whitespace(bic)

    if force_long_bic and len(bic) == 8:
        bic += force_long_bic_str or "XXX"

    if not bic and allow_empty_bic:
        return ValidationResult.ok("")

    bic = bic.upper()

    if BIC_PATTERN.match(bic):
        return ValidationResult.ok(bic)

    return ValidationResult.invalid(error="BIC has an invalid structure")


def check_restricted_person_identifier(value: Any) -> ValidationResult:
    """RestrictedPersonIdentifierSEPA, the shape of a creditor identifier."""
    if isinstance(value, str) and CREDITOR_IDENTIFIER_PATTERN.match(value):
        return ValidationResult.ok(value)
    return ValidationResult.invalid()


def check_creditor_identifier(ci: Any) -> ValidationResult:
    """
    Validate a SEPA creditor identifier (e.g. DE98ZZZ09999999999).

    The creditor business code (positions 5-7) is not part of the checksum,
    so any value is accepted there. Returns the compact upper case id.
    """
    if not isinstance(ci, str):
        return ValidationResult.invalid(error="Creditor identifier must be a string")

    ci = remove_whitespace(ci).upper()

    if not check_restricted_person_identifier(ci):
        return ValidationResult.invalid(error="Creditor identifier has an invalid structure")

    national_identifier = ci[7:]
    check = ci[:4]
    concat = NON_ALPHANUMERIC.sub("", national_identifier + check)

    if checksum_is_valid(letters_to_digits(concat)):
        return ValidationResult.ok(ci)

    return ValidationResult.invalid(error="Creditor identifier checksum mismatch")


# =============================================================================
# Cross Checks
# =============================================================================

def is_national_transaction(iban1: str, iban2: str) -> bool:
    """
    True if the second IBAN's country code starts the first IBAN.

    Neither IBAN is validated.
    """
    iban1 = remove_whitespace(iban1)
    iban2 = remove_whitespace(iban2)
    # Prefix containment, not strict equality of the two country codes
    return iban1.upper().startswith(iban2[:2].upper())


def is_eea_transaction(iban1: str, iban2: str) -> bool:
    """True if both IBANs belong to the European Economic Area."""
    iban1 = remove_whitespace(iban1)
    iban2 = remove_whitespace(iban2)
    return iban1[:2].upper() in EEA_COUNTRIES and iban2[:2].upper() in EEA_COUNTRIES


def cross_check_iban_bic(iban: str, bic: str) -> bool:
    """
    Check that IBAN and BIC may belong together by country code.

    Overseas territories and crown dependencies use BICs of their own
    country code with IBANs of FR or GB.
    """
    if bic.upper() in EXCEPTIONAL_BICS:
        return True

    iban = remove_whitespace(iban)
    bic = remove_whitespace(bic)

    iban_country_code = iban[:2].upper()
    bic_country_code = bic[4:6].upper()

    return (
        iban_country_code == bic_country_code
        or bic_country_code in BIC_IBAN_COUNTRY_CODE_EXCEPTIONS.get(iban_country_code, ())
    )


# =============================================================================
# Amounts and Flags
# =============================================================================

def _parse_amount(amount: Any) -> Optional[Decimal]:
    if isinstance(amount, bool):
        return None
    if isinstance(amount, Decimal):
        return amount if amount.is_finite() else None
    if isinstance(amount, (int, float)):
        text = repr(amount) if isinstance(amount, float) else str(amount)
    elif isinstance(amount, str):
        text = amount.strip()
    else:
        return None

    for candidate in (text, text.translate(str.maketrans(",.", ".,"))):
        if DOT_DECIMAL_AMOUNT.match(candidate):
            try:
                return Decimal(candidate.replace(",", ""))
            except InvalidOperation:
                return None
    return None


def check_amount(amount: Any) -> ValidationResult:
    """
    Validate an instructed amount.

    Accepts numbers and strings using ',' or '.' as decimal separator and the
    other one as thousands separator: 1234.56, 1,234.56, 1.234,56 and 1234,56
    are all 1234.56, and .50 or ,50 is 0.50. The amount must lie in
    [0.01, 999999999.99] and have at most two decimal places, compared on
    whole cents.

    Returns:
        ValidationResult with the amount as a Decimal quantized to cents.
    """
    value = _parse_amount(amount)
    if value is None:
        return ValidationResult.invalid(error="Amount is not a number")

    if value < AMOUNT_MIN or value > AMOUNT_MAX:
        return ValidationResult.invalid(error="Amount is out of range")

    cents = value.quantize(CENT)
    if cents != value:
        return ValidationResult.invalid(error="Amount has more than two decimal places")

    return ValidationResult.ok(cents)


def check_boolean(value: Any) -> ValidationResult:
    """
    Validate a boolean-like field value (BtchBookg, AmdmntInd).

    Returns the canonical string "true" or "false".
    """
    if isinstance(value, bool):
        return ValidationResult.ok("true" if value else "false")
    if isinstance(value, int):
        value = str(value)
    if not isinstance(value, str):
        return ValidationResult.invalid()

    normalized = value.strip().lower()
    if normalized in TRUE_VALUES:
        return ValidationResult.ok("true")
    if normalized in FALSE_VALUES:
        return ValidationResult.ok("false")

    return ValidationResult.invalid(error="Value is not a boolean")


# =============================================================================
# Code Lists
# =============================================================================

def _check_code(value: Any, valid_codes) -> ValidationResult:
    if not isinstance(value, str):
        return ValidationResult.invalid()
    code = value.upper()
    if code in valid_codes:
        return ValidationResult.ok(code)
    return ValidationResult.invalid(error=f"Unknown code: {value}")


def check_currency_code(ccy: Any) -> ValidationResult:
    """Format check for ActiveOrHistoricCurrencyCode; the code may not exist."""
    if isinstance(ccy, str) and CURRENCY_PATTERN.match(ccy.upper()):
        return ValidationResult.ok(ccy.upper())
    return ValidationResult.invalid(error="Currency code must have three letters")


def check_country_code(ctry: Any) -> ValidationResult:
    return _check_code(ctry, IBAN_COUNTRY_SHAPES)


def check_sequence_type(seq_tp: Any) -> ValidationResult:
    return _check_code(seq_tp, SEQUENCE_TYPES)


def check_category_purpose(value: Any) -> ValidationResult:
    return _check_code(value, CATEGORY_PURPOSE_CODES)


def check_purpose(value: Any) -> ValidationResult:
    return _check_code(value, PURPOSE_CODES)


def check_local_instrument(value: Any, version: Any = None) -> ValidationResult:
    """
    Validate a local instrument code against the codes of a schema version.

    Without a version pain.008.002.02 is assumed. Credit transfer versions
    and unknown versions have no local instruments.
    """
    resolved = SchemaVersion.PAIN_008_002_02 if version is None else SchemaVersion.parse(version)
    valid_codes = LOCAL_INSTRUMENTS_BY_VERSION.get(resolved)
    if valid_codes is None:
        logger.debug(f"No local instruments defined for version {version!r}")
        return ValidationResult.invalid(error=f"Local instrument not supported for version {version}")
    return _check_code(value, valid_codes)


# =============================================================================
# Identifiers and Text
# =============================================================================

def check_restricted_identification_sepa1(value: Any) -> ValidationResult:
    """Message, payment and transfer ids: 1-35 characters, whitespace allowed."""
    if isinstance(value, str) and RESTRICTED_IDENTIFICATION_SEPA1_PATTERN.match(value):
        return ValidationResult.ok(value)
    return ValidationResult.invalid(error="Invalid identification")


def check_restricted_identification_sepa2(value: Any) -> ValidationResult:
    """Mandate ids: 1-35 characters without whitespace."""
    if isinstance(value, str) and RESTRICTED_IDENTIFICATION_SEPA2_PATTERN.match(value):
        return ValidationResult.ok(value)
    return ValidationResult.invalid(error="Invalid identification")


def check_length(value: str, max_length: int) -> bool:
    return len(value) <= max_length


def check_charset(value: str) -> bool:
    return bool(SEPA_CHARSET_PATTERN.match(value))


def check_text(value: Any, max_length: int, allow_empty: bool = True) -> ValidationResult:
    """Validate a free text field against length and the SEPA charset."""
    if not isinstance(value, str):
        return ValidationResult.invalid(error="Text must be a string")
    if not value and not allow_empty:
        return ValidationResult.invalid(error="Text must not be empty")
    if not check_length(value, max_length):
        return ValidationResult.invalid(error=f"Text is longer than {max_length} characters")
    if not check_charset(value):
        return ValidationResult.invalid(error="Text contains characters outside the SEPA charset")
    return ValidationResult.ok(value)


# =============================================================================
# Dates
# =============================================================================

def _check_strict_format(value: Any, fmt: str) -> ValidationResult:
    if not isinstance(value, str):
        return ValidationResult.invalid()
    try:
        parsed = datetime.strptime(value, fmt)
    except ValueError:
        return ValidationResult.invalid(error=f"Date does not match {fmt}")
    # Round trip rejects unpadded or otherwise loose input
    if parsed.strftime(fmt) != value:
        return ValidationResult.invalid(error=f"Date does not match {fmt}")
    return ValidationResult.ok(value)


def check_date_format(value: Any) -> ValidationResult:
    """ISODate: YYYY-MM-DD."""
    return _check_strict_format(value, DATE_FORMAT)


def check_create_date_time(value: Any) -> ValidationResult:
    """ISODateTime without fraction or zone: YYYY-MM-DDTHH:MM:SS."""
    return _check_strict_format(value, CREATE_DATE_TIME_FORMAT)
