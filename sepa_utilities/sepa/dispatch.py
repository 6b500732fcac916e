"""
SEPA Field Dispatch

Routes a named SEPA field and schema version to the right validator or
sanitizer. Field names are the lower cased XML element names used in
pain.001 / pain.008 (msgid, pmtinfid, iban, ...); several names share a
validator, which the CHECKS table makes explicit.

Version dependent rules:
- mndtid / orgnlmndtid allow whitespace only on pain.008.001.02 and its GBIC variant
- lclinstrm codes depend on the direct debit version
- initgptyid is not supported by the Austrian pain.008.001.02 variant
- required collection / payment keys differ per version
"""

import logging
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, Callable, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from .constants import (
    MANDATE_ID_WHITESPACE_VERSIONS,
    MESSAGE_TYPES,
    TEXT_LENGTH_LONG,
    TEXT_LENGTH_SHORT,
    TEXT_LENGTH_SIGNATURE,
    TEXT_LENGTH_VERY_SHORT,
    SchemaVersion,
    TransactionType,
)
from .results import FieldsReport, ValidationResult
from .transliteration import SanitizeFlags, sanitize_text
from . import validators

logger = logging.getLogger(__name__)


# =============================================================================
# Field Names and Options
# =============================================================================

class FieldKind(str, Enum):
    """SEPA field names accepted by check() and sanitize()."""
    # Identifiers
    CI = "ci"
    ORGNL_CDTR_SCHME_ID_ID = "orgnlcdtrschmeid_id"
    MSG_ID = "msgid"
    INSTR_ID = "instrid"
    PMT_ID = "pmtid"
    ESR = "esr"
    MMB_ID = "mmbid"
    LSV = "lsv"
    PMT_INF_ID = "pmtinfid"
    MNDT_ID = "mndtid"
    ORGNL_MNDT_ID = "orgnlmndtid"
    INITG_PTY_ID = "initgptyid"
    ULTMT_DBTR_ID = "ultmtdbtrid"
    ORG_ID_ID = "orgid_id"
    # Names and text
    INITG_PTY = "initgpty"
    CDTR = "cdtr"
    DBTR = "dbtr"
    ORGNL_CDTR_SCHME_ID_NM = "orgnlcdtrschmeid_nm"
    ULTMT_CDTR = "ultmtcdtr"
    ULTMT_DBTR = "ultmtdbtr"
    ULTMT_DEBTR = "ultmtdebtr"      # legacy spelling
    ULTMT_CDRT = "ultmtcdrt"        # legacy spelling
    RMT_INF = "rmtinf"
    ELCTRNC_SGNTR = "elctrncsgntr"
    ADR_LINE = "adrline"
    # Accounts and agents
    IBAN = "iban"
    ORGNL_DBTR_ACCT_IBAN = "orgnldbtracct_iban"
    BIC = "bic"
    ORGNL_DBTR_AGT_BIC = "orgnldbtragt_bic"
    ORG_ID_BOB = "orgid_bob"
    ORGNL_DBTR_AGT = "orgnldbtragt"
    # Amounts, flags and codes
    CCY = "ccy"
    INSTD_AMT = "instdamt"
    BTCH_BOOKG = "btchbookg"
    AMDMNT_IND = "amdmntind"
    SEQ_TP = "seqtp"
    LCL_INSTRM = "lclinstrm"
    PURP = "purp"
    CTGY_PURP = "ctgypurp"
    CTRY = "ctry"
    REF = "ref"
    # Dates
    REQD_EXCTN_DT = "reqdexctndt"
    REQD_COLLTN_DT = "reqdcolltndt"
    DT_OF_SGNTR = "dtofsgntr"
    # Postal addresses
    PSTL_ADR = "pstladr"
    CDTR_PSTL_ADR = "cdtrpstladr"
    DBTR_PSTL_ADR = "dbtrpstladr"

    @classmethod
    def parse(cls, field: Any) -> Optional["FieldKind"]:
        if isinstance(field, cls):
            return field
        if not isinstance(field, str):
            return None
        try:
            return cls(field.strip().lower())
        except ValueError:
            return None


class CheckOptions(BaseModel):
    """
    Per call options for check().

    Accepts both snake_case names and the camelCase keys of the original
    option arrays (checkByFormat, forceLongBic, ...).
    """
    version: Optional[SchemaVersion] = None
    check_by_format: bool = Field(default=True, alias="checkByFormat")
    check_by_checksum: bool = Field(default=True, alias="checkByCheckSum")
    allow_empty_bic: bool = Field(default=False, alias="allowEmptyBic")
    force_long_bic: bool = Field(default=False, alias="forceLongBic")
    force_long_bic_str: str = Field(default="XXX", alias="forceLongBicStr")

    class Config:
        populate_by_name = True
        frozen = True

    @field_validator("version", mode="before")
    @classmethod
    def resolve_version(cls, value):
        if value is None:
            return None
        version = SchemaVersion.parse(value)
        if version is None:
            raise ValueError(f"Unknown schema version: {value}")
        return version


DEFAULT_OPTIONS = CheckOptions()


def _field_name(field: Any) -> str:
    return field.value if isinstance(field, FieldKind) else str(field)


OptionsLike = Union[CheckOptions, Mapping, None]


def resolve_options(options: OptionsLike = None, version: Any = None) -> Optional[CheckOptions]:
    """
    Build CheckOptions from a model, a mapping or None.

    An explicit version overrides the one in options. Returns None if the
    options cannot be understood (e.g. an unknown version).
    """
    try:
        if options is None:
            resolved = DEFAULT_OPTIONS
        elif isinstance(options, CheckOptions):
            resolved = options
        elif isinstance(options, Mapping):
            resolved = CheckOptions.model_validate(dict(options))
        else:
            return None

        if version is not None:
            resolved = CheckOptions.model_validate({**resolved.model_dump(), "version": version})
    except ValidationError as e:
        logger.debug(f"Rejected check options: {e}")
        return None

    return resolved


# =============================================================================
# Check Handlers
# =============================================================================

Handler = Callable[[Any, CheckOptions], ValidationResult]


def _text(max_length: int, allow_empty: bool = True) -> Handler:
    def handler(value: Any, options: CheckOptions) -> ValidationResult:
        return validators.check_text(value, max_length, allow_empty)
    return handler


def _check_mandate_id(value: Any, options: CheckOptions) -> ValidationResult:
    if options.version in MANDATE_ID_WHITESPACE_VERSIONS:
        return validators.check_restricted_identification_sepa1(value)
    return validators.check_restricted_identification_sepa2(value)


def _check_initiating_party_id(value: Any, options: CheckOptions) -> ValidationResult:
    if options.version == SchemaVersion.PAIN_008_001_02_AUSTRIAN_003:
        return ValidationResult.invalid(error="Initiating party id is not supported by this version")
    return validators.check_text(value, TEXT_LENGTH_VERY_SHORT, allow_empty=False)


def _check_address_line(value: Any, options: CheckOptions) -> ValidationResult:
    """A single line, or a list of one or two lines."""
    if isinstance(value, str):
        return validators.check_text(value, TEXT_LENGTH_SHORT)

    if not isinstance(value, (list, tuple)) or not 1 <= len(value) <= 2:
        return ValidationResult.invalid(error="Address needs one or two lines")

    lines = []
    for line in value:
        if not isinstance(line, str):
            return ValidationResult.invalid(error="Address lines must be strings")
        result = validators.check_text(line, TEXT_LENGTH_SHORT)
        if not result:
            return result
        lines.append(result.value)

    return ValidationResult.ok(lines)


POSTAL_ADDRESS_KEYS = frozenset({FieldKind.CTRY.value, FieldKind.ADR_LINE.value})


def _check_postal_address(value: Any, options: CheckOptions) -> ValidationResult:
    """An object with ctry and/or adrline, each checked on its own."""
    if not isinstance(value, Mapping) or not 1 <= len(value) <= 2:
        return ValidationResult.invalid(error="Postal address needs ctry and/or adrline")

    checked = {}
    for key, item in value.items():
        if not isinstance(key, str) or key.lower() not in POSTAL_ADDRESS_KEYS:
            return ValidationResult.invalid(error=f"Unsupported postal address key: {key}")
        result = check(key, item, options)
        if not result:
            return result
        checked[key] = result.value

    return ValidationResult.ok(checked)


def _passthrough(value: Any, options: CheckOptions) -> ValidationResult:
    return ValidationResult.ok(value)


def _check_ci(value, options):
    return validators.check_creditor_identifier(value)


def _check_id(value, options):
    return validators.check_restricted_identification_sepa1(value)


def _check_iban(value, options):
    return validators.check_iban(value, options.check_by_format, options.check_by_checksum)


def _check_bic(value, options):
    return validators.check_bic(
        value,
        allow_empty_bic=options.allow_empty_bic,
        force_long_bic=options.force_long_bic,
        force_long_bic_str=options.force_long_bic_str,
    )


def _check_local_instrument(value, options):
    return validators.check_local_instrument(value, options.version)


def _ignore_options(check_function: Callable[[Any], ValidationResult]) -> Handler:
    return lambda value, options: check_function(value)


CHECKS: dict[FieldKind, Handler] = {
    FieldKind.CI: _check_ci,
    FieldKind.ORGNL_CDTR_SCHME_ID_ID: _check_ci,
    FieldKind.MSG_ID: _check_id,
    FieldKind.INSTR_ID: _check_id,
    FieldKind.PMT_ID: _check_id,
    FieldKind.ESR: _check_id,
    FieldKind.MMB_ID: _check_id,
    FieldKind.LSV: _check_id,
    FieldKind.PMT_INF_ID: _check_id,
    FieldKind.MNDT_ID: _check_mandate_id,
    FieldKind.ORGNL_MNDT_ID: _check_mandate_id,
    FieldKind.INITG_PTY_ID: _check_initiating_party_id,
    FieldKind.ULTMT_DBTR_ID: _text(TEXT_LENGTH_VERY_SHORT),
    FieldKind.ORG_ID_ID: _text(TEXT_LENGTH_VERY_SHORT),
    FieldKind.INITG_PTY: _text(TEXT_LENGTH_SHORT, allow_empty=False),
    FieldKind.CDTR: _text(TEXT_LENGTH_SHORT, allow_empty=False),
    FieldKind.DBTR: _text(TEXT_LENGTH_SHORT, allow_empty=False),
    FieldKind.ORGNL_CDTR_SCHME_ID_NM: _text(TEXT_LENGTH_SHORT),
    FieldKind.ULTMT_CDTR: _text(TEXT_LENGTH_SHORT),
    FieldKind.ULTMT_DBTR: _text(TEXT_LENGTH_SHORT),
    FieldKind.ULTMT_DEBTR: _text(TEXT_LENGTH_SHORT),
    FieldKind.ULTMT_CDRT: _text(TEXT_LENGTH_SHORT),
    FieldKind.RMT_INF: _text(TEXT_LENGTH_LONG),
    FieldKind.ELCTRNC_SGNTR: _text(TEXT_LENGTH_SIGNATURE),
    FieldKind.ADR_LINE: _check_address_line,
    FieldKind.IBAN: _check_iban,
    FieldKind.ORGNL_DBTR_ACCT_IBAN: _check_iban,
    FieldKind.BIC: _check_bic,
    FieldKind.ORGNL_DBTR_AGT_BIC: _check_bic,
    FieldKind.ORG_ID_BOB: _check_bic,
    FieldKind.ORGNL_DBTR_AGT: _passthrough,
    FieldKind.REF: _passthrough,
    FieldKind.CCY: _ignore_options(validators.check_currency_code),
    FieldKind.INSTD_AMT: _ignore_options(validators.check_amount),
    FieldKind.BTCH_BOOKG: _ignore_options(validators.check_boolean),
    FieldKind.AMDMNT_IND: _ignore_options(validators.check_boolean),
    FieldKind.SEQ_TP: _ignore_options(validators.check_sequence_type),
    FieldKind.LCL_INSTRM: _check_local_instrument,
    FieldKind.PURP: _ignore_options(validators.check_purpose),
    FieldKind.CTGY_PURP: _ignore_options(validators.check_category_purpose),
    FieldKind.CTRY: _ignore_options(validators.check_country_code),
    FieldKind.REQD_EXCTN_DT: _ignore_options(validators.check_date_format),
    FieldKind.REQD_COLLTN_DT: _ignore_options(validators.check_date_format),
    FieldKind.DT_OF_SGNTR: _ignore_options(validators.check_date_format),
    FieldKind.PSTL_ADR: _check_postal_address,
    FieldKind.CDTR_PSTL_ADR: _check_postal_address,
    FieldKind.DBTR_PSTL_ADR: _check_postal_address,
}


# =============================================================================
# Sanitize Rules
# =============================================================================

# field -> (max length, empty allowed)
SANITIZE_RULES: dict[FieldKind, tuple[int, bool]] = {
    FieldKind.ORG_ID_ID: (TEXT_LENGTH_VERY_SHORT, True),
    FieldKind.ADR_LINE: (TEXT_LENGTH_SHORT, True),
    FieldKind.ULTMT_CDTR: (TEXT_LENGTH_SHORT, True),
    FieldKind.ULTMT_CDRT: (TEXT_LENGTH_SHORT, True),
    FieldKind.ULTMT_DBTR: (TEXT_LENGTH_SHORT, True),
    FieldKind.ULTMT_DEBTR: (TEXT_LENGTH_SHORT, True),
    FieldKind.ORGNL_CDTR_SCHME_ID_NM: (TEXT_LENGTH_SHORT, False),
    FieldKind.INITG_PTY: (TEXT_LENGTH_SHORT, False),
    FieldKind.CDTR: (TEXT_LENGTH_SHORT, False),
    FieldKind.DBTR: (TEXT_LENGTH_SHORT, False),
    FieldKind.RMT_INF: (TEXT_LENGTH_LONG, True),
}


def _sanitize_value(value: Any, max_length: int, allow_empty: bool, flags: int) -> ValidationResult:
    if not isinstance(value, str):
        return ValidationResult.invalid(error="Only text can be sanitized")
    sanitized = sanitize_text(value, max_length, allow_empty, flags)
    if sanitized is None:
        return ValidationResult.invalid(error="Text is empty after sanitizing")
    return ValidationResult.ok(sanitized)


# =============================================================================
# Public API
# =============================================================================

def check(
    field: Union[str, FieldKind],
    value: Any,
    options: OptionsLike = None,
    version: Any = None,
) -> ValidationResult:
    """
    Check a value for a SEPA field.

    Args:
        field: Field name, case insensitive (see FieldKind).
        value: Raw value.
        options: CheckOptions or a mapping of them.
        version: SchemaVersion, overrides options.version.

    Returns:
        ValidationResult with the normalized value. Unknown fields and
        unusable options give an invalid result.
    """
    kind = FieldKind.parse(field)
    handler = CHECKS.get(kind) if kind else None
    if handler is None:
        logger.debug(f"No check defined for field {field!r}")
        return ValidationResult.invalid(_field_name(field), f"Unknown field: {field}")

    resolved = resolve_options(options, version)
    if resolved is None:
        return ValidationResult.invalid(_field_name(field), "Invalid check options")

    return handler(value, resolved).for_field(_field_name(field))


def sanitize(
    field: Union[str, FieldKind],
    value: Any,
    flags: int = SanitizeFlags.NONE,
) -> ValidationResult:
    """
    Transliterate and truncate a free text field so it fits the SEPA rules.

    Only name, ultimate party, remittance and address fields can be
    sanitized; every other field gives an invalid result.
    """
    kind = FieldKind.parse(field)
    rule = SANITIZE_RULES.get(kind) if kind else None
    if rule is None:
        logger.debug(f"No sanitizer defined for field {field!r}")
        return ValidationResult.invalid(_field_name(field), f"Field cannot be sanitized: {field}")

    max_length, allow_empty = rule

    if kind is FieldKind.ADR_LINE and isinstance(value, (list, tuple)):
        if not 1 <= len(value) <= 2:
            return ValidationResult.invalid(_field_name(field), "Address needs one or two lines")
        lines = []
        for line in value:
            result = _sanitize_value(line, max_length, allow_empty, flags)
            if not result:
                return result.for_field(_field_name(field))
            lines.append(result.value)
        return ValidationResult.ok(lines, _field_name(field))

    return _sanitize_value(value, max_length, allow_empty, flags).for_field(_field_name(field))


def check_and_sanitize(
    field: Union[str, FieldKind],
    value: Any,
    flags: int = SanitizeFlags.NONE,
    options: OptionsLike = None,
    version: Any = None,
) -> ValidationResult:
    """Check the value; if it is invalid, try to sanitize it instead."""
    checked = check(field, value, options, version)
    if checked:
        return checked

    sanitized = sanitize(field, value, flags)
    if sanitized:
        return sanitized

    return ValidationResult(False, field=_field_name(field), errors=checked.errors)


def check_and_sanitize_all(
    inputs: Mapping[str, Any],
    flags: int = SanitizeFlags.NONE,
    options: OptionsLike = None,
    version: Any = None,
) -> FieldsReport:
    """
    Check and sanitize every field of a record independently.

    Returns:
        FieldsReport with the normalized values and the names of the fields
        that failed both check and sanitize.
    """
    if not isinstance(inputs, Mapping):
        raise TypeError(f"inputs must be a mapping, not {type(inputs).__name__}")

    values = {}
    invalid_fields = []
    for field, value in inputs.items():
        result = check_and_sanitize(field, value, flags, options, version)
        if result:
            values[field] = result.value
        else:
            invalid_fields.append(field)

    return FieldsReport(values, invalid_fields)


# =============================================================================
# Nested Input Lookup
# =============================================================================

_MISSING = object()


def _lookup(data: Any, keys) -> Any:
    if isinstance(keys, (str, int)):
        keys = [keys]
    current = data
    for key in keys:
        if not isinstance(current, Mapping) or current.get(key) is None:
            return _MISSING
        current = current[key]
    return current


def check_input(field, data: Mapping, keys, options: OptionsLike = None) -> ValidationResult:
    """check() on data[keys[0]][keys[1]]...; a missing path is invalid."""
    value = _lookup(data, keys)
    if value is _MISSING:
        return ValidationResult.invalid(_field_name(field), f"Missing input: {keys}")
    return check(field, value, options)


def sanitize_input(field, data: Mapping, keys, flags: int = SanitizeFlags.NONE) -> ValidationResult:
    value = _lookup(data, keys)
    if value is _MISSING:
        return ValidationResult.invalid(_field_name(field), f"Missing input: {keys}")
    return sanitize(field, value, flags)


def check_and_sanitize_input(
    field,
    data: Mapping,
    keys,
    flags: int = SanitizeFlags.NONE,
    options: OptionsLike = None,
) -> ValidationResult:
    value = _lookup(data, keys)
    if value is _MISSING:
        return ValidationResult.invalid(_field_name(field), f"Missing input: {keys}")
    return check_and_sanitize(field, value, flags, options)


# =============================================================================
# Required Keys and Versions
# =============================================================================

_CT_COLLECTION_KEYS = ("pmtInfId", "dbtr", "iban")
_DD_COLLECTION_KEYS = ("pmtInfId", "lclInstrm", "seqTp", "cdtr", "iban", "ci")
_CT_PAYMENT_KEYS = ("pmtId", "instdAmt", "iban", "cdtr")
_DD_PAYMENT_KEYS = ("pmtId", "instdAmt", "mndtId", "dtOfSgntr", "dbtr", "iban")

REQUIRED_COLLECTION_KEYS: dict[SchemaVersion, tuple[str, ...]] = {
    SchemaVersion.PAIN_001_002_03: _CT_COLLECTION_KEYS + ("bic",),
    SchemaVersion.PAIN_001_001_03: _CT_COLLECTION_KEYS,
    SchemaVersion.PAIN_001_001_03_GBIC: _CT_COLLECTION_KEYS,
    SchemaVersion.PAIN_001_001_03_CH_02: _CT_COLLECTION_KEYS,
    SchemaVersion.PAIN_001_003_03: _CT_COLLECTION_KEYS,
    SchemaVersion.PAIN_008_002_02: _DD_COLLECTION_KEYS[:5] + ("bic", "ci"),
    SchemaVersion.PAIN_008_001_02: _DD_COLLECTION_KEYS,
    SchemaVersion.PAIN_008_001_02_GBIC: _DD_COLLECTION_KEYS,
    SchemaVersion.PAIN_008_001_02_AUSTRIAN_003: _DD_COLLECTION_KEYS,
    SchemaVersion.PAIN_008_003_02: _DD_COLLECTION_KEYS,
    SchemaVersion.PAIN_008_001_02_CH_03: ("pmtInfId", "lclInstrm", "seqTp", "cdtr", "iban", "lsv"),
}

REQUIRED_PAYMENT_KEYS: dict[SchemaVersion, tuple[str, ...]] = {
    SchemaVersion.PAIN_001_002_03: ("pmtId", "instdAmt", "iban", "bic", "cdtr"),
    SchemaVersion.PAIN_001_001_03: _CT_PAYMENT_KEYS,
    SchemaVersion.PAIN_001_001_03_GBIC: _CT_PAYMENT_KEYS,
    SchemaVersion.PAIN_001_001_03_CH_02: _CT_PAYMENT_KEYS,
    SchemaVersion.PAIN_001_003_03: _CT_PAYMENT_KEYS,
    SchemaVersion.PAIN_008_002_02: _DD_PAYMENT_KEYS + ("bic",),
    SchemaVersion.PAIN_008_001_02: _DD_PAYMENT_KEYS,
    SchemaVersion.PAIN_008_001_02_GBIC: _DD_PAYMENT_KEYS,
    SchemaVersion.PAIN_008_001_02_AUSTRIAN_003: _DD_PAYMENT_KEYS,
    SchemaVersion.PAIN_008_003_02: _DD_PAYMENT_KEYS,
    SchemaVersion.PAIN_008_001_02_CH_03: ("pmtId", "instdAmt", "dbtr", "iban"),
}


def contains_all_keys(data: Mapping, keys: Sequence) -> bool:
    """False if at least one key is missing or None."""
    return all(data.get(key) is not None for key in keys)


def contains_not_any_key(data: Mapping, keys: Sequence) -> bool:
    """True if data holds none of the keys (None values count as absent)."""
    return all(data.get(key) is None for key in keys)


def _missing_keys(data: Mapping, table: dict, version: Any) -> Optional[list[str]]:
    resolved = SchemaVersion.parse(version)
    if resolved is None:
        logger.debug(f"No required keys defined for version {version!r}")
        return None
    return [key for key in table[resolved] if data.get(key) is None]


def missing_required_collection_keys(data: Mapping, version: Any) -> Optional[list[str]]:
    """Required payment collection keys absent from data; None for unknown versions."""
    return _missing_keys(data, REQUIRED_COLLECTION_KEYS, version)


def missing_required_payment_keys(data: Mapping, version: Any) -> Optional[list[str]]:
    """Required single payment keys absent from data; None for unknown versions."""
    return _missing_keys(data, REQUIRED_PAYMENT_KEYS, version)


def check_required_collection_keys(data: Mapping, version: Any) -> bool:
    return missing_required_collection_keys(data, version) == []


def check_required_payment_keys(data: Mapping, version: Any) -> bool:
    return missing_required_payment_keys(data, version) == []


def version_to_string(version: Any) -> Optional[str]:
    """Message type of a schema version, e.g. 'pain.008.001.02'."""
    resolved = SchemaVersion.parse(version)
    return MESSAGE_TYPES[resolved] if resolved else None


def version_to_transaction_type(version: Any) -> Optional[TransactionType]:
    resolved = SchemaVersion.parse(version)
    return resolved.transaction_type if resolved else None
