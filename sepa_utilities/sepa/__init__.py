"""
SEPA Field Validation Package

Structure:
- constants.py: Schema versions, code lists, patterns and country tables
- results.py: ValidationResult and FieldsReport
- checksum.py: ISO/IEC 7064 MOD 97-10
- transliteration.py: Character replacement for the SEPA character set
- validators.py: Single value validators (IBAN, BIC, CI, amount, ...)
- target_calendar.py: TARGET2 business days and Easter
- dispatch.py: Field name based check / sanitize and required keys
"""

from .constants import (
    BIC_REQUIRED_THRESHOLD,
    HTML_PATTERN_BIC,
    HTML_PATTERN_IBAN,
    TEXT_LENGTH_LONG,
    TEXT_LENGTH_SHORT,
    TEXT_LENGTH_SIGNATURE,
    TEXT_LENGTH_VERY_SHORT,
    LocalInstrument,
    SchemaVersion,
    SequenceType,
    TransactionType,
)

from .results import FieldsReport, ValidationResult

from .checksum import checksum_is_valid, iso7064_mod97_10

from .transliteration import (
    SanitizeFlags,
    replace_special_chars,
    sanitize_length,
    sanitize_text,
)

from .validators import (
    check_amount,
    check_bic,
    check_boolean,
    check_category_purpose,
    check_charset,
    check_country_code,
    check_create_date_time,
    check_creditor_identifier,
    check_currency_code,
    check_date_format,
    check_iban,
    check_length,
    check_local_instrument,
    check_purpose,
    check_restricted_identification_sepa1,
    check_restricted_identification_sepa2,
    check_restricted_person_identifier,
    check_sequence_type,
    check_text,
    cross_check_iban_bic,
    is_eea_transaction,
    is_national_transaction,
)

from .target_calendar import (
    easter_date,
    earliest_target_day,
    get_date,
    get_date_with_min_offset_from_today,
    get_date_with_offset,
    is_target_day,
    next_target_day,
    sanitize_date_format,
)

from .dispatch import (
    CheckOptions,
    FieldKind,
    check,
    check_and_sanitize,
    check_and_sanitize_all,
    check_and_sanitize_input,
    check_input,
    check_required_collection_keys,
    check_required_payment_keys,
    contains_all_keys,
    contains_not_any_key,
    missing_required_collection_keys,
    missing_required_payment_keys,
    sanitize,
    sanitize_input,
    version_to_string,
    version_to_transaction_type,
)

__all__ = [
    # Constants
    "BIC_REQUIRED_THRESHOLD",
    "HTML_PATTERN_BIC",
    "HTML_PATTERN_IBAN",
    "TEXT_LENGTH_LONG",
    "TEXT_LENGTH_SHORT",
    "TEXT_LENGTH_SIGNATURE",
    "TEXT_LENGTH_VERY_SHORT",
    "LocalInstrument",
    "SchemaVersion",
    "SequenceType",
    "TransactionType",
    # Results
    "FieldsReport",
    "ValidationResult",
    # Checksum
    "checksum_is_valid",
    "iso7064_mod97_10",
    # Transliteration
    "SanitizeFlags",
    "replace_special_chars",
    "sanitize_length",
    "sanitize_text",
    # Validators
    "check_amount",
    "check_bic",
    "check_boolean",
    "check_category_purpose",
    "check_charset",
    "check_country_code",
    "check_create_date_time",
    "check_creditor_identifier",
    "check_currency_code",
    "check_date_format",
    "check_iban",
    "check_length",
    "check_local_instrument",
    "check_purpose",
    "check_restricted_identification_sepa1",
    "check_restricted_identification_sepa2",
    "check_restricted_person_identifier",
    "check_sequence_type",
    "check_text",
    "cross_check_iban_bic",
    "is_eea_transaction",
    "is_national_transaction",
    # Calendar
    "easter_date",
    "earliest_target_day",
    "get_date",
    "get_date_with_min_offset_from_today",
    "get_date_with_offset",
    "is_target_day",
    "next_target_day",
    "sanitize_date_format",
    # Dispatch
    "CheckOptions",
    "FieldKind",
    "check",
    "check_and_sanitize",
    "check_and_sanitize_all",
    "check_and_sanitize_input",
    "check_input",
    "check_required_collection_keys",
    "check_required_payment_keys",
    "contains_all_keys",
    "contains_not_any_key",
    "missing_required_collection_keys",
    "missing_required_payment_keys",
    "sanitize",
    "sanitize_input",
    "version_to_string",
    "version_to_transaction_type",
]
