"""
SEPA Validation API

JSON endpoints around the sepa package: field checks and sanitizing,
required keys per schema version, IBAN / BIC cross checks and the TARGET2
calendar.

Invalid field values are a normal outcome and come back with valid=false;
HTTP errors are reserved for requests that cannot be served (unknown
schema version, unparseable dates, offsets out of range).
"""

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Query

from ..config import settings
from ..sepa import dispatch, target_calendar, validators
from ..sepa.constants import LOCAL_INSTRUMENTS_BY_VERSION, SchemaVersion
from ..sepa.results import ValidationResult
from .schemas import (
    CheckAllRequest,
    CheckAllResponse,
    CheckAndSanitizeRequest,
    CrossCheckRequest,
    CrossCheckResponse,
    EasterResponse,
    ExecutionDateResponse,
    FieldCheckRequest,
    FieldResultResponse,
    NextTargetDayResponse,
    RequiredKeysRequest,
    RequiredKeysResponse,
    SanitizeRequest,
    TargetDayResponse,
    VersionInfo,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/sepa", tags=["SEPA Validation"])

ISO_DATE = target_calendar.ISO_DATE_FORMAT


# =============================================================================
# Helpers
# =============================================================================

def _json_value(value: Any) -> Any:
    """Amounts leave the service as exact decimal strings."""
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, dict):
        return {key: _json_value(item) for key, item in value.items()}
    return value


def _field_response(result: ValidationResult, field: str) -> FieldResultResponse:
    return FieldResultResponse(
        field=result.field or field,
        valid=result.valid,
        value=_json_value(result.value),
        errors=result.errors,
    )


def _version_or_default(version: Optional[Any], options: Optional[dict] = None) -> Optional[Any]:
    """Configured default version, unless the request names one itself."""
    if version is not None or (options and options.get("version") is not None):
        return version
    return settings.default_version


def _flags_or_default(flags: Optional[int]) -> int:
    return flags if flags is not None else settings.default_sanitize_flags


def _require_version(version: Any) -> SchemaVersion:
    resolved = SchemaVersion.parse(version)
    if resolved is None:
        logger.info(f"Rejected unknown schema version {version!r}")
        raise HTTPException(status_code=400, detail=f"Unknown schema version: {version}")
    return resolved


def _parse_date_param(value: Optional[str], name: str, input_format: str) -> date:
    """Parse a date query parameter; an empty value means today."""
    if not value:
        return date.today()
    parsed = target_calendar.parse_date(value, input_format)
    if parsed is None:
        logger.info(f"Rejected {name}={value!r} (expected format {input_format})")
        raise HTTPException(
            status_code=400,
            detail=f"Invalid {name}: {value} does not match {input_format}",
        )
    return parsed


def _check_offset(offset: int) -> None:
    if offset < 0 or offset > settings.max_workday_offset:
        raise HTTPException(
            status_code=400,
            detail=f"Offset must be between 0 and {settings.max_workday_offset}",
        )


# =============================================================================
# Field Validation
# =============================================================================

@router.post(
    "/check",
    response_model=FieldResultResponse,
    summary="Validate a single SEPA field",
    description="""
    Validates one value for a named field (iban, bic, ci, mndtId, instdAmt,
    lclInstrm, ...). Field names are case insensitive.

    The normalized value is returned on success: IBAN and BIC without
    whitespace in upper case, amounts as decimal strings with two places,
    booleans as "true" / "false".
    """
)
async def check_field(request: FieldCheckRequest) -> FieldResultResponse:
    """Validate a single SEPA field."""
    result = dispatch.check(
        request.field,
        request.value,
        request.options,
        _version_or_default(request.version, request.options),
    )
    return _field_response(result, request.field)


@router.post(
    "/sanitize",
    response_model=FieldResultResponse,
    summary="Sanitize a free text field",
    description="""
    Transliterates a name, address, ultimate party or remittance text into the
    SEPA character set and truncates it to the field length.

    Flags: 1 = German umlauts as ae/oe/ue/ss, 32768 = keep German umlauts.
    """
)
async def sanitize_field(request: SanitizeRequest) -> FieldResultResponse:
    result = dispatch.sanitize(request.field, request.value, _flags_or_default(request.flags))
    return _field_response(result, request.field)


@router.post(
    "/check-and-sanitize",
    response_model=FieldResultResponse,
    summary="Validate a field, sanitizing it if needed",
)
async def check_and_sanitize_field(request: CheckAndSanitizeRequest) -> FieldResultResponse:
    result = dispatch.check_and_sanitize(
        request.field,
        request.value,
        _flags_or_default(request.flags),
        request.options,
        _version_or_default(request.version, request.options),
    )
    return _field_response(result, request.field)


@router.post(
    "/check-all",
    response_model=CheckAllResponse,
    summary="Validate and sanitize a whole record",
    description="""
    Runs check-and-sanitize on every entry of `fields` and reports the
    normalized values together with the names of the fields that failed.
    """
)
async def check_all_fields(request: CheckAllRequest) -> CheckAllResponse:
    report = dispatch.check_and_sanitize_all(
        request.fields,
        _flags_or_default(request.flags),
        request.options,
        _version_or_default(request.version, request.options),
    )
    if not report.valid:
        logger.info(f"Record failed validation: {report.invalid_fields}")

    return CheckAllResponse(
        valid=report.valid,
        values=_json_value(report.values),
        invalid_fields=report.invalid_fields,
    )


# =============================================================================
# Required Keys and Versions
# =============================================================================

@router.post(
    "/required-keys",
    response_model=RequiredKeysResponse,
    summary="Check required payment collection and payment keys",
    description="""
    Reports which required keys are missing from a payment collection
    and/or a single payment for the given schema version. Keys are case
    sensitive (pmtInfId, instdAmt, ...); a key with a null value is missing.
    """
)
async def check_required_keys(request: RequiredKeysRequest) -> RequiredKeysResponse:
    version = _require_version(request.version)

    missing_collection = None
    missing_payment = None
    if request.collection is not None:
        missing_collection = dispatch.missing_required_collection_keys(request.collection, version)
    if request.payment is not None:
        missing_payment = dispatch.missing_required_payment_keys(request.payment, version)

    return RequiredKeysResponse(
        version=version.name,
        message_type=version.message_type,
        valid=not missing_collection and not missing_payment,
        missing_collection_keys=missing_collection,
        missing_payment_keys=missing_payment,
    )


@router.get(
    "/versions",
    response_model=list[VersionInfo],
    summary="List supported schema versions",
)
async def list_versions() -> list[VersionInfo]:
    return [
        VersionInfo(
            id=version.value,
            name=version.name,
            message_type=version.message_type,
            transaction_type=version.transaction_type.name,
            required_collection_keys=list(dispatch.REQUIRED_COLLECTION_KEYS[version]),
            required_payment_keys=list(dispatch.REQUIRED_PAYMENT_KEYS[version]),
            local_instruments=sorted(LOCAL_INSTRUMENTS_BY_VERSION.get(version, ())),
        )
        for version in SchemaVersion
    ]


@router.post(
    "/iban/cross-check",
    response_model=CrossCheckResponse,
    summary="Check that IBAN and BIC belong to the same country",
    description="""
    Compares the IBAN country with the BIC country, allowing for overseas
    territories and crown dependencies that use BICs of their own.
    With a counterparty IBAN the response also tells whether the payment is
    national and whether both accounts are in the EEA.
    """
)
async def cross_check(request: CrossCheckRequest) -> CrossCheckResponse:
    national = None
    eea = None
    if request.counterparty_iban:
        national = validators.is_national_transaction(request.iban, request.counterparty_iban)
        eea = validators.is_eea_transaction(request.iban, request.counterparty_iban)

    return CrossCheckResponse(
        iban=request.iban,
        bic=request.bic,
        bic_matches_iban=validators.cross_check_iban_bic(request.iban, request.bic),
        national=national,
        eea=eea,
    )


# =============================================================================
# TARGET2 Calendar
# =============================================================================

@router.get(
    "/calendar/target-day",
    response_model=TargetDayResponse,
    summary="Check if TARGET2 settles on a date",
)
async def get_target_day(
    day: Optional[str] = Query(None, alias="date", description="Date, today if omitted"),
    input_format: str = Query(ISO_DATE, alias="format"),
) -> TargetDayResponse:
    parsed = _parse_date_param(day, "date", input_format)
    return TargetDayResponse(
        date=parsed.isoformat(),
        is_target_day=target_calendar.is_target_day(parsed),
    )


@router.get(
    "/calendar/next-target-day",
    response_model=NextTargetDayResponse,
    summary="TARGET day a number of business days ahead",
    description="""
    Moves to the first TARGET day on or after `start` and then `offset`
    TARGET days further. Weekends and TARGET holidays do not count.
    """
)
async def get_next_target_day(
    start: Optional[str] = Query(None, description="Start date, today if omitted"),
    offset: int = Query(0, description="Number of TARGET days to skip"),
    input_format: str = Query(ISO_DATE, alias="format"),
) -> NextTargetDayResponse:
    _check_offset(offset)
    start_date = _parse_date_param(start, "start", input_format)
    result = target_calendar.next_target_day(start_date, offset)
    return NextTargetDayResponse(
        start=start_date.isoformat(),
        offset=offset,
        date=result.isoformat(),
    )


@router.get(
    "/calendar/execution-date",
    response_model=ExecutionDateResponse,
    summary="Earliest allowed execution or collection date",
    description="""
    Returns the requested date if it lies at least `minOffset` TARGET days
    after today, otherwise the earliest date that does.
    """
)
async def get_execution_date(
    requested: str = Query(..., alias="date"),
    min_offset: int = Query(..., alias="minOffset"),
    today: Optional[str] = Query(None),
    input_format: str = Query(ISO_DATE, alias="format"),
) -> ExecutionDateResponse:
    _check_offset(min_offset)
    requested_date = _parse_date_param(requested, "date", input_format)
    today_date = _parse_date_param(today, "today", input_format)

    result = target_calendar.earliest_target_day(requested_date, min_offset, today_date)

    return ExecutionDateResponse(
        requested=requested_date.isoformat(),
        today=today_date.isoformat(),
        min_offset=min_offset,
        date=result.isoformat(),
        adjusted=result != requested_date,
    )


@router.get(
    "/calendar/easter/{year}",
    response_model=EasterResponse,
    summary="Easter Sunday and the TARGET Easter holidays of a year",
)
async def get_easter(year: int) -> EasterResponse:
    if not 1 <= year <= 9999:
        raise HTTPException(status_code=400, detail="Year must be between 1 and 9999")

    easter = target_calendar.easter_date(year)
    return EasterResponse(
        year=year,
        easter_sunday=easter.isoformat(),
        good_friday=(easter - timedelta(days=2)).isoformat(),
        easter_monday=(easter + timedelta(days=1)).isoformat(),
    )
