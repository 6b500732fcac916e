"""
Pydantic Schemas for the SEPA Validation API

Request and response models for the /v1/sepa endpoints. JSON uses camelCase
keys; Python code uses snake_case through populate_by_name.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, Field


# =============================================================================
# 1. Common Models
# =============================================================================

VersionRef = Union[int, str]


class FieldResultResponse(BaseModel):
    """Outcome of checking or sanitizing one field."""
    field: str
    valid: bool
    value: Any = None
    errors: list[str] = []


# =============================================================================
# 2. Field Validation
# =============================================================================

class FieldCheckRequest(BaseModel):
    """
    Check a single field.

    options takes the keys checkByFormat, checkByCheckSum, allowEmptyBic,
    forceLongBic and forceLongBicStr.
    """
    field: str = Field(..., description="Field name, e.g. iban, bic, mndtId")
    value: Any = None
    version: Optional[VersionRef] = Field(
        default=None, description="Schema version id (800102) or name (PAIN_008_001_02)"
    )
    options: Optional[dict[str, Any]] = None


class SanitizeRequest(BaseModel):
    """Sanitize a single free text field."""
    field: str
    value: Any = None
    flags: Optional[int] = Field(default=None, ge=0, description="SanitizeFlags bit mask")


class CheckAndSanitizeRequest(FieldCheckRequest):
    """Check a field and fall back to sanitizing it."""
    flags: Optional[int] = Field(default=None, ge=0)


class CheckAllRequest(BaseModel):
    """Check and sanitize every field of a record."""
    fields: dict[str, Any]
    version: Optional[VersionRef] = None
    options: Optional[dict[str, Any]] = None
    flags: Optional[int] = Field(default=None, ge=0)


class CheckAllResponse(BaseModel):
    valid: bool
    values: dict[str, Any]
    invalid_fields: list[str] = Field(alias="invalidFields")

    class Config:
        populate_by_name = True


# =============================================================================
# 3. Required Keys and Versions
# =============================================================================

class RequiredKeysRequest(BaseModel):
    """Verify that a payment collection and/or single payment has all required keys."""
    version: VersionRef
    collection: Optional[dict[str, Any]] = None
    payment: Optional[dict[str, Any]] = None


class RequiredKeysResponse(BaseModel):
    version: str
    message_type: str = Field(alias="messageType")
    valid: bool
    missing_collection_keys: Optional[list[str]] = Field(default=None, alias="missingCollectionKeys")
    missing_payment_keys: Optional[list[str]] = Field(default=None, alias="missingPaymentKeys")

    class Config:
        populate_by_name = True


class VersionInfo(BaseModel):
    """A supported pain message variant."""
    id: int
    name: str
    message_type: str = Field(alias="messageType")
    transaction_type: str = Field(alias="transactionType")
    required_collection_keys: list[str] = Field(alias="requiredCollectionKeys")
    required_payment_keys: list[str] = Field(alias="requiredPaymentKeys")
    local_instruments: list[str] = Field(default=[], alias="localInstruments")

    class Config:
        populate_by_name = True


class CrossCheckRequest(BaseModel):
    """IBAN / BIC country consistency, optionally against a counterparty IBAN."""
    iban: str
    bic: str
    counterparty_iban: Optional[str] = Field(default=None, alias="counterpartyIban")

    class Config:
        populate_by_name = True


class CrossCheckResponse(BaseModel):
    iban: str
    bic: str
    bic_matches_iban: bool = Field(alias="bicMatchesIban")
    national: Optional[bool] = None
    eea: Optional[bool] = None

    class Config:
        populate_by_name = True


# =============================================================================
# 4. TARGET2 Calendar
# =============================================================================

class TargetDayResponse(BaseModel):
    date: str
    is_target_day: bool = Field(alias="isTargetDay")

    class Config:
        populate_by_name = True


class NextTargetDayResponse(BaseModel):
    start: str
    offset: int
    date: str


class ExecutionDateResponse(BaseModel):
    """Earliest allowed execution / collection date for a requested date."""
    requested: str
    today: str
    min_offset: int = Field(alias="minOffset")
    date: str
    adjusted: bool

    class Config:
        populate_by_name = True


class EasterResponse(BaseModel):
    year: int
    easter_sunday: str = Field(alias="easterSunday")
    good_friday: str = Field(alias="goodFriday")
    easter_monday: str = Field(alias="easterMonday")

    class Config:
        populate_by_name = True
