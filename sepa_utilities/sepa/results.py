"""
Validation Result Types

Every SEPA field check returns a ValidationResult instead of a sentinel, so a
valid falsy value (the boolean field "false", an empty ultimate-debtor name)
can never be mistaken for a failed check.
"""

from typing import Any, Optional


class ValidationResult:
    """Outcome of validating or sanitizing a single field."""

    __slots__ = ("valid", "value", "field", "errors")

    def __init__(
        self,
        valid: bool,
        value: Any = None,
        field: Optional[str] = None,
        errors: Optional[list[str]] = None,
    ):
        self.valid = valid
        self.value = value if valid else None
        self.field = field
        self.errors = errors or []

    @classmethod
    def ok(cls, value: Any, field: Optional[str] = None) -> "ValidationResult":
        return cls(True, value, field)

    @classmethod
    def invalid(cls, field: Optional[str] = None, error: Optional[str] = None) -> "ValidationResult":
        return cls(False, None, field, [error] if error else None)

    def for_field(self, field: str) -> "ValidationResult":
        """Copy of this result labelled with a field name."""
        return ValidationResult(self.valid, self.value, field, list(self.errors))

    def value_or(self, default: Any) -> Any:
        return self.value if self.valid else default

    def __bool__(self) -> bool:
        return self.valid

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValidationResult):
            return NotImplemented
        return self.valid == other.valid and self.value == other.value

    def __hash__(self):
        return hash((self.valid, repr(self.value)))

    def __repr__(self) -> str:
        if self.valid:
            return f"ValidationResult.ok({self.value!r})"
        return f"ValidationResult.invalid({self.field!r})"

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "field": self.field,
            "valid": self.valid,
            "value": self.value,
            "errors": self.errors,
        }


class FieldsReport:
    """
    Result of checking a whole record of fields.

    `values` holds the normalized value of every field that passed check or
    sanitize; `invalid_fields` lists the names that failed both, in input order.
    """

    def __init__(self, values: dict[str, Any], invalid_fields: list[str]):
        self.values = values
        self.invalid_fields = invalid_fields

    @property
    def valid(self) -> bool:
        return not self.invalid_fields

    def __bool__(self) -> bool:
        return self.valid

    def __repr__(self) -> str:
        return f"FieldsReport(valid={self.valid}, invalid_fields={self.invalid_fields!r})"

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "values": self.values,
            "invalidFields": self.invalid_fields,
        }
