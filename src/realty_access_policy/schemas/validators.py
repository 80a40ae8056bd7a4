"""Required-field and value-domain validators for governed record kinds.

Each record kind has a :class:`RecordSchema`: the exact list of required
field names plus a list of composable :class:`FieldRule` objects.  A record
is valid only when every required key is present and every rule passes;
there is no partial success.  Extra fields are permitted and ignored.

Field names and enum values are wire-format contracts with stored data and
are matched case-sensitively.

Supported field rules:

- EnumRule      — value must be one of a fixed set of strings
- NumberRule    — value must be numeric (never a bool) and above a bound
- StringLengthRule — value must be a string within a length window

Example
-------
>>> report = validate(RecordKind.NEGOTIATION, {"agentId": "A1"})
>>> report.valid
False
>>> sorted(v.field for v in report.violations)[:2]
['clientId', 'offerId']
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Kinds and value domains
# ---------------------------------------------------------------------------


class RecordKind(str, Enum):
    """Record kinds that carry a schema."""

    OFFER = "offer"
    NEGOTIATION = "negotiation"
    DOCUMENT = "document"


class OfferType(str, Enum):
    BUYER = "buyer"
    SELLER = "seller"


class OfferStatus(str, Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    COUNTERED = "countered"
    EXPIRED = "expired"


class NegotiationType(str, Enum):
    BUYER_NEGOTIATION = "buyer_negotiation"
    SELLER_NEGOTIATION = "seller_negotiation"


class NegotiationStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    STALLED = "stalled"
    CANCELLED = "cancelled"


class DocumentStatus(str, Enum):
    DRAFT = "draft"
    REVIEW = "review"
    APPROVED = "approved"
    FINAL = "final"
    SENT = "sent"
    ARCHIVED = "archived"


class ViolationCode(str, Enum):
    NOT_A_RECORD = "NOT_A_RECORD"
    MISSING_FIELD = "MISSING_FIELD"
    INVALID_ENUM = "INVALID_ENUM"
    NOT_NUMERIC = "NOT_NUMERIC"
    OUT_OF_RANGE = "OUT_OF_RANGE"
    NOT_STRING = "NOT_STRING"
    INVALID_LENGTH = "INVALID_LENGTH"


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldViolation:
    """One reason a record was rejected."""

    field: str
    code: ViolationCode
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "code": self.code.value, "message": self.message}


@dataclass(frozen=True)
class ValidationReport:
    """Outcome of validating one record.  Truthy when valid."""

    kind: RecordKind
    violations: tuple[FieldViolation, ...] = ()

    @property
    def valid(self) -> bool:
        return not self.violations

    def __bool__(self) -> bool:
        return self.valid


# ---------------------------------------------------------------------------
# Field rules
# ---------------------------------------------------------------------------


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class FieldRule(ABC):
    """Abstract base for a single-field domain check.

    Rules are only consulted for fields that are present; absence is
    reported by the required-field check instead.
    """

    field: str

    @abstractmethod
    def check(self, value: object) -> FieldViolation | None:
        """Return a violation, or ``None`` when *value* satisfies the rule."""


@dataclass(frozen=True)
class EnumRule(FieldRule):
    field: str
    allowed: tuple[str, ...]

    def check(self, value: object) -> FieldViolation | None:
        if isinstance(value, str) and value in self.allowed:
            return None
        return FieldViolation(
            self.field,
            ViolationCode.INVALID_ENUM,
            f"{self.field} must be one of {list(self.allowed)}; got {value!r}.",
        )


@dataclass(frozen=True)
class NumberRule(FieldRule):
    """Numeric value strictly above (or, with ``inclusive``, at least) ``minimum``."""

    field: str
    minimum: float = 0
    inclusive: bool = False

    def check(self, value: object) -> FieldViolation | None:
        if not _is_number(value):
            return FieldViolation(
                self.field, ViolationCode.NOT_NUMERIC, f"{self.field} must be a number."
            )
        in_range = value >= self.minimum if self.inclusive else value > self.minimum  # type: ignore[operator]
        if in_range:
            return None
        bound = ">=" if self.inclusive else ">"
        return FieldViolation(
            self.field,
            ViolationCode.OUT_OF_RANGE,
            f"{self.field} must be {bound} {self.minimum}; got {value!r}.",
        )


def utf16_length(value: str) -> int:
    """Return the number of UTF-16 code units in *value*."""
    return len(value.encode("utf-16-le", "surrogatepass")) // 2


@dataclass(frozen=True)
class StringLengthRule(FieldRule):
    """String whose length, counted in UTF-16 code units, lies in a window.

    Characters outside the Basic Multilingual Plane (most emoji) count as
    two units, the way the database measures string length.
    """

    field: str
    min_length: int = 1
    max_length: int = 1000

    def check(self, value: object) -> FieldViolation | None:
        if not isinstance(value, str):
            return FieldViolation(
                self.field, ViolationCode.NOT_STRING, f"{self.field} must be a string."
            )
        if self.min_length <= utf16_length(value) <= self.max_length:
            return None
        return FieldViolation(
            self.field,
            ViolationCode.INVALID_LENGTH,
            f"{self.field} length must be between {self.min_length} and {self.max_length}.",
        )


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RecordSchema:
    """Required fields plus domain rules for one record kind."""

    kind: RecordKind
    required: tuple[str, ...]
    rules: tuple[FieldRule, ...] = field(default_factory=tuple)

    def validate(self, data: object) -> ValidationReport:
        if not isinstance(data, Mapping):
            return ValidationReport(
                self.kind,
                (
                    FieldViolation(
                        "", ViolationCode.NOT_A_RECORD, f"{self.kind.value} data must be a mapping."
                    ),
                ),
            )

        violations: list[FieldViolation] = [
            FieldViolation(name, ViolationCode.MISSING_FIELD, f"{name} is required.")
            for name in self.required
            if name not in data
        ]
        for rule in self.rules:
            if rule.field not in data:
                continue
            violation = rule.check(data[rule.field])
            if violation is not None:
                violations.append(violation)

        if violations:
            logger.debug(
                "%s record rejected: %s",
                self.kind.value,
                ", ".join(f"{v.field}:{v.code.value}" for v in violations),
            )
        return ValidationReport(self.kind, tuple(violations))

    def extend(self, *rules: FieldRule) -> RecordSchema:
        return RecordSchema(self.kind, self.required, self.rules + rules)


def _values(enum_cls: type[Enum]) -> tuple[str, ...]:
    return tuple(member.value for member in enum_cls)


OFFER_REQUIRED_FIELDS: tuple[str, ...] = (
    "agentId",
    "clientId",
    "propertyId",
    "type",
    "status",
    "purchasePrice",
    "earnestMoney",
    "downPayment",
    "loanAmount",
    "offerDate",
    "expirationDate",
    "closingDate",
)

NEGOTIATION_REQUIRED_FIELDS: tuple[str, ...] = (
    "agentId",
    "clientId",
    "offerId",
    "propertyId",
    "type",
    "status",
)

DOCUMENT_REQUIRED_FIELDS: tuple[str, ...] = (
    "agentId",
    "clientId",
    "title",
    "type",
    "category",
    "status",
)

OFFER_SCHEMA = RecordSchema(
    RecordKind.OFFER,
    OFFER_REQUIRED_FIELDS,
    (
        EnumRule("type", _values(OfferType)),
        EnumRule("status", _values(OfferStatus)),
        NumberRule("purchasePrice", minimum=0),
    ),
)

# Application-side variant: deposits must also be non-negative numbers.
STRICT_OFFER_SCHEMA = OFFER_SCHEMA.extend(
    NumberRule("earnestMoney", minimum=0, inclusive=True),
    NumberRule("downPayment", minimum=0, inclusive=True),
)

NEGOTIATION_SCHEMA = RecordSchema(
    RecordKind.NEGOTIATION,
    NEGOTIATION_REQUIRED_FIELDS,
    (
        EnumRule("type", _values(NegotiationType)),
        EnumRule("status", _values(NegotiationStatus)),
    ),
)

DOCUMENT_SCHEMA = RecordSchema(
    RecordKind.DOCUMENT,
    DOCUMENT_REQUIRED_FIELDS,
    (
        EnumRule("status", _values(DocumentStatus)),
        StringLengthRule("title", min_length=1, max_length=200),
    ),
)

_SCHEMAS: dict[RecordKind, RecordSchema] = {
    RecordKind.OFFER: OFFER_SCHEMA,
    RecordKind.NEGOTIATION: NEGOTIATION_SCHEMA,
    RecordKind.DOCUMENT: DOCUMENT_SCHEMA,
}


def schema_for(kind: RecordKind | str, strict: bool = False) -> RecordSchema:
    """Return the schema for *kind*.

    Raises
    ------
    ValueError
        If *kind* is not a known record kind.
    """
    kind = RecordKind(kind)
    if strict and kind is RecordKind.OFFER:
        return STRICT_OFFER_SCHEMA
    return _SCHEMAS[kind]


def validate(kind: RecordKind | str, data: object, strict: bool = False) -> ValidationReport:
    """Validate *data* as a record of *kind*."""
    return schema_for(kind, strict=strict).validate(data)


def validate_offer(data: object, strict: bool = False) -> ValidationReport:
    return validate(RecordKind.OFFER, data, strict=strict)


def validate_negotiation(data: object) -> ValidationReport:
    return validate(RecordKind.NEGOTIATION, data)


def validate_document(data: object) -> ValidationReport:
    return validate(RecordKind.DOCUMENT, data)
