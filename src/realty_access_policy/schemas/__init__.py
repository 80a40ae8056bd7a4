"""Schema validators for Offer, Negotiation and Document records."""
from __future__ import annotations

from realty_access_policy.schemas.validators import (
    DOCUMENT_REQUIRED_FIELDS,
    NEGOTIATION_REQUIRED_FIELDS,
    OFFER_REQUIRED_FIELDS,
    DocumentStatus,
    EnumRule,
    FieldRule,
    FieldViolation,
    NegotiationStatus,
    NegotiationType,
    NumberRule,
    OfferStatus,
    OfferType,
    RecordKind,
    RecordSchema,
    StringLengthRule,
    ValidationReport,
    ViolationCode,
    schema_for,
    validate,
    validate_document,
    validate_negotiation,
    validate_offer,
)

__all__ = [
    "DOCUMENT_REQUIRED_FIELDS",
    "NEGOTIATION_REQUIRED_FIELDS",
    "OFFER_REQUIRED_FIELDS",
    "DocumentStatus",
    "EnumRule",
    "FieldRule",
    "FieldViolation",
    "NegotiationStatus",
    "NegotiationType",
    "NumberRule",
    "OfferStatus",
    "OfferType",
    "RecordKind",
    "RecordSchema",
    "StringLengthRule",
    "ValidationReport",
    "ViolationCode",
    "schema_for",
    "validate",
    "validate_document",
    "validate_negotiation",
    "validate_offer",
]
