"""Configuration package."""
from __future__ import annotations

from realty_access_policy.config.loader import (
    AccessConfig,
    AuditConfig,
    ConfigLoader,
    ValidationConfig,
)

__all__ = [
    "AccessConfig",
    "AuditConfig",
    "ConfigLoader",
    "ValidationConfig",
]
