"""Decision audit trail."""
from __future__ import annotations

from realty_access_policy.audit.logger import DECISION_EVENT, DecisionLogger

__all__ = [
    "DECISION_EVENT",
    "DecisionLogger",
]
