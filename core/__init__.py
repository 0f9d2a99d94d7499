"""Core module for fetch-policy."""

from core.models import (
    AcceptanceDecision,
    FetchErrorCode,
    FetchRequest,
)
from core.config import FetchPolicyConfig
from core.structured_logging import emit_json_event

__all__ = [
    "AcceptanceDecision",
    "FetchErrorCode",
    "FetchRequest",
    "FetchPolicyConfig",
    "emit_json_event",
]
