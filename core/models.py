"""
Core Pydantic models for fetch scheduling.

Design principles:
- Scheduling decisions are immutable values
- Acceptance outcomes are data, never exceptions
- Deterministic serialization (for structured logs and schema contracts)
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Enums
# ============================================================================

class FetchErrorCode(str, Enum):
    """Why was a response rejected?"""
    BODY_TOO_LARGE = "BODY_TOO_LARGE"
    REDIRECT_LIMIT = "REDIRECT_LIMIT"
    MIME_TYPE_REJECTED = "MIME_TYPE_REJECTED"
    SLOW_RESPONSE_RATE = "SLOW_RESPONSE_RATE"


# ============================================================================
# Fetch Request
# ============================================================================

class FetchRequest(BaseModel):
    """
    One batch decision handed out by a FetcherPolicy.

    The caller may fetch at most num_urls URLs now, and must not ask for
    the next batch before next_request_time (epoch milliseconds).

    Example:
      num_urls = 30
      next_request_time = 1740650700000  # now + 30 * 10000 ms
    """
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "examples": [
                {
                    "num_urls": 30,
                    "next_request_time": 1740650700000,
                }
            ]
        },
    )

    num_urls: int = Field(ge=0)
    next_request_time: int


# ============================================================================
# Response Acceptance
# ============================================================================

class AcceptanceDecision(BaseModel):
    """
    Outcome of checking a response against policy thresholds.

    The transport turns a rejected decision into its own abort/skip outcome.
    """
    model_config = ConfigDict(frozen=True)

    accepted: bool
    error_code: Optional[FetchErrorCode] = None
    reason: Optional[str] = None

    @classmethod
    def accept(cls) -> "AcceptanceDecision":
        return cls(accepted=True)

    @classmethod
    def reject(cls, error_code: FetchErrorCode, reason: str) -> "AcceptanceDecision":
        return cls(accepted=False, error_code=error_code, reason=reason)
