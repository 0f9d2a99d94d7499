"""Structured logging helpers for fetch scheduling."""

from __future__ import annotations

from typing import Any

from core.models import FetchRequest
from core.structured_logging import emit_json_event
from fetcher.policy import FetcherPolicy


# Events that mean the crawl cannot make further progress.
WARNING_EVENTS = {"crawl_deadline_reached", "fetch_schedule_stalled"}


def policy_to_dict(policy: FetcherPolicy) -> dict[str, Any]:
    """Convert FetcherPolicy limits to a JSON-safe dictionary."""
    mime_types = policy.valid_mime_types
    return {
        "crawl_end_time": policy.crawl_end_time,
        "min_response_rate": policy.min_response_rate,
        "max_content_size": policy.max_content_size,
        "crawl_delay_ms": policy.crawl_delay,
        "max_redirects": policy.max_redirects,
        "accept_language": policy.accept_language,
        "valid_mime_types": sorted(mime_types) if mime_types is not None else None,
    }


def fetch_request_to_dict(request: FetchRequest) -> dict[str, Any]:
    """Convert FetchRequest to a JSON-safe dictionary."""
    return {
        "num_urls": request.num_urls,
        "next_request_time": request.next_request_time,
    }


def emit_event(event_type: str, *, run_id: str | None = None, **payload: Any) -> str:
    """Emit a structured event log line and return it for testability."""
    level = "warning" if event_type in WARNING_EVENTS else "info"
    return emit_json_event(event_type, run_id=run_id, level=level, **payload)
