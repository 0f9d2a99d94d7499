"""Fetcher subsystem: batch scheduling policy and response acceptance checks."""

from fetcher.acceptance import ResponseMonitor, evaluate_response, request_headers
from fetcher.logging import emit_event, fetch_request_to_dict, policy_to_dict
from fetcher.policy import FetcherPolicy, PolicyFrozenError, UNBOUNDED_URLS
from fetcher.scheduler import BatchScheduler

__all__ = [
    "ResponseMonitor",
    "evaluate_response",
    "request_headers",
    "emit_event",
    "fetch_request_to_dict",
    "policy_to_dict",
    "FetcherPolicy",
    "PolicyFrozenError",
    "UNBOUNDED_URLS",
    "BatchScheduler",
]
