"""Response acceptance checks derived from a FetcherPolicy.

Nothing here performs I/O. A transport streams the response itself and asks
these helpers whether to keep going; a rejected AcceptanceDecision becomes
the transport's own abort/skip outcome.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping

from requests.structures import CaseInsensitiveDict

from core.config import FetchPolicyConfig
from core.models import AcceptanceDecision, FetchErrorCode
from fetcher.policy import FetcherPolicy


def normalize_mime_type(content_type: str | None) -> str | None:
    """Strip parameters and case from a Content-Type value."""
    if not content_type:
        return None
    normalized = content_type.split(";", 1)[0].strip().lower()
    return normalized or None


def _mime_matches(mime_type: str, valid_mime_types: frozenset[str]) -> bool:
    """Exact match, prefix match for entries like ``text/*``, or ``*/*`` for anything."""
    for entry in valid_mime_types:
        entry = entry.strip().lower()
        if not entry:
            continue
        if entry in {"*", "*/*"}:
            return True
        if entry.endswith("/*"):
            if mime_type.startswith(entry[:-1]):
                return True
        elif mime_type == entry:
            return True
    return False


def check_mime_type(policy: FetcherPolicy, content_type: str | None) -> AcceptanceDecision:
    """Check a Content-Type against the policy allow-list."""
    if policy.accepts_all_mime_types():
        return AcceptanceDecision.accept()

    mime_type = normalize_mime_type(content_type)
    if mime_type is None:
        return AcceptanceDecision.reject(
            FetchErrorCode.MIME_TYPE_REJECTED,
            "response has no content type",
        )
    if not _mime_matches(mime_type, policy.valid_mime_types):
        return AcceptanceDecision.reject(
            FetchErrorCode.MIME_TYPE_REJECTED,
            f"mime type {mime_type} is not accepted",
        )
    return AcceptanceDecision.accept()


def check_content_size(policy: FetcherPolicy, bytes_read: int) -> AcceptanceDecision:
    """Check total body bytes against max_content_size."""
    if bytes_read > policy.max_content_size:
        return AcceptanceDecision.reject(
            FetchErrorCode.BODY_TOO_LARGE,
            f"response exceeds {policy.max_content_size} bytes",
        )
    return AcceptanceDecision.accept()


def check_redirects(policy: FetcherPolicy, redirect_count: int) -> AcceptanceDecision:
    """Check the number of redirect hops followed so far."""
    if redirect_count > policy.max_redirects:
        return AcceptanceDecision.reject(
            FetchErrorCode.REDIRECT_LIMIT,
            f"redirects exceeded {policy.max_redirects}",
        )
    return AcceptanceDecision.accept()


def check_response_rate(
    policy: FetcherPolicy,
    bytes_read: int,
    elapsed_ms: int,
) -> AcceptanceDecision:
    """
    Check measured transfer rate against min_response_rate.

    The rate is not judged during the first RESPONSE_RATE_GRACE_MS of a
    transfer, so slow connection setup alone never aborts a fetch.
    """
    if not policy.has_min_response_rate():
        return AcceptanceDecision.accept()
    if elapsed_ms <= FetchPolicyConfig.RESPONSE_RATE_GRACE_MS:
        return AcceptanceDecision.accept()

    bytes_per_second = (bytes_read * 1000) / elapsed_ms
    if bytes_per_second < policy.min_response_rate:
        return AcceptanceDecision.reject(
            FetchErrorCode.SLOW_RESPONSE_RATE,
            f"transfer rate {bytes_per_second:.0f} B/s below {policy.min_response_rate} B/s",
        )
    return AcceptanceDecision.accept()


def evaluate_response(
    policy: FetcherPolicy,
    headers: Mapping[str, str] | None,
    bytes_read: int = 0,
    elapsed_ms: int = 0,
    redirect_count: int = 0,
) -> AcceptanceDecision:
    """Return the first failing check, or an accepted decision."""
    content_type = CaseInsensitiveDict(headers or {}).get("content-type")
    checks = (
        lambda: check_mime_type(policy, content_type),
        lambda: check_redirects(policy, redirect_count),
        lambda: check_content_size(policy, bytes_read),
        lambda: check_response_rate(policy, bytes_read, elapsed_ms),
    )
    for check in checks:
        decision = check()
        if not decision.accepted:
            return decision
    return AcceptanceDecision.accept()


def request_headers(policy: FetcherPolicy) -> CaseInsensitiveDict:
    """Headers a transport should send for every request under this policy."""
    return CaseInsensitiveDict({"Accept-Language": policy.accept_language})


class ResponseMonitor:
    """Track one streamed response body against size and rate limits."""

    def __init__(
        self,
        policy: FetcherPolicy,
        clock_fn: Callable[[], int] | None = None,
    ) -> None:
        """Start timing now; clock_fn returns milliseconds and defaults to the policy clock."""
        self.policy = policy
        self._clock = clock_fn or policy.now
        self._started_at = self._clock()
        self.bytes_read = 0
        self.truncated = False
        self.decision = AcceptanceDecision.accept()

    @property
    def elapsed_ms(self) -> int:
        return self._clock() - self._started_at

    def feed(self, chunk: bytes) -> bytes:
        """
        Account for one received chunk and return the part worth keeping.

        Bytes beyond max_content_size are dropped and the monitor is marked
        truncated. Once truncated or rejected, every later chunk returns
        empty and the rate is no longer judged.
        """
        if self.truncated or not self.decision.accepted:
            return b""

        remaining = max(0, self.policy.max_content_size - self.bytes_read)
        kept = chunk[:remaining]
        self.bytes_read += len(kept)
        if len(kept) < len(chunk):
            self.truncated = True
            return kept

        self.decision = check_response_rate(self.policy, self.bytes_read, self.elapsed_ms)
        return kept

    @property
    def should_continue(self) -> bool:
        """Whether the transport should keep reading."""
        return self.decision.accepted and not self.truncated
