"""
Default fetch-policy configuration.

These values are the crawl-wide defaults every FetcherPolicy starts from.
Callers override them per policy instance; the class itself is never
mutated at runtime.

Design: Everything defaults to "polite + bounded". A crawl that forgets to
configure anything still waits 30 seconds between requests, reads at most
64 KB per page and follows at most 20 redirects.
"""

from typing import Optional


class FetchPolicyConfig:
    """
    Crawl-wide defaults and constants for fetch scheduling.

    Times are milliseconds, sizes are bytes.
    """

    # ========================================================================
    # Sentinels
    # ========================================================================

    NO_MIN_RESPONSE_RATE: Optional[int] = None
    """No lower bound on transfer rate."""

    NO_CRAWL_END_TIME: Optional[int] = None
    """No crawl deadline."""

    NO_REDIRECTS: int = 0
    """Do not follow redirects at all."""

    # ========================================================================
    # Policy Defaults
    # ========================================================================

    DEFAULT_MIN_RESPONSE_RATE: Optional[int] = NO_MIN_RESPONSE_RATE
    """Bytes-per-second floor. Default: not enforced."""

    DEFAULT_MAX_CONTENT_SIZE: int = 64 * 1024
    """Max bytes read from a single response."""

    DEFAULT_CRAWL_END_TIME: Optional[int] = NO_CRAWL_END_TIME
    """Absolute deadline (epoch ms). Default: unbounded."""

    DEFAULT_CRAWL_DELAY: int = 30 * 1000
    """Milliseconds between requests."""

    DEFAULT_MAX_REDIRECTS: int = 20
    """Redirect hops followed per URL."""

    DEFAULT_ACCEPT_LANGUAGE: str = "en-us,en-gb,en;q=0.7,*;q=0.3"
    """Accept-Language request header value."""

    # ========================================================================
    # Scheduling
    # ========================================================================

    # Window used to cap how many URLs go into one batch
    DEFAULT_FETCH_INTERVAL: int = 5 * 60 * 1000
    """Interval between batched fetch requests (ms)."""

    # Delays in (0, MIN_CRAWL_DELAY) were almost certainly given in seconds
    MIN_CRAWL_DELAY: int = 100
    """Smallest non-zero crawl delay accepted (ms)."""

    # ========================================================================
    # Response Acceptance
    # ========================================================================

    # Transfer rate is not judged until the response has been streaming this long
    RESPONSE_RATE_GRACE_MS: int = 5 * 1000
    """Warm-up period before min_response_rate is checked (ms)."""

    @classmethod
    def validate(cls) -> None:
        """
        Validate configuration at startup.

        Raises:
            AssertionError: If any default is inconsistent.
        """
        assert (
            cls.DEFAULT_CRAWL_DELAY == 0 or cls.DEFAULT_CRAWL_DELAY >= cls.MIN_CRAWL_DELAY
        ), "DEFAULT_CRAWL_DELAY must be 0 or >= MIN_CRAWL_DELAY"

        assert (
            cls.DEFAULT_FETCH_INTERVAL > 0
        ), "DEFAULT_FETCH_INTERVAL must be > 0"

        assert (
            cls.DEFAULT_MAX_CONTENT_SIZE >= 0
        ), "DEFAULT_MAX_CONTENT_SIZE must be >= 0"

        assert (
            cls.DEFAULT_MAX_REDIRECTS >= cls.NO_REDIRECTS
        ), "DEFAULT_MAX_REDIRECTS must be >= NO_REDIRECTS"

        assert (
            cls.RESPONSE_RATE_GRACE_MS >= 0
        ), "RESPONSE_RATE_GRACE_MS must be >= 0"


# Validate at module import time
FetchPolicyConfig.validate()
