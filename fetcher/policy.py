"""Crawl-wide fetch policy: batch sizing, deadline capacity, and response limits."""

from __future__ import annotations

import sys
import time
from collections.abc import Callable, Mapping
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, PrivateAttr, field_validator

from core.config import FetchPolicyConfig
from core.models import FetchRequest


# Largest URL count the policy ever reports; stands for "no limit".
UNBOUNDED_URLS = sys.maxsize

NO_MIN_RESPONSE_RATE = FetchPolicyConfig.NO_MIN_RESPONSE_RATE
NO_CRAWL_END_TIME = FetchPolicyConfig.NO_CRAWL_END_TIME


class PolicyFrozenError(RuntimeError):
    """Raised when a frozen FetcherPolicy is reconfigured."""


def _wall_clock_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


class FetcherPolicy(BaseModel):
    """
    Crawl-wide fetch configuration and the scheduling decisions derived from it.

    Configure during setup, call freeze(), then share the instance with every
    worker. Queries only read fields and the clock, so concurrent callers need
    no locking.
    """

    model_config = ConfigDict(validate_assignment=True)

    fetch_interval: ClassVar[int] = FetchPolicyConfig.DEFAULT_FETCH_INTERVAL

    min_response_rate: int | None = FetchPolicyConfig.DEFAULT_MIN_RESPONSE_RATE
    max_content_size: int = FetchPolicyConfig.DEFAULT_MAX_CONTENT_SIZE
    crawl_end_time: int | None = FetchPolicyConfig.DEFAULT_CRAWL_END_TIME
    crawl_delay: int = FetchPolicyConfig.DEFAULT_CRAWL_DELAY
    max_redirects: int = FetchPolicyConfig.DEFAULT_MAX_REDIRECTS

    # Rarely changed; callers override these individually after construction.
    accept_language: str = FetchPolicyConfig.DEFAULT_ACCEPT_LANGUAGE
    valid_mime_types: frozenset[str] | None = None

    _clock: Callable[[], int] | None = PrivateAttr(default=None)
    _frozen: bool = PrivateAttr(default=False)

    def __init__(self, *, clock_fn: Callable[[], int] | None = None, **data: Any) -> None:
        """Build a policy; clock_fn returns epoch milliseconds and exists for tests."""
        super().__init__(**data)
        self._clock = clock_fn

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any],
        clock_fn: Callable[[], int] | None = None,
    ) -> FetcherPolicy:
        """Build a policy from a plain mapping, e.g. a parsed JSON config section."""
        return cls(clock_fn=clock_fn, **dict(config))

    @field_validator("crawl_delay")
    @classmethod
    def validate_crawl_delay(cls, v: int) -> int:
        """Reject negative delays and delays that look like seconds."""
        if v < 0:
            raise ValueError(f"crawl_delay must be >= 0: {v}")
        # Catch common error of specifying crawl delay in seconds versus milliseconds
        if 0 < v < FetchPolicyConfig.MIN_CRAWL_DELAY:
            raise ValueError(f"crawl_delay must be milliseconds, not seconds: {v}")
        return v

    def __setattr__(self, name: str, value: Any) -> None:
        if not name.startswith("_") and self._frozen:
            raise PolicyFrozenError(f"cannot set {name}: fetcher policy is frozen")
        super().__setattr__(name, value)

    # ------------------------------------------------------------------
    # Setup phase
    # ------------------------------------------------------------------

    def freeze(self) -> None:
        """End the setup phase; any later field assignment raises PolicyFrozenError."""
        self._frozen = True

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    # ------------------------------------------------------------------
    # Unbounded-value predicates
    # ------------------------------------------------------------------

    def has_crawl_end_time(self) -> bool:
        return self.crawl_end_time is not NO_CRAWL_END_TIME

    def has_min_response_rate(self) -> bool:
        return self.min_response_rate is not NO_MIN_RESPONSE_RATE

    def accepts_all_mime_types(self) -> bool:
        return self.valid_mime_types is None

    def default_crawl_delay(self) -> int:
        return FetchPolicyConfig.DEFAULT_CRAWL_DELAY

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def now(self) -> int:
        """Read the policy clock once (epoch milliseconds)."""
        return (self._clock or _wall_clock_ms)()

    def get_max_urls(self) -> int:
        """
        Calculate the maximum number of URLs that could be processed in the remaining time.

        Re-evaluated on every call so the bound shrinks as the deadline nears.
        """
        if not self.has_crawl_end_time():
            return UNBOUNDED_URLS
        return self._calc_max_urls()

    def _calc_max_urls(self) -> int:
        if self.crawl_delay == 0:
            return UNBOUNDED_URLS

        crawl_duration = self.crawl_end_time - self.now()
        if crawl_duration <= 0:
            return 0

        # +1 for the request that can still go out right now.
        return min(UNBOUNDED_URLS, 1 + max(0, crawl_duration // self.crawl_delay))

    def get_fetch_request(self, max_urls: int) -> FetchRequest:
        """
        Size the next batch and compute when the batch after it may start.

        Args:
            max_urls: Upper bound from the caller, e.g. how many URLs the frontier holds.

        Returns:
            FetchRequest with at most one fetch interval's worth of URLs.

        Raises:
            ValueError: If max_urls is negative.
        """
        if max_urls < 0:
            raise ValueError(f"max_urls must be >= 0: {max_urls}")

        if self.crawl_delay > 0:
            num_urls = min(max_urls, self.fetch_interval // self.crawl_delay)
        else:
            num_urls = max_urls

        next_request_time = self.now() + num_urls * self.crawl_delay
        return FetchRequest(num_urls=num_urls, next_request_time=next_request_time)

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def summary(self) -> str:
        """Human-readable multi-line summary of the scheduling limits."""
        lines = [
            f"Crawl end time: {self.crawl_end_time}",
            f"Minimum response rate: {self.min_response_rate}",
            f"Maximum content size: {self.max_content_size}",
            f"Crawl delay in msec: {self.crawl_delay}",
            f"Maximum redirects: {self.max_redirects}",
        ]
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.summary()
