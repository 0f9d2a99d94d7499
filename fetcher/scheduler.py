"""Batch gating: hand out FetchRequests no faster than the policy allows."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterable, Iterator

from core.models import FetchRequest
from fetcher.logging import emit_event, fetch_request_to_dict, policy_to_dict
from fetcher.policy import FetcherPolicy


class BatchScheduler:
    """Gate successive fetch batches on the previous batch's next_request_time."""

    def __init__(
        self,
        policy: FetcherPolicy,
        sleep_fn: Callable[[float], None] | None = None,
        event_hook: Callable[[str, dict[str, object]], None] | None = None,
        run_id: str | None = None,
    ) -> None:
        """Take ownership of a configured policy; it is frozen from here on."""
        self.policy = policy
        self.run_id = run_id

        self._sleep = sleep_fn or time.sleep
        self._event_hook = event_hook or self._default_event_logger

        self._lock = threading.Lock()
        self._next_allowed: int | None = None
        self.deadline_reached = False
        self.stalled = False

        if not policy.is_frozen:
            policy.freeze()
        self._emit("fetcher_policy_frozen", policy_to_dict(policy))

    @staticmethod
    def _default_event_logger(event_type: str, payload: dict[str, object]) -> None:
        """Default event sink writing to structured JSON stdout."""
        emit_event(event_type, **payload)

    def _emit(self, event_type: str, payload: dict[str, object]) -> None:
        self._event_hook(event_type, {"run_id": self.run_id, **payload})

    def wait_seconds(self) -> float:
        """How long the next call to next_batch would block."""
        with self._lock:
            if self._next_allowed is None:
                return 0.0
            return max(0, self._next_allowed - self.policy.now()) / 1000

    def next_batch(self, candidate_count: int) -> FetchRequest:
        """Block until the next batch is allowed, then size it."""
        while True:
            with self._lock:
                now = self.policy.now()
                if self._next_allowed is None or now >= self._next_allowed:
                    max_urls = self.policy.get_max_urls()
                    self.deadline_reached = max_urls == 0
                    request = self.policy.get_fetch_request(min(candidate_count, max_urls))
                    self._next_allowed = request.next_request_time
                    break
                wait_ms = self._next_allowed - now

            self._sleep(wait_ms / 1000)

        # A crawl delay longer than the fetch interval leaves no room for any URL.
        self.stalled = (
            not self.deadline_reached and candidate_count > 0 and request.num_urls == 0
        )

        if self.deadline_reached:
            self._emit("crawl_deadline_reached", {"crawl_end_time": self.policy.crawl_end_time})
        elif self.stalled:
            self._emit(
                "fetch_schedule_stalled",
                {
                    "candidate_count": candidate_count,
                    "crawl_delay_ms": self.policy.crawl_delay,
                    "fetch_interval_ms": self.policy.fetch_interval,
                },
            )
        else:
            self._emit(
                "fetch_batch_scheduled",
                {"candidate_count": candidate_count, **fetch_request_to_dict(request)},
            )
        return request

    def batches(self, candidate_counts: Iterable[int]) -> Iterator[FetchRequest]:
        """
        Yield one FetchRequest per candidate count.

        Stops once the crawl deadline has passed, or once the policy can never
        schedule a URL because its crawl delay exceeds the fetch interval.
        """
        for candidate_count in candidate_counts:
            request = self.next_batch(candidate_count)
            if self.deadline_reached or self.stalled:
                return
            yield request
