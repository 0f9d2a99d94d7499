"""
Shared pytest fixtures and configuration for fetch-policy tests.
"""

import pytest

from fetcher.policy import FetcherPolicy


# Arbitrary fixed epoch-ms instant; tests never depend on the real wall clock.
START_MS = 1_740_650_400_000


class FakeClock:
    """Deterministic millisecond clock with a sleep hook that advances it."""

    def __init__(self, start_ms: int = START_MS) -> None:
        self.now_ms = start_ms
        self.sleeps: list[float] = []

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int) -> None:
        self.now_ms += ms

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now_ms += int(round(seconds * 1000))


# ============================================================================
# Fixtures: Clock
# ============================================================================

@pytest.fixture
def clock() -> FakeClock:
    """Fresh fake clock per test."""
    return FakeClock()


# ============================================================================
# Fixtures: Policies
# ============================================================================

@pytest.fixture
def default_policy(clock: FakeClock) -> FetcherPolicy:
    """Policy with all documented defaults."""
    return FetcherPolicy(clock_fn=clock)


@pytest.fixture
def paced_policy(clock: FakeClock) -> FetcherPolicy:
    """10-second pacing, no deadline."""
    return FetcherPolicy(crawl_delay=10_000, clock_fn=clock)


@pytest.fixture
def deadline_policy(clock: FakeClock) -> FetcherPolicy:
    """1-second pacing with a deadline 10 seconds out."""
    return FetcherPolicy(
        crawl_delay=1000,
        crawl_end_time=clock() + 10_000,
        clock_fn=clock,
    )


@pytest.fixture
def html_only_policy(clock: FakeClock) -> FetcherPolicy:
    """Policy accepting HTML and any text type, with a 1 KB body cap."""
    policy = FetcherPolicy(max_content_size=1024, max_redirects=3, clock_fn=clock)
    policy.valid_mime_types = {"text/html", "application/xhtml+xml", "text/*"}
    return policy


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "contract: contract schema compliance tests")
    config.addinivalue_line("markers", "integration: end-to-end integration tests")
    config.addinivalue_line("markers", "unit: unit tests")
