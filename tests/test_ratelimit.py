import pytest

from cratesapi.ratelimit import RATE_LIMIT, RateLimiter


class FakeClock:
    def __init__(self, now: float = 100.0) -> None:
        self.now = now
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def test_first_request_does_not_wait() -> None:
    clock = FakeClock()
    limiter = RateLimiter(clock=clock, sleep=clock.sleep)

    assert limiter.last_request is None
    limiter.acquire()

    assert clock.sleeps == []
    assert limiter.last_request == 100.0


def test_consecutive_requests_wait_remaining_interval() -> None:
    clock = FakeClock()
    limiter = RateLimiter(clock=clock, sleep=clock.sleep)

    limiter.acquire()
    clock.now += 0.25
    limiter.acquire()

    assert clock.sleeps == [pytest.approx(RATE_LIMIT - 0.25)]
    assert limiter.last_request == pytest.approx(100.0 + RATE_LIMIT)


def test_no_wait_after_interval_elapsed() -> None:
    clock = FakeClock()
    limiter = RateLimiter(clock=clock, sleep=clock.sleep)

    limiter.acquire()
    clock.now += RATE_LIMIT + 0.5
    limiter.acquire()

    assert clock.sleeps == []
    assert limiter.last_request == 100.0 + RATE_LIMIT + 0.5


def test_short_sleep_is_retried() -> None:
    clock = FakeClock(now=0.0)

    def short_sleep(seconds: float) -> None:
        # Wakes up early, at most a quarter second at a time
        clock.sleep(min(seconds, 0.25))

    limiter = RateLimiter(clock=clock, sleep=short_sleep)

    limiter.acquire()
    limiter.acquire()

    assert clock.sleeps == [0.25, 0.25, 0.25, 0.25]
    assert limiter.last_request == RATE_LIMIT


def test_instances_do_not_share_state() -> None:
    clock = FakeClock()
    first = RateLimiter(clock=clock, sleep=clock.sleep)
    second = RateLimiter(clock=clock, sleep=clock.sleep)

    first.acquire()
    second.acquire()

    assert clock.sleeps == []
