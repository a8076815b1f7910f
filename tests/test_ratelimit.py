import pytest

from edgeagent.ratelimit import RateLimiter


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


def test_allows_up_to_limit_then_blocks(clock):
    limiter = RateLimiter(3, 10, clock=clock)
    results = [limiter.check() for _ in range(5)]
    assert results == [True, True, True, False, False]
    assert limiter.current_count() == 3


def test_rejected_checks_are_not_recorded(clock):
    limiter = RateLimiter(2, 10, clock=clock)
    limiter.check()
    limiter.check()
    for _ in range(10):
        assert limiter.check() is False
    assert limiter.current_count() == 2


def test_window_expiry_allows_again(clock):
    limiter = RateLimiter(2, 10, clock=clock)
    assert limiter.check()
    assert limiter.check()
    assert not limiter.check()
    clock.advance(10.5)
    assert limiter.check()
    assert limiter.current_count() == 1


def test_event_exactly_at_window_edge_still_counts(clock):
    limiter = RateLimiter(1, 10, clock=clock)
    assert limiter.check()
    clock.advance(10)
    assert limiter.check() is False
    clock.advance(0.001)
    assert limiter.check() is True


def test_sliding_window_expires_oldest_only(clock):
    limiter = RateLimiter(2, 10, clock=clock)
    assert limiter.check()
    clock.advance(6)
    assert limiter.check()
    clock.advance(6)
    # first event is now older than the window, second is not
    assert limiter.check()
    assert limiter.current_count() == 2
    assert not limiter.check()


def test_zero_limit_never_allows(clock):
    limiter = RateLimiter(0, 10, clock=clock)
    assert limiter.check() is False
    assert limiter.current_count() == 0


def test_initial_count_is_zero(clock):
    limiter = RateLimiter(5, 60, clock=clock)
    assert limiter.current_count() == 0


def test_properties_reflect_constructor(clock):
    limiter = RateLimiter(7, 30, clock=clock)
    assert limiter.max_commands == 7
    assert limiter.window == 30.0


def test_count_never_exceeds_limit(clock):
    limiter = RateLimiter(4, 5, clock=clock)
    for _ in range(50):
        limiter.check()
        clock.advance(0.3)
        assert limiter.current_count() <= limiter.max_commands


@pytest.mark.parametrize("max_commands, window", [(-1, 10), (3, -1)])
def test_invalid_arguments_raise(max_commands, window):
    with pytest.raises(ValueError):
        RateLimiter(max_commands, window)


def test_default_clock_allows_first_command():
    limiter = RateLimiter(1, 60)
    assert limiter.check() is True
    assert limiter.check() is False