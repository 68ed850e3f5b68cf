"""Tests for retry logic."""

import pytest

from mrreports.utils.retry import RetryStrategy


class Flaky:
    def __init__(self, failures, exc=ConnectionError):
        self.failures = failures
        self.exc = exc
        self.calls = 0

    def __call__(self, value):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc("transient")
        return value


def test_recovers_after_failures():
    delays = []
    strategy = RetryStrategy(max_retries=3, exceptions=(ConnectionError,), sleep=delays.append)
    flaky = Flaky(failures=2)

    assert strategy.execute(flaky, "ok") == "ok"
    assert flaky.calls == 3
    assert len(delays) == 2


def test_gives_up():
    strategy = RetryStrategy(max_retries=2, exceptions=(ConnectionError,), sleep=lambda s: None)
    flaky = Flaky(failures=10)
    with pytest.raises(ConnectionError):
        strategy.execute(flaky, "ok")
    assert flaky.calls == 3


def test_other_exceptions_are_not_retried():
    strategy = RetryStrategy(max_retries=3, exceptions=(ConnectionError,), sleep=lambda s: None)
    flaky = Flaky(failures=1, exc=KeyError)
    with pytest.raises(KeyError):
        strategy.execute(flaky, "ok")
    assert flaky.calls == 1


def test_exponential_delay_without_jitter():
    strategy = RetryStrategy(base_delay=1.0, max_delay=5.0, jitter=False)
    assert [strategy._calculate_delay(attempt) for attempt in range(4)] == [1.0, 2.0, 4.0, 5.0]
