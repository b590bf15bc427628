"""Unit tests for the per-country sliding-window limiter"""

import threading
import pytest
from datetime import datetime, timedelta
from loan_gateway.domain.exceptions import RateExceededError
from loan_gateway.domain.rate_window import CountryLocks, RateWindowLimiter

NOW = datetime(2024, 3, 1, 12, 0, 0)
WINDOW = timedelta(milliseconds=1000)


def test_first_attempt_for_country_is_admitted(attempt_store):
    limiter = RateWindowLimiter(attempt_store, WINDOW, count_limit=1)

    assert limiter.admit("lv", NOW) == 1
    assert len(attempt_store.attempts) == 1


def test_count_equal_to_limit_is_admitted(attempt_store):
    """limit - 1 prior attempts: the new count equals the limit and passes"""
    limiter = RateWindowLimiter(attempt_store, WINDOW, count_limit=3)
    for offset in (300, 200):
        attempt_store.save_attempt("lv", NOW - timedelta(milliseconds=offset))

    assert limiter.admit("lv", NOW) == 3


def test_count_above_limit_is_rejected(attempt_store):
    """limit prior attempts: the new count is limit + 1 and fails"""
    limiter = RateWindowLimiter(attempt_store, WINDOW, count_limit=3)
    for offset in (300, 200, 100):
        attempt_store.save_attempt("lv", NOW - timedelta(milliseconds=offset))

    with pytest.raises(RateExceededError) as exc_info:
        limiter.admit("lv", NOW)

    assert exc_info.value.country_code == "lv"
    assert "lv" in str(exc_info.value)


def test_rejected_attempt_is_still_recorded(attempt_store):
    limiter = RateWindowLimiter(attempt_store, WINDOW, count_limit=0)

    with pytest.raises(RateExceededError):
        limiter.admit("lv", NOW)

    assert attempt_store.attempts[-1].country_code == "lv"
    assert attempt_store.attempts[-1].timestamp == NOW


def test_expired_attempts_do_not_count(attempt_store):
    """Attempts at t-2000, t-1500, t-1100 are outside a 1000ms window"""
    limiter = RateWindowLimiter(attempt_store, WINDOW, count_limit=2)
    for offset in (2000, 1500, 1100):
        attempt_store.save_attempt("lv", NOW - timedelta(milliseconds=offset))

    assert limiter.admit("lv", NOW) == 1


def test_window_start_is_inclusive(attempt_store):
    limiter = RateWindowLimiter(attempt_store, WINDOW, count_limit=5)
    attempt_store.save_attempt("lv", NOW - WINDOW)
    attempt_store.save_attempt("lv", NOW - WINDOW - timedelta(microseconds=1))

    assert limiter.admit("lv", NOW) == 2


def test_other_countries_do_not_count(attempt_store):
    limiter = RateWindowLimiter(attempt_store, WINDOW, count_limit=1)
    for _ in range(5):
        attempt_store.save_attempt("ee", NOW)

    assert limiter.admit("lv", NOW) == 1


def test_zero_window_counts_only_attempts_at_now(attempt_store):
    limiter = RateWindowLimiter(attempt_store, timedelta(0), count_limit=1)
    attempt_store.save_attempt("lv", NOW - timedelta(milliseconds=1))

    assert limiter.admit("lv", NOW) == 1


def test_sliding_window_moves_with_now(attempt_store):
    limiter = RateWindowLimiter(attempt_store, WINDOW, count_limit=2)
    limiter.admit("lv", NOW)
    limiter.admit("lv", NOW + timedelta(milliseconds=500))

    with pytest.raises(RateExceededError):
        limiter.admit("lv", NOW + timedelta(milliseconds=900))

    # First attempt slid out, but the rejected one at +900 still counts
    with pytest.raises(RateExceededError):
        limiter.admit("lv", NOW + timedelta(milliseconds=1450))

    # Window [+950, +1950] only holds the +1450 and +1950 attempts
    assert limiter.admit("lv", NOW + timedelta(milliseconds=1950)) == 2


def test_invalid_configuration_is_rejected(attempt_store):
    with pytest.raises(ValueError):
        RateWindowLimiter(attempt_store, timedelta(milliseconds=-1), count_limit=1)
    with pytest.raises(ValueError):
        RateWindowLimiter(attempt_store, WINDOW, count_limit=-1)


def test_concurrent_admissions_see_each_other(attempt_store):
    """Every racing attempt observes a distinct count and none is lost"""
    limiter = RateWindowLimiter(attempt_store, WINDOW, count_limit=100, locks=CountryLocks())
    counts = []
    counts_guard = threading.Lock()

    def worker():
        count = limiter.admit("lv", NOW)
        with counts_guard:
            counts.append(count)

    threads = [threading.Thread(target=worker) for _ in range(20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(counts) == list(range(1, 21))
    assert len(attempt_store.attempts) == 20


def test_country_locks_are_per_country():
    locks = CountryLocks()

    assert locks.for_country("lv") is locks.for_country("lv")
    assert locks.for_country("lv") is not locks.for_country("ee")
