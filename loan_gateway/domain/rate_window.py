"""Per-country sliding-window rate limiting for loan applications"""

import threading
from datetime import datetime, timedelta
from typing import Dict

from loan_gateway.domain.exceptions import RateExceededError
from loan_gateway.domain.ports import AttemptStore


class CountryLocks:
    """Registry of one mutex per country code, created on first use"""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}

    def for_country(self, country_code: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(country_code)
            if lock is None:
                lock = self._locks[country_code] = threading.Lock()
            return lock


# Shared by every limiter in the process so concurrent requests serialize per country
country_locks = CountryLocks()


class RateWindowLimiter:
    """
    Sliding-window limiter over the attempt log.

    Every call appends an attempt before counting, so the current attempt is
    part of its own window and rejected attempts still consume budget. The
    window is [now - window, now], recomputed on each call; nothing is ever
    reset or pre-allocated.
    """

    def __init__(
        self,
        attempts: AttemptStore,
        window: timedelta,
        count_limit: int,
        locks: CountryLocks = country_locks,
    ):
        if window < timedelta(0):
            raise ValueError("Rate window must not be negative")
        if count_limit < 0:
            raise ValueError("Count limit must not be negative")
        self.attempts = attempts
        self.window = window
        self.count_limit = count_limit
        self.locks = locks

    def admit(self, country_code: str, now: datetime) -> int:
        """
        Record an attempt for a country and check the window.

        Returns:
            Number of attempts in the window, the new one included

        Raises:
            RateExceededError: When that number is above count_limit
        """
        window_start = now - self.window

        # Record and count under one lock so racing requests see each other's attempts
        with self.locks.for_country(country_code):
            self.attempts.save_attempt(country_code, now)
            count = self.attempts.count_attempts_from(country_code, window_start)

        if count > self.count_limit:
            raise RateExceededError(country_code)
        return count
