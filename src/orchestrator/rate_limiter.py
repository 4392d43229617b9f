"""
Per-provider request admission.

Each configured provider gets a 60-second request window and a cooldown
timer. Exceeding ``requestsPerMinute`` (or an explicit upstream 429) trips
the cooldown, and every request for that provider is refused until it
expires, whatever the window holds. Providers with no configured limit are
always admitted.
"""
from __future__ import annotations

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable

from src.core.config.models import RateLimitConfig

log = logging.getLogger("rate_limiter")

WINDOW_SECONDS = 60.0


@dataclass(frozen=True)
class Admission:
    allowed: bool
    reason: str


class RateLimiter:
    def __init__(
        self,
        limits: dict[str, RateLimitConfig] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limits = dict(limits or {})
        self._clock = clock
        self._windows: dict[str, deque[float]] = {}
        self._cooldown_until: dict[str, float] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, provider: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(provider)
            if lock is None:
                lock = self._locks[provider] = threading.Lock()
            return lock

    def _prune(self, window: deque[float], now: float) -> None:
        cutoff = now - WINDOW_SECONDS
        while window and window[0] <= cutoff:
            window.popleft()

    def admit(self, provider: str) -> Admission:
        with self._lock_for(provider):
            now = self._clock()
            until = self._cooldown_until.get(provider)
            if until is not None and now < until:
                return Admission(False, f"{provider} is in a cooldown period. Please wait {until - now:.1f}s.")

            limit = self.limits.get(provider)
            if limit is None:
                return Admission(True, "No rate limit configured.")

            window = self._windows.setdefault(provider, deque())
            self._prune(window, now)
            if len(window) >= limit.requests_per_minute:
                self._start_cooldown(provider, limit, now)
                return Admission(
                    False,
                    f"{provider} rate limit reached. Entering {limit.cooldown_seconds:g}s cooldown.",
                )

            window.append(now)
            return Admission(True, "Request allowed.")

    def enter_cooldown(self, provider: str) -> None:
        """Trip the cooldown explicitly, e.g. after the provider answered 429."""
        limit = self.limits.get(provider)
        if limit is None:
            log.debug("No rate limit configured for %s; ignoring cooldown request", provider)
            return
        with self._lock_for(provider):
            self._start_cooldown(provider, limit, self._clock())

    def _start_cooldown(self, provider: str, limit: RateLimitConfig, now: float) -> None:
        self._cooldown_until[provider] = now + limit.cooldown_seconds
        log.warning("Cooldown initiated for %s for %gs", provider, limit.cooldown_seconds)

    def cooldown_remaining(self, provider: str) -> float:
        until = self._cooldown_until.get(provider)
        if until is None:
            return 0.0
        return max(0.0, until - self._clock())

    def usage_stats(self) -> dict[str, dict]:
        """Current window occupancy and cooldown per configured provider."""
        stats = {}
        for provider, limit in self.limits.items():
            with self._lock_for(provider):
                window = self._windows.get(provider, deque())
                self._prune(window, self._clock())
                count = len(window)
            stats[provider] = {
                "requests_this_minute": count,
                "minute_limit": limit.requests_per_minute,
                "minute_remaining": max(0, limit.requests_per_minute - count),
                "cooldown_remaining_s": round(self.cooldown_remaining(provider), 1),
            }
        return stats
