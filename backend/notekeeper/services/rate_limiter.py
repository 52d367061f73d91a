"""
Notekeeper API - Sliding Window Rate Limiter
=============================================

What:  Per-client sliding window limiter guarding note creation.
How:   Tracks accepted request timestamps per client id in memory.
Who:   Called by NoteService.create_note before the payload is validated.
When:  Once per POST /notes request.

Algorithm: Sliding Window Counter
    1. Each client id gets a list of accepted request timestamps
    2. On each check, drop timestamps at or before `now - window`
    3. If the remaining count >= limit, reject (nothing is recorded)
    4. Otherwise, record `now` and accept

    An accepted timestamp can be withdrawn with `release()`. NoteService
    does this when the admitted request then fails validation, so rejected
    payloads never consume the client's budget.

    Time complexity: O(k) per check, k = requests in the client's window
    Space complexity: O(n × k), n = clients seen within recent windows

Concurrency:
    One `threading.Lock` guards the whole map, so prune/check/record is
    atomic per client. This is per-process state; multiple workers each
    keep their own counters.
"""

import logging
import math
import threading
import time
from collections import defaultdict
from typing import Callable, Dict, List, Optional

from notekeeper.exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)


class SlidingWindowRateLimiter:
    """
    In-memory sliding window rate limiter.

    Args:
        limit: Max accepted requests per client per window (default: 5)
        window: Window duration in seconds (default: 60)
        cleanup_every: Prune clients with no live timestamps every N checks
        clock: Returns the current time in seconds (default: time.time)
    """

    def __init__(
        self,
        limit: int = 5,
        window: int = 60,
        cleanup_every: int = 1000,
        clock: Optional[Callable[[], float]] = None,
    ):
        if limit < 1:
            raise ValueError("limit must be at least 1")
        if window <= 0:
            raise ValueError("window must be positive")
        self.limit = limit
        self.window = window
        self.cleanup_every = max(1, cleanup_every)
        self._clock = clock or time.time
        self._lock = threading.Lock()
        self._requests: Dict[str, List[float]] = defaultdict(list)
        self._checks = 0

    def hit(self, client_id: str) -> float:
        """
        Check the limit for `client_id` and record the request if allowed.

        Returns:
            The recorded timestamp (pass it to `release()` to withdraw it).

        Raises:
            RateLimitExceededError: The client already has `limit` requests
                in the current window.
        """
        with self._lock:
            now = self._clock()
            window_start = now - self.window

            # ── Sliding Window: Clean old entries ─────────────────────────
            timestamps = [ts for ts in self._requests[client_id] if ts > window_start]
            self._requests[client_id] = timestamps

            # ── Check rate limit ──────────────────────────────────────────
            if len(timestamps) >= self.limit:
                oldest = timestamps[0]
                retry_after = max(1, math.ceil(oldest + self.window - now))
                logger.warning(
                    "Rate limit exceeded for client %s: %d requests in %ds window",
                    client_id,
                    len(timestamps),
                    self.window,
                )
                raise RateLimitExceededError(
                    limit=self.limit,
                    window=self.window,
                    retry_after=retry_after,
                    context={"client_id": client_id},
                )

            # ── Record this request ───────────────────────────────────────
            timestamps.append(now)

            self._checks += 1
            if self._checks % self.cleanup_every == 0:
                self._cleanup_inactive_clients(window_start)

            return now

    def release(self, client_id: str, stamp: float) -> None:
        """Withdraw a timestamp previously returned by `hit()`."""
        with self._lock:
            timestamps = self._requests.get(client_id)
            if timestamps and stamp in timestamps:
                timestamps.remove(stamp)

    def remaining(self, client_id: str) -> int:
        """Requests `client_id` may still make in the current window."""
        with self._lock:
            window_start = self._clock() - self.window
            live = [ts for ts in self._requests.get(client_id, []) if ts > window_start]
            return max(0, self.limit - len(live))

    def reset(self) -> None:
        with self._lock:
            self._requests.clear()
            self._checks = 0

    def tracked_clients(self) -> int:
        with self._lock:
            return len(self._requests)

    def _cleanup_inactive_clients(self, window_start: float) -> None:
        """Remove clients that have no requests within the current window."""
        inactive = [
            client for client, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] <= window_start
        ]
        for client in inactive:
            del self._requests[client]

        if inactive:
            logger.debug("Cleaned up %d inactive rate limit entries", len(inactive))
