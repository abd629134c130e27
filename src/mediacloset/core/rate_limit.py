"""Per-provider token bucket rate limiting.

Some catalogs publish hard request-rate terms (MusicBrainz allows one
request per second per client). A single RateGovernor is shared by every
in-flight resolution in the process, so bucket state is guarded by a
threading lock and callers sleep outside of it.

Example:
    governor = RateGovernor()
    governor.configure("musicbrainz", capacity=1, refill_interval=1.0)
    await governor.wait("musicbrainz")  # returns immediately
    await governor.wait("musicbrainz")  # sleeps ~1 second
"""

import asyncio
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

MUSICBRAINZ_RATE_KEY = "musicbrainz"

# MusicBrainz: 1 request per second
MUSICBRAINZ_CAPACITY = 1
MUSICBRAINZ_REFILL_INTERVAL = 1.0


@dataclass
class _BucketState:
    """Mutable token bucket state; only touched under RateGovernor._lock."""

    capacity: float
    refill_interval: float
    tokens: float
    updated_at: float

    def refill(self, now: float) -> None:
        """Add the tokens earned since the last update."""
        elapsed = now - self.updated_at
        if elapsed > 0:
            self.tokens = min(self.capacity, self.tokens + elapsed / self.refill_interval)
            self.updated_at = now

    def take(self, now: float) -> float:
        """Take a token if one is available.

        Returns:
            0.0 if a token was taken, otherwise seconds until one is due.
        """
        self.refill(now)
        if self.tokens >= 1.0:
            self.tokens -= 1.0
            return 0.0
        return (1.0 - self.tokens) * self.refill_interval


class RateGovernor:
    """Token buckets keyed by provider id.

    Providers without a configured bucket are not limited.

    Attributes:
        clock: Monotonic time source (injectable for tests).
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize with no buckets.

        Args:
            clock: Monotonic time source in seconds.
        """
        self.clock = clock
        self._lock = threading.Lock()
        self._buckets: dict[str, _BucketState] = {}

    @classmethod
    def with_defaults(cls) -> "RateGovernor":
        """Create a governor with the published provider limits."""
        governor = cls()
        governor.configure(
            MUSICBRAINZ_RATE_KEY,
            capacity=MUSICBRAINZ_CAPACITY,
            refill_interval=MUSICBRAINZ_REFILL_INTERVAL,
        )
        return governor

    def configure(self, provider_id: str, capacity: int, refill_interval: float) -> None:
        """Register (or replace) the bucket for a provider.

        The bucket starts full.

        Args:
            provider_id: Provider key used by wait()/try_acquire().
            capacity: Maximum burst size in requests.
            refill_interval: Seconds to earn back one token.

        Raises:
            ValueError: If capacity or refill_interval is not positive.
        """
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        if refill_interval <= 0:
            raise ValueError(f"refill_interval must be > 0, got {refill_interval}")
        with self._lock:
            self._buckets[provider_id] = _BucketState(
                capacity=float(capacity),
                refill_interval=refill_interval,
                tokens=float(capacity),
                updated_at=self.clock(),
            )

    def is_limited(self, provider_id: str) -> bool:
        """Return True if the provider has a configured bucket."""
        with self._lock:
            return provider_id in self._buckets

    def _reserve(self, provider_id: str) -> float:
        with self._lock:
            bucket = self._buckets.get(provider_id)
            if bucket is None:
                return 0.0
            return bucket.take(self.clock())

    def try_acquire(self, provider_id: str) -> bool:
        """Take a token without blocking.

        Returns:
            True if the request may proceed now.
        """
        return self._reserve(provider_id) == 0.0

    async def wait(self, provider_id: str) -> None:
        """Block until the provider's bucket has a token.

        Cancelling the awaiting task interrupts the sleep immediately and
        leaves the bucket untouched.

        Raises:
            asyncio.CancelledError: If the calling task is cancelled.
        """
        while True:
            delay = self._reserve(provider_id)
            if delay <= 0:
                return
            logger.debug("Rate limit for %s: waiting %.2fs", provider_id, delay)
            await asyncio.sleep(delay)
