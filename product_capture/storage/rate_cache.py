# product_capture/storage/rate_cache.py

"""In-memory exchange-rate cache with per-currency expiry."""

import logging
import threading
import time
from dataclasses import dataclass

from product_capture.config.settings import Settings

logger = logging.getLogger("product_capture.cache")


@dataclass
class RateEntry:
    """A fetched ``1 <currency> = rate BDT`` observation."""

    currency: str
    rate: float
    source: str
    timestamp: float


class RateCache:
    """Keeps the last fetched rate per currency for ``RATE_CACHE_TTL``.

    Rates only feed price conversion, so a value up to an hour old is
    acceptable and saves a paid scraping call per capture. One cache is
    shared by every capture, including concurrent API requests, so all
    access goes through a lock.
    """

    def __init__(self, ttl: float | None = None) -> None:
        self._entries: dict[str, RateEntry] = {}
        self._lock = threading.Lock()
        self._ttl: float = (
            ttl if ttl is not None else Settings.RATE_CACHE_TTL
        )

    def get(self, currency: str) -> float | None:
        """Return the cached rate for *currency*, or ``None`` on miss."""
        with self._lock:
            self._evict_expired(time.time())
            entry = self._entries.get(currency)
        if entry is None:
            return None
        logger.debug(
            "Using cached %s rate %.4f (from %s)",
            currency,
            entry.rate,
            entry.source,
        )
        return entry.rate

    def store(self, currency: str, rate: float, source: str) -> None:
        """Remember *rate* for *currency*."""
        entry = RateEntry(
            currency=currency,
            rate=rate,
            source=source,
            timestamp=time.time(),
        )
        with self._lock:
            self._entries[currency] = entry
        logger.info(
            "%s rate updated from %s: %.4f", currency, source, rate
        )

    def clear(self) -> int:
        """Purge all cached rates.

        Returns the number of entries that were removed.
        """
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.info("Rate cache purged (%d entries removed)", count)
        return count

    def _evict_expired(self, now: float) -> None:
        """Remove entries older than the TTL threshold.

        Caller must hold ``_lock``.
        """
        expired = [
            code
            for code, entry in self._entries.items()
            if now - entry.timestamp >= self._ttl
        ]
        for code in expired:
            del self._entries[code]
        if expired:
            logger.debug("Evicted %d expired rates", len(expired))
