# product_capture/services/health_checker.py

"""Connectivity checks for the supported stores and the scraping API."""

import asyncio
import logging
import time
from dataclasses import dataclass

from curl_cffi import requests as curl_requests

from product_capture.config.settings import Settings

logger = logging.getLogger("product_capture.health")

_HEALTH_TIMEOUT = 10  # seconds per target
_SLOW_MS = 5000


@dataclass
class HealthResult:
    """Result of a single connectivity probe."""

    target_id: str
    status: str  # "ok", "slow", "down"
    latency_ms: float
    message: str


def _classify(target_id: str, status_code: int, elapsed_ms: float) -> HealthResult:
    if status_code != 200:
        return HealthResult(target_id, "down", elapsed_ms, f"HTTP {status_code}")
    if elapsed_ms > _SLOW_MS:
        return HealthResult(target_id, "slow", elapsed_ms, "High latency")
    return HealthResult(target_id, "ok", elapsed_ms, "")


def probe_store(store: dict[str, str]) -> HealthResult:
    """GET a store homepage with the impersonating HTTP client."""
    store_id = store["id"]
    homepage = store["homepage"]
    headers = {
        **Settings.DEFAULT_HEADERS,
        "User-Agent": Settings.USER_AGENT,
    }

    start = time.monotonic()
    try:
        with curl_requests.Session(
            impersonate=Settings.IMPERSONATE_BROWSER
        ) as session:
            resp = session.get(
                homepage, headers=headers, timeout=_HEALTH_TIMEOUT
            )
        elapsed_ms = (time.monotonic() - start) * 1000
        return _classify(store_id, resp.status_code, elapsed_ms)
    except Exception as exc:
        elapsed_ms = (time.monotonic() - start) * 1000
        return HealthResult(store_id, "down", elapsed_ms, str(exc)[:80])


def probe_scraper_api() -> HealthResult:
    """Check the ScraperAPI key against its account endpoint."""
    if not Settings.SCRAPER_API_KEY:
        return HealthResult("scraper_api", "down", 0.0, "SCRAPER_API_KEY not set")

    start = time.monotonic()
    try:
        with curl_requests.Session() as session:
            resp = session.get(
                f"{Settings.SCRAPER_API_BASE}/account",
                params={"api_key": Settings.SCRAPER_API_KEY},
                timeout=_HEALTH_TIMEOUT,
            )
        elapsed_ms = (time.monotonic() - start) * 1000
        return _classify("scraper_api", resp.status_code, elapsed_ms)
    except Exception as exc:
        elapsed_ms = (time.monotonic() - start) * 1000
        return HealthResult("scraper_api", "down", elapsed_ms, str(exc)[:80])


class HealthChecker:
    """Runs concurrent probes against every store and the managed API."""

    def __init__(self) -> None:
        self.stores = Settings.SUPPORTED_STORES

    async def check_all(self) -> list[HealthResult]:
        """Probe every target concurrently."""
        tasks = [asyncio.to_thread(probe_store, s) for s in self.stores]
        tasks.append(asyncio.to_thread(probe_scraper_api))
        results: list[HealthResult] = list(await asyncio.gather(*tasks))
        for r in results:
            logger.info(
                "Health check %s: %s (%.0fms) %s",
                r.target_id,
                r.status,
                r.latency_ms,
                r.message,
            )
        return results
