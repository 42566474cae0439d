# product_capture/services/capture_orchestrator.py

"""Runs capture strategies in priority order for a single URL."""

import importlib
import logging
import random
import string
import time
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from product_capture.config.settings import Settings
from product_capture.models.product import ScrapedProduct
from product_capture.normalizers.currency import RateLookup
from product_capture.scrapers.store_detector import detect_store
from product_capture.services.exchange_rates import ExchangeRateProvider

logger = logging.getLogger("product_capture.orchestrator")

_ID_ALPHABET = string.ascii_lowercase + string.digits


class CaptureStrategy(Protocol):
    """Anything with the strategy ``capture`` contract."""

    name: str

    def capture(self, url: str, store: str) -> ScrapedProduct | None: ...


@dataclass
class CaptureResult:
    """Outcome of one capture request."""

    success: bool
    status_code: int
    product: ScrapedProduct | None = None
    error: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the endpoint's response body."""
        if self.success and self.product is not None:
            return {"success": True, "product": self.product.to_dict()}
        return {"success": False, "error": self.error}


def _make_product_id(store: str) -> str:
    """``<store>-<epoch ms>-<9 base36 chars>``."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"{store}-{int(time.time() * 1000)}-{suffix}"


def _load_strategy_class(dotted_path: str) -> type[Any]:
    """Dynamically import a strategy class from its dotted module path."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls: type[Any] = getattr(module, class_name)
    return cls


def build_default_strategies(
    rate_lookup: RateLookup | None = None,
) -> list[CaptureStrategy]:
    """Instantiate the strategies listed in ``CAPTURE_STRATEGIES``.

    All strategies share one rate lookup (and so one rate cache).
    """
    lookup = rate_lookup or ExchangeRateProvider()
    return [
        _load_strategy_class(entry["strategy"])(lookup)
        for entry in Settings.CAPTURE_STRATEGIES
    ]


class CaptureOrchestrator:
    """Detects the store and walks the strategy chain.

    Managed API → headless browser → plain HTTP. The first strategy
    that returns a product ends the chain; if none does, the caller
    receives a single generic failure and the details stay in the log.
    """

    def __init__(
        self,
        strategies: Sequence[CaptureStrategy] | None = None,
        rate_provider: ExchangeRateProvider | None = None,
    ) -> None:
        self.settings = Settings()
        self.rate_provider = rate_provider or ExchangeRateProvider()
        self.strategies: list[CaptureStrategy] = (
            list(strategies)
            if strategies is not None
            else build_default_strategies(self.rate_provider)
        )

    def refresh_rates(self) -> int:
        """Drop cached exchange rates; returns how many were dropped."""
        return self.rate_provider.cache.clear()

    def capture(self, url: str | None) -> CaptureResult:
        """Capture *url* into a normalized product."""
        url = (url or "").strip()
        if not url:
            return CaptureResult(
                success=False,
                status_code=400,
                error=self.settings.MSG_URL_REQUIRED,
            )

        store = detect_store(url)
        if store is None:
            logger.info("Rejected unsupported URL: %s", url)
            return CaptureResult(
                success=False,
                status_code=400,
                error=self.settings.MSG_UNSUPPORTED_STORE,
            )

        for strategy in self.strategies:
            logger.info(
                "Trying %s strategy for %s (%s)",
                strategy.name,
                url,
                store,
            )
            product = strategy.capture(url, store)
            if product is None:
                logger.warning(
                    "%s strategy returned nothing for %s",
                    strategy.name,
                    url,
                )
                continue

            product.url = url
            product.id = _make_product_id(store)
            logger.info(
                "Captured %s via %s: %.2f BDT",
                product.id,
                strategy.name,
                product.price,
            )
            return CaptureResult(
                success=True, status_code=200, product=product
            )

        logger.error(
            "All %d strategies failed for %s",
            len(self.strategies),
            url,
        )
        return CaptureResult(
            success=False,
            status_code=500,
            error=self.settings.MSG_CAPTURE_FAILED,
        )
