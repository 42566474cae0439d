# product_capture/scrapers/base_strategy.py

"""Abstract base class for all capture strategies."""

import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Any

from bs4 import BeautifulSoup

from product_capture.config.settings import Settings
from product_capture.filters.product_validator import ProductValidator
from product_capture.models.product import RawListing, ScrapedProduct
from product_capture.normalizers.currency import RateLookup
from product_capture.scrapers.html_extractor import ListingExtractor
from product_capture.services.exchange_rates import ExchangeRateProvider
from product_capture.services.listing_assembler import ListingAssembler


class BaseStrategy(ABC):
    """Abstract base class for all capture strategies.

    Subclasses only implement :meth:`_extract`. :meth:`capture` owns
    the error boundary: whatever goes wrong inside a strategy is
    logged and turned into ``None`` so the orchestrator can move on
    to the next engine.
    """

    name: str = "base"

    def __init__(self, rate_lookup: RateLookup | None = None) -> None:
        self.logger = logging.getLogger(
            f"product_capture.{self.name}"
        )
        self.settings = Settings()
        self.selectors: dict[str, Any] = self._load_selectors()
        self.extractor = ListingExtractor(self.selectors)
        self.assembler = ListingAssembler(
            rate_lookup or ExchangeRateProvider()
        )

    def _load_selectors(self) -> dict[str, Any]:
        """Load every store's CSS selectors from selectors.json."""
        with open(self.settings.SELECTORS_PATH, encoding="utf-8") as f:
            all_selectors: dict[str, Any] = json.load(f)
        return all_selectors

    # Cloudflare challenge page markers (checked before keyword scan)
    _CF_CHALLENGE_MARKERS: list[str] = [
        "challenges.cloudflare.com",
        "cdn-cgi/challenge-platform",
        "just a moment",
        "cf-turnstile",
        "cf_chl_opt",
    ]

    def _validate_html(self, html: str) -> bool:
        """Check for challenge pages and CAPTCHA indicators."""
        lower = html.lower()

        for marker in self._CF_CHALLENGE_MARKERS:
            if marker in lower:
                self.logger.warning(
                    "[%s] Cloudflare challenge detected "
                    "(marker: '%s')",
                    self.name,
                    marker,
                )
                return False

        # Real product pages mention "robot" etc. in scripts, so only
        # short pages are scanned for keywords
        has_body_content = "<body" in lower and len(html) > 5000
        if not has_body_content:
            for keyword in self.settings.CAPTCHA_KEYWORDS:
                if keyword in lower:
                    self.logger.warning(
                        "[%s] CAPTCHA keyword '%s' detected",
                        self.name,
                        keyword,
                    )
                    return False
        return True

    def _parse_html(
        self, html: str, store: str, url: str,
    ) -> RawListing | None:
        """Validate and parse a product page into a RawListing."""
        if not html or not self._validate_html(html):
            return None
        soup = BeautifulSoup(html, "lxml")
        page_title = soup.title.get_text(strip=True) if soup.title else ""
        if store == "amazon" and page_title == "Amazon.com":
            self.logger.warning(
                "[%s] Amazon returned its bare landing page (blocked)",
                self.name,
            )
            return None
        return self.extractor.extract(soup, store, url)

    def capture(self, url: str, store: str) -> ScrapedProduct | None:
        """Run this strategy; return a normalized product or ``None``."""
        started = time.monotonic()
        try:
            listing = self._extract(url, store)
            if listing is None:
                self.logger.info(
                    "[%s] No listing extracted for %s", self.name, url
                )
                return None

            problem = ProductValidator.listing_problem(listing)
            if problem:
                self.logger.warning(
                    "[%s] Discarding listing for %s: %s",
                    self.name,
                    url,
                    problem,
                )
                return None

            product = self.assembler.assemble(listing)
            if not ProductValidator.validate(product):
                return None

            self.logger.info(
                "[%s] Captured '%s' in %.1fs",
                self.name,
                product.title[:60],
                time.monotonic() - started,
            )
            return product
        except Exception as exc:
            self.logger.error(
                "[%s] Capture failed for %s: %s",
                self.name,
                url,
                exc,
                exc_info=True,
            )
            return None

    @abstractmethod
    def _extract(self, url: str, store: str) -> RawListing | None:
        """Fetch *url* and return its raw fields, or ``None``."""
        ...
