# tests/test_capture_orchestrator.py

"""Tests for the CaptureOrchestrator strategy chain."""

import re
import unittest
from unittest.mock import MagicMock, patch

from product_capture.config.settings import Settings
from product_capture.models.product import RawListing, ScrapedProduct
from product_capture.scrapers.base_strategy import BaseStrategy
from product_capture.services.capture_orchestrator import (
    CaptureOrchestrator,
    CaptureResult,
    build_default_strategies,
)


def _strategy(name: str, product: ScrapedProduct | None = None) -> MagicMock:
    """A mock strategy returning *product* from capture()."""
    strategy = MagicMock()
    strategy.name = name
    strategy.capture.return_value = product
    return strategy


def _product(price: float = 2418.9) -> ScrapedProduct:
    return ScrapedProduct(title="Anker PowerCore", price=price, store="amazon")


class _ListingStrategy(BaseStrategy):
    """Real BaseStrategy subclass returning a fixed listing."""

    name = "fixed"

    def __init__(self, listing: RawListing, rate_lookup: MagicMock) -> None:
        super().__init__(rate_lookup=rate_lookup)
        self.listing = listing

    def _extract(self, url: str, store: str) -> RawListing | None:
        return self.listing


class TestCaptureOrchestrator(unittest.TestCase):
    """CaptureOrchestrator.capture outcomes."""

    URL = "https://www.amazon.com/dp/B0194WDVHI"

    # ── Input rejection ──────────────────────────────────

    def test_blank_url_is_400(self) -> None:
        api = _strategy("scraper_api", _product())
        result = CaptureOrchestrator([api]).capture("   ")
        self.assertFalse(result.success)
        self.assertEqual(result.status_code, 400)
        self.assertEqual(result.error, "URL is required")
        api.capture.assert_not_called()

    def test_unsupported_store_invokes_no_strategy(self) -> None:
        """An unknown host fails before any strategy runs."""
        strategies = [
            _strategy("scraper_api", _product()),
            _strategy("browser", _product()),
            _strategy("http", _product()),
        ]
        result = CaptureOrchestrator(strategies).capture(
            "https://www.target.com/p/A-12345"
        )
        self.assertEqual(result.status_code, 400)
        self.assertEqual(result.error, Settings.MSG_UNSUPPORTED_STORE)
        for strategy in strategies:
            strategy.capture.assert_not_called()

    # ── Chain order ──────────────────────────────────────

    def test_first_success_short_circuits(self) -> None:
        """Later strategies are never called once one succeeds."""
        api = _strategy("scraper_api", None)
        browser = _strategy("browser", _product())
        http = _strategy("http", _product(price=1.0))
        result = CaptureOrchestrator([api, browser, http]).capture(self.URL)

        self.assertTrue(result.success)
        self.assertEqual(result.status_code, 200)
        self.assertEqual(api.capture.call_count, 1)
        self.assertEqual(browser.capture.call_count, 1)
        self.assertEqual(http.capture.call_count, 0)
        assert result.product is not None
        self.assertEqual(result.product.price, 2418.9)

    def test_strategies_receive_url_and_store(self) -> None:
        api = _strategy("scraper_api", _product())
        CaptureOrchestrator([api]).capture(self.URL)
        api.capture.assert_called_once_with(self.URL, "amazon")

    def test_all_fail_gives_generic_500(self) -> None:
        strategies = [
            _strategy("scraper_api"),
            _strategy("browser"),
            _strategy("http"),
        ]
        result = CaptureOrchestrator(strategies).capture(self.URL)
        self.assertFalse(result.success)
        self.assertEqual(result.status_code, 500)
        self.assertEqual(result.error, Settings.MSG_CAPTURE_FAILED)
        for strategy in strategies:
            self.assertEqual(strategy.capture.call_count, 1)

    def test_success_assigns_url_and_id(self) -> None:
        result = CaptureOrchestrator(
            [_strategy("http", _product())]
        ).capture(self.URL)
        assert result.product is not None
        self.assertEqual(result.product.url, self.URL)
        self.assertRegex(result.product.id, r"^amazon-\d{13}-[a-z0-9]{9}$")

    # ── End to end through a real strategy ───────────────

    def test_usd_price_times_rate_rounded(self) -> None:
        """A $19.99 listing at 121.4567 BDT/USD becomes 2427.92 BDT."""
        lookup = MagicMock(return_value=121.4567)
        strategy = _ListingStrategy(
            RawListing(store="amazon", title="Cable", price_texts=["$19.99"]),
            lookup,
        )
        result = CaptureOrchestrator([strategy]).capture(self.URL)
        assert result.product is not None
        self.assertEqual(result.product.price, 2427.92)
        self.assertEqual(result.product.original_price_value, 19.99)
        lookup.assert_called_once_with("USD")

    def test_rate_failure_falls_through_to_next_strategy(self) -> None:
        failing = _ListingStrategy(
            RawListing(store="amazon", title="Cable", price_texts=["$19.99"]),
            MagicMock(side_effect=RuntimeError("no rate")),
        )
        fallback = _strategy("http", _product())
        result = CaptureOrchestrator([failing, fallback]).capture(self.URL)
        self.assertTrue(result.success)
        fallback.capture.assert_called_once()


class TestRefreshRates(unittest.TestCase):
    """refresh_rates empties the shared rate cache."""

    def test_clears_provider_cache(self) -> None:
        provider = MagicMock()
        provider.cache.clear.return_value = 3
        orchestrator = CaptureOrchestrator(
            [_strategy("http")], rate_provider=provider
        )
        self.assertEqual(orchestrator.refresh_rates(), 3)
        provider.cache.clear.assert_called_once_with()


class TestCaptureResult(unittest.TestCase):
    """CaptureResult serialisation."""

    def test_success_body(self) -> None:
        body = CaptureResult(True, 200, product=_product()).to_dict()
        self.assertEqual(body["success"], True)
        self.assertEqual(body["product"]["title"], "Anker PowerCore")
        self.assertNotIn("error", body)

    def test_failure_body(self) -> None:
        body = CaptureResult(False, 500, error="nope").to_dict()
        self.assertEqual(body, {"success": False, "error": "nope"})


class TestBuildDefaultStrategies(unittest.TestCase):
    """Strategy registry loading."""

    @patch("product_capture.services.capture_orchestrator._load_strategy_class")
    def test_order_and_shared_lookup(self, mock_load: MagicMock) -> None:
        """Strategies come back in registry order sharing one lookup."""
        classes = {
            entry["strategy"]: MagicMock(name=entry["id"])
            for entry in Settings.CAPTURE_STRATEGIES
        }
        mock_load.side_effect = lambda path: classes[path]
        lookup = MagicMock()

        strategies = build_default_strategies(lookup)

        self.assertEqual(len(strategies), 3)
        paths = [e["strategy"] for e in Settings.CAPTURE_STRATEGIES]
        self.assertTrue(re.search(r"ScraperApiStrategy$", paths[0]))
        self.assertTrue(re.search(r"HttpStrategy$", paths[-1]))
        for path, strategy in zip(paths, strategies):
            classes[path].assert_called_once_with(lookup)
            self.assertIs(strategy, classes[path].return_value)


if __name__ == "__main__":
    unittest.main()
