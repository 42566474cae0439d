# tests/test_settings.py

"""Tests for the Settings configuration class."""

import unittest

from product_capture.config.settings import Settings


class TestSettings(unittest.TestCase):
    """Verify Settings constants and the store/strategy registries."""

    def test_timeouts_are_positive_ints(self) -> None:
        for name in (
            "REQUEST_TIMEOUT",
            "SCRAPER_API_TIMEOUT",
            "RATE_REQUEST_TIMEOUT",
        ):
            with self.subTest(name=name):
                value = getattr(Settings, name)
                self.assertIsInstance(value, int)
                self.assertGreater(value, 0)

    def test_rate_cache_ttl_is_one_hour(self) -> None:
        self.assertEqual(Settings.RATE_CACHE_TTL, 3600.0)

    def test_supported_currencies_cover_base_and_target(self) -> None:
        self.assertIn(Settings.BASE_CURRENCY, Settings.SUPPORTED_CURRENCIES)
        self.assertIn(Settings.TARGET_CURRENCY, Settings.SUPPORTED_CURRENCIES)
        self.assertNotIn("EUR", Settings.SUPPORTED_CURRENCIES)

    def test_three_stores_registered(self) -> None:
        """Amazon, Walmart and eBay, in that order."""
        ids = [s["id"] for s in Settings.SUPPORTED_STORES]
        self.assertEqual(ids, ["amazon", "walmart", "ebay"])

    def test_each_store_has_required_keys(self) -> None:
        for store in Settings.SUPPORTED_STORES:
            with self.subTest(store=store.get("id", "?")):
                for key in ("id", "label", "host", "homepage"):
                    self.assertIn(key, store)
                self.assertTrue(store["homepage"].startswith("https://"))

    def test_strategy_chain_order(self) -> None:
        """Managed API first, headless browser second, plain HTTP last."""
        ids = [s["id"] for s in Settings.CAPTURE_STRATEGIES]
        self.assertEqual(ids, ["scraper_api", "browser", "http"])

    def test_strategy_paths_are_dotted(self) -> None:
        for entry in Settings.CAPTURE_STRATEGIES:
            with self.subTest(strategy=entry["id"]):
                module, _, cls = entry["strategy"].rpartition(".")
                self.assertTrue(module.startswith("product_capture.scrapers."))
                self.assertTrue(cls.endswith("Strategy"))

    def test_shipping_constants(self) -> None:
        self.assertEqual(Settings.SHIPPING_RATE_PER_KG, 2500)
        self.assertEqual(Settings.SERVICE_CHARGE_RATE, 0.05)
        self.assertEqual(Settings.DEFAULT_WEIGHT_KG, 1.0)

    def test_impersonate_browser_is_str(self) -> None:
        self.assertIsInstance(Settings.IMPERSONATE_BROWSER, str)
        self.assertTrue(Settings.IMPERSONATE_BROWSER.startswith("chrome"))

    def test_default_headers_have_accept_language(self) -> None:
        self.assertIn("Accept-Language", Settings.DEFAULT_HEADERS)

    def test_selectors_file_exists(self) -> None:
        self.assertTrue(Settings.SELECTORS_PATH.exists())

    def test_generic_failure_message_names_no_strategy(self) -> None:
        """The user-facing failure text leaks no internal detail."""
        message = Settings.MSG_CAPTURE_FAILED.lower()
        for word in ("scraperapi", "playwright", "browser", "http"):
            self.assertNotIn(word, message)


if __name__ == "__main__":
    unittest.main()
