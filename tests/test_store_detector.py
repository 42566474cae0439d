# tests/test_store_detector.py

"""Tests for store detection and URL helpers."""

import unittest

from product_capture.scrapers.store_detector import (
    clean_url,
    detect_store,
    extract_asin,
    store_homepage,
)


class TestDetectStore(unittest.TestCase):
    """detect_store host classification."""

    def test_supported_hosts(self) -> None:
        cases = {
            "https://www.amazon.com/dp/B0194WDVHI": "amazon",
            "https://amazon.co.uk/gp/product/B0194WDVHI": "amazon",
            "https://smile.amazon.ca/dp/B0194WDVHI": "amazon",
            "https://www.walmart.com/ip/Great-Value/10451001": "walmart",
            "https://www.ebay.com/itm/123456789012": "ebay",
            "https://www.ebay.co.uk/itm/123456789012": "ebay",
        }
        for url, expected in cases.items():
            with self.subTest(url=url):
                self.assertEqual(detect_store(url), expected)

    def test_host_is_case_insensitive(self) -> None:
        self.assertEqual(
            detect_store("HTTPS://WWW.AMAZON.COM/dp/B0194WDVHI"), "amazon"
        )

    def test_unsupported_host_returns_none(self) -> None:
        self.assertIsNone(detect_store("https://www.target.com/p/A-1"))
        self.assertIsNone(detect_store("https://www.aliexpress.com/item/1"))

    def test_store_name_in_path_is_ignored(self) -> None:
        """Only the hostname decides the store."""
        self.assertIsNone(
            detect_store("https://example.com/redirect/amazon.com/dp/X")
        )

    def test_empty_and_hostless_return_none(self) -> None:
        self.assertIsNone(detect_store(""))
        self.assertIsNone(detect_store(None))
        self.assertIsNone(detect_store("not a url"))
        self.assertIsNone(detect_store("amazon.com/dp/B0194WDVHI"))


class TestExtractAsin(unittest.TestCase):
    """extract_asin URL patterns."""

    def test_patterns(self) -> None:
        cases = [
            "https://www.amazon.com/Anker-PowerCore/dp/B0194WDVHI/ref=sr_1_1",
            "https://www.amazon.com/gp/product/B0194WDVHI?th=1",
            "https://www.amazon.com/exec/obidos/ASIN/B0194WDVHI",
            "https://www.amazon.com/s?asin=b0194wdvhi",
        ]
        for url in cases:
            with self.subTest(url=url):
                self.assertEqual(extract_asin(url), "B0194WDVHI")

    def test_no_asin(self) -> None:
        self.assertIsNone(extract_asin("https://www.amazon.com/s?k=charger"))


class TestUrlHelpers(unittest.TestCase):
    """clean_url and store_homepage."""

    def test_clean_url_strips_query_and_fragment(self) -> None:
        self.assertEqual(
            clean_url(
                "https://www.amazon.com/dp/B0194WDVHI?tag=aff-20&psc=1#reviews"
            ),
            "https://www.amazon.com/dp/B0194WDVHI",
        )

    def test_store_homepage(self) -> None:
        self.assertEqual(store_homepage("ebay"), "https://www.ebay.com/")
        self.assertEqual(store_homepage("target"), "")


if __name__ == "__main__":
    unittest.main()
