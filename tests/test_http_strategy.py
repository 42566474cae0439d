# tests/test_http_strategy.py

"""Tests for the plain HTTP strategy using mocked HTTP responses."""

import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

from product_capture.scrapers.http_strategy import HttpStrategy

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _resp(status: int = 200, text: str = "") -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.text = text
    return resp


def _fixture(name: str) -> str:
    with open(FIXTURES_DIR / name, encoding="utf-8") as f:
        return f.read()


@patch("product_capture.scrapers.http_strategy.cloudscraper")
@patch("product_capture.scrapers.http_strategy.curl_requests.Session")
class TestHttpStrategy(unittest.TestCase):
    """HttpStrategy fetch, fallback and parse."""

    def setUp(self) -> None:
        self.lookup = MagicMock(return_value=150.0)
        self.strategy = HttpStrategy(rate_lookup=self.lookup)

    def _wire(self, mock_session_cls: MagicMock, resp: MagicMock) -> MagicMock:
        session = MagicMock()
        session.get.return_value = resp
        mock_session_cls.return_value.__enter__.return_value = session
        return session

    def test_ebay_page_parsed(
        self, mock_session_cls: MagicMock, mock_cloudscraper: MagicMock,
    ) -> None:
        """A 200 product page becomes a GBP-converted product."""
        self._wire(mock_session_cls, _resp(text=_fixture("ebay_product.html")))
        product = self.strategy.capture(
            "https://www.ebay.co.uk/itm/1234?hash=item1", "ebay"
        )
        assert product is not None
        self.assertEqual(product.price, 6750.0)
        self.assertEqual(product.original_currency, "GBP")
        self.assertEqual(product.availability, "out_of_stock")
        self.assertAlmostEqual(product.weight or 0.0, 0.25)
        self.lookup.assert_called_once_with("GBP")
        mock_cloudscraper.create_scraper.assert_not_called()

    def test_request_uses_clean_url_and_referer(
        self, mock_session_cls: MagicMock, mock_cloudscraper: MagicMock,
    ) -> None:
        session = self._wire(
            mock_session_cls, _resp(text=_fixture("ebay_product.html"))
        )
        self.strategy.capture("https://www.ebay.com/itm/1234?hash=item1", "ebay")
        self.assertEqual(
            session.get.call_args.args[0], "https://www.ebay.com/itm/1234"
        )
        headers = session.get.call_args.kwargs["headers"]
        self.assertEqual(headers["Referer"], "https://www.ebay.com/")

    def test_falls_back_to_cloudscraper_on_block(
        self, mock_session_cls: MagicMock, mock_cloudscraper: MagicMock,
    ) -> None:
        """A CAPTCHA page from curl_cffi triggers the cloudscraper retry."""
        self._wire(mock_session_cls, _resp(text=_fixture("captcha_page.html")))
        scraper = MagicMock()
        scraper.get.return_value = _resp(text=_fixture("amazon_product.html"))
        mock_cloudscraper.create_scraper.return_value = scraper

        product = self.strategy.capture(
            "https://www.amazon.com/dp/B0194WDVHI", "amazon"
        )
        assert product is not None
        self.assertEqual(product.original_price_value, 21.99)
        scraper.get.assert_called_once()

    def test_both_fetchers_fail(
        self, mock_session_cls: MagicMock, mock_cloudscraper: MagicMock,
    ) -> None:
        self._wire(mock_session_cls, _resp(status=503))
        scraper = MagicMock()
        scraper.get.return_value = _resp(status=403)
        mock_cloudscraper.create_scraper.return_value = scraper

        self.assertIsNone(
            self.strategy.capture("https://www.walmart.com/ip/1", "walmart")
        )

    def test_blocked_fallback_page_returns_none(
        self, mock_session_cls: MagicMock, mock_cloudscraper: MagicMock,
    ) -> None:
        """The fallback's HTML still goes through block detection."""
        mock_session_cls.return_value.__enter__.side_effect = OSError("tls")
        scraper = MagicMock()
        scraper.get.return_value = _resp(text=_fixture("captcha_page.html"))
        mock_cloudscraper.create_scraper.return_value = scraper

        self.assertIsNone(
            self.strategy.capture("https://www.amazon.com/dp/B0194WDVHI", "amazon")
        )


if __name__ == "__main__":
    unittest.main()
