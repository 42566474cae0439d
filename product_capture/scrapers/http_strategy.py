# product_capture/scrapers/http_strategy.py

"""Last-resort strategy: plain HTTP fetch plus HTML parsing."""

from typing import Any

import cloudscraper  # type: ignore[import-untyped]
from curl_cffi import requests as curl_requests

from product_capture.models.product import RawListing
from product_capture.scrapers.base_strategy import BaseStrategy
from product_capture.scrapers.store_detector import clean_url, store_homepage


class HttpStrategy(BaseStrategy):
    """Fetch the product page directly and parse it with BeautifulSoup.

    The primary request goes through curl_cffi's browser-impersonating
    TLS stack; cloudscraper (JS challenge solver) is tried once when
    that does not produce a usable page.
    """

    name = "http"

    def _build_headers(self, store: str) -> dict[str, str]:
        return {
            **self.settings.DEFAULT_HEADERS,
            "User-Agent": self.settings.USER_AGENT,
            "Referer": store_homepage(store),
        }

    def _fetch_html(self, url: str, headers: dict[str, str]) -> str | None:
        """GET *url* with curl_cffi, falling back to cloudscraper."""
        try:
            with curl_requests.Session(
                impersonate=self.settings.IMPERSONATE_BROWSER
            ) as session:
                resp = session.get(
                    url,
                    headers=headers,
                    timeout=self.settings.REQUEST_TIMEOUT,
                )
            if resp.status_code == 200 and self._validate_html(resp.text):
                return str(resp.text)
            self.logger.warning(
                "[%s] HTTP %d from %s", self.name, resp.status_code, url
            )
        except Exception as exc:
            self.logger.warning(
                "[%s] Request error for %s: %s",
                self.name,
                url,
                exc,
                exc_info=True,
            )

        self.logger.info(
            "[%s] curl_cffi failed, falling back to cloudscraper",
            self.name,
        )
        try:
            _cs: Any = cloudscraper
            scraper: Any = _cs.create_scraper()
            fallback_resp: Any = scraper.get(
                url,
                headers=headers,
                timeout=self.settings.REQUEST_TIMEOUT,
            )
            if fallback_resp.status_code == 200:
                return str(fallback_resp.text)
            self.logger.warning(
                "[%s] cloudscraper got HTTP %d",
                self.name,
                fallback_resp.status_code,
            )
        except Exception as exc:
            self.logger.error(
                "[%s] cloudscraper fallback also failed: %s",
                self.name,
                exc,
                exc_info=True,
            )
        return None

    def _extract(self, url: str, store: str) -> RawListing | None:
        target = clean_url(url)
        html = self._fetch_html(target, self._build_headers(store))
        if html is None:
            return None
        return self._parse_html(html, store, target)
