# product_capture/scrapers/browser_strategy.py

"""Second strategy: headless Chromium rendering via Playwright."""

from typing import Any

from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from product_capture.models.product import RawListing
from product_capture.scrapers.base_strategy import BaseStrategy
from product_capture.scrapers.store_detector import clean_url


class BrowserStrategy(BaseStrategy):
    """Render JS-heavy pages the managed API misses.

    A browser, context and page are opened for a single capture and
    always closed before returning; nothing is pooled.
    """

    name = "browser"

    def _navigate(self, page: Any, url: str) -> None:
        """Try progressively laxer ``wait_until`` conditions."""
        conditions = self.settings.BROWSER_WAIT_UNTIL
        for idx, condition in enumerate(conditions):
            try:
                page.goto(
                    url,
                    wait_until=condition,
                    timeout=self.settings.BROWSER_NAV_TIMEOUT_MS,
                )
                return
            except PlaywrightTimeoutError:
                if idx == len(conditions) - 1:
                    raise
                self.logger.info(
                    "[%s] goto(wait_until=%s) timed out, retrying "
                    "with %s",
                    self.name,
                    condition,
                    conditions[idx + 1],
                )

    def _render(self, page: Any, url: str, store: str) -> str:
        self._navigate(page, url)
        page.wait_for_timeout(self.settings.BROWSER_SETTLE_MS)
        wait_for = self.selectors.get(store, {}).get("wait_for")
        if wait_for:
            try:
                page.wait_for_selector(
                    wait_for,
                    timeout=self.settings.BROWSER_SELECTOR_TIMEOUT_MS,
                )
            except PlaywrightTimeoutError:
                self.logger.info(
                    "[%s] Continuing without '%s'", self.name, wait_for
                )
        return str(page.content())

    def _extract(self, url: str, store: str) -> RawListing | None:
        target = clean_url(url)
        with sync_playwright() as playwright:
            browser = playwright.chromium.launch(
                headless=self.settings.BROWSER_HEADLESS
            )
            try:
                context = browser.new_context(
                    viewport=self.settings.BROWSER_VIEWPORT,
                    locale="en-US",
                    user_agent=self.settings.USER_AGENT,
                    extra_http_headers={
                        "Accept-Language": self.settings.DEFAULT_HEADERS[
                            "Accept-Language"
                        ],
                    },
                )
                try:
                    page = context.new_page()
                    try:
                        html = self._render(page, target, store)
                    finally:
                        page.close()
                finally:
                    context.close()
            finally:
                browser.close()
        return self._parse_html(html, store, target)
