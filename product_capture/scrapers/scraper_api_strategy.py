# product_capture/scrapers/scraper_api_strategy.py

"""First strategy: ScraperAPI managed scraping (structured or rendered)."""

from typing import Any
from urllib.parse import urlsplit

from curl_cffi import requests as curl_requests

from product_capture.models.product import RawListing
from product_capture.scrapers.base_strategy import BaseStrategy
from product_capture.scrapers.store_detector import extract_asin

_PRICE_FIELDS = ("pricing", "price", "current_price", "list_price", "sale_price")
_WEIGHT_INFO_FIELDS = ("item_weight", "shipping_weight", "package_weight")
_WEIGHT_TOP_FIELDS = ("item_weight", "shipping_weight", "weight")


def listing_from_payload(payload: dict[str, Any], store: str) -> RawListing:
    """Map a ScraperAPI structured Amazon product payload to a RawListing."""
    info = payload.get("product_information") or {}
    if not isinstance(info, dict):
        info = {}

    weight_texts = [info.get(f) for f in _WEIGHT_INFO_FIELDS]
    weight_texts += [payload.get(f) for f in _WEIGHT_TOP_FIELDS]

    images = payload.get("images") or []
    bullets = payload.get("feature_bullets") or []
    rating = payload.get("average_rating")
    reviews = payload.get("total_reviews")

    return RawListing(
        store=store,
        title=str(payload.get("name") or ""),
        price_texts=[
            str(payload[f]) for f in _PRICE_FIELDS if payload.get(f)
        ],
        list_price_text=str(payload.get("list_price") or ""),
        image=str(images[0]) if isinstance(images, list) and images else "",
        rating_text=str(rating) if rating is not None else "",
        review_count_text=str(reviews) if reviews is not None else "",
        features=[str(b) for b in bullets if isinstance(b, str)],
        weight_texts=[w for w in weight_texts if isinstance(w, str)],
        availability_status=str(payload.get("availability_status") or ""),
    )


class ScraperApiStrategy(BaseStrategy):
    """Managed scraping API, the cheapest engine when it works.

    Amazon URLs carrying an ASIN go to the structured product
    endpoint (JSON); everything else is fetched rendered through the
    raw endpoint and parsed with the store selectors.
    """

    name = "scraper_api"

    def _request(self, url: str, params: dict[str, str]) -> Any | None:
        """GET a ScraperAPI endpoint; ``None`` on a non-200 reply."""
        with curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        ) as session:
            resp = session.get(
                url,
                params=params,
                timeout=self.settings.SCRAPER_API_TIMEOUT,
            )
        if resp.status_code != 200:
            self.logger.warning(
                "[%s] ScraperAPI HTTP %d", self.name, resp.status_code
            )
            return None
        return resp

    def _structured_amazon(self, asin: str, url: str) -> RawListing | None:
        domain = (urlsplit(url).hostname or "amazon.com").removeprefix("www.")
        resp = self._request(
            f"{self.settings.SCRAPER_API_BASE}/structured/amazon/product",
            {
                "api_key": self.settings.SCRAPER_API_KEY,
                "asin": asin,
                "domain": domain,
                "premium": "true",
                "device_type": "desktop",
            },
        )
        if resp is None:
            return None
        payload: dict[str, Any] = resp.json()
        if not payload or not payload.get("name"):
            self.logger.warning(
                "[%s] Structured response for %s has no name",
                self.name,
                asin,
            )
            return None
        return listing_from_payload(payload, "amazon")

    def _rendered_page(self, url: str, store: str) -> RawListing | None:
        resp = self._request(
            f"{self.settings.SCRAPER_API_BASE}/",
            {
                "api_key": self.settings.SCRAPER_API_KEY,
                "url": url,
                "render": "true",
                "premium": "true",
                "device_type": "desktop",
                "retry_404": "true",
            },
        )
        if resp is None:
            return None
        return self._parse_html(resp.text, store, url)

    def _extract(self, url: str, store: str) -> RawListing | None:
        if not self.settings.SCRAPER_API_KEY:
            self.logger.warning(
                "[%s] SCRAPER_API_KEY not configured, skipping",
                self.name,
            )
            return None

        if store == "amazon":
            asin = extract_asin(url)
            if asin:
                self.logger.info(
                    "[%s] Structured lookup for ASIN %s", self.name, asin
                )
                return self._structured_amazon(asin, url)
            self.logger.info(
                "[%s] No ASIN in %s, using rendered page", self.name, url
            )
        return self._rendered_page(url, store)
