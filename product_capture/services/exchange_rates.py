# product_capture/services/exchange_rates.py

"""Exchange-rate lookup for converting source prices into BDT."""

import logging
import re
from typing import Any
from urllib.parse import quote_plus

from curl_cffi import requests as curl_requests

from product_capture.config.settings import Settings
from product_capture.storage.rate_cache import RateCache

logger = logging.getLogger("product_capture.rates")

_RATE_CALCULATOR_RE = re.compile(
    r'<div[^>]*class="[^"]*BNeawe[^"]*"[^>]*>([0-9.,]+)\s*Bangladeshi',
    re.IGNORECASE,
)
_RATE_GENERIC_RE = re.compile(
    r">([0-9.,]+)\s*(?:Bangladeshi\s*)?(?:taka|BDT)",
    re.IGNORECASE,
)
_RATE_ATTRIBUTE_RE = re.compile(r'data-exchange-rate="([0-9.]+)"')


class ExchangeRateError(RuntimeError):
    """Raised when no source could provide a rate."""


def _to_float(raw: str) -> float | None:
    try:
        return float(raw.replace(",", ""))
    except ValueError:
        return None


def parse_google_rate(
    html: str,
    currency: str,
    target: str = Settings.TARGET_CURRENCY,
) -> float | None:
    """Pull ``1 <currency> = N <target>`` out of a Google result page.

    Tries the exchange-rate data attribute, the textual equation,
    the calculator widget and finally a generic ``N taka`` match
    (the last one sanity-bounded).
    """
    match = _RATE_ATTRIBUTE_RE.search(html)
    if match:
        rate = _to_float(match.group(1))
        if rate:
            return rate

    equation = re.compile(
        rf"1\s*{re.escape(currency)}\s*=\s*([0-9.,]+)\s*{re.escape(target)}",
        re.IGNORECASE,
    )
    for pattern in (equation, _RATE_CALCULATOR_RE):
        match = pattern.search(html)
        if match:
            rate = _to_float(match.group(1))
            if rate:
                return rate

    match = _RATE_GENERIC_RE.search(html)
    if match:
        rate = _to_float(match.group(1))
        if rate and 0 < rate < Settings.RATE_SANITY_MAX:
            return rate
    return None


class ExchangeRateProvider:
    """Fetches ``1 <currency> = N BDT`` with caching and a fallback source.

    Primary source is Google's converter fetched through ScraperAPI;
    the exchangeratesapi.io EUR table is the fallback. Instances are
    callable so they can be handed straight to ``convert_to_bdt``.
    The rate cache is the only state shared between captures.
    """

    def __init__(
        self,
        cache: RateCache | None = None,
        session: Any = None,
    ) -> None:
        self.settings = Settings()
        self.cache = cache if cache is not None else RateCache()
        self.session = session

    def __call__(self, currency: str) -> float:
        return self.get_rate(currency)

    def _get(self, url: str, **kwargs: Any) -> Any:
        """GET through the injected session, or a short-lived one."""
        if self.session is not None:
            return self.session.get(url, **kwargs)
        with curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        ) as session:
            return session.get(url, **kwargs)

    def get_rate(self, currency: str) -> float:
        """Return the BDT value of one unit of *currency*.

        Raises:
            ExchangeRateError: when every source failed.
        """
        currency = currency.upper()
        if currency == self.settings.TARGET_CURRENCY:
            return 1.0

        cached = self.cache.get(currency)
        if cached is not None:
            return cached

        try:
            rate = self._fetch_google_rate(currency)
            source = "google"
        except Exception as google_exc:
            logger.warning(
                "Google conversion failed for %s, falling back "
                "to exchange rate API: %s",
                currency,
                google_exc,
            )
            try:
                rate = self._fetch_api_rate(currency)
                source = "exchange_rate_api"
            except Exception as api_exc:
                logger.error(
                    "Both rate sources failed for %s: %s",
                    currency,
                    api_exc,
                    exc_info=True,
                )
                msg = f"Unable to fetch {currency} exchange rate from any source"
                raise ExchangeRateError(msg) from api_exc

        self.cache.store(currency, rate, source)
        return rate

    def _fetch_google_rate(self, currency: str) -> float:
        """Scrape Google's currency converter via ScraperAPI."""
        api_key = self.settings.SCRAPER_API_KEY
        if not api_key:
            msg = "SCRAPER_API_KEY is not set"
            raise ExchangeRateError(msg)

        query = f"1 {currency} to {self.settings.TARGET_CURRENCY}"
        params = {
            "api_key": api_key,
            "url": f"https://www.google.com/search?q={quote_plus(query)}",
            "render": "false",
            "premium": "true",
            "country_code": "us",
            "device_type": "desktop",
        }
        logger.info("Fetching %s to BDT rate from Google", currency)
        resp = self._get(
            self.settings.SCRAPER_API_BASE,
            params=params,
            headers=self.settings.DEFAULT_HEADERS,
            timeout=self.settings.RATE_REQUEST_TIMEOUT,
        )
        if resp.status_code != 200:
            msg = f"ScraperAPI returned HTTP {resp.status_code}"
            raise ExchangeRateError(msg)

        rate = parse_google_rate(resp.text, currency)
        if rate is None:
            msg = "No exchange rate found in Google response"
            raise ExchangeRateError(msg)
        return rate

    def _fetch_api_rate(self, currency: str) -> float:
        """Derive the BDT cross rate from the EUR-based rate table."""
        access_key = self.settings.EXCHANGE_API_KEY
        if not access_key:
            msg = "EXCHANGE_API_KEY is not set"
            raise ExchangeRateError(msg)

        symbols = ",".join(self.settings.SUPPORTED_CURRENCIES)
        resp = self._get(
            self.settings.EXCHANGE_API_URL,
            params={
                "access_key": access_key,
                "base": "EUR",
                "symbols": symbols,
            },
            timeout=self.settings.RATE_REQUEST_TIMEOUT,
        )
        if resp.status_code != 200:
            msg = f"Exchange rate API returned HTTP {resp.status_code}"
            raise ExchangeRateError(msg)

        data: dict[str, Any] = resp.json()
        if data.get("error"):
            info = data["error"]
            if isinstance(info, dict):
                info = info.get("info", info)
            msg = f"Exchange rate API error: {info}"
            raise ExchangeRateError(msg)

        rates: dict[str, float] = data["rates"]
        return rates[self.settings.TARGET_CURRENCY] / rates[currency]
