# product_capture/config/settings.py

"""Central configuration for the product_capture engine."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the product_capture engine."""

    # --- Credentials (from .env / environment) ---
    SCRAPER_API_KEY: str = os.getenv("SCRAPER_API_KEY", "")
    EXCHANGE_API_KEY: str = os.getenv("EXCHANGE_API_KEY", "")

    # --- Currency ---
    BASE_CURRENCY: str = "USD"          # Assumed when no symbol is found
    TARGET_CURRENCY: str = "BDT"        # Canonical display currency
    SUPPORTED_CURRENCIES: list[str] = ["USD", "CAD", "GBP", "AUD", "BDT"]
    RATE_CACHE_TTL: float = 3600.0      # Seconds a fetched rate stays fresh
    RATE_SANITY_MAX: float = 10000.0    # Upper bound for a scraped BDT rate

    # --- Scraping ---
    REQUEST_TIMEOUT: int = 30           # Plain HTTP fetch timeout (secs)
    SCRAPER_API_TIMEOUT: int = 150      # Managed API round-trip (secs)
    RATE_REQUEST_TIMEOUT: int = 30      # Exchange-rate lookups (secs)
    SCRAPER_API_BASE: str = "https://api.scraperapi.com"
    EXCHANGE_API_URL: str = "https://api.exchangeratesapi.io/v1/latest"
    MAX_FEATURES: int = 5               # Feature bullets kept per product
    DESCRIPTION_FEATURES: int = 3       # Bullets joined into description

    # --- Headless browser ---
    BROWSER_HEADLESS: bool = (
        os.getenv("BROWSER_HEADLESS", "true").lower() == "true"
    )
    BROWSER_NAV_TIMEOUT_MS: int = 45000
    BROWSER_SELECTOR_TIMEOUT_MS: int = 15000
    BROWSER_SETTLE_MS: int = 3000       # Pause for late JS after load
    BROWSER_WAIT_UNTIL: list[str] = ["domcontentloaded", "networkidle", "load"]
    BROWSER_VIEWPORT: dict[str, int] = {"width": 1366, "height": 900}

    # --- Block detection ---
    CAPTCHA_KEYWORDS: list[str] = [
        "captcha",
        "robot check",
        "verify you are human",
        "unusual traffic",
        "automated requests",
    ]

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/131.0.0.0 Safari/537.36"
    )
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": (
            "text/html,application/xhtml+xml,"
            "application/xml;q=0.9,image/avif,"
            "image/webp,image/apng,*/*;q=0.8"
        ),
        "Accept-Language": "en-US,en;q=0.9",
        "sec-ch-ua": (
            '"Google Chrome";v="131", '
            '"Chromium";v="131", '
            '"Not_A Brand";v="24"'
        ),
        "sec-ch-ua-mobile": "?0",
        "sec-ch-ua-platform": '"Windows"',
        "sec-fetch-dest": "document",
        "sec-fetch-mode": "navigate",
        "sec-fetch-site": "none",
        "sec-fetch-user": "?1",
        "Upgrade-Insecure-Requests": "1",
    }

    # --- Shipping (BDT) ---
    SHIPPING_RATE_PER_KG: int = 2500
    SERVICE_CHARGE_RATE: float = 0.05
    DEFAULT_WEIGHT_KG: float = 1.0

    # --- User-facing messages ---
    MSG_URL_REQUIRED: str = "URL is required"
    MSG_UNSUPPORTED_STORE: str = (
        "This link is not supported as of yet. "
        "Please use an Amazon, Walmart or eBay product link."
    )
    MSG_CAPTURE_FAILED: str = (
        "We were unable to process this product URL. "
        "Please verify the link is correct or contact our "
        "support team for assistance."
    )

    # --- API server ---
    API_HOST: str = os.getenv("CAPTURE_API_HOST", "127.0.0.1")
    API_PORT: int = int(os.getenv("CAPTURE_API_PORT", "5000"))

    # --- Logging ---
    CONSOLE_LOG_LEVEL: str = os.getenv("CAPTURE_LOG_LEVEL", "WARNING").upper()

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    SELECTORS_PATH: Path = Path(__file__).resolve().parent / "selectors.json"
    RESULTS_DIR: Path = BASE_DIR / "results"
    LOGS_DIR: Path = BASE_DIR / "logs"

    # --- Capture strategies, tried in this order ---
    CAPTURE_STRATEGIES: list[dict[str, str]] = [
        {
            "id": "scraper_api",
            "label": "ScraperAPI",
            "strategy": "product_capture.scrapers.scraper_api_strategy.ScraperApiStrategy",
        },
        {
            "id": "browser",
            "label": "Headless browser",
            "strategy": "product_capture.scrapers.browser_strategy.BrowserStrategy",
        },
        {
            "id": "http",
            "label": "HTTP fallback",
            "strategy": "product_capture.scrapers.http_strategy.HttpStrategy",
        },
    ]

    # --- Stores (registry for future extensibility) ---
    SUPPORTED_STORES: list[dict[str, str]] = [
        {
            "id": "amazon",
            "label": "Amazon",
            "host": "amazon.",
            "homepage": "https://www.amazon.com/",
        },
        {
            "id": "walmart",
            "label": "Walmart",
            "host": "walmart.",
            "homepage": "https://www.walmart.com/",
        },
        {
            "id": "ebay",
            "label": "eBay",
            "host": "ebay.",
            "homepage": "https://www.ebay.com/",
        },
    ]
