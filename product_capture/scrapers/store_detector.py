# product_capture/scrapers/store_detector.py

"""URL classification into supported storefronts."""

import re
from urllib.parse import urlsplit, urlunsplit

from product_capture.config.settings import Settings

_ASIN_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"/dp/([A-Z0-9]{10})"),
    re.compile(r"/gp/product/([A-Z0-9]{10})"),
    re.compile(r"/exec/obidos/ASIN/([A-Z0-9]{10})"),
    re.compile(r"[?&]asin=([A-Z0-9]{10})", re.IGNORECASE),
    re.compile(r"/([A-Z0-9]{10})(?:[/?]|$)"),
]


def _hostname(url: str) -> str:
    """Return the lower-cased hostname of *url*, or '' if unparsable."""
    try:
        return (urlsplit(url.strip()).hostname or "").lower()
    except ValueError:
        return ""


def detect_store(url: str | None) -> str | None:
    """Classify *url* as ``amazon``, ``walmart`` or ``ebay``.

    Returns ``None`` for any other domain or an unparsable URL.
    """
    if not url:
        return None
    hostname = _hostname(url)
    if not hostname:
        return None
    for store in Settings.SUPPORTED_STORES:
        if store["host"] in hostname:
            return store["id"]
    return None


def extract_asin(url: str) -> str | None:
    """Pull the 10-character Amazon product id out of *url*."""
    for pattern in _ASIN_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1).upper()
    return None


def clean_url(url: str) -> str:
    """Drop the query string and fragment (tracking parameters)."""
    parts = urlsplit(url.strip())
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


def store_homepage(store: str) -> str:
    """Return the registered homepage for *store* (Referer header)."""
    for entry in Settings.SUPPORTED_STORES:
        if entry["id"] == store:
            return entry["homepage"]
    return ""
