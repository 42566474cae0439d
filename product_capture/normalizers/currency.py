# product_capture/normalizers/currency.py

"""Price text parsing, currency detection and BDT conversion."""

import logging
import math
import re
from collections.abc import Callable

from product_capture.config.settings import Settings

logger = logging.getLogger("product_capture.currency")

# Ordered: prefixed dollar forms must win over the bare "$"
_CURRENCY_MARKERS: list[tuple[str, list[str], list[str]]] = [
    ("BDT", ["৳"], [r"\bBDT\b", r"\bTK\b", r"\bTAKA\b"]),
    ("CAD", ["CDN$", "C$", "CA$"], [r"\bCAD\b"]),
    ("AUD", ["A$", "AU$"], [r"\bAUD\b"]),
    ("GBP", ["£"], [r"\bGBP\b"]),
    ("USD", ["US$", "$"], [r"\bUSD\b"]),
]

_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")

# Accepted range per source currency (min, max)
_PRICE_RANGES: dict[str, tuple[float, float]] = {
    "USD": (0.01, 100_000),
    "GBP": (0.01, 80_000),
    "CAD": (0.01, 130_000),
    "AUD": (0.01, 150_000),
    "BDT": (1, 10_000_000),
}

RateLookup = Callable[[str], float]


def parse_price_from_text(text: str | None) -> float:
    """Extract a numeric price from free text like '$1,299.00' or 'Tk 850'.

    Returns ``0.0`` when nothing numeric can be found.
    """
    if not text or not isinstance(text, str):
        return 0.0
    cleaned = text.replace(",", "").replace("\xa0", " ")
    match = _NUMBER_RE.search(cleaned)
    if not match:
        return 0.0
    try:
        return float(match.group(0))
    except ValueError:
        return 0.0


def detect_currency(
    text: str | None,
    default: str = Settings.BASE_CURRENCY,
) -> str:
    """Return the currency code implied by symbols/codes in *text*.

    Falls back to *default* (the configured base currency) when no
    marker is recognised.
    """
    if not text:
        return default
    upper = text.upper()
    for code, symbols, patterns in _CURRENCY_MARKERS:
        if any(symbol in text for symbol in symbols):
            return code
        if any(re.search(p, upper) for p in patterns):
            return code
    return default


def convert_to_bdt(
    amount: float,
    currency: str,
    rate_lookup: RateLookup,
) -> float:
    """Convert *amount* in *currency* to BDT.

    BDT amounts are returned untouched without consulting
    *rate_lookup*; anything else costs exactly one lookup and is
    rounded to two decimal places.
    """
    if currency == Settings.TARGET_CURRENCY:
        logger.debug("Price already in BDT, skipping conversion")
        return amount
    rate = rate_lookup(currency)
    converted = round(amount * rate, 2)
    logger.debug(
        "Converted %.2f %s at %.4f -> %.2f BDT",
        amount,
        currency,
        rate,
        converted,
    )
    return converted


def format_bdt_price(value: float | None) -> str:
    """Render a BDT amount for display, e.g. ``৳1,234.50``."""
    if (
        not isinstance(value, (int, float))
        or isinstance(value, bool)
        or math.isnan(value)
    ):
        logger.warning("format_bdt_price received invalid value: %r", value)
        return "৳0"
    return f"৳{value:,.2f}"


def format_price_with_original(
    bdt_price: float,
    original_value: float,
    original_currency: str,
) -> str:
    """Render ``৳12,100.00 (110.00 USD)``."""
    return (
        f"{format_bdt_price(bdt_price)} "
        f"({original_value:.2f} {original_currency})"
    )


def validate_price(
    price: float,
    currency: str = Settings.BASE_CURRENCY,
) -> tuple[bool, str]:
    """Check *price* against the plausible range for *currency*.

    Zero is accepted (free items); negatives and NaN are not.
    """
    if not isinstance(price, (int, float)) or math.isnan(price):
        return False, "Invalid number"
    if price < 0:
        return False, "Negative price"
    if price == 0:
        return True, ""

    low, high = _PRICE_RANGES.get(currency, _PRICE_RANGES["USD"])
    if price < low:
        return False, f"Price too low (min: {low} {currency})"
    if price > high:
        return False, f"Price too high (max: {high} {currency})"
    return True, ""
