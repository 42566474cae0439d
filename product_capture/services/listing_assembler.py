# product_capture/services/listing_assembler.py

"""Turns a strategy's RawListing into a normalized ScrapedProduct."""

import logging
import re

from product_capture.config.settings import Settings
from product_capture.models.product import RawListing, ScrapedProduct
from product_capture.normalizers.currency import (
    RateLookup,
    convert_to_bdt,
    detect_currency,
    parse_price_from_text,
    validate_price,
)
from product_capture.normalizers.weight import extract_weight_kg

logger = logging.getLogger("product_capture.assembler")

_RATING_RE = re.compile(r"(\d+(?:\.\d+)?)\s*out of", re.IGNORECASE)
_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")
_COUNT_RE = re.compile(r"\d[\d,]*")

_FEATURE_NOISE = "make sure this fits"
_MIN_FEATURE_LENGTH = 10


def parse_rating(text: str | None) -> float | None:
    """Parse '4.5 out of 5 stars' (or a bare '4.5') into a 0-5 float."""
    if not text:
        return None
    match = _RATING_RE.search(text)
    if match:
        rating = float(match.group(1))
    else:
        bare = _NUMBER_RE.search(text)
        if not bare:
            return None
        rating = float(bare.group(0))
    if 0 <= rating <= 5:
        return rating
    return None


def parse_review_count(text: str | None) -> int | None:
    """Parse '12,345 ratings' into ``12345``."""
    if not text:
        return None
    match = _COUNT_RE.search(text)
    if not match:
        return None
    return int(match.group(0).replace(",", ""))


def clean_features(features: list[str]) -> list[str]:
    """Drop boilerplate and fragments, de-duplicate, cap the count."""
    cleaned: list[str] = []
    for raw in features:
        text = " ".join(raw.split())
        if len(text) <= _MIN_FEATURE_LENGTH:
            continue
        if _FEATURE_NOISE in text.lower():
            continue
        if text in cleaned:
            continue
        cleaned.append(text)
        if len(cleaned) >= Settings.MAX_FEATURES:
            break
    return cleaned


def map_availability(text: str | None) -> str:
    """Map free availability text onto in_stock/out_of_stock/limited."""
    if not text:
        return "in_stock"
    lower = text.lower()
    if "out of stock" in lower or "unavailable" in lower:
        return "out_of_stock"
    if "only" in lower and "left" in lower:
        return "limited"
    return "in_stock"


def map_availability_status(status: str) -> str:
    """Map the structured API enum; anything unrecognised is limited."""
    normalized = status.strip().lower()
    if normalized == "in stock":
        return "in_stock"
    if normalized == "out of stock":
        return "out_of_stock"
    return "limited"


class ListingAssembler:
    """Normalizes price to BDT and weight to kilograms."""

    def __init__(self, rate_lookup: RateLookup) -> None:
        self.rate_lookup = rate_lookup

    def _resolve_currency(self, price_text: str, hint: str) -> str:
        detected = detect_currency(price_text, default="")
        if detected:
            return detected
        if hint:
            code = hint.strip().upper()
            if code not in Settings.SUPPORTED_CURRENCIES:
                msg = f"Unsupported source currency: {code}"
                raise ValueError(msg)
            return code
        return Settings.BASE_CURRENCY

    def assemble(self, listing: RawListing) -> ScrapedProduct:
        """Build the normalized product.

        Raises:
            ValueError: when no positive price is present or the
                source currency is not supported.
        """
        price_value = 0.0
        currency = Settings.BASE_CURRENCY
        for text in listing.price_texts:
            parsed = parse_price_from_text(text)
            if parsed <= 0:
                continue
            currency = self._resolve_currency(text, listing.currency_hint)
            ok, reason = validate_price(parsed, currency)
            if ok:
                price_value = parsed
                break
            logger.warning("Skipping price candidate %r: %s", text, reason)
        if price_value <= 0:
            msg = "Listing has no plausible positive price"
            raise ValueError(msg)

        list_value = parse_price_from_text(listing.list_price_text)
        original_list: float | None = (
            list_value
            if list_value > 0 and list_value != price_value
            else None
        )

        bdt_price = convert_to_bdt(
            price_value, currency, self.rate_lookup
        )
        bdt_list = (
            convert_to_bdt(original_list, currency, self.rate_lookup)
            if original_list is not None
            else None
        )

        weight = extract_weight_kg(listing.weight_texts)
        if weight is None:
            logger.info(
                "No weight found for '%s', shipping will use the "
                "%.1f kg default",
                listing.title[:60],
                Settings.DEFAULT_WEIGHT_KG,
            )

        features = clean_features(listing.features)
        logger.debug(
            "Assembled '%s': %.2f %s -> %.2f BDT",
            listing.title[:60],
            price_value,
            currency,
            bdt_price,
        )
        return ScrapedProduct(
            title=" ".join(listing.title.split()),
            price=bdt_price,
            store=listing.store,
            original_currency=currency,
            original_price_value=price_value,
            original_price=bdt_list,
            weight=weight,
            image=listing.image,
            rating=parse_rating(listing.rating_text),
            review_count=parse_review_count(
                listing.review_count_text
            ),
            description=". ".join(
                features[: Settings.DESCRIPTION_FEATURES]
            ),
            features=features,
            availability=(
                map_availability_status(listing.availability_status)
                if listing.availability_status is not None
                else map_availability(listing.availability_text)
            ),
        )
