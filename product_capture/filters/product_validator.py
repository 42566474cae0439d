# product_capture/filters/product_validator.py

"""Product validation: reject captures missing essential fields."""

import logging

from product_capture.models.product import RawListing, ScrapedProduct
from product_capture.normalizers.currency import parse_price_from_text

logger = logging.getLogger("product_capture.filters")


class ProductValidator:
    """Decide whether an extraction is complete enough to return.

    A capture without a title or a positive price is treated as a
    failed extraction; it is never handed to the caller in degraded
    form.
    """

    @staticmethod
    def listing_problem(listing: RawListing) -> str | None:
        """Return why *listing* is unusable, or ``None`` if it is fine."""
        if not listing.title.strip():
            return "empty title"
        if not any(
            parse_price_from_text(text) > 0
            for text in listing.price_texts
        ):
            return "no positive price"
        return None

    @staticmethod
    def validate(product: ScrapedProduct) -> bool:
        """Final check on an assembled product."""
        if not product.title.strip():
            logger.debug(
                "Rejected product with empty title (store=%s)",
                product.store,
            )
            return False
        if product.price <= 0:
            logger.debug(
                "Rejected product with zero/negative price "
                "(title=%s, store=%s)",
                product.title,
                product.store,
            )
            return False
        return True
