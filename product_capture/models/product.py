# product_capture/models/product.py

"""Product data models for the capture pipeline."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class RawListing:
    """Un-normalized fields pulled off a product page or API payload.

    Every strategy produces one of these; the listing assembler turns
    it into a :class:`ScrapedProduct`.
    """

    store: str
    title: str = ""
    price_texts: list[str] = field(
        default_factory=lambda: list[str]()
    )
    list_price_text: str = ""
    currency_hint: str = ""
    image: str = ""
    rating_text: str = ""
    review_count_text: str = ""
    features: list[str] = field(
        default_factory=lambda: list[str]()
    )
    weight_texts: list[str] = field(
        default_factory=lambda: list[str]()
    )
    availability_text: str = ""
    # ScraperAPI enum ("In Stock", "Out of Stock", ...); None for HTML pages
    availability_status: str | None = None


@dataclass
class ScrapedProduct:
    """A captured product, price in BDT and weight in kilograms."""

    title: str
    price: float
    store: str
    original_currency: str = "USD"
    original_price_value: float = 0.0
    original_price: float | None = None
    weight: float | None = None
    image: str = ""
    rating: float | None = None
    review_count: int | None = None
    description: str = ""
    features: list[str] = field(
        default_factory=lambda: list[str]()
    )
    availability: str = "in_stock"
    url: str = ""
    id: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the camelCase shape the capture endpoint returns."""
        return {
            "id": self.id,
            "url": self.url,
            "title": self.title,
            "price": self.price,
            "originalPrice": self.original_price,
            "originalCurrency": self.original_currency,
            "originalPriceValue": self.original_price_value,
            "weight": self.weight,
            "image": self.image,
            "rating": self.rating,
            "reviewCount": self.review_count,
            "description": self.description,
            "features": list(self.features),
            "availability": self.availability,
            "store": self.store,
        }
