# product_capture/services/shipping.py

"""Landed-cost quote built on the normalized BDT price and kg weight."""

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass

from product_capture.config.settings import Settings
from product_capture.models.product import ScrapedProduct

logger = logging.getLogger("product_capture.shipping")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_shipping_cost(weight_kg: float | None) -> int:
    """Whole-taka shipping for *weight_kg*, at least the default weight."""
    if not weight_kg or weight_kg <= 0:
        logger.debug(
            "No weight given, charging %.1f kg", Settings.DEFAULT_WEIGHT_KG
        )
        weight_kg = Settings.DEFAULT_WEIGHT_KG
    return _round_half_up(weight_kg * Settings.SHIPPING_RATE_PER_KG)


def calculate_service_charge(product_cost: float) -> int:
    return _round_half_up(product_cost * Settings.SERVICE_CHARGE_RATE)


@dataclass
class ShippingQuote:
    """Totals for a basket of captured products, all in BDT."""

    subtotal: float
    shipping_cost: int
    service_charge: int
    total: float
    total_weight: float

    def to_dict(self) -> dict[str, float]:
        return {
            "subtotal": self.subtotal,
            "shippingCost": self.shipping_cost,
            "serviceCharge": self.service_charge,
            "total": self.total,
            "totalWeight": self.total_weight,
        }


def quote_items(items: Iterable[tuple[ScrapedProduct, int]]) -> ShippingQuote:
    """Quote ``(product, quantity)`` pairs as a single shipment.

    Products without a known weight add nothing to the total weight;
    the shipment as a whole is still charged the default minimum.
    """
    subtotal = 0.0
    total_weight = 0.0
    for product, quantity in items:
        subtotal += product.price * quantity
        total_weight += (product.weight or 0.0) * quantity

    subtotal = round(subtotal, 2)
    total_weight = round(total_weight, 3)
    shipping = calculate_shipping_cost(total_weight)
    service = calculate_service_charge(subtotal)
    return ShippingQuote(
        subtotal=subtotal,
        shipping_cost=shipping,
        service_charge=service,
        total=round(subtotal + shipping + service, 2),
        total_weight=total_weight,
    )


def quote_product(product: ScrapedProduct, quantity: int = 1) -> ShippingQuote:
    """Quote *quantity* units of one captured product."""
    return quote_items([(product, quantity)])
