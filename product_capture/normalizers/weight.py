# product_capture/normalizers/weight.py

"""Weight text parsing with conversion to kilograms."""

import logging
import re
from collections.abc import Iterable
from typing import Any

logger = logging.getLogger("product_capture.weight")

_WEIGHT_RE = re.compile(
    r"(\d+(?:\.\d+)?)\s*"
    r"(kilograms?|kgs?|pounds?|lbs?|grams?|g|ounces?|oz)\b",
    re.IGNORECASE,
)

LB_TO_KG = 0.453592
OZ_TO_KG = 0.0283495
G_TO_KG = 0.001


def _factor_for(unit: str) -> float:
    """Return the multiplier that turns *unit* into kilograms."""
    unit = unit.lower()
    if unit.startswith(("kg", "kilogram")):
        return 1.0
    if unit.startswith(("lb", "pound")):
        return LB_TO_KG
    if unit.startswith(("oz", "ounce")):
        return OZ_TO_KG
    return G_TO_KG


def parse_weight_kg(text: str | None) -> float | None:
    """Convert the first ``<number> <unit>`` in *text* to kilograms."""
    if not text:
        return None
    match = _WEIGHT_RE.search(text.replace(",", ""))
    if not match:
        return None
    value = float(match.group(1))
    return value * _factor_for(match.group(2))


def extract_weight_kg(candidates: Iterable[Any]) -> float | None:
    """Return the kilogram weight of the first candidate that parses.

    Candidates are checked in order; non-string entries (missing API
    fields) are skipped.
    """
    for candidate in candidates:
        if not isinstance(candidate, str):
            continue
        weight = parse_weight_kg(candidate)
        if weight is not None:
            logger.debug(
                "Weight %.4f kg extracted from '%s'", weight, candidate
            )
            return weight
    return None
