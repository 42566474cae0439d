# tests/test_product_validator.py

"""Tests for ProductValidator."""

import unittest

from product_capture.filters.product_validator import ProductValidator
from product_capture.models.product import RawListing, ScrapedProduct


def _p(title: str = "Anker PowerCore", price: float = 2418.9) -> ScrapedProduct:
    """Create a minimal ScrapedProduct."""
    return ScrapedProduct(title=title, price=price, store="amazon")


def _raw(title: str = "Anker PowerCore", *prices: str) -> RawListing:
    """Create a minimal RawListing."""
    return RawListing(
        store="amazon", title=title, price_texts=list(prices or ("$21.99",))
    )


class TestListingProblem(unittest.TestCase):
    """ProductValidator.listing_problem unit tests."""

    def test_complete_listing_has_no_problem(self) -> None:
        self.assertIsNone(ProductValidator.listing_problem(_raw()))

    def test_empty_title(self) -> None:
        """A blank or whitespace-only title is a failed extraction."""
        self.assertEqual(ProductValidator.listing_problem(_raw("")), "empty title")
        self.assertEqual(
            ProductValidator.listing_problem(_raw("   ")), "empty title"
        )

    def test_no_positive_price(self) -> None:
        problem = ProductValidator.listing_problem(
            _raw("Anker PowerCore", "$0.00", "Currently unavailable")
        )
        self.assertEqual(problem, "no positive price")

    def test_any_positive_candidate_is_enough(self) -> None:
        self.assertIsNone(
            ProductValidator.listing_problem(
                _raw("Anker PowerCore", "", "$19.99")
            )
        )


class TestValidate(unittest.TestCase):
    """ProductValidator.validate unit tests."""

    def test_valid_product_passes(self) -> None:
        self.assertTrue(ProductValidator.validate(_p()))

    def test_whitespace_title_rejected(self) -> None:
        self.assertFalse(ProductValidator.validate(_p("  ")))

    def test_zero_price_rejected(self) -> None:
        self.assertFalse(ProductValidator.validate(_p(price=0.0)))

    def test_negative_price_rejected(self) -> None:
        self.assertFalse(ProductValidator.validate(_p(price=-5.0)))


if __name__ == "__main__":
    unittest.main()
