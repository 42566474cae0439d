# product_capture/scrapers/html_extractor.py

"""Selector-fallback extraction of product fields from rendered HTML."""

import json
import logging
from typing import Any
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from product_capture.models.product import RawListing

logger = logging.getLogger("product_capture.extractor")


def _element_text(el: Tag) -> str:
    """Visible text of *el*, or its ``content`` attribute for meta-like tags."""
    if el.name == "meta":
        return str(el.get("content", "")).strip()
    text = el.get_text(" ", strip=True)
    if text:
        return text
    return str(el.get("content", "") or el.get("data-price", "")).strip()


class ListingExtractor:
    """Pulls a :class:`RawListing` out of a parsed product page.

    For every field the store's selectors (``selectors.json``) are
    tried in order and the first non-empty result wins. OpenGraph /
    product meta tags and JSON-LD ``Product`` offers are consulted
    after the store selectors.
    """

    def __init__(self, selectors: dict[str, Any]) -> None:
        self.selectors = selectors
        self.meta: dict[str, list[str]] = selectors.get("meta", {})

    # ── Field helpers ────────────────────────────────────

    @staticmethod
    def first_text(soup: BeautifulSoup, selectors: list[str]) -> str:
        """Return the text of the first selector that yields any."""
        for selector in selectors:
            el = soup.select_one(selector)
            if el is None:
                continue
            text = _element_text(el)
            if text:
                return text
        return ""

    @staticmethod
    def candidate_texts(
        soup: BeautifulSoup, selectors: list[str],
    ) -> list[str]:
        """First non-empty text of every selector, in selector order."""
        texts: list[str] = []
        for selector in selectors:
            el = soup.select_one(selector)
            if el is None:
                continue
            text = _element_text(el)
            if text and text not in texts:
                texts.append(text)
        return texts

    @staticmethod
    def all_texts(soup: BeautifulSoup, selectors: list[str]) -> list[str]:
        """Texts of every match of the first selector that matches."""
        for selector in selectors:
            texts = [
                el.get_text(" ", strip=True)
                for el in soup.select(selector)
            ]
            texts = [t for t in texts if t]
            if texts:
                return texts
        return []

    @staticmethod
    def weight_rows(
        soup: BeautifulSoup, selectors: list[str],
    ) -> list[str]:
        """Detail rows that mention a weight, in page order."""
        rows: list[str] = []
        for selector in selectors:
            for el in soup.select(selector):
                text = el.get_text(" ", strip=True)
                if "weight" in text.lower() and text not in rows:
                    rows.append(text)
            if rows:
                break
        return rows

    @staticmethod
    def first_image(
        soup: BeautifulSoup,
        selectors: list[str],
        attrs: list[str],
        page_url: str,
    ) -> str:
        """Resolve the first usable image URL to an absolute one."""
        for selector in selectors:
            el = soup.select_one(selector)
            if el is None:
                continue
            if el.name == "meta":
                candidates = [el.get("content")]
            else:
                candidates = [el.get(attr) for attr in attrs]
                srcset = el.get("srcset")
                if srcset:
                    candidates.append(
                        str(srcset).split(",")[0].strip().split(" ")[0]
                    )
            for src in candidates:
                if src and not str(src).startswith("data:"):
                    return urljoin(page_url, str(src))
        return ""

    @staticmethod
    def json_ld_offer(soup: BeautifulSoup) -> tuple[str, str]:
        """Return ``(price, currency)`` from a JSON-LD Product, if any."""
        for script in soup.select('script[type="application/ld+json"]'):
            try:
                data = json.loads(script.string or "{}")
            except (json.JSONDecodeError, TypeError):
                continue
            nodes = data if isinstance(data, list) else [data]
            expanded: list[Any] = []
            for node in nodes:
                if isinstance(node, dict) and "@graph" in node:
                    expanded.extend(node["@graph"])
                else:
                    expanded.append(node)
            for node in expanded:
                if not isinstance(node, dict):
                    continue
                if node.get("@type") != "Product" or not node.get("offers"):
                    continue
                offers = node["offers"]
                offer = offers[0] if isinstance(offers, list) else offers
                if not isinstance(offer, dict):
                    continue
                price = offer.get("price") or offer.get("lowPrice")
                if price:
                    return str(price), str(offer.get("priceCurrency", ""))
        return "", ""

    # ── Entry point ──────────────────────────────────────

    def extract(
        self, soup: BeautifulSoup, store: str, page_url: str,
    ) -> RawListing:
        """Extract every field the store's selectors describe."""
        sel: dict[str, Any] = self.selectors.get(store, {})

        title = self.first_text(soup, sel.get("title", []))
        if not title:
            title = self.first_text(soup, self.meta.get("title", []))

        price_texts = self.candidate_texts(soup, sel.get("price", []))
        price_texts.extend(
            self.candidate_texts(soup, self.meta.get("price", []))
        )
        currency_hint = self.first_text(
            soup, self.meta.get("currency", [])
        )
        ld_price, ld_currency = self.json_ld_offer(soup)
        if ld_price:
            price_texts.append(ld_price)
            currency_hint = currency_hint or ld_currency

        image = self.first_image(
            soup,
            sel.get("image", []),
            sel.get("image_attrs", ["src", "data-src"]),
            page_url,
        ) or self.first_image(
            soup, self.meta.get("image", []), [], page_url
        )

        listing = RawListing(
            store=store,
            title=title,
            price_texts=price_texts,
            list_price_text=self.first_text(
                soup, sel.get("list_price", [])
            ),
            currency_hint=currency_hint,
            image=image,
            rating_text=self.first_text(soup, sel.get("rating", [])),
            review_count_text=self.first_text(
                soup, sel.get("review_count", [])
            ),
            features=self.all_texts(soup, sel.get("features", [])),
            weight_texts=self.weight_rows(
                soup, sel.get("weight_rows", [])
            ),
            availability_text=self.first_text(
                soup, sel.get("availability", [])
            ),
        )
        logger.debug(
            "[%s] Extracted title=%r, %d price candidates, %d features",
            store,
            listing.title[:60],
            len(listing.price_texts),
            len(listing.features),
        )
        return listing
