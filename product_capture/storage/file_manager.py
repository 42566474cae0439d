# product_capture/storage/file_manager.py

"""Writes captured products to disk."""

import csv
import json
import logging
from datetime import datetime
from pathlib import Path

from product_capture.config.settings import Settings
from product_capture.models.product import ScrapedProduct
from product_capture.services.shipping import quote_product

logger = logging.getLogger("product_capture.storage")

_CSV_HEADER = [
    "ID",
    "Store",
    "Title",
    "Price (BDT)",
    "List Price (BDT)",
    "Source Price",
    "Source Currency",
    "Weight (kg)",
    "Shipping (BDT)",
    "Landed Total (BDT)",
    "Availability",
    "URL",
]


class FileManager:
    """Saves captured products as JSON snapshots or a CSV sheet."""

    def __init__(self, results_dir: Path | None = None) -> None:
        self.results_dir: Path = results_dir or Settings.RESULTS_DIR
        self.results_dir.mkdir(parents=True, exist_ok=True)
        logger.debug("FileManager initialised, results_dir=%s", self.results_dir)

    @staticmethod
    def _timestamp() -> str:
        return datetime.now().strftime("%Y%m%d_%H%M%S")

    def save_product(self, product: ScrapedProduct) -> Path:
        """Save one product to ``<id or store>_<timestamp>.json``."""
        stem = product.id or product.store
        filepath = self.results_dir / f"{stem}_{self._timestamp()}.json"
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(product.to_dict(), f, ensure_ascii=False, indent=2)
        logger.info("Saved product %s to %s", stem, filepath)
        return filepath

    def save_products(self, products: list[ScrapedProduct]) -> Path:
        """Save a batch of products to one timestamped JSON file."""
        filepath = self.results_dir / f"captures_{self._timestamp()}.json"
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(
                [p.to_dict() for p in products],
                f,
                ensure_ascii=False,
                indent=2,
            )
        logger.info("Saved %d products to %s", len(products), filepath)
        return filepath

    def export_csv(self, products: list[ScrapedProduct]) -> Path:
        """Export products with their landed cost, cheapest first."""
        filepath = self.results_dir / f"export_captures_{self._timestamp()}.csv"
        sorted_products = sorted(products, key=lambda p: p.price)

        with open(filepath, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(_CSV_HEADER)
            for p in sorted_products:
                quote = quote_product(p)
                writer.writerow(
                    [
                        p.id,
                        p.store,
                        p.title,
                        p.price,
                        p.original_price if p.original_price is not None else "",
                        p.original_price_value,
                        p.original_currency,
                        p.weight if p.weight is not None else "",
                        quote.shipping_cost,
                        quote.total,
                        p.availability,
                        p.url,
                    ]
                )

        logger.info("Exported %d products to %s", len(products), filepath)
        return filepath
