# product_capture/ui/app.py

"""Terminal UI for capturing product links into BDT listings."""

import asyncio
import logging
import webbrowser
from typing import cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Static,
)

from product_capture.config.settings import Settings
from product_capture.models.product import ScrapedProduct
from product_capture.normalizers.currency import format_bdt_price
from product_capture.services.capture_orchestrator import CaptureOrchestrator
from product_capture.services.shipping import quote_product
from product_capture.storage.file_manager import FileManager

logger = logging.getLogger("product_capture.ui")


class CaptureApp(App[object]):
    """Paste a store link, get a normalized product with its landed cost."""

    CSS_PATH = "styles.css"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("s", "save", "Save"),
        Binding("e", "export", "Export CSV"),
        Binding("p", "sort_price", "Price Sort"),
        Binding("c", "copy_url", "Copy URL"),
        Binding("r", "refresh_rates", "Refresh Rates"),
    ]

    def __init__(
        self, orchestrator: CaptureOrchestrator | None = None,
    ) -> None:
        super().__init__()
        self.products: list[ScrapedProduct] = []
        self.settings = Settings()
        self.file_manager = FileManager()
        self._orchestrator = orchestrator

    @property
    def orchestrator(self) -> CaptureOrchestrator:
        if self._orchestrator is None:
            self._orchestrator = CaptureOrchestrator()
        return self._orchestrator

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        store_names = ", ".join(
            s["label"] for s in self.settings.SUPPORTED_STORES
        )

        yield Header()
        yield Container(
            Static(f"📦 Product Capture ({store_names})", id="title"),
            Horizontal(
                Input(
                    placeholder="Paste a product URL...", id="url_input"
                ),
                Button("Capture", variant="primary", id="capture_btn"),
                id="capture_bar",
            ),
            Static("Ready", id="status"),
            cast(
                DataTable[str | Text],
                DataTable(
                    id="results_table",
                    zebra_stripes=True,
                    cursor_type="row",
                ),
            ),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Configure the results table columns on startup."""
        table = cast(
            DataTable[str | Text],
            self.query_one("#results_table", DataTable),
        )
        table.add_columns(
            "Title", "Price", "Source Price", "Weight", "Landed", "Store"
        )

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "capture_btn":
            await self.perform_capture()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "url_input":
            await self.perform_capture()

    async def perform_capture(self) -> None:
        """Run the strategy chain for the entered URL off the UI thread."""
        url_input = self.query_one("#url_input", Input)
        url = url_input.value.strip()
        if not url:
            self.notify("Please paste a product URL", severity="warning")
            return

        status = self.query_one("#status", Static)
        status.update(f"🔍 Capturing {url} ...")

        result = await asyncio.to_thread(self.orchestrator.capture, url)

        if not result.success or result.product is None:
            status.update(f"❌ {result.error}")
            self.notify(result.error, severity="error")
            return

        self.products.append(result.product)
        self.populate_table()
        url_input.value = ""
        status.update(
            f"✅ {result.product.title[:50]} · "
            f"{format_bdt_price(result.product.price)}"
        )

    def populate_table(self) -> None:
        """Fill the DataTable with every captured product."""
        table = cast(
            DataTable[str | Text],
            self.query_one("#results_table", DataTable),
        )
        table.clear()
        if not self.products:
            return

        min_price = min(p.price for p in self.products)
        for p in self.products:
            quote = quote_product(p)
            price_style = "bold green" if p.price == min_price else ""
            table.add_row(
                p.title[:60],
                Text(format_bdt_price(p.price), style=price_style),
                f"{p.original_price_value:,.2f} {p.original_currency}",
                f"{p.weight:.2f} kg" if p.weight else "—",
                format_bdt_price(quote.total),
                p.store.upper(),
            )

    def on_data_table_row_selected(
        self, event: DataTable.RowSelected
    ) -> None:
        """Open the selected product's page in the default browser."""
        if 0 <= event.cursor_row < len(self.products):
            webbrowser.open(self.products[event.cursor_row].url)

    def action_sort_price(self) -> None:
        """Sort products by BDT price, ascending."""
        self.products.sort(key=lambda p: p.price)
        self.populate_table()

    def action_save(self) -> None:
        """Save captured products to a JSON file."""
        if not self.products:
            self.notify("Nothing captured yet", severity="warning")
            return
        try:
            path = self.file_manager.save_products(self.products)
            logger.info("Captures saved to %s", path)
            self.notify(f"Saved to {path}")
        except OSError as e:
            logger.error("Failed to save captures", exc_info=True)
            self.notify(f"Save failed: {e}", severity="error")

    def action_export(self) -> None:
        """Export captured products to a CSV file."""
        if not self.products:
            self.notify("Nothing captured yet", severity="warning")
            return
        try:
            path = self.file_manager.export_csv(self.products)
            logger.info("Exported captures to %s", path)
            self.notify(f"Exported to {path}")
        except OSError as e:
            logger.error("Failed to export captures", exc_info=True)
            self.notify(f"Export failed: {e}", severity="error")

    def action_copy_url(self) -> None:
        """Copy the selected product's URL to the clipboard."""
        table = cast(
            DataTable[str | Text],
            self.query_one("#results_table", DataTable),
        )
        row = table.cursor_row
        if 0 <= row < len(self.products):
            self.copy_to_clipboard(self.products[row].url)
            self.notify("URL Copied")

    def action_refresh_rates(self) -> None:
        """Forget cached exchange rates so the next capture refetches."""
        dropped = self.orchestrator.refresh_rates()
        self.notify(f"Exchange rates refreshed ({dropped} cleared)")
