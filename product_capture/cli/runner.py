# product_capture/cli/runner.py

"""Headless CLI runner: capture one URL, probe health, or serve the API."""

import json
import logging
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

from product_capture.config.settings import Settings
from product_capture.models.product import ScrapedProduct
from product_capture.normalizers.currency import (
    format_bdt_price,
    format_price_with_original,
)
from product_capture.services.capture_orchestrator import CaptureOrchestrator
from product_capture.services.shipping import quote_product
from product_capture.storage.file_manager import FileManager

logger = logging.getLogger("product_capture.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _print_table(product: ScrapedProduct) -> None:
    """Render a Rich key/value table of one product to stdout."""
    quote = quote_product(product)
    table = Table(
        title="Captured Product",
        show_header=False,
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Field", style="bold")
    table.add_column("Value", overflow="fold")

    weight = f"{product.weight:.3f} kg" if product.weight else "—"
    list_price = (
        format_bdt_price(product.original_price)
        if product.original_price is not None
        else "—"
    )
    rows = [
        ("ID", product.id),
        ("Store", product.store),
        ("Title", product.title),
        (
            "Price",
            format_price_with_original(
                product.price,
                product.original_price_value,
                product.original_currency,
            ),
        ),
        ("List price", list_price),
        ("Weight", weight),
        ("Rating", str(product.rating) if product.rating is not None else "—"),
        ("Reviews", str(product.review_count or "—")),
        ("Availability", product.availability),
        ("Shipping", format_bdt_price(quote.shipping_cost)),
        ("Service charge", format_bdt_price(quote.service_charge)),
        ("Landed total", f"[green]{format_bdt_price(quote.total)}[/green]"),
        ("Image", product.image or "—"),
        ("URL", product.url),
    ]
    for field, value in rows:
        table.add_row(field, value)

    Console().print(table)


def cli_capture(
    url: str,
    output_format: str,
    output_dir: str | None,
    save: bool = False,
    orchestrator: CaptureOrchestrator | None = None,
) -> int:
    """Capture *url* and return an exit code (0=ok, 1=fail)."""
    if output_dir is not None:
        Settings.RESULTS_DIR = Path(output_dir)

    orchestrator = orchestrator or CaptureOrchestrator()
    _err.print(f"[bold]Capturing:[/bold] {url}")

    result = orchestrator.capture(url)
    if not result.success or result.product is None:
        _err.print(f"[red]✗ {result.error}[/red]")
        if output_format == "json":
            json.dump(result.to_dict(), sys.stdout, ensure_ascii=False, indent=2)
            sys.stdout.write("\n")
        return 1

    product = result.product
    _err.print(
        f"[green]✓ {product.store}: "
        f"{format_bdt_price(product.price)}[/green]"
    )

    if save:
        try:
            path = FileManager().save_product(product)
            _err.print(f"[dim]Saved → {path}[/dim]")
        except OSError as exc:
            logger.error("Save failed: %s", exc, exc_info=True)
            _err.print(f"[red]Save failed: {exc}[/red]")

    if output_format == "table":
        _print_table(product)
    else:
        body: dict[str, Any] = result.to_dict()
        body["quote"] = quote_product(product).to_dict()
        json.dump(body, sys.stdout, ensure_ascii=False, indent=2)
        sys.stdout.write("\n")

    return 0


async def run_health_check() -> int:
    """Run connectivity health check on every store and the scraping API."""
    from product_capture.services.health_checker import HealthChecker

    _err.print("[bold]Running capture health check...[/bold]")
    checker = HealthChecker()
    results = await checker.check_all()

    table = Table(
        title="Capture Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Target", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")

    any_down = False
    for r in results:
        if r.status == "ok":
            status = "[green]✅ OK[/green]"
        elif r.status == "slow":
            status = "[yellow]⚠️  SLOW[/yellow]"
        else:
            status = "[red]❌ DOWN[/red]"
            any_down = True

        latency = f"{r.latency_ms:.0f}ms" if r.latency_ms > 0 else "—"
        table.add_row(r.target_id, status, latency, r.message)

    Console().print(table)
    return 1 if any_down else 0


def run_server(host: str | None = None, port: int | None = None) -> int:
    """Serve the capture endpoint with Flask's built-in server."""
    from product_capture.api.server import create_app

    host = host or Settings.API_HOST
    port = port or Settings.API_PORT
    _err.print(
        f"[bold]Serving[/bold] POST http://{host}:{port}/api/capture-product"
    )
    logger.info("API server listening on %s:%d", host, port)
    create_app().run(host=host, port=port)
    return 0
