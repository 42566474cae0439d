# main.py

"""Entry point for product_capture (TUI, headless capture or API server)."""

import argparse
import asyncio
import logging
import sys

from product_capture.config.logging_config import setup_logging
from product_capture.config.settings import Settings

logger = logging.getLogger("product_capture.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    store_labels = ", ".join(s["label"] for s in Settings.SUPPORTED_STORES)

    parser = argparse.ArgumentParser(
        prog="product_capture",
        description="Capture store product links as BDT-priced listings.",
        epilog=f"Supported stores: {store_labels}",
    )
    parser.add_argument(
        "url",
        nargs="?",
        help="Product URL to capture. Omit to launch the interactive TUI.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Echo INFO logs to stderr as well as the run log.",
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--serve",
        action="store_true",
        help="Run the HTTP capture endpoint.",
    )
    mode.add_argument(
        "--health",
        action="store_true",
        help="Probe every store and ScraperAPI, then exit.",
    )

    capture = parser.add_argument_group("headless capture")
    capture.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    capture.add_argument(
        "-o",
        "--output",
        dest="output_dir",
        help="Directory for --save (default: results/).",
    )
    capture.add_argument(
        "--save",
        action="store_true",
        help="Also write the captured product to a JSON file.",
    )

    server = parser.add_argument_group("API server")
    server.add_argument(
        "--host",
        help=f"Bind address (default: {Settings.API_HOST}).",
    )
    server.add_argument(
        "--port",
        type=int,
        help=f"Port (default: {Settings.API_PORT}).",
    )
    return parser


def _run_tui() -> int:
    from product_capture.ui.app import CaptureApp

    try:
        CaptureApp().run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("product_capture TUI shutting down")
    return 0


def _dispatch(args: argparse.Namespace) -> int:
    """Pick the mode from the parsed flags and return its exit code."""
    from product_capture.cli import runner

    if args.serve:
        return runner.run_server(args.host, args.port)
    if args.health:
        return asyncio.run(runner.run_health_check())
    if args.url is None:
        return _run_tui()
    return runner.cli_capture(
        url=args.url,
        output_format=args.output_format,
        output_dir=args.output_dir,
        save=args.save,
    )


def main() -> None:
    """Route to TUI (no args), API server, health check or headless capture."""
    args = _build_parser().parse_args()

    log_file = setup_logging(logging.INFO if args.verbose else None)
    logger.info("product_capture starting, log file: %s", log_file)

    sys.exit(_dispatch(args))


if __name__ == "__main__":
    main()
