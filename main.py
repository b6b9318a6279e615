# main.py

"""Entry point for the showroom inventory browser (TUI or headless CLI)."""

import argparse
import asyncio
import logging
import sys

from showroom.config.logging_config import setup_logging
from showroom.config.settings import Settings

logger = logging.getLogger("showroom.main")

# (flag, filter name, help)
_FILTER_FLAGS: list[tuple[str, str, str]] = [
    ("--make", "make", "Vehicle make, e.g. BMW."),
    ("--model", "model", "Vehicle model."),
    ("--year-from", "yearFrom", "Minimum model year."),
    ("--year-to", "yearTo", "Maximum model year."),
    ("--price-from", "priceFrom", "Minimum price."),
    ("--price-to", "priceTo", "Maximum price."),
    ("--fuel-type", "fuelType", "Fuel type."),
    ("--transmission", "transmission", "Transmission."),
    ("--body-type", "bodyType", "Body type."),
    ("--sort-by", "sortBy", "Sort field (default: createdAt)."),
    ("--sort-order", "sortOrder", "asc or desc (default: desc)."),
]


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="showroom",
        description="Dealership inventory browser.",
        epilog=f"API: {Settings.API_BASE_URL}",
    )
    parser.add_argument(
        "search",
        nargs="?",
        default=None,
        help="Free-text search. Omit (with no filters) to launch the TUI.",
    )
    for flag, dest, help_text in _FILTER_FLAGS:
        parser.add_argument(flag, dest=dest, default=None, help=help_text)
    parser.add_argument(
        "--featured",
        action="store_true",
        default=False,
        help="Only featured vehicles.",
    )
    parser.add_argument(
        "-p",
        "--pages",
        type=int,
        default=1,
        help="Number of pages to fetch (default: 1).",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    return parser


def _collect_filters(args: argparse.Namespace) -> dict[str, str | bool | None]:
    """Pull filter values out of the parsed arguments."""
    filters: dict[str, str | bool | None] = {
        dest: getattr(args, dest) for _, dest, _ in _FILTER_FLAGS
    }
    filters["search"] = args.search
    filters["featured"] = args.featured
    return filters


def _run_tui() -> None:
    """Launch the interactive Textual TUI."""
    from showroom.ui.app import ShowroomApp

    try:
        app = ShowroomApp()
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("showroom TUI shutting down")


def _run_cli(args: argparse.Namespace) -> None:
    """Run a headless browse and exit."""
    from showroom.cli.runner import cli_browse

    exit_code = asyncio.run(
        cli_browse(
            filters=_collect_filters(args),
            pages=args.pages,
            output_format=args.output_format,
        )
    )
    sys.exit(exit_code)


def main() -> None:
    """Route to TUI (no filters) or headless CLI (any filter given)."""
    log_file = setup_logging()
    logger.info("showroom starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()
    if args.pages < 1:
        parser.error("--pages must be at least 1")

    filters = _collect_filters(args)
    if any(value for value in filters.values()):
        _run_cli(args)
    else:
        _run_tui()


if __name__ == "__main__":
    main()
