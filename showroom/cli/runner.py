# showroom/cli/runner.py

"""Headless inventory browsing; reuses the async browser and cache."""

import json
import logging
import sys
from collections.abc import Mapping

from rich.console import Console
from rich.table import Table

from showroom.filters.filter_state import describe_filters, normalize_filters
from showroom.models.vehicle import Vehicle
from showroom.services.inventory_browser import FetchFn, InventoryBrowser
from showroom.storage.search_cache import FilterValue, SearchCache

logger = logging.getLogger("showroom.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _vehicles_to_dicts(vehicles: list[Vehicle]) -> list[dict[str, object]]:
    """Serialise vehicles to plain dicts for JSON output."""
    return [
        {
            "id": v.id,
            "title": v.display_title,
            "make": v.make,
            "model": v.model,
            "year": v.year,
            "price": v.price,
            "mileage": v.mileage,
            "fuelType": v.fuel_type,
            "transmission": v.transmission,
            "bodyType": v.body_type,
            "color": v.color,
            "featured": v.featured,
        }
        for v in vehicles
    ]


def _print_table(vehicles: list[Vehicle], total: int) -> None:
    """Render a Rich table of vehicles to stdout."""
    table = Table(
        title=f"Inventory ({len(vehicles)} of {total})",
        show_lines=False,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Vehicle", max_width=48)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Mileage", justify="right")
    table.add_column("Fuel")
    table.add_column("Gearbox")

    for idx, v in enumerate(vehicles, 1):
        table.add_row(
            str(idx),
            v.display_title + (" ★" if v.featured else ""),
            f"{v.price:,.0f}" if v.price > 0 else "N/A",
            f"{v.mileage:,} km" if v.mileage else "—",
            v.fuel_type or "—",
            v.transmission or "—",
        )

    Console().print(table)


async def cli_browse(
    filters: Mapping[str, FilterValue],
    pages: int,
    output_format: str,
    fetch: FetchFn | None = None,
) -> int:
    """Fetch up to *pages* pages and print them; return an exit code."""
    browser = InventoryBrowser(SearchCache(), fetch)
    summary = describe_filters(normalize_filters(filters))
    _err.print(f"[bold]Browsing:[/bold] {summary}")

    try:
        await browser.search(filters)
        for _ in range(max(pages, 1) - 1):
            more = await browser.load_more()
            if more is None:
                break
    except Exception as exc:
        logger.error("Browse failed: %s", exc, exc_info=True)
        _err.print(f"[red]Error: {exc}[/red]")
        return 1

    vehicles = list(browser.list.items)
    if not vehicles:
        _err.print("[yellow]No vehicles found.[/yellow]")
        return 1

    tail = "" if browser.list.has_more else " (end of results)"
    _err.print(
        f"[green]✓ {len(vehicles)} of {browser.total_count} vehicles"
        f" over {browser.page} page(s){tail}[/green]"
    )

    if output_format == "table":
        _print_table(vehicles, browser.total_count)
    else:
        json.dump(
            _vehicles_to_dicts(vehicles),
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")

    return 0
