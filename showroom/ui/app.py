# showroom/ui/app.py

"""Terminal UI for browsing the dealership inventory."""

import asyncio
import logging

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical, VerticalScroll
from textual.widgets import Button, Footer, Header, Input, Static

from showroom.filters.filter_state import describe_filters, normalize_filters
from showroom.models.vehicle import Vehicle
from showroom.services.inventory_browser import BrowseResult, InventoryBrowser
from showroom.storage.search_cache import SearchCache
from showroom.ui.regions import ScrollViewport, WidgetRegion
from showroom.viewport.activation import Subscription, ViewportTracker
from showroom.viewport.lazy import LazyMount
from showroom.viewport.window import ViewMode

logger = logging.getLogger("showroom.ui")

# Card heights in terminal rows, used as the list's height estimates
CARD_ROWS: dict[ViewMode, float] = {
    ViewMode.GRID: 6,
    ViewMode.LIST: 3,
}
# Rows from the bottom of the results that count as reaching the tail
TAIL_ROWS = 2.0

# (input id, filter name, placeholder)
FILTER_INPUTS: list[tuple[str, str, str]] = [
    ("filter_search", "search", "Search..."),
    ("filter_make", "make", "Make"),
    ("filter_model", "model", "Model"),
    ("filter_year_from", "yearFrom", "Year from"),
    ("filter_price_to", "priceTo", "Max price"),
]


def _card_details(vehicle: Vehicle) -> str:
    parts = [
        f"{vehicle.mileage:,} km" if vehicle.mileage else "",
        vehicle.fuel_type,
        vehicle.transmission,
        vehicle.body_type,
        vehicle.color,
    ]
    return " · ".join(p for p in parts if p)


class VehicleCard(Vertical):
    """One vehicle; the detail line is filled in once it is on screen."""

    def __init__(self, vehicle: Vehicle, mode: ViewMode) -> None:
        super().__init__(classes=mode.value)
        self.vehicle = vehicle
        self.lazy_details: LazyMount[str] | None = None

    def compose(self) -> ComposeResult:
        price = (
            f"{self.vehicle.price:,.0f}" if self.vehicle.price > 0 else "N/A"
        )
        badge = " ★" if self.vehicle.featured else ""
        yield Static(
            f"[b]{self.vehicle.display_title}[/b]{badge}", classes="card_title"
        )
        yield Static(price, classes="card_price")
        yield Static("…", classes="card_details")

    def show_details(self, text: str) -> None:
        self.query_one(".card_details", Static).update(text)

    def on_unmount(self) -> None:
        if self.lazy_details is not None:
            self.lazy_details.dispose()


class ShowroomApp(App[object]):
    """Terminal UI for the showroom inventory browser."""

    CSS_PATH = "styles.css"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("g", "view_grid", "Grid"),
        Binding("l", "view_list", "List"),
        Binding("m", "load_more", "More"),
        Binding("x", "clear_cache", "Clear cache"),
    ]

    def __init__(self, browser: InventoryBrowser | None = None) -> None:
        super().__init__()
        self.browser = browser or InventoryBrowser(
            SearchCache(), item_heights=CARD_ROWS, tail_margin=TAIL_ROWS
        )
        self.browser.list.load_more = self._request_more
        self.tracker: ViewportTracker | None = None
        self._sentinel_subscription: Subscription | None = None

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        yield Header()
        yield Container(
            Static("🚗 Vehicle Inventory", id="title"),
            Horizontal(
                *[
                    Input(placeholder=placeholder, id=input_id)
                    for input_id, _, placeholder in FILTER_INPUTS
                ],
                Button("Search", variant="primary", id="search_btn"),
                id="search_bar",
            ),
            Static("Ready", id="status"),
            VerticalScroll(
                Static("", id="spacer_top"),
                Vertical(id="cards"),
                Static("", id="spacer_bottom"),
                Static("", id="sentinel"),
                id="results",
            ),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Wire scroll tracking and the tail sentinel."""
        results = self.query_one("#results", VerticalScroll)
        self.tracker = ViewportTracker(ScrollViewport(results))
        self._sentinel_subscription = self.browser.list.attach_sentinel(
            self.tracker,
            WidgetRegion(self.query_one("#sentinel", Static), results),
        )
        self.watch(results, "scroll_y", self._on_results_scrolled, init=False)
        self.set_interval(
            self.browser.cache.ttl, self._purge_expired_cache
        )

    def on_unmount(self) -> None:
        if self.tracker is not None:
            self.tracker.close()

    # ── Search ───────────────────────────────────────────

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button click events."""
        if event.button.id == "search_btn":
            await self.perform_search()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle Enter in any filter input."""
        await self.perform_search()

    def collect_filters(self) -> dict[str, str]:
        """Read the filter inputs into a descriptor."""
        return {
            name: self.query_one(f"#{input_id}", Input).value
            for input_id, name, _ in FILTER_INPUTS
        }

    async def perform_search(self) -> None:
        """Run a (possibly cached) search for the current filters."""
        filters = self.collect_filters()
        status = self.query_one("#status", Static)
        summary = describe_filters(normalize_filters(filters))
        status.update(f"🔍 Searching {summary}...")

        try:
            result = await self.browser.search(filters)
        except Exception as exc:
            status.update("❌ Search failed")
            self.notify(f"Error: {exc}", severity="error")
            return

        results = self.query_one("#results", VerticalScroll)
        results.scroll_home(animate=False)
        await self.render_window()
        self._update_status(result)

    def _update_status(self, result: BrowseResult | None = None) -> None:
        status = self.query_one("#status", Static)
        shown = len(self.browser.list)
        if shown == 0:
            status.update("❌ No vehicles found")
            return
        source = " (cached)" if result is not None and result.from_cache else ""
        more = "" if self.browser.list.has_more else " · end of results"
        status.update(
            f"✅ {shown} of {self.browser.total_count} vehicles{source}{more}"
        )

    # ── Incremental rendering ────────────────────────────

    async def render_window(self) -> None:
        """Mount cards for the visible window and pad the rest."""
        items = self.browser.list
        window = items.window
        height = items.item_height

        results = self.query_one("#results", VerticalScroll)
        cards = self.query_one("#cards", Vertical)
        await cards.remove_children()
        new_cards = [
            VehicleCard(vehicle, items.view_mode)
            for vehicle in items.visible_items()
        ]
        for card in new_cards:
            card.styles.height = int(height)
        if new_cards:
            await cards.mount(*new_cards)

        self.query_one("#spacer_top", Static).styles.height = int(
            window.start * height
        )
        self.query_one("#spacer_bottom", Static).styles.height = int(
            (len(items) - window.end) * height
        )
        sentinel = self.query_one("#sentinel", Static)
        sentinel.update(
            "Loading more..." if items.has_more else "End of results"
        )

        if self.tracker is not None:
            for card in new_cards:
                card.lazy_details = LazyMount(
                    self.tracker,
                    WidgetRegion(card, results),
                    lambda v=card.vehicle: _card_details(v),
                    on_mount=card.show_details,
                )
        self.call_after_refresh(self._refresh_activation)

    def _refresh_activation(self) -> None:
        if self.tracker is not None:
            self.tracker.refresh()

    async def _on_results_scrolled(self, scroll_y: float) -> None:
        await self._sync_window(scroll_y)

    def on_resize(self, event: events.Resize) -> None:
        """Recompute the window once the new layout is in place."""
        self.call_after_refresh(self._sync_window)

    async def _sync_window(self, scroll_y: float | None = None) -> None:
        if self.tracker is None:
            # Not mounted yet
            return
        results = self.query_one("#results", VerticalScroll)
        if scroll_y is None:
            scroll_y = results.scroll_y
        before = self.browser.list.window
        after = self.browser.list.on_scroll(
            scroll_y,
            results.size.height,
            results.virtual_size.height,
        )
        if after != before:
            await self.render_window()
        else:
            self._refresh_activation()

    def _request_more(self) -> "asyncio.Task[BrowseResult | None]":
        """Tail activation: fetch the next page, then re-render."""
        task = self.browser.request_more()
        task.add_done_callback(self._after_load_more)
        return task

    def _after_load_more(
        self, task: "asyncio.Task[BrowseResult | None]"
    ) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self.notify(
                f"Could not load more vehicles: {exc}", severity="error"
            )
            return
        self.call_later(self._rerender_after_load, task.result())

    async def _rerender_after_load(self, result: BrowseResult | None) -> None:
        await self.render_window()
        self._update_status(result)

    # ── Actions ──────────────────────────────────────────

    async def action_view_grid(self) -> None:
        """Switch to the grid layout."""
        self.browser.set_view_mode(ViewMode.GRID)
        await self.render_window()

    async def action_view_list(self) -> None:
        """Switch to the list layout."""
        self.browser.set_view_mode(ViewMode.LIST)
        await self.render_window()

    def action_load_more(self) -> None:
        """Ask for the next page without scrolling."""
        if self.browser.list.on_tail_activation() is None:
            self.notify("Nothing more to load", severity="warning")

    def action_clear_cache(self) -> None:
        """Drop every cached result page."""
        removed = self.browser.cache.clear()
        self.notify(f"Cleared {removed} cached pages")

    def _purge_expired_cache(self) -> None:
        removed = self.browser.cache.clear_expired()
        if removed:
            logger.debug("Periodic purge removed %d cache entries", removed)
