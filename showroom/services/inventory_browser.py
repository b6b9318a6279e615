# showroom/services/inventory_browser.py

"""Coordinates cached inventory searches with the incremental list."""

import asyncio
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

from showroom.config.settings import Settings
from showroom.filters.filter_state import normalize_filters
from showroom.models.inventory_page import InventoryPage
from showroom.models.vehicle import Vehicle
from showroom.storage.search_cache import (
    FilterValue,
    QueryDescriptor,
    SearchCache,
    derive_key,
)
from showroom.viewport.window import IncrementalList, ViewMode

logger = logging.getLogger("showroom.browser")

FetchFn = Callable[[QueryDescriptor], InventoryPage]


@dataclass
class BrowseResult:
    """Outcome of one page request."""

    descriptor: dict[str, FilterValue]
    items: list[Vehicle] = field(
        default_factory=lambda: list[Vehicle]()
    )
    total_count: int = 0
    from_cache: bool = False


def _default_fetch() -> FetchFn:
    from showroom.services.inventory_client import InventoryClient

    return InventoryClient().fetch


class InventoryBrowser:
    """Drive page fetches through a shared :class:`SearchCache`.

    Each page has its own descriptor (filters plus ``page``/``limit``),
    so revisiting a filter combination is served from the cache page by
    page.  Identical requests that overlap in time share one fetch.
    """

    def __init__(
        self,
        cache: SearchCache,
        fetch: FetchFn | None = None,
        *,
        items_per_page: int = Settings.ITEMS_PER_PAGE,
        view_mode: ViewMode = ViewMode.GRID,
        item_heights: Mapping[ViewMode, float] | None = None,
        tail_margin: float = Settings.TAIL_SCROLL_MARGIN,
    ) -> None:
        self.cache = cache
        self._fetch = fetch or _default_fetch()
        self.items_per_page = items_per_page
        self.filters: dict[str, FilterValue] = normalize_filters({})
        self.page = 0
        self.total_count = 0
        self.cache_hits = 0
        self.last_error: Exception | None = None
        self.list: IncrementalList[Vehicle] = IncrementalList(
            items_per_page=items_per_page,
            view_mode=view_mode,
            load_more=self.request_more,
            item_heights=item_heights,
            tail_margin=tail_margin,
        )
        self._pending: dict[str, asyncio.Task[InventoryPage]] = {}
        self._generation = 0
        self._load_task: asyncio.Task[BrowseResult | None] | None = None

    def page_descriptor(self, page: int) -> dict[str, FilterValue]:
        """Cache/query descriptor for *page* of the current filters."""
        return {
            **self.filters,
            "page": page,
            "limit": self.items_per_page,
        }

    # ── Fetching ─────────────────────────────────────────

    async def fetch_page(
        self, descriptor: QueryDescriptor
    ) -> tuple[InventoryPage, bool]:
        """Return the page for *descriptor* and whether it was cached.

        A miss either joins an identical fetch that is already running
        or starts one and stores its result in the cache.
        """
        cached = self.cache.get(descriptor)
        if cached is not None:
            self.cache_hits += 1
            return (
                InventoryPage(
                    items=list(cached.items),
                    total_count=cached.total_count,
                ),
                True,
            )

        key = derive_key(descriptor)
        fetch = self._pending.get(key)
        if fetch is None:
            fetch = asyncio.get_running_loop().create_task(
                asyncio.to_thread(self._fetch, descriptor)
            )
            snapshot = dict(descriptor)
            fetch.add_done_callback(
                lambda done: self._settle_fetch(key, snapshot, done)
            )
            self._pending[key] = fetch
        else:
            logger.debug("Joining in-flight fetch for %s", key)

        # Cancelling one waiter must not cancel the fetch the others share
        page = await asyncio.shield(fetch)
        return (
            InventoryPage(items=list(page.items), total_count=page.total_count),
            False,
        )

    def _settle_fetch(
        self,
        key: str,
        descriptor: QueryDescriptor,
        fetch: "asyncio.Task[InventoryPage]",
    ) -> None:
        """Cache a finished shared fetch and stop advertising it."""
        if self._pending.get(key) is fetch:
            del self._pending[key]
        if fetch.cancelled():
            return
        exc = fetch.exception()
        if exc is not None:
            logger.debug("Shared fetch for %s failed: %s", key, exc)
            return
        page = fetch.result()
        self.cache.set(descriptor, page.items, page.total_count)

    # ── Public operations ────────────────────────────────

    async def search(
        self, filters: Mapping[str, FilterValue]
    ) -> BrowseResult:
        """Start a new result list for *filters* from page 1.

        Results of a search that was superseded while in flight are
        cached but not shown.
        """
        self._generation += 1
        generation = self._generation
        self.filters = normalize_filters(filters)
        descriptor = self.page_descriptor(1)
        self.last_error = None
        self.list.loading = True

        try:
            page, from_cache = await self.fetch_page(descriptor)
        except Exception as exc:
            if generation == self._generation:
                self.last_error = exc
            logger.error(
                "Search failed for %s: %s", descriptor, exc, exc_info=True
            )
            raise
        finally:
            # Also reached on cancellation
            if generation == self._generation:
                self.list.loading = False

        result = BrowseResult(
            descriptor=descriptor,
            items=page.items,
            total_count=page.total_count,
            from_cache=from_cache,
        )
        if generation != self._generation:
            logger.info("Discarding superseded search %s", descriptor)
            return result

        self.page = 1
        self.total_count = page.total_count
        self.list.replace(page.items)
        self.list.has_more = (
            bool(page.items) and len(self.list) < page.total_count
        )
        logger.info(
            "Search %s -> %d of %d vehicles (cache=%s)",
            descriptor,
            len(page.items),
            page.total_count,
            from_cache,
        )
        return result

    async def load_more(self) -> BrowseResult | None:
        """Fetch and append the next page, if there is one.

        Returns ``None`` when nothing was requested.  Fetch errors are
        recorded on ``last_error`` and re-raised; ``has_more`` is left
        unchanged so the caller may retry.
        """
        if not self.list.has_more or self.list.loading:
            return None

        generation = self._generation
        descriptor = self.page_descriptor(self.page + 1)
        self.list.loading = True
        try:
            page, from_cache = await self.fetch_page(descriptor)
        except Exception as exc:
            if generation == self._generation:
                self.last_error = exc
            logger.error(
                "Loading more failed for %s: %s",
                descriptor,
                exc,
                exc_info=True,
            )
            raise
        finally:
            if generation == self._generation:
                self.list.loading = False

        result = BrowseResult(
            descriptor=descriptor,
            items=page.items,
            total_count=page.total_count,
            from_cache=from_cache,
        )
        if generation != self._generation:
            return result

        self.page += 1
        self.total_count = page.total_count
        self.last_error = None
        self.list.append(page.items)
        self.list.has_more = (
            bool(page.items) and len(self.list) < page.total_count
        )
        return result

    def request_more(self) -> "asyncio.Task[BrowseResult | None]":
        """Tail-activation hook: schedule :meth:`load_more` on the loop."""
        task = asyncio.get_running_loop().create_task(self.load_more())
        task.add_done_callback(self._on_load_done)
        self._load_task = task
        return task

    def set_view_mode(self, mode: ViewMode) -> None:
        self.list.set_view_mode(mode)

    def _on_load_done(
        self, task: "asyncio.Task[BrowseResult | None]"
    ) -> None:
        if task.cancelled():
            return
        # Already logged and stored on last_error by load_more
        task.exception()
