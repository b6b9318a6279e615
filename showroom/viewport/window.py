# showroom/viewport/window.py

"""Windowed rendering of a growing result list.

Only ``items[start:end]`` of the known results is handed to the view.
The window follows the scroll position using a fixed per-layout item
height estimate rather than measuring rendered rows, so the mapping
from scroll offset to index is approximate.  Reaching the tail, either
by scroll position or through a sentinel region, asks the caller for
more data.
"""

import logging
import math
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from showroom.config.settings import Settings
from showroom.viewport.activation import (
    ActivationState,
    Region,
    Subscription,
    ViewportTracker,
)

logger = logging.getLogger("showroom.list")

T = TypeVar("T")


class ViewMode(str, Enum):
    """Layout of the result list."""

    GRID = "grid"
    LIST = "list"


DEFAULT_ITEM_HEIGHTS: dict[ViewMode, float] = {
    ViewMode.GRID: Settings.GRID_ITEM_HEIGHT,
    ViewMode.LIST: Settings.LIST_ITEM_HEIGHT,
}


@dataclass(frozen=True)
class VisibleWindow:
    """Half-open index range ``[start, end)`` over the known items."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            msg = f"invalid window [{self.start}, {self.end})"
            raise ValueError(msg)

    def __len__(self) -> int:
        return self.end - self.start


def compute_visible(
    sequence: Sequence[T], window: VisibleWindow
) -> list[T]:
    """Return the slice of *sequence* covered by *window*."""
    return list(sequence[window.start : window.end])


class IncrementalList(Generic[T]):
    """Expose a sliding slice of an ordered result list.

    ``has_more`` and ``loading`` belong to the caller.  ``load_more`` is
    called at most once per loading cycle: after it fires, further tail
    signals are ignored until the caller sets ``loading = False`` or
    delivers data through :meth:`append` / :meth:`replace`.
    """

    def __init__(
        self,
        items: Iterable[T] = (),
        *,
        items_per_page: int = Settings.ITEMS_PER_PAGE,
        view_mode: ViewMode = ViewMode.GRID,
        load_more: Callable[[], object] | None = None,
        has_more: bool = False,
        item_heights: Mapping[ViewMode, float] | None = None,
        tail_margin: float = Settings.TAIL_SCROLL_MARGIN,
    ) -> None:
        if items_per_page < 1:
            msg = f"items_per_page must be >= 1, got {items_per_page}"
            raise ValueError(msg)
        heights = dict(DEFAULT_ITEM_HEIGHTS)
        if item_heights:
            heights.update(item_heights)
        if any(h <= 0 for h in heights.values()):
            msg = f"item heights must be positive, got {heights}"
            raise ValueError(msg)

        self._items: list[T] = list(items)
        self._items_per_page = items_per_page
        self._view_mode = view_mode
        self._item_heights = heights
        self._tail_margin = tail_margin
        self.load_more = load_more
        self.has_more = has_more
        self._loading = False
        self._awaiting_load = False
        self._window = self._window_from(0)

    # ── State ────────────────────────────────────────────

    @property
    def items(self) -> tuple[T, ...]:
        return tuple(self._items)

    @property
    def window(self) -> VisibleWindow:
        return self._window

    @property
    def items_per_page(self) -> int:
        return self._items_per_page

    @property
    def view_mode(self) -> ViewMode:
        return self._view_mode

    @property
    def item_height(self) -> float:
        """Height estimate used for the current view mode."""
        return self._item_heights[self._view_mode]

    @property
    def loading(self) -> bool:
        return self._loading

    @loading.setter
    def loading(self, value: bool) -> None:
        self._loading = value
        if not value:
            self._awaiting_load = False

    def __len__(self) -> int:
        return len(self._items)

    def visible_items(self) -> list[T]:
        """Items inside the current window."""
        return compute_visible(self._items, self._window)

    # ── Data updates ─────────────────────────────────────

    def append(self, items: Iterable[T]) -> VisibleWindow:
        """Add a fetched page to the tail; the window start is kept."""
        new_items = list(items)
        self._items.extend(new_items)
        self._awaiting_load = False
        self._window = self._window_from(self._window.start)
        logger.debug(
            "Appended %d items (known=%d, window=%s)",
            len(new_items),
            len(self._items),
            self._window,
        )
        return self._window

    def replace(self, items: Iterable[T]) -> VisibleWindow:
        """Swap in a fresh result list and go back to the first page."""
        self._items = list(items)
        self._awaiting_load = False
        self._window = self._window_from(0)
        return self._window

    def set_view_mode(self, mode: ViewMode) -> None:
        """Switch layout; only the height estimate changes.

        The window keeps its absolute indices, so the next scroll event
        may jump to a different start index.
        """
        if mode == self._view_mode:
            return
        logger.debug(
            "View mode %s -> %s (window kept at %s)",
            self._view_mode.value,
            mode.value,
            self._window,
        )
        self._view_mode = mode

    # ── Events ───────────────────────────────────────────

    def on_scroll(
        self,
        scroll_top: float,
        container_height: float,
        scroll_height: float,
    ) -> VisibleWindow:
        """Move the window to match a scroll offset.

        ``start`` is ``floor(scroll_top / item_height)``; when the
        remaining distance to the bottom is within the tail margin the
        scroll also counts as a tail activation.
        """
        start = math.floor(max(scroll_top, 0.0) / self.item_height)
        self._window = self._window_from(start)

        remaining = scroll_height - (scroll_top + container_height)
        if remaining <= self._tail_margin:
            self.on_tail_activation()
        return self._window

    def on_tail_activation(self) -> object | None:
        """Ask the caller for the next page if one is due.

        Returns whatever ``load_more`` returned (e.g. an awaitable), or
        ``None`` when the request was suppressed.
        """
        if (
            self.load_more is None
            or not self.has_more
            or self._loading
            or self._awaiting_load
        ):
            return None

        self._awaiting_load = True
        logger.debug("Tail reached at %d known items", len(self._items))
        try:
            return self.load_more()
        except Exception:
            self._awaiting_load = False
            raise

    def attach_sentinel(
        self,
        tracker: ViewportTracker,
        region: Region | None,
        *,
        threshold: float = Settings.ACTIVATION_THRESHOLD,
        root_margin: str = "0px",
    ) -> Subscription:
        """Observe a trailing sentinel that triggers tail activation."""

        def _on_change(state: ActivationState) -> None:
            if state.is_intersecting:
                self.on_tail_activation()

        return tracker.observe(
            region,
            threshold=threshold,
            root_margin=root_margin,
            trigger_once=False,
            callback=_on_change,
        )

    def _window_from(self, start: int) -> VisibleWindow:
        """Clamp a window starting at *start* into the known items."""
        total = len(self._items)
        start = min(max(start, 0), total)
        end = min(start + self._items_per_page, total)
        return VisibleWindow(start, end)
