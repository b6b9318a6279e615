# showroom/viewport/lazy.py

"""One-shot helpers built on :class:`ViewportTracker`.

``LazyMount`` defers building content until its placeholder first
becomes visible; ``LazyResource`` defers a fetch the same way and keeps
an error state instead of raising when the fetch fails.
"""

import logging
from collections.abc import Callable
from typing import Generic, TypeVar

from showroom.config.settings import Settings
from showroom.viewport.activation import (
    ActivationState,
    Region,
    Subscription,
    ViewportTracker,
)

logger = logging.getLogger("showroom.viewport")

T = TypeVar("T")


class LazyMount(Generic[T]):
    """Build content once, on first activation of its region."""

    def __init__(
        self,
        tracker: ViewportTracker,
        region: Region | None,
        factory: Callable[[], T],
        *,
        threshold: float = Settings.ACTIVATION_THRESHOLD,
        root_margin: str = Settings.LAZY_SECTION_ROOT_MARGIN,
        on_mount: Callable[[T], None] | None = None,
    ) -> None:
        self._factory = factory
        self._on_mount = on_mount
        self._content: T | None = None
        self._should_render = False
        self._subscription: Subscription = tracker.observe(
            region,
            threshold=threshold,
            root_margin=root_margin,
            trigger_once=True,
            callback=self._activate,
        )

    @property
    def should_render(self) -> bool:
        return self._should_render

    @property
    def content(self) -> T | None:
        """The built content, or ``None`` before first activation."""
        return self._content

    def dispose(self) -> None:
        """Stop watching the placeholder region."""
        self._subscription.unobserve()

    def _activate(self, state: ActivationState) -> None:
        if not state.is_intersecting or self._should_render:
            return
        self._should_render = True
        self._content = self._factory()
        if self._on_mount is not None:
            self._on_mount(self._content)


class LazyResource(Generic[T]):
    """Fetch a resource once, on first activation of its region.

    A failing loader leaves ``has_error`` set and ``value`` empty; the
    resource is not retried.
    """

    def __init__(
        self,
        tracker: ViewportTracker,
        region: Region | None,
        loader: Callable[[str], T],
        source: str,
        *,
        threshold: float = Settings.ACTIVATION_THRESHOLD,
        root_margin: str = Settings.ACTIVATION_ROOT_MARGIN,
        on_settled: Callable[["LazyResource[T]"], None] | None = None,
    ) -> None:
        self._loader = loader
        self._source = source
        self._on_settled = on_settled
        self._value: T | None = None
        self._is_loaded = False
        self._has_error = False
        self._should_load = False
        self._subscription: Subscription = tracker.observe(
            region,
            threshold=threshold,
            root_margin=root_margin,
            trigger_once=True,
            callback=self._activate,
        )

    @property
    def source(self) -> str:
        return self._source

    @property
    def should_load(self) -> bool:
        return self._should_load

    @property
    def is_loaded(self) -> bool:
        return self._is_loaded

    @property
    def has_error(self) -> bool:
        return self._has_error

    @property
    def value(self) -> T | None:
        return self._value

    def dispose(self) -> None:
        """Stop watching the placeholder region."""
        self._subscription.unobserve()

    def _activate(self, state: ActivationState) -> None:
        if not state.is_intersecting or self._should_load:
            return
        self._should_load = True
        if not self._source:
            return
        try:
            self._value = self._loader(self._source)
        except Exception as exc:
            self._has_error = True
            logger.warning(
                "Lazy load failed for %s: %s",
                self._source,
                exc,
                exc_info=True,
            )
        else:
            self._is_loaded = True
        if self._on_settled is not None:
            self._on_settled(self)
