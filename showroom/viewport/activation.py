# showroom/viewport/activation.py

"""Viewport activation tracking for lazy rendering and pagination.

A :class:`ViewportTracker` watches regions against one scrolling root
and reports whether each region is visible enough to count as active.
It is driven by :meth:`ViewportTracker.refresh`, which the event source
(scroll, resize, layout change) calls, so any geometry provider can back
it: Textual widgets in the TUI, plain :class:`Rect` holders in tests.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from types import TracebackType
from typing import Protocol

from showroom.config.settings import Settings
from showroom.viewport.geometry import Rect, RootMargin, intersection_ratio

logger = logging.getLogger("showroom.viewport")


class Region(Protocol):
    """Anything that can report where it currently sits."""

    def bounding_rect(self) -> Rect | None:
        """Current box in the root's coordinate space, ``None`` if detached."""
        ...


@dataclass(frozen=True)
class ActivationState:
    """Visibility snapshot for one observed region.

    ``has_triggered`` only moves in one-shot mode, and never back.
    """

    is_intersecting: bool = False
    has_triggered: bool = False


ActivationCallback = Callable[[ActivationState], None]


class Subscription:
    """Live observation of one region, ended by :meth:`unobserve`."""

    def __init__(
        self,
        tracker: "ViewportTracker | None",
        region: Region | None,
        threshold: float,
        root_margin: RootMargin,
        trigger_once: bool,
        callback: ActivationCallback | None,
    ) -> None:
        self._tracker = tracker
        self._region = region
        self._threshold = threshold
        self._root_margin = root_margin
        self._trigger_once = trigger_once
        self._callback = callback
        self._state = ActivationState()

    @property
    def state(self) -> ActivationState:
        return self._state

    @property
    def is_intersecting(self) -> bool:
        return self._state.is_intersecting

    @property
    def has_triggered(self) -> bool:
        return self._state.has_triggered

    @property
    def trigger_once(self) -> bool:
        return self._trigger_once

    @property
    def active(self) -> bool:
        """True while the region is still being watched."""
        return self._tracker is not None

    def unobserve(self) -> None:
        """Stop watching; no state changes are reported afterwards."""
        tracker = self._tracker
        if tracker is None:
            return
        self._tracker = None
        tracker._forget(self)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.unobserve()

    def _evaluate(self, root: Rect) -> None:
        """Recompute visibility against *root* and report a transition."""
        if self._tracker is None or self._region is None:
            return
        target = self._region.bounding_rect()
        if target is None:
            return

        ratio = intersection_ratio(target, self._root_margin.expand(root))
        visible = ratio is not None and ratio >= self._threshold
        if visible == self._state.is_intersecting:
            return

        if self._trigger_once:
            if not visible:
                return
            self._state = ActivationState(
                is_intersecting=True, has_triggered=True
            )
            self.unobserve()
        else:
            self._state = ActivationState(is_intersecting=visible)

        logger.debug(
            "Region %r is_intersecting=%s (ratio=%s)",
            self._region,
            visible,
            ratio,
        )
        if self._callback is not None:
            self._callback(self._state)


class ViewportTracker:
    """Reports region visibility against a single scrolling root."""

    def __init__(self, root: Region) -> None:
        self._root = root
        self._subscriptions: list[Subscription] = []

    def __len__(self) -> int:
        return len(self._subscriptions)

    def observe(
        self,
        region: Region | None,
        *,
        threshold: float = Settings.ACTIVATION_THRESHOLD,
        root_margin: str = Settings.ACTIVATION_ROOT_MARGIN,
        trigger_once: bool = True,
        callback: ActivationCallback | None = None,
    ) -> Subscription:
        """Start watching *region* and evaluate it right away.

        A ``None`` region yields an inert subscription that never
        reports; observe once the region exists.
        """
        if not 0.0 <= threshold <= 1.0:
            msg = f"threshold must be within [0, 1], got {threshold}"
            raise ValueError(msg)
        margin = RootMargin.parse(root_margin)

        if region is None:
            logger.debug("observe() called without a region; ignoring")
            return Subscription(
                None, None, threshold, margin, trigger_once, callback
            )

        subscription = Subscription(
            self, region, threshold, margin, trigger_once, callback
        )
        self._subscriptions.append(subscription)
        root_rect = self._root.bounding_rect()
        if root_rect is not None:
            subscription._evaluate(root_rect)
        return subscription

    def refresh(self) -> None:
        """Re-evaluate every live subscription in observation order.

        Call this from the scroll, resize or layout event source.
        """
        root_rect = self._root.bounding_rect()
        if root_rect is None:
            return
        # Callbacks may observe or unobserve while we iterate
        for subscription in list(self._subscriptions):
            subscription._evaluate(root_rect)

    def close(self) -> None:
        """Tear down every live subscription."""
        for subscription in list(self._subscriptions):
            subscription.unobserve()

    def _forget(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)
