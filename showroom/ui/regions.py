# showroom/ui/regions.py

"""Adapters exposing Textual widget geometry to the viewport tracker.

Everything is expressed in the scroll container's virtual space, where
the container's scroll offset is the top-left of what is on screen.
"""

from textual.containers import ScrollableContainer
from textual.widget import Widget

from showroom.viewport.geometry import Rect


class ScrollViewport:
    """The visible part of a scroll container, as a tracker root."""

    def __init__(self, container: ScrollableContainer) -> None:
        self.container = container

    def bounding_rect(self) -> Rect | None:
        size = self.container.size
        if not self.container.is_mounted or size.area == 0:
            return None
        return Rect(
            float(self.container.scroll_x),
            float(self.container.scroll_y),
            float(size.width),
            float(size.height),
        )


class WidgetRegion:
    """A widget somewhere below *container* in the DOM."""

    def __init__(self, widget: Widget, container: Widget) -> None:
        self.widget = widget
        self.container = container

    def __repr__(self) -> str:
        return f"WidgetRegion({self.widget.id or type(self.widget).__name__})"

    def bounding_rect(self) -> Rect | None:
        if not self.widget.is_mounted:
            return None
        region = self.widget.virtual_region
        if region.width == 0 and region.height == 0:
            # Not laid out yet
            return None

        # virtual_region is relative to the parent; walk up to the container
        x, y = region.x, region.y
        node = self.widget.parent
        while node is not self.container:
            if not isinstance(node, Widget):
                return None
            x += node.virtual_region.x
            y += node.virtual_region.y
            node = node.parent

        return Rect(
            float(x), float(y), float(region.width), float(region.height)
        )
