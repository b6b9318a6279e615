# showroom/viewport/geometry.py

"""Rectangle geometry and CSS-style root margins for activation checks."""

import re
from dataclasses import dataclass

_MARGIN_TOKEN_RE = re.compile(r"^(-?\d+(?:\.\d+)?)(px|%)?$")


@dataclass(frozen=True)
class Rect:
    """Axis-aligned box in a shared coordinate space (y grows down)."""

    x: float
    y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def top(self) -> float:
        return self.y

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return max(self.width, 0.0) * max(self.height, 0.0)

    def intersection(self, other: "Rect") -> "Rect | None":
        """Overlap with *other*, or ``None`` when the boxes are apart.

        Boxes that only touch along an edge yield a zero-area rect.
        """
        left = max(self.left, other.left)
        top = max(self.top, other.top)
        right = min(self.right, other.right)
        bottom = min(self.bottom, other.bottom)
        if right < left or bottom < top:
            return None
        return Rect(left, top, right - left, bottom - top)


@dataclass(frozen=True)
class RootMargin:
    """Per-side offsets; ``percent`` sides scale with the root box."""

    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0
    top_percent: bool = False
    right_percent: bool = False
    bottom_percent: bool = False
    left_percent: bool = False

    @classmethod
    def parse(cls, text: str) -> "RootMargin":
        """Parse CSS margin shorthand such as ``"50px"`` or ``"10px 5%"``.

        One to four values are accepted, each a number with a ``px`` or
        ``%`` unit (bare ``0`` is allowed).  Negative values shrink the
        root box.
        """
        tokens = text.split()
        if not 1 <= len(tokens) <= 4:
            msg = f"root margin must have 1-4 values, got {text!r}"
            raise ValueError(msg)

        parsed: list[tuple[float, bool]] = []
        for token in tokens:
            match = _MARGIN_TOKEN_RE.match(token)
            if match is None:
                msg = f"invalid root margin value {token!r} in {text!r}"
                raise ValueError(msg)
            value = float(match.group(1))
            unit = match.group(2)
            if unit is None and value != 0:
                msg = f"root margin value {token!r} needs a px or % unit"
                raise ValueError(msg)
            parsed.append((value, unit == "%"))

        # CSS shorthand expansion: top, right, bottom, left
        if len(parsed) == 1:
            parsed *= 4
        elif len(parsed) == 2:
            parsed = [parsed[0], parsed[1], parsed[0], parsed[1]]
        elif len(parsed) == 3:
            parsed = [parsed[0], parsed[1], parsed[2], parsed[1]]

        (top, top_pct), (right, right_pct), (bottom, bottom_pct), (
            left,
            left_pct,
        ) = parsed
        return cls(
            top=top,
            right=right,
            bottom=bottom,
            left=left,
            top_percent=top_pct,
            right_percent=right_pct,
            bottom_percent=bottom_pct,
            left_percent=left_pct,
        )

    def expand(self, root: Rect) -> Rect:
        """Return *root* grown (or shrunk) by this margin."""
        top = root.height * self.top / 100 if self.top_percent else self.top
        bottom = (
            root.height * self.bottom / 100
            if self.bottom_percent
            else self.bottom
        )
        left = root.width * self.left / 100 if self.left_percent else self.left
        right = (
            root.width * self.right / 100
            if self.right_percent
            else self.right
        )
        return Rect(
            root.x - left,
            root.y - top,
            max(root.width + left + right, 0.0),
            max(root.height + top + bottom, 0.0),
        )


def intersection_ratio(target: Rect, root: Rect) -> float | None:
    """Visible fraction of *target* inside *root*.

    Returns ``None`` when the boxes do not touch at all.  A zero-area
    target that lies on or inside the root counts as fully visible.
    """
    overlap = target.intersection(root)
    if overlap is None:
        return None
    if target.area == 0:
        return 1.0
    return overlap.area / target.area
