from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple


def round_half_up(v: float) -> int:
    # Canvas rounding: 2.5 -> 3, -2.5 -> -2 (not banker's rounding)
    return int(math.floor(float(v) + 0.5))


@dataclass(frozen=True)
class Point:
    """A location in canvas raster space."""
    x: float
    y: float


@dataclass(frozen=True)
class RasterSize:
    width: int
    height: int

    def as_tuple(self) -> Tuple[int, int]:
        return (int(self.width), int(self.height))


@dataclass(frozen=True)
class DisplayRect:
    """Where the raster is drawn inside the canvas widget (widget pixels)."""
    left: float
    top: float
    width: float
    height: float

    def contains(self, client_x: float, client_y: float) -> bool:
        return (self.left <= client_x <= self.left + self.width and
                self.top <= client_y <= self.top + self.height)


@dataclass(frozen=True)
class CropBox:
    x: float = 0
    y: float = 0
    w: float = 0
    h: float = 0

    @property
    def is_empty(self) -> bool:
        return self.w <= 0 or self.h <= 0

    def contains(self, p: Point) -> bool:
        if self.is_empty:
            return False
        return (self.x <= p.x <= self.x + self.w and
                self.y <= p.y <= self.y + self.h)

    def as_pil_box(self) -> Tuple[int, int, int, int]:
        return (int(self.x), int(self.y), int(self.x + self.w), int(self.y + self.h))


# ---------- client/display <-> raster ----------

def raster_scale(display: DisplayRect, raster: RasterSize) -> Tuple[float, float]:
    if display.width <= 0 or display.height <= 0:
        raise ValueError("display rectangle has no area")
    return raster.width / display.width, raster.height / display.height


def to_canvas_point(client_x: float, client_y: float, display: DisplayRect, raster: RasterSize) -> Point:
    """
    Convert a pointer position in widget coordinates into raster coordinates.

    The display rectangle changes whenever the window is resized or a crop
    replaces the raster, so callers pass the current geometry on every event.
    """
    sx, sy = raster_scale(display, raster)
    css_x = client_x - display.left
    css_y = client_y - display.top
    return Point(css_x * sx, css_y * sy)


def to_display_point(p: Point, display: DisplayRect, raster: RasterSize) -> Tuple[float, float]:
    sx, sy = raster_scale(display, raster)
    return display.left + p.x / sx, display.top + p.y / sy


def box_to_display(box: CropBox, display: DisplayRect, raster: RasterSize) -> Tuple[float, float, float, float]:
    x0, y0 = to_display_point(Point(box.x, box.y), display, raster)
    x1, y1 = to_display_point(Point(box.x + box.w, box.y + box.h), display, raster)
    return x0, y0, x1, y1


# ---------- boxes ----------

def box_from_corners(a: Point, b: Point) -> CropBox:
    return CropBox(min(a.x, b.x), min(a.y, b.y), abs(b.x - a.x), abs(b.y - a.y))


def clamp_box(box: CropBox, raster: RasterSize) -> CropBox:
    """Round and clamp a box so it lies entirely inside the raster."""
    W, H = int(raster.width), int(raster.height)
    x = max(0, min(W, round_half_up(box.x)))
    y = max(0, min(H, round_half_up(box.y)))
    w = max(0, min(W - x, round_half_up(box.w)))
    h = max(0, min(H - y, round_half_up(box.h)))
    return CropBox(x, y, w, h)


def raster_to_original(box: CropBox, raster: RasterSize, original: RasterSize) -> CropBox:
    fx = original.width / raster.width
    fy = original.height / raster.height
    return CropBox(
        round_half_up(box.x * fx),
        round_half_up(box.y * fy),
        round_half_up(box.w * fx),
        round_half_up(box.h * fy),
    )
