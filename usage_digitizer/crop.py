from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from PIL import Image

from .coords import CropBox, Point, RasterSize, box_from_corners, clamp_box, raster_to_original
from .errors import EmptyCrop
from .image_utils import decode_image, encode_png, image_size

logger = logging.getLogger(__name__)


# ---------- crop interaction states ----------

@dataclass(frozen=True)
class CropIdle:
    pass


@dataclass(frozen=True)
class CropDrawing:
    origin: Point
    box: CropBox


@dataclass(frozen=True)
class CropDragging:
    box: CropBox
    # pointer position relative to the box's top-left corner at press time
    grab_dx: float
    grab_dy: float


@dataclass(frozen=True)
class CropSized:
    box: CropBox


CropState = Union[CropIdle, CropDrawing, CropDragging, CropSized]


class CropTool:
    """
    Rubber-band crop selection in raster coordinates.

    Idle -> Sized(empty) when crop mode is switched on. A press outside the
    current box starts Drawing, a press inside starts Dragging; release
    clamps the box to the raster and settles in Sized.
    """

    def __init__(self) -> None:
        self.state: CropState = CropIdle()

    @property
    def active(self) -> bool:
        return not isinstance(self.state, CropIdle)

    @property
    def box(self) -> Optional[CropBox]:
        st = self.state
        if isinstance(st, CropIdle):
            return None
        return st.box

    def toggle(self) -> bool:
        if self.active:
            self.state = CropIdle()
        else:
            self.state = CropSized(CropBox())
        return self.active

    def cancel(self) -> None:
        self.state = CropIdle()

    def press(self, p: Point) -> None:
        st = self.state
        if isinstance(st, CropIdle):
            return
        box = st.box
        if isinstance(st, CropSized) and box.contains(p):
            self.state = CropDragging(box, p.x - box.x, p.y - box.y)
        else:
            self.state = CropDrawing(p, CropBox(p.x, p.y, 0, 0))

    def move(self, p: Point, raster: RasterSize) -> None:
        st = self.state
        if isinstance(st, CropDrawing):
            self.state = CropDrawing(st.origin, box_from_corners(st.origin, p))
        elif isinstance(st, CropDragging):
            b = st.box
            x = max(0.0, min(p.x - st.grab_dx, raster.width - b.w))
            y = max(0.0, min(p.y - st.grab_dy, raster.height - b.h))
            self.state = CropDragging(CropBox(x, y, b.w, b.h), st.grab_dx, st.grab_dy)

    def release(self, raster: RasterSize) -> None:
        st = self.state
        if isinstance(st, (CropDrawing, CropDragging)):
            self.state = CropSized(clamp_box(st.box, raster))


# ---------- lossless crop ----------

def crop_image(box: CropBox, original: Image.Image, raster: RasterSize) -> Image.Image:
    """
    Cut ``box`` (raster coordinates) out of ``original`` at full resolution.

    The region is read straight from the original pixels and re-encoded as
    PNG, so the result is exactly the selected source pixels and its size is
    the mapped region's size.
    """
    cb = clamp_box(box, raster)
    if cb.is_empty:
        raise EmptyCrop("Select a valid crop area first.")

    orig_size = image_size(original)
    # independent rounding can overshoot the far edge by a pixel
    src = clamp_box(raster_to_original(cb, raster, orig_size), orig_size)
    if src.is_empty:
        raise EmptyCrop("Crop too small.")

    region = original.crop(src.as_pil_box())
    cropped = decode_image(encode_png(region))
    logger.info("Cropped raster box %s -> original box %s (%dx%d)",
                cb, src, cropped.width, cropped.height)
    return cropped
