from __future__ import annotations

import io
from pathlib import Path
from typing import Union

from PIL import Image

from .coords import RasterSize

IMAGE_FILETYPES = [
    ("Images", "*.png *.jpg *.jpeg *.gif *.bmp *.webp *.tif *.tiff"),
    ("All files", "*.*"),
]


def normalize_mode(img: Image.Image) -> Image.Image:
    """
    Keep RGB/RGBA as-is, convert everything else (palette, grayscale, CMYK)
    to RGB or RGBA so crops and redraws behave the same for all inputs.
    """
    if img.mode in ("RGB", "RGBA"):
        return img
    if img.mode in ("P", "LA", "PA") or "transparency" in img.info:
        return img.convert("RGBA")
    return img.convert("RGB")


def decode_image(source: Union[str, Path, bytes]) -> Image.Image:
    """Fully decode ``source`` into a detached image; the file is closed on return."""
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)
    with Image.open(source) as img:
        # Image.open is lazy
        img.load()
        out = normalize_mode(img)
        return out.copy() if out is img else out


def encode_png(img: Image.Image) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def image_size(img: Image.Image) -> RasterSize:
    w, h = img.size
    return RasterSize(int(w), int(h))


def render_raster(img: Image.Image, raster: RasterSize) -> Image.Image:
    """Draw the full image stretched onto a raster of the given size."""
    if img.size == raster.as_tuple():
        return img
    return img.resize(raster.as_tuple(), Image.Resampling.BILINEAR)

