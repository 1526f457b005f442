from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from PIL import Image

from .calibration import (
    TWO_POINTS_REQUIRED, UNCALIBRATED, Calibrated, CalibrationStatus, build_affine, parse_bounds,
)
from .errors import InvalidCalibration
from .coords import Point, RasterSize
from .crop import CropTool, crop_image
from .extract import UsageMode, UsageResults, compute_results, month_index
from .image_utils import image_size, render_raster
from .points import PointStore

logger = logging.getLogger(__name__)


@dataclass
class ImageDocument:
    # full-resolution pixels; crops are always cut from this
    original: Image.Image
    raster: RasterSize

    @property
    def original_size(self) -> RasterSize:
        return image_size(self.original)


@dataclass
class AppState:
    """
    Everything the window mutates, in one place.

    Handlers receive this object; derived state (calibration, results) is
    recomputed or cleared here so the UI only has to redraw.
    """
    default_raster: RasterSize = field(default_factory=lambda: RasterSize(800, 500))
    document: Optional[ImageDocument] = None
    points: PointStore = field(default_factory=PointStore)
    calibration: CalibrationStatus = UNCALIBRATED
    mode: UsageMode = UsageMode.TOTAL
    start_idx: int = 0
    crop: CropTool = field(default_factory=CropTool)
    results: Optional[UsageResults] = None

    # ---------- queries ----------

    @property
    def has_image(self) -> bool:
        return self.document is not None

    @property
    def raster(self) -> RasterSize:
        if self.document is None:
            return self.default_raster
        return self.document.raster

    @property
    def is_calibrated(self) -> bool:
        return isinstance(self.calibration, Calibrated)

    def working_raster(self) -> Optional[Image.Image]:
        if self.document is None:
            return None
        return render_raster(self.document.original, self.document.raster)

    def status_text(self) -> str:
        return self.points.counter_text()

    # ---------- lifecycle ----------

    def _clear_derived(self) -> None:
        self.points.reset_all()
        self.calibration = UNCALIBRATED
        self.results = None

    def load_image(self, image: Image.Image) -> None:
        self.document = ImageDocument(original=image, raster=self.default_raster)
        self._clear_derived()
        self.crop.cancel()
        w, h = image.size
        logger.info("Loaded image %dx%d into %dx%d raster", w, h, *self.raster.as_tuple())

    def reset(self) -> None:
        self._clear_derived()
        self.crop.cancel()

    # ---------- points ----------

    def click(self, p: Point) -> bool:
        """
        Route a canvas click: calibration points first, then month points
        once the axis is calibrated. Returns True if a point was placed.
        """
        if self.document is None or self.crop.active:
            return False
        if not self.points.calibration_complete:
            return self.points.add_calibration_point(p)
        if not self.points.add_month_point(p, calibrated=self.is_calibrated):
            return False
        if self.points.is_complete:
            self._recompute()
        return True

    def undo(self) -> bool:
        if self.points.undo_last_month_point() is None:
            return False
        self.results = None
        return True

    # ---------- calibration ----------

    def set_calibration(self, vmin_text: str, vmax_text: str, mode: str, start_month: str) -> None:
        """Raises InvalidCalibration/InvalidInput and leaves state untouched on failure."""
        if not self.points.calibration_complete:
            raise InvalidCalibration(TWO_POINTS_REQUIRED)
        bounds = parse_bounds(vmin_text, vmax_text)
        affine = build_affine(self.points.calibration, bounds)
        new_mode = UsageMode.from_label(mode)
        new_start = month_index(start_month)

        self.calibration = Calibrated(affine=affine, bounds=bounds)
        self.mode = new_mode
        self.start_idx = new_start
        logger.info("Calibrated: y=%.1f -> %g, y=%.1f -> %g",
                    affine.y_bottom, bounds.vmin, affine.y_top, bounds.vmax)
        self._recompute()

    def set_mode(self, mode: str, start_month: str) -> None:
        self.mode = UsageMode.from_label(mode)
        self.start_idx = month_index(start_month)
        self._recompute()

    def _recompute(self) -> None:
        if not isinstance(self.calibration, Calibrated) or not self.points.is_complete:
            self.results = None
            return
        self.results = compute_results(self.points.months, self.calibration.affine, self.mode, self.start_idx)

    # ---------- crop ----------

    def apply_crop(self) -> bool:
        """
        Replace the image with the selected region. Returns False when crop
        mode is off; raises EmptyCrop without changing anything.
        """
        if self.document is None or not self.crop.active:
            return False
        box = self.crop.box
        cropped = crop_image(box, self.document.original, self.document.raster)
        self.document = ImageDocument(original=cropped, raster=image_size(cropped))
        self._clear_derived()
        self.crop.cancel()
        return True
