from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Union

from .coords import Point
from .errors import InvalidCalibration, InvalidInput

MIN_PIXEL_RANGE = 1e-6
TWO_POINTS_REQUIRED = "Select two calibration points (bottom then top) first."


@dataclass(frozen=True)
class Bounds:
    vmin: float
    vmax: float


def _parse_number(s: str, label: str) -> float:
    try:
        v = float((s or "").strip())
    except ValueError:
        raise InvalidInput(f"Enter numeric {label}") from None
    if not math.isfinite(v):
        raise InvalidInput(f"Enter numeric {label}")
    return v


def parse_bounds(vmin_text: str, vmax_text: str) -> Bounds:
    # vmin > vmax is allowed: an inverted axis still maps linearly
    return Bounds(_parse_number(vmin_text, "Y-min"), _parse_number(vmax_text, "Y-max"))


@dataclass(frozen=True)
class AffineMap:
    """
    Vertical-axis pixel -> value map anchored at two calibration points.

    Only the y pixel coordinate participates; the chart's value axis is
    assumed to be vertical, so x is accepted and ignored.
    """
    y_bottom: float
    y_top: float
    vmin: float
    vmax: float

    @property
    def pixel_range(self) -> float:
        return self.y_bottom - self.y_top

    def value(self, x: float, y: float) -> float:
        return self.vmin + ((self.y_bottom - y) / self.pixel_range) * (self.vmax - self.vmin)

    __call__ = value


def build_affine(calib_points: Sequence[Point], bounds: Bounds) -> AffineMap:
    if len(calib_points) != 2:
        raise InvalidCalibration(TWO_POINTS_REQUIRED)
    bottom, top = calib_points
    if abs(bottom.y - top.y) < MIN_PIXEL_RANGE:
        raise InvalidCalibration("Calibration points too close vertically.")
    return AffineMap(y_bottom=float(bottom.y), y_top=float(top.y),
                     vmin=float(bounds.vmin), vmax=float(bounds.vmax))


# ---------- calibration status ----------

@dataclass(frozen=True)
class Uncalibrated:
    pass


@dataclass(frozen=True)
class Calibrated:
    affine: AffineMap
    bounds: Bounds


CalibrationStatus = Union[Uncalibrated, Calibrated]

UNCALIBRATED = Uncalibrated()
