from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence

import numpy as np

from .calibration import AffineMap
from .coords import Point
from .errors import InvalidInput
from .points import MONTH_COUNT

MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
               "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

MONTH_FULL_NAMES = ("January", "February", "March", "April", "May", "June",
                    "July", "August", "September", "October", "November", "December")

# Non-leap year; bills are read as a typical year.
DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


class UsageMode(str, Enum):
    TOTAL = "Total"
    DAILY_AVERAGE = "Daily average"

    @classmethod
    def from_label(cls, label: str) -> "UsageMode":
        s = (label or "").strip().lower()
        for m in cls:
            if m.value.lower() == s or m.name.lower() == s:
                return m
        raise InvalidInput(f"Unknown mode: {label!r}")


def month_index(name: str) -> int:
    """Index of a month given as "Jan" or "January" (any case)."""
    s = (name or "").strip().lower()
    for i, (short, full) in enumerate(zip(MONTH_NAMES, MONTH_FULL_NAMES)):
        if s in (short.lower(), full.lower()):
            return i
    raise InvalidInput(f"Unknown start month: {name!r}")


def format_value(v: float) -> str:
    return f"{v:.2f}"


@dataclass(frozen=True)
class MonthRow:
    month: str
    axis_value: float
    final_value: float


@dataclass(frozen=True)
class UsageResults:
    rows: List[MonthRow]
    annual_total: float
    mode: UsageMode
    start_idx: int


def month_labels(start_idx: int) -> List[str]:
    return [MONTH_NAMES[(start_idx + i) % 12] for i in range(MONTH_COUNT)]


def month_day_counts(start_idx: int) -> np.ndarray:
    idx = (int(start_idx) + np.arange(MONTH_COUNT)) % 12
    return np.asarray(DAYS_IN_MONTH, dtype=float)[idx]


def compute_results(
    month_points: Sequence[Point],
    affine: AffineMap,
    mode: UsageMode,
    start_idx: int,
) -> UsageResults:
    """
    Turn the twelve clicked month points into a usage table.

    Rows keep click order; labels are rotated so row 0 is the start month.
    In daily-average mode each axis value is multiplied by the number of days
    in its month.
    """
    if len(month_points) != MONTH_COUNT:
        raise ValueError(f"Expected {MONTH_COUNT} month points, got {len(month_points)}")
    if not 0 <= int(start_idx) < 12:
        raise ValueError(f"start_idx out of range: {start_idx}")

    axis_vals = [affine.value(p.x, p.y) for p in month_points]
    if mode == UsageMode.DAILY_AVERAGE:
        days = month_day_counts(start_idx)
        final_vals = [float(v * d) for v, d in zip(axis_vals, days)]
    else:
        final_vals = list(axis_vals)

    rows = [MonthRow(name, float(a), float(f))
            for name, a, f in zip(month_labels(start_idx), axis_vals, final_vals)]

    total = 0.0
    for f in final_vals:
        total += f
    return UsageResults(rows=rows, annual_total=total, mode=mode, start_idx=int(start_idx))
