from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .coords import Point

MAX_CALIBRATION_POINTS = 2
MONTH_COUNT = 12


@dataclass
class PointStore:
    # calibration order matters: [bottom reference (vmin), top reference (vmax)]
    calibration: List[Point] = field(default_factory=list)
    months: List[Point] = field(default_factory=list)

    @property
    def calibration_complete(self) -> bool:
        return len(self.calibration) >= MAX_CALIBRATION_POINTS

    @property
    def is_complete(self) -> bool:
        return len(self.months) >= MONTH_COUNT

    def add_calibration_point(self, p: Point) -> bool:
        if self.calibration_complete:
            return False
        self.calibration.append(p)
        return True

    def add_month_point(self, p: Point, *, calibrated: bool) -> bool:
        if not calibrated or self.is_complete:
            return False
        self.months.append(p)
        return True

    def undo_last_month_point(self) -> Optional[Point]:
        if not self.months:
            return None
        return self.months.pop()

    def reset_all(self) -> None:
        self.calibration.clear()
        self.months.clear()

    def counter_text(self) -> str:
        return f"Red Points: {len(self.months)}/{MONTH_COUNT}"
