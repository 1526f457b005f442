from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional

from .coords import RasterSize
from .extract import MONTH_NAMES, UsageMode

logger = logging.getLogger(__name__)

# -----------------------------
# User preferences persistence
# -----------------------------

CONFIG_PATH = Path.home() / ".usage_chart_config.json"


@dataclass
class AppSettings:
    # raster the chart is drawn into before any crop
    canvas_width: int = 800
    canvas_height: int = 500
    default_mode: str = UsageMode.TOTAL.value
    default_start_month: str = "Jan"
    point_radius: int = 6
    calibration_color: str = "blue"
    month_color: str = "red"
    last_directory: str = ""

    def __post_init__(self):
        self.canvas_width = max(1, int(self.canvas_width))
        self.canvas_height = max(1, int(self.canvas_height))
        self.point_radius = max(1, int(self.point_radius))
        if self.default_start_month not in MONTH_NAMES:
            self.default_start_month = "Jan"
        if self.default_mode not in [m.value for m in UsageMode]:
            self.default_mode = UsageMode.TOTAL.value

    @property
    def canvas_size(self) -> RasterSize:
        return RasterSize(self.canvas_width, self.canvas_height)


def load_settings(path: Optional[Path] = None) -> AppSettings:
    path = path or CONFIG_PATH
    if not path.exists():
        return AppSettings()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            return AppSettings()
        known = {f.name for f in fields(AppSettings)}
        merged = {**asdict(AppSettings()), **{k: v for k, v in data.items() if k in known}}
        return AppSettings(**merged)
    except Exception as e:
        # A corrupt config must not block the app.
        logger.warning("Ignoring unreadable settings file %s: %s", path, e)
        return AppSettings()


def save_settings(settings: AppSettings, path: Optional[Path] = None) -> None:
    path = path or CONFIG_PATH
    path.write_text(json.dumps(asdict(settings), indent=2), encoding="utf-8")
