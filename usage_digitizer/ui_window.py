from __future__ import annotations

import logging
import queue
import tkinter as tk
from pathlib import Path
from tkinter import ttk, filedialog, messagebox
from typing import Callable, Optional

from PIL import Image

from .app_state import AppState
from .errors import DigitizerError
from .image_utils import IMAGE_FILETYPES
from .loader import ImageLoader
from .settings import AppSettings, save_settings
from .ui_panel_calibration import CalibrationPanel, Calibrator
from .ui_panel_canvas import CanvasPanel, CanvasActor
from .ui_panel_results import ResultsPanel, Exporter
from .ui_panel_toolbar import ToolbarPanel

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "1. Open a chart image (e.g. the usage graph from a utility bill).\n"
    "2. Optional: Crop Mode, drag a box around the chart, Apply Crop.\n"
    "   Drag inside the box to move it. Cropping keeps full resolution.\n"
    "3. Click the bottom reference point on the value axis, then the top one.\n"
    "4. Enter the values of those two points (Y-min, Y-max), choose the mode\n"
    "   and the month of the first bar, then Set calibration.\n"
    "5. Click one point per month, left to right (12 points).\n"
    "   Undo removes the last point.\n\n"
    "Daily average multiplies each value by the number of days in its month."
)


class UsageDigitizerWindow(tk.Tk):
    def __init__(self, *, settings: Optional[AppSettings] = None):
        super().__init__()
        self.title("Usage Chart Digitizer")
        self.geometry("1180x760")
        self.resizable(True, True)

        self.settings = settings or AppSettings()
        self.app = AppState(default_raster=self.settings.canvas_size)

        self.var_vmin = tk.StringVar(value="0")
        self.var_vmax = tk.StringVar(value="100")
        self.var_mode = tk.StringVar(value=self.settings.default_mode)
        self.var_start = tk.StringVar(value=self.settings.default_start_month)
        self.status_var = tk.StringVar(value="Ready.")

        self._ui_queue: "queue.Queue[Callable[[], None]]" = queue.Queue()
        self.loader = ImageLoader(dispatch=self._ui_queue.put)
        self._raster_img: Optional[Image.Image] = None
        self._display = None
        self._render_after_id = None

        self.canvas_actor = CanvasActor(self)
        self.calibrator = Calibrator(self)
        self.exporter = Exporter(self)

        self._build_ui()
        self.protocol("WM_DELETE_WINDOW", self._on_close)
        self.after(50, self._poll_ui_queue)
        self._refresh()

    # ---------- UI ----------
    def _build_ui(self):
        root = ttk.Frame(self, padding=8)
        root.pack(fill="both", expand=True)

        self._panes = ttk.Panedwindow(root, orient="horizontal")
        self._panes.pack(fill="both", expand=True)

        left = ttk.Frame(self._panes)
        right = ttk.Frame(self._panes, width=340)
        self._panes.add(left, weight=3)
        self._panes.add(right, weight=1)

        self.toolbar_panel = ToolbarPanel(
            self,
            left,
            on_open=self._open_image,
            on_reset=self._reset,
            on_undo=self._undo,
            on_toggle_crop=self._toggle_crop,
            on_apply_crop=self._apply_crop,
            on_help=self._show_help,
        )
        self.canvas_panel = CanvasPanel(self, left, actor=self.canvas_actor)

        self.calibration_panel = CalibrationPanel(
            self,
            right,
            on_set_calibration=self.calibrator._set_calibration,
            on_mode_change=self.calibrator._on_mode_change,
        )
        self.results_panel = ResultsPanel(
            self,
            right,
            on_copy_csv=self.exporter._copy_csv,
            on_save_csv=self.exporter._save_csv,
        )

        footer = ttk.Frame(self, padding=(8, 0, 8, 8))
        footer.pack(side="bottom", fill="x")
        ttk.Label(footer, textvariable=self.status_var).pack(side="left")

    def _refresh(self) -> None:
        self.counter_var.set(self.app.status_text())
        self.var_crop_label.set("Cancel Crop" if self.app.crop.active else "Crop Mode")
        self.toolbar_panel.show_apply_crop(self.app.crop.active)
        self.calibrator._update_controls()
        self.exporter._refresh_table()
        self.canvas_actor._redraw_overlay()

    def set_status(self, msg: str):
        self.status_var.set(msg)

    def _show_info(self, title: str, message: str) -> None:
        messagebox.showinfo(title, message, parent=self)

    def _show_error(self, title: str, message: str) -> None:
        messagebox.showerror(title, message, parent=self)

    def _show_help(self) -> None:
        self._show_info("How to use", HELP_TEXT)

    # ---------- worker -> UI ----------
    def _poll_ui_queue(self) -> None:
        try:
            while True:
                try:
                    fn = self._ui_queue.get_nowait()
                except queue.Empty:
                    break
                try:
                    fn()
                except Exception:
                    logger.exception("UI callback failed")
        finally:
            self.after(50, self._poll_ui_queue)

    # ---------- image ----------
    def _open_image(self):
        path = filedialog.askopenfilename(
            parent=self,
            title="Open chart image",
            initialdir=self.settings.last_directory or None,
            filetypes=IMAGE_FILETYPES,
        )
        if not path:
            return
        self.set_status(f"Loading {Path(path).name}…")
        self.loader.request(path, self._on_image_loaded, self._on_image_error)

        self.settings.last_directory = str(Path(path).parent)
        try:
            save_settings(self.settings)
        except OSError as e:
            logger.warning("Could not save settings: %s", e)

    def _on_image_loaded(self, img: Image.Image) -> None:
        self.app.load_image(img)
        self.canvas_actor._invalidate_raster()
        self.canvas_actor._render_image()
        self._refresh()
        self.set_status(f"Loaded {img.width}x{img.height} image.")

    def _on_image_error(self, exc: Exception) -> None:
        logger.error("Image decode failed", exc_info=exc)
        self._show_error("Could not open image", str(exc))
        self.set_status("Ready.")

    # ---------- actions ----------
    def _reset(self):
        self.app.reset()
        self._refresh()
        self.set_status("Points and calibration cleared.")

    def _undo(self):
        if self.app.undo():
            self._refresh()

    def _toggle_crop(self):
        if not self.app.has_image:
            return
        self.app.crop.toggle()
        self._refresh()
        if self.app.crop.active:
            self.set_status("Drag a box around the chart. Drag inside the box to move it.")

    def _apply_crop(self):
        try:
            applied = self.app.apply_crop()
        except DigitizerError as e:
            self._show_error(e.title, str(e))
            return
        if not applied:
            return
        self.canvas_actor._invalidate_raster()
        self.canvas_actor._render_image()
        self._refresh()
        w, h = self.app.raster.as_tuple()
        self.set_status(f"Cropped to {w}x{h} px.")

    def _on_close(self):
        self.loader.shutdown()
        self.destroy()
