from __future__ import annotations

import tkinter as tk
from tkinter import ttk
from typing import Optional

from PIL import Image, ImageTk

from .calibration import Calibrated
from .coords import DisplayRect, Point, box_to_display, to_canvas_point, to_display_point


class CanvasPanel:
    def __init__(self, owner, parent: tk.Widget, *, actor) -> None:
        self.owner = owner
        self.actor = actor

        frame = ttk.Frame(parent)
        self.frame = frame
        frame.pack(side="top", fill="both", expand=True)

        owner.canvas = tk.Canvas(frame, background="#111", highlightthickness=1, highlightbackground="#333")
        owner.canvas.pack(side="top", fill="both", expand=True)
        owner.canvas.bind("<Configure>", actor._on_canvas_configure)
        owner.canvas.bind("<ButtonPress-1>", actor._on_press)
        owner.canvas.bind("<B1-Motion>", actor._on_drag)
        owner.canvas.bind("<ButtonRelease-1>", actor._on_release)
        owner.canvas.bind("<Leave>", actor._on_canvas_leave)


class CanvasActor:
    def __init__(self, owner) -> None:
        object.__setattr__(self, "owner", owner)

    def __getattr__(self, name):
        return getattr(self.owner, name)

    def __setattr__(self, name, value) -> None:
        if name == "owner":
            object.__setattr__(self, name, value)
            return
        setattr(self.owner, name, value)

    def _on_canvas_configure(self, _evt=None):
        # Avoid thrashing when resizing: schedule a single re-render
        if getattr(self, "_render_after_id", None) is not None:
            try:
                self.after_cancel(self._render_after_id)
            except tk.TclError:
                pass
        self._render_after_id = self.after(30, self._render_image)

    def _invalidate_raster(self) -> None:
        self._raster_img = None

    def _render_image(self):
        self._render_after_id = None
        self.canvas.delete("all")
        self._display = None
        self.canvas.update_idletasks()
        cw = max(10, self.canvas.winfo_width())
        ch = max(10, self.canvas.winfo_height())

        if not self.app.has_image:
            self.canvas.create_text(cw // 2, ch // 2, text="Open a chart image to begin.",
                                    fill="#aaa", tags=("placeholder",))
            return

        if getattr(self, "_raster_img", None) is None:
            self._raster_img = self.app.working_raster()

        rw, rh = self.app.raster.as_tuple()
        scale = min(cw / rw, ch / rh)
        disp_w = max(1, int(rw * scale))
        disp_h = max(1, int(rh * scale))
        offx = (cw - disp_w) // 2
        offy = (ch - disp_h) // 2
        self._display = DisplayRect(offx, offy, disp_w, disp_h)

        disp = self._raster_img.resize((disp_w, disp_h), Image.NEAREST)
        self._photo = ImageTk.PhotoImage(disp)
        self.canvas.create_image(offx, offy, image=self._photo, anchor="nw", tags=("img",))
        self._redraw_overlay()

    def _redraw_overlay(self):
        self.canvas.delete("overlay")
        display: Optional[DisplayRect] = getattr(self, "_display", None)
        if display is None:
            return
        raster = self.app.raster

        cal = self.app.calibration
        if isinstance(cal, Calibrated):
            x0 = display.left
            x1 = display.left + display.width
            for ypx in (cal.affine.y_bottom, cal.affine.y_top):
                _, cy = to_display_point(Point(0, ypx), display, raster)
                self.canvas.create_line(x0, cy, x1, cy, fill=self.settings.calibration_color,
                                        dash=(4, 3), tags=("overlay", "guide"))

        for p in self.app.points.calibration:
            self._draw_point(p, self.settings.calibration_color)
        for p in self.app.points.months:
            self._draw_point(p, self.settings.month_color)

        box = self.app.crop.box
        if box is not None and not box.is_empty:
            x0, y0, x1, y1 = box_to_display(box, display, raster)
            self.canvas.create_rectangle(x0, y0, x1, y1, outline="black", width=4, tags=("overlay", "crop"))
            self.canvas.create_rectangle(x0, y0, x1, y1, outline="#2D9CDB", width=2,
                                         dash=(6, 4), tags=("overlay", "crop"))

    def _draw_point(self, p: Point, color: str) -> None:
        cx, cy = to_display_point(p, self._display, self.app.raster)
        r = self.settings.point_radius
        self.canvas.create_oval(cx - r, cy - r, cx + r, cy + r, fill=color,
                                outline="#fff", width=2, tags=("overlay", "pt"))

    # ---------- coordinate transforms ----------

    def _event_point(self, event, *, require_inside: bool) -> Optional[Point]:
        display: Optional[DisplayRect] = getattr(self, "_display", None)
        if display is None:
            return None
        cx = self.canvas.canvasx(event.x)
        cy = self.canvas.canvasy(event.y)
        if require_inside and not display.contains(cx, cy):
            return None
        return to_canvas_point(cx, cy, display, self.app.raster)

    # ---------- mouse ----------

    def _on_press(self, event):
        if self.app.crop.active:
            p = self._event_point(event, require_inside=False)
            if p is not None:
                self.app.crop.press(p)
                self._redraw_overlay()
            return
        p = self._event_point(event, require_inside=True)
        if p is None:
            return
        if self.app.click(p):
            self.owner._refresh()

    def _on_drag(self, event):
        if not self.app.crop.active:
            return
        p = self._event_point(event, require_inside=False)
        if p is None:
            return
        self.app.crop.move(p, self.app.raster)
        self._redraw_overlay()

    def _on_release(self, _event):
        if not self.app.crop.active:
            return
        self.app.crop.release(self.app.raster)
        self._redraw_overlay()

    def _on_canvas_leave(self, _event):
        self._on_release(_event)
