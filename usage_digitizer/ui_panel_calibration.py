from __future__ import annotations

import tkinter as tk
from tkinter import ttk
from typing import Callable

from .errors import DigitizerError
from .extract import MONTH_NAMES, UsageMode


class CalibrationPanel:
    def __init__(
        self,
        owner,
        parent: tk.Widget,
        *,
        on_set_calibration: Callable[[], None],
        on_mode_change: Callable[[], None],
    ) -> None:
        self.owner = owner
        frame = ttk.LabelFrame(parent, text="Calibration", padding=8)
        self.frame = frame
        frame.pack(side="top", fill="x")

        owner.var_calib_hint = tk.StringVar(value="")
        ttk.Label(frame, textvariable=owner.var_calib_hint, wraplength=300, justify="left").pack(fill="x")

        grid = ttk.Frame(frame)
        grid.pack(fill="x", pady=(6, 0))
        for col in range(4):
            grid.columnconfigure(col, weight=1)

        ttk.Label(grid, text="Y-min").grid(row=0, column=0, sticky="w")
        owner.ent_vmin = ttk.Entry(grid, textvariable=owner.var_vmin, width=10)
        owner.ent_vmin.grid(row=0, column=1, sticky="w", padx=(6, 0))
        ttk.Label(grid, text="Y-max").grid(row=0, column=2, sticky="w", padx=(8, 0))
        owner.ent_vmax = ttk.Entry(grid, textvariable=owner.var_vmax, width=10)
        owner.ent_vmax.grid(row=0, column=3, sticky="w", padx=(6, 0))

        ttk.Label(grid, text="Mode").grid(row=1, column=0, sticky="w", pady=(6, 0))
        owner.cmb_mode = ttk.Combobox(
            grid,
            textvariable=owner.var_mode,
            state="readonly",
            width=13,
            values=[m.value for m in UsageMode],
        )
        owner.cmb_mode.grid(row=1, column=1, sticky="w", padx=(6, 0), pady=(6, 0))
        owner.cmb_mode.bind("<<ComboboxSelected>>", lambda _e: on_mode_change())

        ttk.Label(grid, text="Start").grid(row=1, column=2, sticky="w", padx=(8, 0), pady=(6, 0))
        owner.cmb_start = ttk.Combobox(
            grid,
            textvariable=owner.var_start,
            state="readonly",
            width=6,
            values=MONTH_NAMES,
        )
        owner.cmb_start.grid(row=1, column=3, sticky="w", padx=(6, 0), pady=(6, 0))
        owner.cmb_start.bind("<<ComboboxSelected>>", lambda _e: on_mode_change())

        owner.btn_set_calib = ttk.Button(frame, text="Set calibration", command=on_set_calibration)
        owner.btn_set_calib.pack(side="top", anchor="e", pady=(8, 0))


class Calibrator:
    def __init__(self, owner) -> None:
        object.__setattr__(self, "owner", owner)

    def __getattr__(self, name):
        return getattr(self.owner, name)

    def __setattr__(self, name, value) -> None:
        if name == "owner":
            object.__setattr__(self, name, value)
            return
        setattr(self.owner, name, value)

    def _set_calibration(self) -> None:
        try:
            self.app.set_calibration(
                self.var_vmin.get(),
                self.var_vmax.get(),
                self.var_mode.get(),
                self.var_start.get(),
            )
        except DigitizerError as e:
            self._show_error(e.title, str(e))
            return
        self.set_status("Calibration set. Click the 12 monthly points.")
        self.owner._refresh()

    def _on_mode_change(self) -> None:
        # only an active calibration carries a mode; otherwise it is read on "Set calibration"
        if not self.app.is_calibrated:
            return
        try:
            self.app.set_mode(self.var_mode.get(), self.var_start.get())
        except DigitizerError as e:
            self._show_error(e.title, str(e))
            return
        self.owner._refresh()

    def _update_controls(self) -> None:
        n = len(self.app.points.calibration)
        if not self.app.has_image:
            hint = "Open a chart image first."
        elif n == 0:
            hint = "Click the bottom reference point on the value axis."
        elif n == 1:
            hint = "Click the top reference point on the value axis."
        elif not self.app.is_calibrated:
            hint = "Enter the axis values for the two points, then Set calibration."
        else:
            hint = "Calibrated. Click one point per month, in order."
        self.var_calib_hint.set(hint)
        state = "normal" if self.app.points.calibration_complete else "disabled"
        self.btn_set_calib.configure(state=state)
