from __future__ import annotations

import tkinter as tk
from tkinter import ttk, filedialog
from typing import Callable

from .export_csv import results_csv_string, write_results_csv
from .extract import format_value


class ResultsPanel:
    def __init__(
        self,
        owner,
        parent: tk.Widget,
        *,
        on_copy_csv: Callable[[], None],
        on_save_csv: Callable[[], None],
    ) -> None:
        self.owner = owner
        frame = ttk.LabelFrame(parent, text="Results", padding=8)
        self.frame = frame
        frame.pack(side="top", fill="both", expand=True, pady=(8, 0))

        cols = ("month", "axis", "kwh")
        owner.tree = ttk.Treeview(frame, columns=cols, show="headings", height=12)
        for col, label, width in (("month", "Month", 60), ("axis", "Axis Value", 100), ("kwh", "kWh", 100)):
            owner.tree.heading(col, text=label)
            owner.tree.column(col, width=width, anchor="e" if col != "month" else "w")
        owner.tree.pack(side="top", fill="both", expand=True)

        owner.annual_var = tk.StringVar(value="")
        ttk.Label(frame, textvariable=owner.annual_var).pack(side="top", anchor="w", pady=(6, 0))

        btns = ttk.Frame(frame)
        btns.pack(side="top", fill="x", pady=(6, 0))
        ttk.Button(btns, text="Copy CSV", command=on_copy_csv).pack(side="left")
        ttk.Button(btns, text="Save CSV…", command=on_save_csv).pack(side="left", padx=(8, 0))


class Exporter:
    def __init__(self, owner) -> None:
        object.__setattr__(self, "owner", owner)

    def __getattr__(self, name):
        return getattr(self.owner, name)

    def __setattr__(self, name, value) -> None:
        if name == "owner":
            object.__setattr__(self, name, value)
            return
        setattr(self.owner, name, value)

    def _refresh_table(self) -> None:
        self.tree.delete(*self.tree.get_children())
        res = self.app.results
        if res is None:
            self.annual_var.set("")
            return
        for r in res.rows:
            self.tree.insert("", "end", values=(r.month, format_value(r.axis_value), format_value(r.final_value)))
        self.annual_var.set(f"Annual usage: {format_value(res.annual_total)} kWh")

    def _copy_csv(self) -> None:
        if self.app.results is None:
            self._show_info("Copy CSV", "No results yet. Place all 12 monthly points first.")
            return
        self.clipboard_clear()
        self.clipboard_append(results_csv_string(self.app.results))
        self.set_status("Results copied to clipboard.")

    def _save_csv(self) -> None:
        if self.app.results is None:
            self._show_info("Save CSV", "No results yet. Place all 12 monthly points first.")
            return
        path = filedialog.asksaveasfilename(
            parent=self.owner,
            defaultextension=".csv",
            filetypes=[("CSV files", "*.csv"), ("All files", "*.*")],
        )
        if not path:
            return
        try:
            write_results_csv(path, self.app.results)
        except OSError as e:
            self._show_error("Save failed", str(e))
            return
        self.set_status(f"Saved: {path}")
