from __future__ import annotations

import tkinter as tk
from tkinter import ttk
from typing import Callable


class ToolbarPanel:
    def __init__(
        self,
        owner,
        parent: tk.Widget,
        *,
        on_open: Callable[[], None],
        on_reset: Callable[[], None],
        on_undo: Callable[[], None],
        on_toggle_crop: Callable[[], None],
        on_apply_crop: Callable[[], None],
        on_help: Callable[[], None],
    ) -> None:
        self.owner = owner
        self.frame = ttk.Frame(parent, padding=(0, 0, 0, 6))
        self.frame.pack(side="top", fill="x")

        ttk.Button(self.frame, text="Open image…", command=on_open).pack(side="left")
        ttk.Button(self.frame, text="Reset", command=on_reset).pack(side="left", padx=(8, 0))
        ttk.Button(self.frame, text="Undo", command=on_undo).pack(side="left", padx=(8, 0))

        ttk.Separator(self.frame, orient="vertical").pack(side="left", fill="y", padx=10)

        owner.var_crop_label = tk.StringVar(value="Crop Mode")
        ttk.Button(self.frame, textvariable=owner.var_crop_label, command=on_toggle_crop).pack(side="left")
        self.btn_apply_crop = ttk.Button(self.frame, text="Apply Crop", command=on_apply_crop)

        ttk.Button(self.frame, text="Help", command=on_help).pack(side="right")
        owner.counter_var = tk.StringVar(value="")
        ttk.Label(self.frame, textvariable=owner.counter_var).pack(side="right", padx=(0, 12))

    def show_apply_crop(self, visible: bool) -> None:
        if visible and not self.btn_apply_crop.winfo_ismapped():
            self.btn_apply_crop.pack(side="left", padx=(8, 0))
        elif not visible and self.btn_apply_crop.winfo_ismapped():
            self.btn_apply_crop.pack_forget()
