from __future__ import annotations

from typing import Iterable

import customtkinter as ctk


class BottomBar(ctk.CTkFrame):
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, height=140, **kwargs)

        # layout
        self.grid_rowconfigure(1, weight=1)
        self.grid_columnconfigure(0, weight=1)

        self._status_val = ctk.StringVar(value="Откройте изображение не меньше 512x512")
        self._status_label = ctk.CTkLabel(self, textvariable=self._status_val, anchor="w")
        self._status_label.grid(row=0, column=0, padx=10, pady=(8, 4), sticky="ew")

        self._log = ctk.CTkTextbox(self, height=96)
        self._log.grid(row=1, column=0, padx=10, pady=(0, 8), sticky="nsew")
        self._log.configure(state="disabled")

    # public API (sync from controller)
    def set_status(self, text: str, error: bool = False) -> None:
        self._status_val.set(text)
        self._status_label.configure(text_color="#d9534f" if error else ("gray10", "gray90"))

    def set_lines(self, lines: Iterable[str]) -> None:
        self._log.configure(state="normal")
        self._log.delete("1.0", "end")
        self._log.insert("end", "\n".join(lines))
        self._log.configure(state="disabled")
