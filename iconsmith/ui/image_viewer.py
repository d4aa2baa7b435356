"""Виджет просмотра исходника: вписывание в окно и подсветка квадратной области обрезки.

Принципы:
- SRP: отвечает только за представление изображения.
- Чистый код: чёткое разделение публичного API и внутренних обработчиков событий.
"""
from __future__ import annotations

from typing import Optional, Tuple

import customtkinter as ctk
import tkinter as tk
from PIL import Image, ImageTk


class ImageViewer(ctk.CTkFrame):
    """Канва с исходником; область, которая попадёт в иконки, обведена рамкой."""
    def __init__(self, master: ctk.CTk | tk.Misc, **kwargs) -> None:
        super().__init__(master, **kwargs)
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(0, weight=1)

        self._canvas = tk.Canvas(self, highlightthickness=0, bg=self._get_canvas_bg())
        self._canvas.grid(row=0, column=0, sticky="nsew")

        self._image: Optional[Image.Image] = None
        self._crop_box: Optional[Tuple[int, int, int, int]] = None
        self._tk_image: Optional[ImageTk.PhotoImage] = None
        self._scale_factor: float = 1.0

        self._canvas.bind("<Configure>", self._on_canvas_resize)

    # ---- Public API ----
    def set_image(self, image: Image.Image, crop_box: Optional[Tuple[int, int, int, int]] = None) -> None:
        """Устанавливает изображение и область обрезки, затем вписывает в окно."""
        self._image = image
        self._crop_box = crop_box
        self._render_image()

    # ---- Internals ----
    def _on_canvas_resize(self, _event: tk.Event) -> None:
        if self._image is None:
            return
        self._render_image()

    def _render_image(self) -> None:
        self._canvas.delete("all")
        if self._image is None:
            return

        canvas_w = max(1, int(self._canvas.winfo_width()))
        canvas_h = max(1, int(self._canvas.winfo_height()))
        img_w, img_h = self._image.size
        self._scale_factor = max(0.01, min(4.0, canvas_w / img_w, canvas_h / img_h))

        scaled_w = max(1, int(img_w * self._scale_factor))
        scaled_h = max(1, int(img_h * self._scale_factor))
        ox = (canvas_w - scaled_w) // 2
        oy = (canvas_h - scaled_h) // 2

        resized = self._image.resize((scaled_w, scaled_h), Image.Resampling.LANCZOS)
        self._tk_image = ImageTk.PhotoImage(resized)
        self._canvas.create_image(ox, oy, image=self._tk_image, anchor="nw")

        if self._crop_box is None:
            return
        left, top, right, bottom = (int(round(v * self._scale_factor)) for v in self._crop_box)
        # затемняем то, что отрежется
        for x0, y0, x1, y1 in (
            (0, 0, left, scaled_h),
            (right, 0, scaled_w, scaled_h),
            (left, 0, right, top),
            (left, bottom, right, scaled_h),
        ):
            if x1 > x0 and y1 > y0:
                self._canvas.create_rectangle(
                    ox + x0, oy + y0, ox + x1, oy + y1, fill="#000000", stipple="gray50", outline=""
                )
        self._canvas.create_rectangle(ox + left, oy + top, ox + right, oy + bottom, outline="#3b8ed0", width=2)

    def _get_canvas_bg(self) -> str:
        # CTk does not expose canvas theme, so pick neutral
        return "#1f1f1f" if ctk.get_appearance_mode().lower() == "dark" else "#f2f2f2"
