"""Боковая панель: открытие исходника, информация о нём и параметры генерации.

Принципы:
- SRP: управляет только UI параметров, не содержит логики генерации.
- ISP: выдаёт параметры через компактные методы `get_*`, события через `on_*`.
"""
from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Optional

import customtkinter as ctk

from iconsmith.models.icon_model import IconFamily
from iconsmith.models.image_model import ImageData

FAMILY_LABELS = {
    IconFamily.FAVICON: "Favicon (16–48 + .ico)",
    IconFamily.APPLE_TOUCH: "Apple touch",
    IconFamily.ANDROID: "Android / Chrome",
    IconFamily.MSTILE: "Microsoft tile",
}

METHOD_LABELS = {"Pillow (встроенный)": "bitmap", "ImageMagick": "cli"}


def _format_size(size_bytes: Optional[int]) -> str:
    if size_bytes is None:
        return "—"
    if size_bytes < 1024:
        return f"{size_bytes} B"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    return f"{size_bytes / (1024 * 1024):.1f} MB"


class Sidebar(ctk.CTkFrame):
    """Панель инструментов с блоками: файл, информация, генерация."""
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, width=280, **kwargs)

        self.grid_columnconfigure(0, weight=1)

        # Callbacks
        self.on_open_file: Optional[Callable[[], None]] = None
        self.on_choose_output: Optional[Callable[[], None]] = None
        self.on_generate: Optional[Callable[[], None]] = None

        # Controls
        self._title = ctk.CTkLabel(self, text="Исходник", font=ctk.CTkFont(size=16, weight="bold"))
        self._title.grid(row=0, column=0, padx=8, pady=(8, 4), sticky="w")

        self._open_btn = ctk.CTkButton(self, text="Открыть изображение…", command=self._emit_open_file)
        self._open_btn.grid(row=1, column=0, padx=8, pady=(0, 12), sticky="ew")

        # Info section
        self._info_title = ctk.CTkLabel(self, text="Информация", font=ctk.CTkFont(size=16, weight="bold"))
        self._info_title.grid(row=2, column=0, padx=8, pady=(8, 4), sticky="w")

        self._path_val = ctk.StringVar(value="—")
        self._size_val = ctk.StringVar(value="—")
        self._dims_val = ctk.StringVar(value="—")
        self._format_val = ctk.StringVar(value="—")

        self._info_path = ctk.CTkLabel(self, textvariable=self._path_val, wraplength=250, anchor="w", justify="left")
        self._info_size = ctk.CTkLabel(self, textvariable=self._size_val, anchor="w", justify="left")
        self._info_dims = ctk.CTkLabel(self, textvariable=self._dims_val, anchor="w", justify="left")
        self._info_format = ctk.CTkLabel(self, textvariable=self._format_val, anchor="w", justify="left")

        self._info_path.grid(row=3, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_size.grid(row=4, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_dims.grid(row=5, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_format.grid(row=6, column=0, padx=8, pady=(0, 10), sticky="ew")

        # Генерация
        self._gen_title = ctk.CTkLabel(self, text="Генерация", font=ctk.CTkFont(size=16, weight="bold"))
        self._gen_title.grid(row=7, column=0, padx=8, pady=(8, 4), sticky="w")

        self._output_val = ctk.StringVar(value="Каталог не выбран")
        self._output_btn = ctk.CTkButton(self, text="Каталог вывода…", command=self._emit_choose_output)
        self._output_btn.grid(row=8, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._output_label = ctk.CTkLabel(
            self, textvariable=self._output_val, wraplength=250, anchor="w", justify="left"
        )
        self._output_label.grid(row=9, column=0, padx=8, pady=(0, 8), sticky="ew")

        self._method_label = ctk.CTkLabel(self, text="Метод:")
        self._method_label.grid(row=10, column=0, padx=8, pady=(0, 2), sticky="w")
        self._method_menu = ctk.CTkOptionMenu(self, values=list(METHOD_LABELS), command=self._on_method_change)
        self._method_menu.set("Pillow (встроенный)")
        self._method_menu.grid(row=11, column=0, padx=8, pady=(0, 4), sticky="ew")

        # путь к утилите нужен только для ImageMagick
        self._tool_path_val = ctk.StringVar(value="magick")
        self._tool_path_entry = ctk.CTkEntry(self, textvariable=self._tool_path_val)
        self._tool_path_entry.grid(row=12, column=0, padx=8, pady=(0, 4), sticky="ew")
        self._tool_path_entry.grid_remove()

        self._quality_val = ctk.StringVar(value="Качество: 90")
        self._quality_label = ctk.CTkLabel(self, textvariable=self._quality_val)
        self._quality_label.grid(row=13, column=0, padx=8, pady=(4, 2), sticky="w")
        self._quality_slider = ctk.CTkSlider(
            self, from_=1, to=100, number_of_steps=99, command=self._on_quality_change
        )
        self._quality_slider.set(90)
        self._quality_slider.grid(row=14, column=0, padx=8, pady=(0, 8), sticky="ew")

        self._family_vars: Dict[IconFamily, ctk.BooleanVar] = {}
        for offset, (family, label) in enumerate(FAMILY_LABELS.items()):
            var = ctk.BooleanVar(value=True)
            box = ctk.CTkCheckBox(self, text=label, variable=var)
            box.grid(row=15 + offset, column=0, padx=8, pady=(2, 2), sticky="w")
            self._family_vars[family] = var

        # filler
        self.grid_rowconfigure(99, weight=1)

        self._generate_btn = ctk.CTkButton(self, text="Сгенерировать", command=self._emit_generate)
        self._generate_btn.grid(row=100, column=0, padx=8, pady=(8, 8), sticky="ew")

    # public API (sync from controller)
    def set_image_info(self, image: ImageData) -> None:
        self._path_val.set(str(image.path))
        self._size_val.set(f"Размер файла: {_format_size(image.size_bytes)}")
        self._dims_val.set(f"Размеры: {image.width}x{image.height} px")
        self._format_val.set(f"Формат: {image.format}")

    def set_output_dir(self, path: Path) -> None:
        self._output_val.set(str(path))

    def set_busy(self, busy: bool) -> None:
        state = "disabled" if busy else "normal"
        self._generate_btn.configure(state=state)
        self._open_btn.configure(state=state)

    def get_method(self) -> str:
        return METHOD_LABELS[self._method_menu.get()]

    def get_tool_path(self) -> str:
        return self._tool_path_val.get().strip() or "magick"

    def get_quality(self) -> int:
        return int(round(self._quality_slider.get()))

    def get_families(self) -> List[IconFamily]:
        return [family for family, var in self._family_vars.items() if var.get()]

    # events
    def _emit_open_file(self) -> None:
        if self.on_open_file:
            self.on_open_file()

    def _emit_choose_output(self) -> None:
        if self.on_choose_output:
            self.on_choose_output()

    def _emit_generate(self) -> None:
        if self.on_generate:
            self.on_generate()

    def _on_method_change(self, value: str) -> None:
        if METHOD_LABELS.get(value) == "cli":
            self._tool_path_entry.grid()
        else:
            self._tool_path_entry.grid_remove()

    def _on_quality_change(self, value: float) -> None:
        self._quality_val.set(f"Качество: {int(round(value))}")
