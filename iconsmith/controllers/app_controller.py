"""Контроллер приложения: оркестрация UI и сервисов генерации.

SOLID:
- SRP: класс управляет связями между UI и сервисами (без логики обработки изображений).
- DIP: зависит от сервисов как от абстрактных ролей; конкретные реализации инкапсулированы.
Clean Code:
- Обработчики компактны; тяжёлая логика вынесена в сервисы.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from tkinter import filedialog, TclError
from typing import List, Optional

import customtkinter as ctk

from iconsmith.config import GeneratorConfig
from iconsmith.errors import IconsmithError
from iconsmith.models.icon_model import GenerationResult
from iconsmith.models.image_model import ImageData
from iconsmith.services.favicon_generator import FaviconGenerator
from iconsmith.services.image_service import ImageService, square_crop_box
from iconsmith.services.manifest_builder import build_manifest, manifest_to_json
from iconsmith.services.markup_renderer import render_markup
from iconsmith.ui.bottom_bar import BottomBar
from iconsmith.ui.image_viewer import ImageViewer
from iconsmith.ui.sidebar import Sidebar

logger = logging.getLogger(__name__)


@dataclass
class AppController:
    """Связывает элементы UI с прикладной логикой.

    Ответственности:
    - Инициализация и бинд событий (UI -> контроллер).
    - Загрузка исходника через `ImageService` и показ области обрезки.
    - Запуск `FaviconGenerator` с параметрами из сайдбара и вывод итогов.
    """
    viewer: ImageViewer
    sidebar: Sidebar
    bottom: BottomBar
    window: ctk.CTk
    config: GeneratorConfig = field(default_factory=GeneratorConfig)

    _image_service: ImageService = field(default_factory=ImageService)
    _current_image: Optional[ImageData] = None
    _output_dir: Optional[Path] = None

    def bind_events(self) -> None:
        """Регистрирует обработчики событий между UI-компонентами."""
        self.sidebar.on_open_file = self._handle_open_file
        self.sidebar.on_choose_output = self._handle_choose_output
        self.sidebar.on_generate = self._handle_generate
        if self.config.base_path != Path("."):
            self._output_dir = self.config.base_path
            self.sidebar.set_output_dir(self._output_dir)

    # ---- Handlers ----
    def _handle_open_file(self) -> None:
        try:
            file_path = filedialog.askopenfilename(
                title="Выберите изображение",
                filetypes=(
                    ("Images", "*.png *.jpg *.jpeg *.gif *.webp"),
                    ("All files", "*.*"),
                ),
            )
        except TclError:
            # Silent fail if dialog cannot open
            return

        if not file_path:
            return

        try:
            image_data = self._image_service.load_image(file_path)
        except IconsmithError as exc:
            self.bottom.set_status(str(exc), error=True)
            return
        self._current_image = image_data

        self.viewer.set_image(image_data.pil_image, square_crop_box(image_data.width, image_data.height))
        self.sidebar.set_image_info(image_data)

        required = self.config.generation.min_source_size
        if image_data.min_side < required:
            self.bottom.set_status(
                f"Изображение {image_data.width}x{image_data.height} меньше {required}x{required}: "
                "генерация невозможна",
                error=True,
            )
        else:
            self.bottom.set_status(f"Исходник {image_data.width}x{image_data.height}, выделена область иконок")

        if self._output_dir is None:
            self._output_dir = image_data.path.parent / "icons"
            self.sidebar.set_output_dir(self._output_dir)

    def _handle_choose_output(self) -> None:
        try:
            directory = filedialog.askdirectory(title="Каталог вывода", mustexist=False)
        except TclError:
            return
        if directory:
            self._output_dir = Path(directory)
            self.sidebar.set_output_dir(self._output_dir)

    def _handle_generate(self) -> None:
        if self._current_image is None:
            self.bottom.set_status("Сначала откройте изображение", error=True)
            return
        if self._output_dir is None:
            self.bottom.set_status("Выберите каталог вывода", error=True)
            return

        self.sidebar.set_busy(True)
        self.window.update_idletasks()
        try:
            config = self.config.with_generation(
                method=self.sidebar.get_method(),
                tool_path=self.sidebar.get_tool_path(),
                quality=self.sidebar.get_quality(),
            )
            generator = FaviconGenerator(config)
            result = generator.generate(
                self._current_image.path,
                output_dir=self._output_dir,
                families=self.sidebar.get_families(),
            )
            self._write_manifest(generator, config)
        except IconsmithError as exc:
            logger.error("Генерация не выполнена: %s", exc)
            self.bottom.set_status(str(exc), error=True)
            return
        except OSError as exc:
            self.bottom.set_status(f"Ошибка записи: {exc}", error=True)
            return
        finally:
            self.sidebar.set_busy(False)

        self.bottom.set_status(
            f"Создано: {len(result.written)}, пропущено: {len(result.skipped)}, ошибок: {len(result.failed)}",
            error=not result.ok,
        )
        self.bottom.set_lines(self._result_lines(result) + ["", render_markup(generator.registry, config)])

    # ---- Helpers ----
    def _write_manifest(self, generator: FaviconGenerator, config: GeneratorConfig) -> None:
        manifest_path = self._output_dir / "manifest.json"
        manifest_path.write_text(manifest_to_json(build_manifest(generator.registry, config)), encoding="utf-8")
        generator.registry.set_manifest(config.url_for(manifest_path.name))

    @staticmethod
    def _result_lines(result: GenerationResult) -> List[str]:
        described = {icon.path.name: icon for icon in result.icons}
        lines = []
        for name in result.written:
            icon = described.get(name)
            lines.append(f"+ {name} ({icon.family.value}, {icon.dimension})" if icon else f"+ {name}")
        lines += [f"= {item.filename} ({item.reason})" for item in result.skipped]
        lines += [f"! {item.filename}: {item.error}" for item in result.failed]
        return lines
