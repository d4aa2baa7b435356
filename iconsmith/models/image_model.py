"""Модели данных для изображений.

Принципы:
- SRP: только структура данных, без логики обработки.
- Чистый код: неизменяемость (`frozen=True`) для предсказуемости.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image


@dataclass(frozen=True)
class ImageData:
    """Неизменяемая модель исходного изображения и его метаданные.

    Fields:
        path: Путь к исходному файлу.
        pil_image: Загруженное изображение PIL (в режиме RGBA).
        width: Ширина, px.
        height: Высота, px.
        mode: Режим PIL после загрузки, например "RGBA".
        format: Формат файла по данным декодера: "JPEG" | "PNG" | "GIF" | "WEBP".
        size_bytes: Размер файла, если доступен.
    """
    path: Path
    pil_image: Image.Image
    width: int
    height: int
    mode: str
    format: str
    size_bytes: Optional[int]

    @property
    def min_side(self) -> int:
        return min(self.width, self.height)


@dataclass(frozen=True)
class NormalizedImage:
    """Квадратная область исходника, подготовленная бэкендом.

    Fields:
        source_path: Путь к исходному файлу.
        side: Сторона квадрата после обрезки, px.
        crop_box: Область обрезки в координатах исходника (left, top, right, bottom).
        pil_image: Обрезанное изображение для встроенного бэкенда; `None` для внешней утилиты.
        opaque: Нет ли в изображении прозрачных пикселей.
    """
    source_path: Path
    side: int
    crop_box: Tuple[int, int, int, int]
    pil_image: Optional[Image.Image] = None
    opaque: bool = False
