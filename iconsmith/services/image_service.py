"""Загрузка исходных изображений, проверка формата и геометрия квадратной обрезки.

Принципы:
- SRP: класс отвечает только за загрузку и базовое извлечение свойств.
- Геометрия обрезки вынесена в чистые функции, чтобы её могли использовать оба бэкенда.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

import numpy as np
from PIL import Image, UnidentifiedImageError

from iconsmith.errors import InvalidImage, SourceNotFound
from iconsmith.models.image_model import ImageData

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("JPEG", "PNG", "GIF", "WEBP")


def square_crop_box(width: int, height: int) -> Tuple[int, int, int, int]:
    """Наибольший квадрат по центру: (left, top, right, bottom).

    Смещение floor((большая − меньшая) / 2) только по длинной оси.
    Для 1024x768 это (128, 0, 896, 768).
    """
    side = min(width, height)
    left = (width - side) // 2
    top = (height - side) // 2
    return left, top, left + side, top + side


def crop_to_square(image: Image.Image) -> Image.Image:
    """Обрезает изображение до центрального квадрата. Квадратное возвращается копией."""
    width, height = image.size
    if width == height:
        return image.copy()
    return image.crop(square_crop_box(width, height))


def is_opaque(image: Image.Image) -> bool:
    """True, если в изображении нет ни одного полупрозрачного пикселя."""
    if "A" not in image.getbands():
        return True
    alpha = np.asarray(image.getchannel("A"), dtype=np.uint8)
    return bool(alpha.size == 0 or alpha.min() == 255)


class ImageService:
    def load_image(self, file_path: str | Path) -> ImageData:
        """Загружает изображение с диска и возвращает его вместе с метаданными.

        Args:
            file_path: Путь до файла изображения.

        Returns:
            `ImageData` c `PIL.Image.Image` (в режиме RGBA), размерами, форматом и размером файла.

        Raises:
            SourceNotFound: если путь не существует или не указывает на файл.
            InvalidImage: если файл не распознан как изображение или формат не поддерживается.
        """
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise SourceNotFound(path)

        try:
            with Image.open(path) as opened:
                image_format = (opened.format or "").upper()
                if image_format not in SUPPORTED_FORMATS:
                    raise InvalidImage(
                        f"Неподдерживаемый формат {image_format or 'unknown'}: {path}. "
                        f"Поддерживаются: {', '.join(SUPPORTED_FORMATS)}"
                    )
                # для GIF берётся первый кадр
                opened.seek(0)
                pil_image = opened.convert("RGBA")
        except UnidentifiedImageError as exc:
            raise InvalidImage(f"Файл не является изображением: {path}") from exc
        except Image.DecompressionBombError as exc:
            raise InvalidImage(f"Изображение слишком велико для декодирования {path}: {exc}") from exc
        except OSError as exc:
            raise InvalidImage(f"Не удалось декодировать изображение {path}: {exc}") from exc

        width, height = pil_image.size
        try:
            size_bytes: Optional[int] = path.stat().st_size
        except OSError:
            size_bytes = None

        logger.debug("Загружено %s: %dx%d %s", path, width, height, image_format)
        return ImageData(
            path=path,
            pil_image=pil_image,
            width=width,
            height=height,
            mode=pil_image.mode,
            format=image_format,
            size_bytes=size_bytes,
        )
