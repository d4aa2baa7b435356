"""Бэкенды обработки изображений: встроенный (Pillow) и внешняя утилита (ImageMagick).

Принципы:
- LSP: оба бэкенда реализуют один контракт `ImageBackend` и взаимозаменяемы.
- OCP: новый движок добавляется подклассом и строкой в `METHOD_ALIASES`.
- Бэкенд не пишет файлы: он возвращает закодированные байты, запись делает генератор.
"""
from __future__ import annotations

import io
import logging
import re
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Sequence, Type

from PIL import Image, features

from iconsmith.config import GenerationSettings
from iconsmith.errors import (
    BackendUnavailable,
    EncodeFailed,
    EncoderUnsupported,
    InvalidGenerationMethod,
    InvalidImage,
    SourceNotFound,
    UnsupportedDimension,
)
from iconsmith.models.image_model import NormalizedImage
from iconsmith.services.image_service import ImageService, crop_to_square, is_opaque, square_crop_box

logger = logging.getLogger(__name__)


class ImageBackend(ABC):
    """Общий контракт: декодирование, квадратная обрезка, уменьшение, кодирование."""

    name: str = ""

    @abstractmethod
    def is_available(self) -> bool:
        """Проба доступности движка в текущем окружении."""

    @abstractmethod
    def ensure_available(self) -> None:
        """Бросает `BackendUnavailable`/`EncoderUnsupported`, если работать нельзя."""

    @abstractmethod
    def prepare(self, source_path: str | Path) -> NormalizedImage:
        """Декодирует исходник и обрезает его до центрального квадрата."""

    @abstractmethod
    def resize_square(self, image: NormalizedImage, dimension: int, quality: int) -> bytes:
        """Возвращает WEBP (с потерями) размера dimension x dimension."""

    @abstractmethod
    def encode_ico(self, image: NormalizedImage, dimensions: Sequence[int]) -> bytes:
        """Возвращает ICO-контейнер с кадрами указанных размеров."""

    @staticmethod
    def _check_dimension(image: NormalizedImage, dimension: int) -> None:
        # только уменьшение, никогда не увеличиваем
        if dimension > image.side:
            raise UnsupportedDimension(dimension, image.side)

    @staticmethod
    def _ico_sizes(image: NormalizedImage, dimensions: Sequence[int]) -> List[int]:
        sizes = sorted({d for d in dimensions if d <= image.side})
        if not sizes:
            raise UnsupportedDimension(min(dimensions), image.side)
        return sizes


class BitmapBackend(ImageBackend):
    """Обработка в процессе средствами Pillow."""

    name = "bitmap"

    def __init__(self, image_service: ImageService | None = None) -> None:
        self._image_service = image_service or ImageService()

    def is_available(self) -> bool:
        # Pillow входит в зависимости; кодеки проверяет ensure_available
        return True

    def ensure_available(self) -> None:
        if not self.is_available():
            raise BackendUnavailable("Pillow недоступен")
        if not features.check("webp"):
            raise EncoderUnsupported(
                "Pillow собран без поддержки WebP. Обновите Pillow или используйте метод 'cli'."
            )

    def prepare(self, source_path: str | Path) -> NormalizedImage:
        data = self._image_service.load_image(source_path)
        square = crop_to_square(data.pil_image)
        return NormalizedImage(
            source_path=data.path,
            side=square.width,
            crop_box=square_crop_box(data.width, data.height),
            pil_image=square,
            opaque=is_opaque(square),
        )

    def resize_square(self, image: NormalizedImage, dimension: int, quality: int) -> bytes:
        self._check_dimension(image, dimension)
        resized = self._resized(image, dimension)
        buffer = io.BytesIO()
        try:
            resized.save(buffer, format="WEBP", quality=quality, method=6)
        except (OSError, ValueError, KeyError) as exc:
            raise EncodeFailed(f"{dimension}x{dimension}", str(exc)) from exc
        return buffer.getvalue()

    def encode_ico(self, image: NormalizedImage, dimensions: Sequence[int]) -> bytes:
        sizes = self._ico_sizes(image, dimensions)
        # Pillow сам уменьшает базовый кадр под каждый размер из `sizes`
        base = self._resized(image, max(sizes))
        buffer = io.BytesIO()
        try:
            base.save(buffer, format="ICO", sizes=[(s, s) for s in sizes])
        except (OSError, ValueError) as exc:
            raise EncodeFailed("favicon.ico", str(exc)) from exc
        return buffer.getvalue()

    def _resized(self, image: NormalizedImage, dimension: int) -> Image.Image:
        if image.pil_image is None:
            raise EncodeFailed(f"{dimension}x{dimension}", "нет данных изображения для встроенного бэкенда")
        resized = image.pil_image
        if resized.size != (dimension, dimension):
            resized = resized.resize((dimension, dimension), Image.Resampling.LANCZOS)
        if image.opaque:
            resized = resized.convert("RGB")
        return resized


class CommandLineBackend(ImageBackend):
    """Обработка внешней утилитой ImageMagick (`magick` или `convert`).

    Команды собираются списком аргументов, без оболочки, поэтому пути не требуют
    экранирования. Каждый вызов ограничен таймаутом.
    """

    name = "cli"

    _DIMENSIONS_RE = re.compile(r"(\d+)x(\d+)")

    def __init__(self, tool_path: str = "magick", timeout: float = 30.0) -> None:
        self.tool_path = tool_path
        self.timeout = timeout
        self._version_output: str | None = None

    def _run(self, args: Sequence[str]) -> subprocess.CompletedProcess:
        command = [self.tool_path, *args]
        logger.debug("Запуск: %s", command)
        return subprocess.run(command, capture_output=True, timeout=self.timeout, check=False)

    def is_available(self) -> bool:
        if self._version_output is not None:
            return True
        try:
            completed = self._run(["-version"])
        except (OSError, subprocess.TimeoutExpired) as exc:
            logger.debug("Проба %s не удалась: %s", self.tool_path, exc)
            return False
        if completed.returncode != 0:
            return False
        self._version_output = completed.stdout.decode("utf-8", "replace")
        return True

    def ensure_available(self) -> None:
        if not self.is_available():
            raise BackendUnavailable(f"ImageMagick не найден: {self.tool_path}")
        if "webp" not in (self._version_output or "").lower():
            raise EncoderUnsupported(f"{self.tool_path} собран без делегата WebP")

    def prepare(self, source_path: str | Path) -> NormalizedImage:
        path = Path(source_path)
        if not path.is_file():
            raise SourceNotFound(path)
        try:
            completed = self._run([self._input(path), "-format", "%wx%h", "info:"])
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise InvalidImage(f"Не удалось определить размеры {path}: {exc}") from exc
        match = self._DIMENSIONS_RE.search(completed.stdout.decode("utf-8", "replace"))
        if completed.returncode != 0 or not match:
            raise InvalidImage(f"Не удалось определить размеры {path}")
        width, height = int(match.group(1)), int(match.group(2))
        crop_box = square_crop_box(width, height)
        return NormalizedImage(source_path=path, side=min(width, height), crop_box=crop_box)

    def resize_square(self, image: NormalizedImage, dimension: int, quality: int) -> bytes:
        self._check_dimension(image, dimension)
        target = f"{dimension}x{dimension}"
        args = [
            *self._cropped(image),
            "-resize", f"{target}!",
            "-quality", str(quality),
            "-define", "webp:lossless=false",
            "-define", "webp:method=6",
            "webp:-",
        ]
        return self._encode(args, target)

    def encode_ico(self, image: NormalizedImage, dimensions: Sequence[int]) -> bytes:
        sizes = self._ico_sizes(image, dimensions)
        args = [
            *self._cropped(image),
            "-define", "icon:auto-resize=" + ",".join(str(s) for s in reversed(sizes)),
            "ico:-",
        ]
        return self._encode(args, "favicon.ico")

    def _cropped(self, image: NormalizedImage) -> List[str]:
        left, top, right, bottom = image.crop_box
        return [
            self._input(image.source_path),
            "-crop", f"{right - left}x{bottom - top}+{left}+{top}",
            "+repage",
            "-background", "none",
        ]

    def _encode(self, args: Sequence[str], target: str) -> bytes:
        try:
            completed = self._run(args)
        except subprocess.TimeoutExpired as exc:
            raise EncodeFailed(target, f"превышен таймаут {self.timeout} с") from exc
        except OSError as exc:
            raise EncodeFailed(target, str(exc)) from exc
        if completed.returncode != 0:
            stderr = completed.stderr.decode("utf-8", "replace").strip()
            raise EncodeFailed(target, f"код выхода {completed.returncode}: {stderr}")
        if not completed.stdout:
            raise EncodeFailed(target, "утилита не вернула данных")
        return completed.stdout

    @staticmethod
    def _input(path: Path) -> str:
        # абсолютный путь не спутать с опцией, [0] означает первый кадр GIF
        return f"{path.resolve()}[0]"


METHOD_ALIASES: Dict[str, Type[ImageBackend]] = {
    "bitmap": BitmapBackend,
    "gd": BitmapBackend,
    "pillow": BitmapBackend,
    "cli": CommandLineBackend,
    "imagemagick": CommandLineBackend,
    "imagick": CommandLineBackend,
    "magick": CommandLineBackend,
}


def create_backend(settings: GenerationSettings) -> ImageBackend:
    """Создаёт бэкенд по имени метода из настроек.

    Raises:
        InvalidGenerationMethod: если имя метода неизвестно.
    """
    backend_cls = METHOD_ALIASES.get(settings.method.strip().lower())
    if backend_cls is None:
        raise InvalidGenerationMethod(settings.method)
    if backend_cls is CommandLineBackend:
        return CommandLineBackend(tool_path=settings.tool_path, timeout=settings.timeout)
    return backend_cls()
