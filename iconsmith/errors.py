"""Иерархия исключений генератора иконок.

Принципы:
- Все ошибки наследуют `IconsmithError`, чтобы вызывающий код мог ловить их одним `except`.
- Дополнительное наследование от встроенных типов (`FileNotFoundError`, `ValueError`,
  `RuntimeError`) сохраняет привычную семантику для стороннего кода.
"""
from __future__ import annotations

from typing import Optional


class IconsmithError(Exception):
    """Базовая ошибка пакета."""


class ConfigError(IconsmithError, ValueError):
    """Некорректная конфигурация или параметр генерации."""


class SourceNotFound(IconsmithError, FileNotFoundError):
    def __init__(self, path: object) -> None:
        super().__init__(f"Исходное изображение не найдено: {path}")
        self.path = path


class InvalidImage(IconsmithError, ValueError):
    """Файл не декодируется или формат не поддерживается."""


class ImageTooSmall(InvalidImage):
    """Исходник меньше минимального порога; апскейл запрещён."""

    def __init__(self, required: int, width: int, height: int) -> None:
        super().__init__(
            f"Исходное изображение слишком маленькое. Минимальный размер {required}x{required} px, "
            f"текущий размер {width}x{height} px. Увеличение не выполняется, чтобы избежать пикселизации."
        )
        self.required = required
        self.width = width
        self.height = height


class InvalidGenerationMethod(IconsmithError, ValueError):
    def __init__(self, method: str) -> None:
        super().__init__(f"Неизвестный метод генерации: {method!r}")
        self.method = method


class BackendUnavailable(IconsmithError, RuntimeError):
    """Бэкенд не может работать в текущем окружении (нет библиотеки или утилиты)."""


class EncoderUnsupported(BackendUnavailable):
    """Бэкенд есть, но не умеет кодировать нужный формат."""


class UnsupportedDimension(IconsmithError, ValueError):
    """Размер больше стороны нормализованного исходника."""

    def __init__(self, dimension: int, side: int) -> None:
        super().__init__(f"Размер {dimension}x{dimension} требует увеличения исходника {side}x{side}")
        self.dimension = dimension
        self.side = side


class EncodeFailed(IconsmithError, RuntimeError):
    """Ошибка кодирования одного файла. Не прерывает пакетную генерацию."""

    def __init__(self, target: str, reason: Optional[str] = None) -> None:
        message = f"Не удалось создать {target}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.target = target
        self.reason = reason
