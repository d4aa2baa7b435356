"""Каталог размеров иконок и шаблонов имён файлов.

Принципы:
- Чистая статическая таблица без изменяемого состояния.
- Порядок размеров фиксирован: генерация идёт в порядке объявления, а не по возрастанию.
"""
from __future__ import annotations

import re
from typing import Dict, Iterable, List, Tuple

from iconsmith.models.icon_model import IconFamily

FAVICON_SIZES: Dict[IconFamily, Tuple[str, ...]] = {
    IconFamily.FAVICON: ("16x16", "32x32", "48x48"),
    IconFamily.APPLE_TOUCH: ("152x152", "167x167", "180x180"),
    IconFamily.ANDROID: ("36x36", "48x48", "72x72", "96x96", "144x144", "192x192", "512x512"),
    IconFamily.MSTILE: ("150x150",),
}

FILE_PATTERNS: Dict[IconFamily, str] = {
    IconFamily.FAVICON: "favicon-%s.webp",
    IconFamily.APPLE_TOUCH: "apple-touch-icon-%s.webp",
    IconFamily.ANDROID: "android-chrome-%s.webp",
    IconFamily.MSTILE: "mstile-%s.webp",
}

ICO_FILENAME = "favicon.ico"
ICO_DIMENSIONS: Tuple[int, ...] = (16, 32, 48)

_DIMENSION_RE = re.compile(r"^(\d+)x(\d+)$")


def dimensions(family: IconFamily) -> Tuple[str, ...]:
    return FAVICON_SIZES[family]


def filename(family: IconFamily, dimension: str) -> str:
    return FILE_PATTERNS[family] % dimension


def entries(families: Iterable[IconFamily]) -> List[Tuple[IconFamily, str, str]]:
    """Тройки (семейство, размер, имя файла) в порядке запроса и объявления размеров."""
    return [(family, size, filename(family, size)) for family in families for size in FAVICON_SIZES[family]]


def parse_dimension(dimension: str) -> int:
    """'180x180' -> 180. Поддерживаются только квадратные размеры."""
    match = _DIMENSION_RE.match(dimension.strip())
    if not match:
        raise ValueError(f"Неверный формат размера: {dimension!r}, ожидается WxH")
    width, height = int(match.group(1)), int(match.group(2))
    if width != height:
        raise ValueError(f"Размер иконки должен быть квадратным: {dimension!r}")
    return width


def format_dimension(side: int) -> str:
    return f"{side}x{side}"
