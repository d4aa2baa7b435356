"""Реестр иконок: слот -> путь или значение.

Реестр наполняется сеттерами, начальными значениями из конфигурации и результатами
генерации. Читается рендерером разметки и сборщиком манифеста.
"""
from __future__ import annotations

import copy
from typing import Any, Dict, Mapping, Optional

from iconsmith.models.icon_model import IconFamily

# семейства с размерными слотами
SIZED_SLOTS = {
    IconFamily.FAVICON: "png",
    IconFamily.APPLE_TOUCH: "apple-touch",
    IconFamily.ANDROID: "android",
}


class IconRegistry:
    """Накопленное состояние иконок одного генератора."""

    def __init__(self, initial: Optional[Mapping[str, Any]] = None) -> None:
        self._icons: Dict[str, Any] = {}
        if initial:
            self.seed(initial)

    def seed(self, icons: Mapping[str, Any]) -> "IconRegistry":
        """Заполняет реестр из блока `icons` конфигурации. Размерные слоты сливаются."""
        for slot, value in icons.items():
            if isinstance(value, Mapping) and slot in ("png", "apple-touch", "android"):
                self._icons.setdefault(slot, {}).update(value)
            else:
                self._icons[slot] = copy.deepcopy(value)
        return self

    def set_favicon(self, path: str) -> "IconRegistry":
        self._icons["favicon"] = path
        return self

    def set_png_icon(self, size: str, path: str) -> "IconRegistry":
        self._icons.setdefault("png", {})[size] = path
        return self

    def set_apple_touch_icon(self, size: str, path: str) -> "IconRegistry":
        self._icons.setdefault("apple-touch", {})[size] = path
        return self

    def set_android_icon(self, size: str, path: str) -> "IconRegistry":
        self._icons.setdefault("android", {})[size] = path
        return self

    def set_ms_tile_image(self, path: str) -> "IconRegistry":
        self._icons["mstile"] = path
        return self

    def set_ms_tile_color(self, color: str) -> "IconRegistry":
        self._icons["ms-tile-color"] = color
        return self

    def set_safari_pinned_tab(self, path: str, color: str) -> "IconRegistry":
        self._icons["safari-pinned-tab"] = {"path": path, "color": color}
        return self

    def set_theme_color(self, color: str) -> "IconRegistry":
        self._icons["theme-color"] = color
        return self

    def set_manifest(self, path: str) -> "IconRegistry":
        self._icons["manifest"] = path
        return self

    def register(self, family: IconFamily, size: str, path: str) -> None:
        """Регистрирует сгенерированный файл в слоте его семейства."""
        if family is IconFamily.MSTILE:
            self.set_ms_tile_image(path)
        else:
            self._icons.setdefault(SIZED_SLOTS[family], {})[size] = path

    def get(self, slot: str, default: Any = None) -> Any:
        return self._icons.get(slot, default)

    def sized(self, slot: str) -> Dict[str, str]:
        return dict(self._icons.get(slot) or {})

    def reset(self) -> None:
        self._icons.clear()

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._icons)

    def __contains__(self, slot: object) -> bool:
        return slot in self._icons
