"""Модели иконок: семейства, запрос генерации и её результат."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Tuple


class IconFamily(Enum):
    FAVICON = "favicon"
    APPLE_TOUCH = "apple-touch"
    ANDROID = "android"
    MSTILE = "mstile"


ALL_FAMILIES: Tuple[IconFamily, ...] = tuple(IconFamily)


@dataclass(frozen=True)
class GeneratedIcon:
    family: IconFamily
    dimension: str
    path: Path


@dataclass(frozen=True)
class GenerationRequest:
    """Параметры одного вызова `generate()`. Не сохраняется."""
    source: Path
    method: str
    output_dir: Path
    families: Tuple[IconFamily, ...]
    quality: int


@dataclass(frozen=True)
class SkippedIcon:
    filename: str
    reason: str  # "exists" | "upscale"


@dataclass(frozen=True)
class FailedIcon:
    filename: str
    error: str


@dataclass
class GenerationResult:
    """Итог генерации: что записано, что пропущено и что не удалось.

    `written` сохраняет порядок каталога размеров: имя файла -> путь.
    Уже существовавшие файлы попадают в `skipped`, а не в `written`.
    """
    written: Dict[str, Path] = field(default_factory=dict)
    icons: List[GeneratedIcon] = field(default_factory=list)
    skipped: List[SkippedIcon] = field(default_factory=list)
    failed: List[FailedIcon] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    def skipped_names(self, reason: str | None = None) -> List[str]:
        return [item.filename for item in self.skipped if reason is None or item.reason == reason]

    def failed_names(self) -> List[str]:
        return [item.filename for item in self.failed]
