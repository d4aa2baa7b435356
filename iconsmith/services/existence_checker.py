"""Проверка уже существующих иконок в каталоге вывода.

Наличие файла не означает его актуальность: содержимое не сравнивается, файл просто
не перезаписывается. Так сохраняются ручные правки иконок.
"""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Set

from iconsmith.models.icon_model import IconFamily
from iconsmith.services import size_catalog


def compute_skip_set(output_dir: str | Path, families: Iterable[IconFamily]) -> Set[str]:
    """Имена файлов запрошенных семейств, которые уже лежат в `output_dir`."""
    directory = Path(output_dir)
    return {
        name
        for _family, _size, name in size_catalog.entries(families)
        if (directory / name).exists()
    }
