"""Сборка web app manifest по содержимому реестра иконок.

Функции чистые: файлов не читают и не пишут, результат сохраняет вызывающий код.
"""
from __future__ import annotations

import json
from pathlib import PurePosixPath
from typing import Any, Dict, List, Mapping, Optional

from iconsmith.config import GeneratorConfig
from iconsmith.models.icon_model import IconFamily
from iconsmith.services import size_catalog
from iconsmith.services.icon_registry import IconRegistry

MIME_TYPES = {
    ".webp": "image/webp",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
}


def mime_type_for(path: str) -> str:
    # query-строка и фрагмент в ссылке не влияют на тип
    clean = path.split("?", 1)[0].split("#", 1)[0]
    return MIME_TYPES.get(PurePosixPath(clean).suffix.lower(), "image/png")


def android_icon_entries(registry: IconRegistry) -> List[Dict[str, str]]:
    """Описания иконок Android в порядке каталога; отсутствующие размеры пропускаются."""
    registered = registry.sized("android")
    return [
        {"src": registered[size], "sizes": size, "type": mime_type_for(registered[size])}
        for size in size_catalog.dimensions(IconFamily.ANDROID)
        if size in registered
    ]


def build_manifest(
    registry: IconRegistry,
    config: Optional[GeneratorConfig] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Собирает манифест: умолчания, затем `config.manifest`, затем `overrides`, затем иконки.

    Args:
        registry: Реестр иконок генератора.
        config: Конфигурация (название приложения и поля манифеста по умолчанию).
        overrides: Поля, заданные вызывающим кодом.

    Returns:
        Словарь, готовый к сериализации в JSON.
    """
    config = config or GeneratorConfig()
    overrides = dict(overrides or {})
    manifest: Dict[str, Any] = {
        "name": config.app_name or "My App",
        "short_name": config.app_short_name or "App",
        "theme_color": registry.get("theme-color") or "#ffffff",
        "background_color": "#ffffff",
        "display": "standalone",
        "orientation": "portrait",
        "start_url": "/",
        "icons": [],
    }
    manifest.update(config.manifest)
    manifest.update(overrides)
    manifest["icons"] = list(manifest.get("icons") or []) + android_icon_entries(registry)
    return manifest


def manifest_to_json(manifest: Mapping[str, Any]) -> str:
    """JSON с отступами; слэши и не-ASCII символы не экранируются."""
    return json.dumps(manifest, indent=4, ensure_ascii=False)
