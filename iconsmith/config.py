"""Конфигурация генератора иконок.

Значение конфигурации передаётся в генератор явно; глобальных настроек по умолчанию нет.
Формат повторяет привычный блок `favicons` из настроек сайта:

    {
        "base_path": "public/icons",
        "base_url": "/icons",
        "app_name": "My App",
        "generation": {"method": "bitmap", "tool_path": "magick", "quality": 90}
    }
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotenv import dotenv_values

from iconsmith.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_METHOD = "bitmap"
DEFAULT_TOOL_PATH = "magick"
DEFAULT_QUALITY = 90
MIN_SOURCE_SIZE = 512
DEFAULT_TIMEOUT = 30.0

ENV_METHOD = "ICONSMITH_METHOD"
ENV_TOOL_PATH = "ICONSMITH_TOOL_PATH"
ENV_QUALITY = "ICONSMITH_QUALITY"


def validate_quality(value: Any) -> int:
    """Приводит качество к int и проверяет диапазон 1..100."""
    try:
        quality = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Качество должно быть целым числом, получено {value!r}") from exc
    if not 1 <= quality <= 100:
        raise ConfigError(f"Качество должно быть в диапазоне 1..100, получено {quality}")
    return quality


@dataclass(frozen=True)
class GenerationSettings:
    """Параметры генерации: метод, путь к утилите, качество, порог размера, таймаут."""
    method: str = DEFAULT_METHOD
    tool_path: str = DEFAULT_TOOL_PATH
    quality: int = DEFAULT_QUALITY
    min_source_size: int = MIN_SOURCE_SIZE
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "GenerationSettings":
        data = dict(data or {})
        try:
            min_size = int(data.get("min_source_size", MIN_SOURCE_SIZE))
            timeout = float(data.get("timeout", DEFAULT_TIMEOUT))
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Неверное числовое значение в настройках генерации: {exc}") from exc
        if min_size < 1:
            raise ConfigError(f"min_source_size должен быть положительным, получено {min_size}")
        if timeout <= 0:
            raise ConfigError(f"timeout должен быть положительным, получено {timeout}")
        return cls(
            method=str(data.get("method", DEFAULT_METHOD)),
            # imagick_path: старое имя ключа
            tool_path=str(data.get("tool_path") or data.get("imagick_path") or DEFAULT_TOOL_PATH),
            quality=validate_quality(data.get("quality", DEFAULT_QUALITY)),
            min_source_size=min_size,
            timeout=timeout,
        )


@dataclass(frozen=True)
class GeneratorConfig:
    """Полная конфигурация: пути, сведения о приложении, иконки и генерация.

    Fields:
        base_path: Каталог, куда по умолчанию пишутся иконки.
        base_url: Публичный префикс URL для ссылок в разметке и манифесте.
        app_name: Название приложения (манифест, `application-name`).
        app_short_name: Короткое название для манифеста.
        mobile_web_app_capable: Выводить ли meta `*-web-app-capable`.
        theme_color: Цвет темы браузера.
        ms_tile_color: Цвет плитки Windows.
        icons: Начальные значения реестра иконок.
        manifest: Поля манифеста по умолчанию.
        generation: Настройки генерации.
    """
    base_path: Path = Path(".")
    base_url: str = ""
    app_name: Optional[str] = None
    app_short_name: Optional[str] = None
    mobile_web_app_capable: bool = False
    theme_color: Optional[str] = None
    ms_tile_color: Optional[str] = None
    icons: Dict[str, Any] = field(default_factory=dict)
    manifest: Dict[str, Any] = field(default_factory=dict)
    generation: GenerationSettings = field(default_factory=GenerationSettings)

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "GeneratorConfig":
        data = dict(data or {})
        # допускаем как "theme-color", так и "theme_color"
        return cls(
            base_path=Path(data.get("base_path") or "."),
            base_url=str(data.get("base_url", "")).rstrip("/"),
            app_name=data.get("app_name"),
            app_short_name=data.get("app_short_name"),
            mobile_web_app_capable=bool(data.get("mobile_web_app_capable", False)),
            theme_color=data.get("theme-color", data.get("theme_color")),
            ms_tile_color=data.get("ms-tile-color", data.get("ms_tile_color")),
            icons=dict(data.get("icons") or {}),
            manifest=dict(data.get("manifest") or {}),
            generation=GenerationSettings.from_mapping(data.get("generation")),
        )

    def with_generation(self, **changes: Any) -> "GeneratorConfig":
        """Копия конфигурации с изменёнными параметрами генерации."""
        if "quality" in changes:
            changes["quality"] = validate_quality(changes["quality"])
        return replace(self, generation=replace(self.generation, **changes))

    def url_for(self, filename: str) -> str:
        return f"{self.base_url}/{filename}"


def _apply_env(data: Dict[str, Any], env: Mapping[str, Optional[str]]) -> Dict[str, Any]:
    generation = dict(data.get("generation") or {})
    if env.get(ENV_METHOD):
        generation["method"] = env[ENV_METHOD]
    if env.get(ENV_TOOL_PATH):
        generation["tool_path"] = env[ENV_TOOL_PATH]
    if env.get(ENV_QUALITY):
        generation["quality"] = env[ENV_QUALITY]
    data["generation"] = generation
    return data


def load_config(path: Optional[str | Path] = None, env_file: Optional[str | Path] = None) -> GeneratorConfig:
    """Загружает конфигурацию из JSON-файла и переменных окружения.

    Args:
        path: JSON-файл конфигурации. Допускается обёртка `{"favicons": {...}}`.
        env_file: `.env`-файл с переменными `ICONSMITH_*`. Значения из окружения процесса
            имеют приоритет над файлом.

    Returns:
        `GeneratorConfig`.

    Raises:
        ConfigError: если файл не найден, не является JSON или содержит неверные значения.
    """
    data: Dict[str, Any] = {}
    if path is not None:
        config_path = Path(path)
        if not config_path.is_file():
            raise ConfigError(f"Файл конфигурации не найден: {config_path}")
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Файл конфигурации не является JSON: {config_path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Ожидался JSON-объект в {config_path}")
        if isinstance(data.get("favicons"), dict):
            data = data["favicons"]
        logger.debug("Конфигурация загружена из %s", config_path)

    env: Dict[str, Optional[str]] = {}
    if env_file is not None:
        env.update(dotenv_values(env_file))
    env.update({key: os.environ[key] for key in (ENV_METHOD, ENV_TOOL_PATH, ENV_QUALITY) if key in os.environ})

    return GeneratorConfig.from_mapping(_apply_env(data, env))
