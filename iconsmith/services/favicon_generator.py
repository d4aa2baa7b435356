"""Генератор полного набора иконок из одного исходного изображения.

Порядок работы одного вызова `generate()`:
1. Проверка исходника: файл есть, декодируется, формат поддерживается, размер не меньше порога.
2. Проверка бэкенда (выбран один раз при создании генератора).
3. Блокировка каталога вывода и вычисление уже существующих файлов.
4. Генерация недостающих размеров в порядке каталога. Ошибки отдельных файлов
   не прерывают пакет.
5. Сборка `favicon.ico` из кадров 16/32/48.

Ошибки проверки (шаги 1–2) фатальны и выбрасываются до любой записи на диск.
"""
from __future__ import annotations

import logging
import os
import threading
import weakref
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from iconsmith.config import GeneratorConfig, validate_quality
from iconsmith.errors import EncodeFailed, ImageTooSmall, UnsupportedDimension
from iconsmith.models.icon_model import (
    ALL_FAMILIES,
    FailedIcon,
    GeneratedIcon,
    GenerationRequest,
    GenerationResult,
    IconFamily,
    SkippedIcon,
)
from iconsmith.models.image_model import ImageData, NormalizedImage
from iconsmith.services import size_catalog
from iconsmith.services.backends import ImageBackend, create_backend
from iconsmith.services.existence_checker import compute_skip_set
from iconsmith.services.icon_registry import IconRegistry
from iconsmith.services.image_service import ImageService

logger = logging.getLogger(__name__)

FamilyLike = Union[IconFamily, str]

_locks_guard = threading.Lock()


class _DirectoryLock:
    """Замок каталога. В словаре хранится по слабой ссылке."""

    def __init__(self) -> None:
        self.lock = threading.Lock()


# записи исчезают, когда каталог больше никто не блокирует
_directory_locks: "weakref.WeakValueDictionary[Path, _DirectoryLock]" = weakref.WeakValueDictionary()


@contextmanager
def directory_lock(directory: Path) -> Iterator[None]:
    """Сериализует генерацию в один каталог внутри процесса."""
    key = directory.resolve()
    with _locks_guard:
        entry = _directory_locks.get(key)
        if entry is None:
            entry = _DirectoryLock()
            _directory_locks[key] = entry
    with entry.lock:
        yield


def write_atomic(target: Path, data: bytes) -> None:
    """Пишет файл через временный файл в том же каталоге.

    Оборванная запись не оставляет усечённый файл под целевым именем, поэтому
    повторный `generate()` создаст его заново.
    """
    tmp = target.with_name(f".{target.name}.tmp")
    try:
        tmp.write_bytes(data)
        os.replace(tmp, target)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def normalize_families(families: Optional[Iterable[FamilyLike]]) -> Tuple[IconFamily, ...]:
    """Приводит имена семейств к `IconFamily`; неизвестные пропускаются с предупреждением."""
    if families is None:
        return ALL_FAMILIES
    result: List[IconFamily] = []
    for item in families:
        try:
            family = item if isinstance(item, IconFamily) else IconFamily(str(item).strip().lower())
        except ValueError:
            logger.warning("Неизвестное семейство иконок пропущено: %s", item)
            continue
        if family not in result:
            result.append(family)
    return tuple(result)


class FaviconGenerator:
    """Оркестратор: проверка исходника, выбор бэкенда, генерация и регистрация иконок.

    Args:
        config: Конфигурация генератора.
        backend: Готовый бэкенд. По умолчанию создаётся по `method` или `config.generation.method`.
        registry: Реестр иконок. По умолчанию создаётся и заполняется из `config.icons`.
        image_service: Сервис загрузки изображений для проверки исходника.
        method: Явный метод генерации, имеет приоритет над конфигурацией.

    Raises:
        InvalidGenerationMethod: если имя метода неизвестно.
    """

    def __init__(
        self,
        config: Optional[GeneratorConfig] = None,
        backend: Optional[ImageBackend] = None,
        registry: Optional[IconRegistry] = None,
        image_service: Optional[ImageService] = None,
        method: Optional[str] = None,
    ) -> None:
        self.config = config or GeneratorConfig()
        if method is not None:
            self.config = self.config.with_generation(method=method)
        self.backend = backend or create_backend(self.config.generation)
        self.registry = registry if registry is not None else self._seed_registry(self.config)
        self._image_service = image_service or ImageService()

    @staticmethod
    def _seed_registry(config: GeneratorConfig) -> IconRegistry:
        registry = IconRegistry(config.icons)
        if config.theme_color and "theme-color" not in registry:
            registry.set_theme_color(config.theme_color)
        if config.ms_tile_color and "ms-tile-color" not in registry:
            registry.set_ms_tile_color(config.ms_tile_color)
        return registry

    def generate(
        self,
        source: str | Path,
        output_dir: Optional[str | Path] = None,
        families: Optional[Iterable[FamilyLike]] = None,
        quality: Optional[int] = None,
    ) -> GenerationResult:
        """Создаёт недостающие иконки запрошенных семейств.

        Args:
            source: Путь к исходному изображению (JPEG, PNG, GIF, WEBP).
            output_dir: Каталог вывода, по умолчанию `config.base_path`.
            families: Семейства иконок, по умолчанию все.
            quality: Качество WEBP 1..100, по умолчанию из конфигурации.

        Returns:
            `GenerationResult`; в `written` только файлы, записанные этим вызовом.

        Raises:
            SourceNotFound, InvalidImage, ImageTooSmall: исходник не прошёл проверку.
            BackendUnavailable, EncoderUnsupported: бэкенд не может работать.
            ConfigError: качество вне диапазона.
        """
        request = GenerationRequest(
            source=Path(source),
            method=self.backend.name,
            output_dir=Path(output_dir) if output_dir is not None else self.config.base_path,
            families=normalize_families(families),
            quality=validate_quality(self.config.generation.quality if quality is None else quality),
        )
        self.validate_source(request.source)
        self.backend.ensure_available()

        with directory_lock(request.output_dir):
            return self._run(request)

    def validate_source(self, source: Path) -> ImageData:
        data = self._image_service.load_image(source)
        required = self.config.generation.min_source_size
        if data.min_side < required:
            raise ImageTooSmall(required, data.width, data.height)
        return data

    def _run(self, request: GenerationRequest) -> GenerationResult:
        output_dir = request.output_dir
        output_dir.mkdir(parents=True, exist_ok=True)
        existing = compute_skip_set(output_dir, request.families)
        result = GenerationResult()

        pending: List[Tuple[IconFamily, str, str]] = []
        for family, size, name in size_catalog.entries(request.families):
            if name in existing:
                logger.info("Пропуск существующего файла: %s", name)
                result.skipped.append(SkippedIcon(name, "exists"))
                self.registry.register(family, size, self.config.url_for(name))
            else:
                pending.append((family, size, name))

        need_ico = IconFamily.FAVICON in request.families
        ico_path = output_dir / size_catalog.ICO_FILENAME
        if need_ico and ico_path.exists():
            logger.info("Пропуск существующего файла: %s", ico_path.name)
            result.skipped.append(SkippedIcon(ico_path.name, "exists"))
            self.registry.set_favicon(self.config.url_for(ico_path.name))
            need_ico = False

        if not pending and not need_ico:
            return result

        image = self.backend.prepare(request.source)
        for family, size, name in pending:
            self._generate_one(image, family, size, name, request, result)
        if need_ico:
            self._generate_ico(image, ico_path, result)

        logger.info(
            "Генерация завершена (%s): создано %d, пропущено %d, ошибок %d",
            request.method, len(result.written), len(result.skipped), len(result.failed),
        )
        return result

    def _generate_one(
        self,
        image: NormalizedImage,
        family: IconFamily,
        size: str,
        name: str,
        request: GenerationRequest,
        result: GenerationResult,
    ) -> None:
        target = request.output_dir / name
        try:
            data = self.backend.resize_square(image, size_catalog.parse_dimension(size), request.quality)
            write_atomic(target, data)
        except UnsupportedDimension as exc:
            logger.warning("Пропуск %s: %s", name, exc)
            result.skipped.append(SkippedIcon(name, "upscale"))
            return
        except (EncodeFailed, OSError) as exc:
            logger.error("Ошибка генерации %s: %s", name, exc)
            result.failed.append(FailedIcon(name, str(exc)))
            return

        logger.info("Создан %s", target)
        result.written[name] = target
        result.icons.append(GeneratedIcon(family, size, target))
        self.registry.register(family, size, self.config.url_for(name))

    def _generate_ico(self, image: NormalizedImage, ico_path: Path, result: GenerationResult) -> None:
        name = ico_path.name
        try:
            write_atomic(ico_path, self.backend.encode_ico(image, size_catalog.ICO_DIMENSIONS))
        except UnsupportedDimension as exc:
            logger.warning("Пропуск %s: %s", name, exc)
            result.skipped.append(SkippedIcon(name, "upscale"))
            return
        except (EncodeFailed, OSError) as exc:
            logger.error("Ошибка генерации %s: %s", name, exc)
            result.failed.append(FailedIcon(name, str(exc)))
            return

        logger.info("Создан %s", ico_path)
        result.written[name] = ico_path
        self.registry.set_favicon(self.config.url_for(name))
