"""Командная строка: генерация иконок, манифеста и разметки из одного исходника.

Пример:
    iconsmith logo.png -o public/icons -m cli -q 95 --html
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from iconsmith.config import GeneratorConfig, load_config
from iconsmith.errors import IconsmithError
from iconsmith.models.icon_model import IconFamily
from iconsmith.services.favicon_generator import FaviconGenerator
from iconsmith.services.manifest_builder import build_manifest, manifest_to_json
from iconsmith.services.markup_renderer import render_markup

logger = logging.getLogger("iconsmith.cli")

MANIFEST_FILENAME = "manifest.json"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="iconsmith",
        description="Генерация favicon, Apple touch, Android и MS tile иконок из одного изображения.",
    )
    parser.add_argument("source", type=Path, help="Исходное изображение (не меньше 512x512)")
    parser.add_argument("-o", "--output", type=Path, help="Каталог вывода (по умолчанию base_path из конфигурации)")
    parser.add_argument("-m", "--method", help="Метод генерации: bitmap или cli")
    parser.add_argument("-q", "--quality", type=int, help="Качество WebP 1-100")
    parser.add_argument(
        "-t", "--type", dest="families", action="append",
        choices=[family.value for family in IconFamily],
        help="Семейство иконок; можно указать несколько раз (по умолчанию все)",
    )
    parser.add_argument("-c", "--config", type=Path, help="JSON-файл конфигурации")
    parser.add_argument("--env-file", type=Path, help=".env с переменными ICONSMITH_*")
    parser.add_argument("--tool-path", help="Путь к ImageMagick (magick или convert)")
    parser.add_argument("--no-manifest", action="store_true", help="Не записывать manifest.json")
    parser.add_argument("--html", action="store_true", help="Вывести разметку для <head>")
    parser.add_argument("-v", "--verbose", action="store_true", help="Подробный лог")
    return parser


def _resolve_config(args: argparse.Namespace) -> GeneratorConfig:
    config = load_config(args.config, env_file=args.env_file)
    changes = {}
    if args.method:
        changes["method"] = args.method
    if args.tool_path:
        changes["tool_path"] = args.tool_path
    if args.quality is not None:
        changes["quality"] = args.quality
    return config.with_generation(**changes) if changes else config


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(message)s",
        level=logging.DEBUG if args.verbose else logging.INFO,
    )

    try:
        config = _resolve_config(args)
        output_dir = args.output or config.base_path
        generator = FaviconGenerator(config)
        result = generator.generate(args.source, output_dir=output_dir, families=args.families)
    except IconsmithError as exc:
        logger.error("%s", exc)
        return 1

    families = {icon.path.name: icon.family.value for icon in result.icons}
    for name, path in result.written.items():
        label = f" [{families[name]}]" if name in families else ""
        print(f"  + {name}{label} ({path.stat().st_size / 1024:.1f} KB)")
    for item in result.skipped:
        print(f"  = {item.filename} ({'уже существует' if item.reason == 'exists' else 'требует увеличения'})")
    for item in result.failed:
        print(f"  ! {item.filename}: {item.error}")
    print(f"Создано: {len(result.written)}, пропущено: {len(result.skipped)}, ошибок: {len(result.failed)}")

    if not args.no_manifest:
        manifest_path = Path(output_dir) / MANIFEST_FILENAME
        try:
            manifest_path.write_text(manifest_to_json(build_manifest(generator.registry, config)), encoding="utf-8")
        except OSError as exc:
            logger.error("Не удалось записать %s: %s", manifest_path, exc)
            return 1
        generator.registry.set_manifest(config.url_for(MANIFEST_FILENAME))
        print(f"  + {MANIFEST_FILENAME}")

    if args.html:
        print()
        print(render_markup(generator.registry, config))
    return 0


if __name__ == "__main__":
    sys.exit(main())
