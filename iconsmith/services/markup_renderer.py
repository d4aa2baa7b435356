"""HTML-разметка `<link>`/`<meta>` для иконок из реестра."""
from __future__ import annotations

from html import escape
from typing import List, Optional

from iconsmith.config import GeneratorConfig
from iconsmith.services.icon_registry import IconRegistry
from iconsmith.services.manifest_builder import mime_type_for


def render_markup(registry: IconRegistry, config: Optional[GeneratorConfig] = None) -> str:
    """Возвращает теги для `<head>`, по одному на строку. Все значения экранируются."""
    config = config or GeneratorConfig()
    out: List[str] = []

    favicon = registry.get("favicon")
    if favicon:
        out.append(f'<link rel="icon" href="{escape(favicon)}" type="image/x-icon">')
        out.append(f'<link rel="shortcut icon" href="{escape(favicon)}" type="image/x-icon">')

    for slot in ("png", "android"):
        for size, path in registry.sized(slot).items():
            out.append(
                f'<link rel="icon" type="{mime_type_for(path)}" sizes="{escape(size)}" href="{escape(path)}">'
            )

    for size, path in registry.sized("apple-touch").items():
        out.append(f'<link rel="apple-touch-icon" sizes="{escape(size)}" href="{escape(path)}">')

    tile_color = registry.get("ms-tile-color")
    if tile_color:
        out.append(f'<meta name="msapplication-TileColor" content="{escape(tile_color)}">')
    tile_image = registry.get("mstile")
    if tile_image:
        out.append(f'<meta name="msapplication-TileImage" content="{escape(tile_image)}">')

    pinned = registry.get("safari-pinned-tab")
    if pinned:
        out.append(f'<link rel="mask-icon" href="{escape(pinned["path"])}" color="{escape(pinned["color"])}">')

    theme_color = registry.get("theme-color")
    if theme_color:
        out.append(f'<meta name="theme-color" content="{escape(theme_color)}">')

    manifest = registry.get("manifest")
    if manifest:
        out.append(f'<link rel="manifest" href="{escape(manifest)}">')

    if config.mobile_web_app_capable:
        out.append('<meta name="mobile-web-app-capable" content="yes">')
        out.append('<meta name="apple-mobile-web-app-capable" content="yes">')

    if config.app_name:
        out.append(f'<meta name="application-name" content="{escape(config.app_name)}">')
        out.append(f'<meta name="apple-mobile-web-app-title" content="{escape(config.app_name)}">')

    return "\n".join(out)
