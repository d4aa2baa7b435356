import subprocess
from pathlib import Path
from typing import Callable, List

import pytest
from PIL import Image, ImageDraw

from iconsmith.config import GeneratorConfig

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)


@pytest.fixture
def make_image(tmp_path: Path) -> Callable[..., Path]:
    """Фабрика исходников: изображение заданного размера и формата в tmp_path."""

    def _make(width: int, height: int, fmt: str = "PNG", name: str | None = None, transparent: bool = False) -> Path:
        ext = {"PNG": "png", "JPEG": "jpg", "GIF": "gif", "WEBP": "webp", "BMP": "bmp"}[fmt]
        path = tmp_path / (name or f"source-{width}x{height}.{ext}")
        image = Image.new("RGBA", (width, height), (0, 0, 0, 0) if transparent else (255, 255, 255, 255))
        draw = ImageDraw.Draw(image)
        draw.ellipse((width // 4, height // 4, 3 * width // 4, 3 * height // 4), fill=BLUE)
        if fmt in ("JPEG", "BMP"):
            image = image.convert("RGB")
        image.save(path, format=fmt)
        return path

    return _make


@pytest.fixture
def striped_source(tmp_path: Path) -> Path:
    """1024x768: красная полоса 128 px слева, зелёный центр 768 px, синяя полоса 128 px справа."""
    image = Image.new("RGBA", (1024, 768), GREEN)
    draw = ImageDraw.Draw(image)
    draw.rectangle((0, 0, 127, 767), fill=RED)
    draw.rectangle((896, 0, 1023, 767), fill=BLUE)
    path = tmp_path / "striped.png"
    image.save(path)
    return path


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    return tmp_path / "public" / "icons"


@pytest.fixture
def config() -> GeneratorConfig:
    return GeneratorConfig.from_mapping({"base_url": "/icons", "app_name": "Test App"})


class FakeMagick:
    """Подмена `subprocess.run` для ImageMagick: записывает команды и отдаёт фиктивные данные."""

    def __init__(self, dimensions: str = "1024x768", delegates: str = "png webp zlib") -> None:
        self.dimensions = dimensions
        self.delegates = delegates
        self.calls: List[dict] = []
        self.fail_on: set = set()

    def __call__(self, command, **kwargs):
        self.calls.append({"command": list(command), **kwargs})
        args = command[1:]
        if args == ["-version"]:
            out = f"Version: ImageMagick 7.1.1-21 Q16\nDelegates (built-in): {self.delegates}\n".encode()
            return subprocess.CompletedProcess(command, 0, stdout=out, stderr=b"")
        if args[-1] == "info:":
            return subprocess.CompletedProcess(command, 0, stdout=self.dimensions.encode(), stderr=b"")
        size = args[args.index("-resize") + 1] if "-resize" in args else "ico"
        if size in self.fail_on:
            return subprocess.CompletedProcess(command, 1, stdout=b"", stderr=b"convert: no encode delegate")
        return subprocess.CompletedProcess(command, 0, stdout=b"RIFF-fake-" + size.encode(), stderr=b"")


@pytest.fixture
def fake_magick(monkeypatch) -> FakeMagick:
    fake = FakeMagick()
    monkeypatch.setattr("iconsmith.services.backends.subprocess.run", fake)
    return fake
