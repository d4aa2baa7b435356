import io
import subprocess

import numpy as np
import pytest
from PIL import Image

from iconsmith.config import GenerationSettings
from iconsmith.errors import (
    BackendUnavailable,
    EncodeFailed,
    EncoderUnsupported,
    InvalidGenerationMethod,
    UnsupportedDimension,
)
from iconsmith.services.backends import BitmapBackend, CommandLineBackend, create_backend


# ---- BitmapBackend ----

def test_bitmap_prepare_crops_center_square(striped_source):
    image = BitmapBackend().prepare(striped_source)
    assert image.side == 768
    assert image.crop_box == (128, 0, 896, 768)
    pixels = np.asarray(image.pil_image)
    # красная и синяя полосы по 128 px отрезаны, остался только зелёный центр
    assert pixels.shape == (768, 768, 4)
    assert (pixels[..., :3] == (0, 255, 0)).all()


def test_bitmap_resize_produces_exact_webp(striped_source):
    backend = BitmapBackend()
    data = backend.resize_square(backend.prepare(striped_source), 180, quality=90)
    with Image.open(io.BytesIO(data)) as encoded:
        assert encoded.format == "WEBP"
        assert encoded.size == (180, 180)


def test_bitmap_never_upscales(make_image):
    backend = BitmapBackend()
    image = backend.prepare(make_image(300, 400))
    with pytest.raises(UnsupportedDimension) as info:
        backend.resize_square(image, 512, quality=90)
    assert (info.value.dimension, info.value.side) == (512, 300)


def test_bitmap_keeps_transparency(make_image):
    backend = BitmapBackend()
    transparent = backend.prepare(make_image(600, 600, transparent=True))
    opaque = backend.prepare(make_image(600, 600, fmt="JPEG"))
    assert not transparent.opaque
    assert opaque.opaque
    with Image.open(io.BytesIO(backend.resize_square(transparent, 32, 90))) as encoded:
        assert encoded.mode == "RGBA"
    with Image.open(io.BytesIO(backend.resize_square(opaque, 32, 90))) as encoded:
        assert encoded.mode == "RGB"


def test_bitmap_ico_contains_all_frames(make_image):
    backend = BitmapBackend()
    data = backend.encode_ico(backend.prepare(make_image(512, 512)), (16, 32, 48))
    with Image.open(io.BytesIO(data)) as ico:
        assert ico.format == "ICO"
        assert set(ico.info["sizes"]) == {(16, 16), (32, 32), (48, 48)}


def test_bitmap_rejects_missing_webp_encoder(monkeypatch):
    monkeypatch.setattr("iconsmith.services.backends.features.check", lambda name: False)
    with pytest.raises(EncoderUnsupported):
        BitmapBackend().ensure_available()


# ---- CommandLineBackend ----

def test_cli_unavailable_when_tool_missing(tmp_path):
    backend = CommandLineBackend(tool_path=str(tmp_path / "no-such-magick"))
    assert backend.is_available() is False
    with pytest.raises(BackendUnavailable):
        backend.ensure_available()


def test_cli_probe_uses_version_flag(fake_magick):
    backend = CommandLineBackend(tool_path="magick")
    backend.ensure_available()
    assert fake_magick.calls[0]["command"] == ["magick", "-version"]
    # результат пробы кэшируется
    backend.ensure_available()
    assert len(fake_magick.calls) == 1


def test_cli_requires_webp_delegate(fake_magick):
    fake_magick.delegates = "png jpeg zlib"
    with pytest.raises(EncoderUnsupported):
        CommandLineBackend().ensure_available()


def test_cli_prepare_reads_dimensions(fake_magick, striped_source):
    image = CommandLineBackend().prepare(striped_source)
    assert image.side == 768
    assert image.crop_box == (128, 0, 896, 768)
    assert image.pil_image is None
    command = fake_magick.calls[-1]["command"]
    assert command[-3:] == ["-format", "%wx%h", "info:"]


def test_cli_resize_builds_argument_list(fake_magick, tmp_path, striped_source):
    tricky = tmp_path / "logo; rm -rf $HOME.png"
    tricky.write_bytes(striped_source.read_bytes())
    backend = CommandLineBackend(tool_path="convert", timeout=5)
    data = backend.resize_square(backend.prepare(tricky), 48, quality=85)

    assert data == b"RIFF-fake-48x48!"
    call = fake_magick.calls[-1]
    command = call["command"]
    assert command[0] == "convert"
    assert command[1] == f"{tricky.resolve()}[0]"
    assert command[command.index("-crop") + 1] == "768x768+128+0"
    assert command[command.index("-quality") + 1] == "85"
    assert command[-1] == "webp:-"
    assert call["timeout"] == 5
    assert not call.get("shell")


def test_cli_refuses_upscale_without_running(fake_magick, striped_source):
    backend = CommandLineBackend()
    image = backend.prepare(striped_source)
    calls = len(fake_magick.calls)
    with pytest.raises(UnsupportedDimension):
        backend.resize_square(image, 1024, quality=90)
    assert len(fake_magick.calls) == calls


def test_cli_nonzero_exit_is_encode_failure(fake_magick, striped_source):
    fake_magick.fail_on.add("32x32!")
    backend = CommandLineBackend()
    with pytest.raises(EncodeFailed, match="no encode delegate"):
        backend.resize_square(backend.prepare(striped_source), 32, quality=90)


def test_cli_timeout_is_encode_failure(monkeypatch, fake_magick, striped_source):
    backend = CommandLineBackend(timeout=0.5)
    image = backend.prepare(striped_source)

    def hang(command, **kwargs):
        raise subprocess.TimeoutExpired(command, kwargs["timeout"])

    monkeypatch.setattr("iconsmith.services.backends.subprocess.run", hang)
    with pytest.raises(EncodeFailed, match="таймаут"):
        backend.resize_square(image, 16, quality=90)


def test_cli_ico_auto_resize(fake_magick, striped_source):
    backend = CommandLineBackend()
    assert backend.encode_ico(backend.prepare(striped_source), (16, 32, 48)) == b"RIFF-fake-ico"
    command = fake_magick.calls[-1]["command"]
    assert "icon:auto-resize=48,32,16" in command
    assert command[-1] == "ico:-"


# ---- create_backend ----

@pytest.mark.parametrize(
    "method, expected",
    [("bitmap", BitmapBackend), ("gd", BitmapBackend), ("cli", CommandLineBackend), ("ImageMagick", CommandLineBackend)],
)
def test_create_backend_aliases(method, expected):
    assert isinstance(create_backend(GenerationSettings(method=method)), expected)


def test_create_backend_passes_tool_settings():
    backend = create_backend(GenerationSettings(method="cli", tool_path="/opt/bin/magick", timeout=7))
    assert backend.tool_path == "/opt/bin/magick"
    assert backend.timeout == 7


def test_create_backend_unknown_method():
    with pytest.raises(InvalidGenerationMethod):
        create_backend(GenerationSettings(method="photoshop"))
