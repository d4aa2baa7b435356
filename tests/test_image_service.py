import pytest
from PIL import Image

from iconsmith.errors import InvalidImage, SourceNotFound
from iconsmith.services.image_service import ImageService, crop_to_square, is_opaque, square_crop_box


@pytest.mark.parametrize(
    "width, height, expected",
    [
        (1024, 768, (128, 0, 896, 768)),
        (768, 1024, (0, 128, 768, 896)),
        (512, 512, (0, 0, 512, 512)),
        (1025, 768, (128, 0, 896, 768)),
    ],
)
def test_square_crop_box_centers_on_long_axis(width, height, expected):
    assert square_crop_box(width, height) == expected


def test_crop_to_square_keeps_alpha():
    image = Image.new("RGBA", (600, 400), (10, 20, 30, 0))
    square = crop_to_square(image)
    assert square.size == (400, 400)
    assert square.mode == "RGBA"
    assert square.getpixel((0, 0))[3] == 0


def test_is_opaque():
    assert is_opaque(Image.new("RGB", (4, 4)))
    assert is_opaque(Image.new("RGBA", (4, 4), (1, 2, 3, 255)))
    transparent = Image.new("RGBA", (4, 4), (1, 2, 3, 255))
    transparent.putpixel((2, 2), (0, 0, 0, 10))
    assert not is_opaque(transparent)


def test_load_image_reports_metadata(make_image):
    path = make_image(640, 520, fmt="JPEG")
    data = ImageService().load_image(path)
    assert (data.width, data.height) == (640, 520)
    assert data.format == "JPEG"
    assert data.mode == "RGBA"
    assert data.min_side == 520
    assert data.size_bytes == path.stat().st_size


def test_load_image_missing(tmp_path):
    with pytest.raises(SourceNotFound):
        ImageService().load_image(tmp_path / "nope.png")


def test_load_image_not_an_image(tmp_path):
    path = tmp_path / "logo.png"
    path.write_text("definitely not a png")
    with pytest.raises(InvalidImage):
        ImageService().load_image(path)


def test_load_image_rejects_unsupported_format(make_image):
    with pytest.raises(InvalidImage, match="BMP"):
        ImageService().load_image(make_image(600, 600, fmt="BMP"))


@pytest.mark.parametrize("fmt", ["PNG", "JPEG", "GIF", "WEBP"])
def test_load_image_supported_formats(make_image, fmt):
    assert ImageService().load_image(make_image(520, 520, fmt=fmt)).format == fmt


def test_oversized_image_is_reported_as_invalid(make_image, monkeypatch):
    source = make_image(512, 512)
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
    with pytest.raises(InvalidImage):
        ImageService().load_image(source)
