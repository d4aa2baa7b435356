import pytest

from iconsmith.models.icon_model import IconFamily
from iconsmith.services import size_catalog
from iconsmith.services.existence_checker import compute_skip_set


def test_filenames_follow_templates():
    assert size_catalog.filename(IconFamily.FAVICON, "32x32") == "favicon-32x32.webp"
    assert size_catalog.filename(IconFamily.APPLE_TOUCH, "180x180") == "apple-touch-icon-180x180.webp"
    assert size_catalog.filename(IconFamily.ANDROID, "192x192") == "android-chrome-192x192.webp"
    assert size_catalog.filename(IconFamily.MSTILE, "150x150") == "mstile-150x150.webp"


def test_entries_keep_declaration_order():
    names = [name for _f, _s, name in size_catalog.entries([IconFamily.MSTILE, IconFamily.FAVICON])]
    assert names == ["mstile-150x150.webp", "favicon-16x16.webp", "favicon-32x32.webp", "favicon-48x48.webp"]
    android = size_catalog.dimensions(IconFamily.ANDROID)
    assert android == ("36x36", "48x48", "72x72", "96x96", "144x144", "192x192", "512x512")


def test_parse_dimension():
    assert size_catalog.parse_dimension("180x180") == 180
    assert size_catalog.format_dimension(48) == "48x48"
    with pytest.raises(ValueError):
        size_catalog.parse_dimension("310x150")
    with pytest.raises(ValueError):
        size_catalog.parse_dimension("big")


def test_skip_set_lists_only_present_files(tmp_path):
    (tmp_path / "favicon-32x32.webp").write_bytes(b"manual edit")
    (tmp_path / "android-chrome-192x192.webp").write_bytes(b"")
    (tmp_path / "unrelated.png").write_bytes(b"")

    assert compute_skip_set(tmp_path, [IconFamily.FAVICON]) == {"favicon-32x32.webp"}
    assert compute_skip_set(tmp_path, list(IconFamily)) == {"favicon-32x32.webp", "android-chrome-192x192.webp"}
    assert compute_skip_set(tmp_path / "missing", list(IconFamily)) == set()
