import json
from pathlib import Path

import pytest

from iconsmith.config import GeneratorConfig, GenerationSettings, load_config
from iconsmith.errors import ConfigError
from iconsmith.services.favicon_generator import FaviconGenerator


def test_from_mapping_reads_documented_keys():
    config = GeneratorConfig.from_mapping(
        {
            "base_path": "public/icons",
            "base_url": "/icons/",
            "app_name": "Example App",
            "theme-color": "#4F46E5",
            "ms-tile-color": "#ffffff",
            "icons": {"manifest": "/manifest.json"},
            "generation": {"method": "imagemagick", "imagick_path": "/usr/bin/convert", "quality": 95},
        }
    )
    assert config.base_path == Path("public/icons")
    assert config.base_url == "/icons"
    assert config.url_for("favicon.ico") == "/icons/favicon.ico"
    assert config.theme_color == "#4F46E5"
    assert config.generation == GenerationSettings(method="imagemagick", tool_path="/usr/bin/convert", quality=95)


def test_defaults():
    settings = GeneratorConfig.from_mapping(None).generation
    assert (settings.method, settings.tool_path, settings.quality, settings.min_source_size) == (
        "bitmap", "magick", 90, 512,
    )


@pytest.mark.parametrize("quality", [0, 101, "high"])
def test_quality_validation(quality):
    with pytest.raises(ConfigError):
        GenerationSettings.from_mapping({"quality": quality})


@pytest.mark.parametrize("data", [{"timeout": "soon"}, {"timeout": 0}, {"min_source_size": "big"}])
def test_numeric_settings_validation(data):
    with pytest.raises(ConfigError):
        GenerationSettings.from_mapping(data)


def test_with_generation_validates_quality():
    config = GeneratorConfig()
    assert config.with_generation(quality="70").generation.quality == 70
    with pytest.raises(ConfigError):
        config.with_generation(quality=150)


def test_config_seeds_registry():
    config = GeneratorConfig.from_mapping(
        {"theme-color": "#123456", "icons": {"favicon": "/favicon.ico", "ms-tile-color": "#eeeeee"}}
    )
    registry = FaviconGenerator(config).registry
    assert registry.get("favicon") == "/favicon.ico"
    assert registry.get("theme-color") == "#123456"
    assert registry.get("ms-tile-color") == "#eeeeee"


def test_load_config_unwraps_favicons_block(tmp_path):
    path = tmp_path / "favicon.json"
    path.write_text(json.dumps({"favicons": {"base_url": "/assets/icons", "generation": {"method": "gd"}}}))
    config = load_config(path)
    assert config.base_url == "/assets/icons"
    assert config.generation.method == "gd"


def test_load_config_errors(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "missing.json")
    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    with pytest.raises(ConfigError):
        load_config(broken)


def test_environment_overrides(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("ICONSMITH_METHOD=cli\nICONSMITH_QUALITY=75\n")
    monkeypatch.delenv("ICONSMITH_METHOD", raising=False)
    monkeypatch.delenv("ICONSMITH_QUALITY", raising=False)
    monkeypatch.setenv("ICONSMITH_TOOL_PATH", "/opt/im/magick")

    settings = load_config(env_file=env_file).generation
    assert settings.method == "cli"
    assert settings.quality == 75
    assert settings.tool_path == "/opt/im/magick"

    monkeypatch.setenv("ICONSMITH_METHOD", "bitmap")
    assert load_config(env_file=env_file).generation.method == "bitmap"
