import pytest

from braillegcode import configuration
from braillegcode.configuration import geometry_from_settings, get_settings
from braillegcode.structures import DeviceGeometry


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / ".config"))
    monkeypatch.chdir(tmp_path)
    for name in list(configuration.BraillegcodeConfig.__field_infos__):
        monkeypatch.delenv(name, raising=False)
    configuration._load_settings.cache_clear()
    yield tmp_path
    configuration._load_settings.cache_clear()


def test_defaults_match_device_geometry(isolated):
    settings = get_settings(app_dir=isolated)

    assert geometry_from_settings(settings) == DeviceGeometry()


def test_environment_overrides(isolated, monkeypatch):
    monkeypatch.setenv("BRAILLE_PAPER_WIDTH", "200")
    monkeypatch.setenv("BRAILLE_CENTER_ORIGIN", "true")
    monkeypatch.setenv("BRAILLE_LANGUAGE", "8-dots")

    geometry = geometry_from_settings(get_settings(app_dir=isolated))

    assert geometry.paper_width == 200
    assert geometry.center_origin is True
    assert geometry.language == "8 dots"


def test_dotenv_file(isolated):
    (isolated / ".env").write_text("BRAILLE_SPEED=1500\n", encoding="utf-8")

    geometry = geometry_from_settings(get_settings(app_dir=isolated))

    assert geometry.speed == 1500
