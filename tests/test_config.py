"""Tests for environment-driven settings."""

from pathlib import Path

import pytest

from datebook.config import Settings, load_settings
from datebook.grid import MONDAY, SUNDAY


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("DATEBOOK_TZ", "DATEBOOK_FIRST_WEEKDAY", "DATEBOOK_DATA_DIR"):
        monkeypatch.delenv(name, raising=False)


def test_defaults(tmp_path):
    """Test settings with nothing configured."""
    settings = load_settings(tmp_path / "missing.env")

    assert settings.tz == "UTC"
    assert settings.first_weekday == MONDAY
    assert settings.data_dir == Path("~/.datebook").expanduser()


def test_environment_overrides(monkeypatch, tmp_path):
    """Test reading every variable from the environment."""
    monkeypatch.setenv("DATEBOOK_TZ", "Europe/Berlin")
    monkeypatch.setenv("DATEBOOK_FIRST_WEEKDAY", "sunday")
    monkeypatch.setenv("DATEBOOK_DATA_DIR", str(tmp_path))

    settings = load_settings(tmp_path / "missing.env")

    assert settings.zone.key == "Europe/Berlin"
    assert settings.first_weekday == SUNDAY
    assert settings.data_dir == tmp_path


def test_numeric_first_weekday(monkeypatch, tmp_path):
    """Test that the first weekday may be given as an index."""
    monkeypatch.setenv("DATEBOOK_FIRST_WEEKDAY", "6")
    assert load_settings(tmp_path / "missing.env").first_weekday == 6


def test_env_file_is_loaded(monkeypatch, tmp_path):
    """Test that values come from a .env file when not already set."""
    env_file = tmp_path / ".env"
    env_file.write_text("DATEBOOK_TZ=Asia/Tokyo\n")
    # load_dotenv writes into os.environ; let monkeypatch restore it
    monkeypatch.setenv("DATEBOOK_TZ", "")
    monkeypatch.delenv("DATEBOOK_TZ")

    assert load_settings(env_file).tz == "Asia/Tokyo"


def test_invalid_timezone(monkeypatch, tmp_path):
    """Test that an unknown zone is rejected."""
    monkeypatch.setenv("DATEBOOK_TZ", "Mars/Olympus")
    with pytest.raises(ValueError, match="IANA timezone"):
        load_settings(tmp_path / "missing.env")


def test_invalid_weekday(monkeypatch, tmp_path):
    """Test that an unknown weekday is rejected."""
    monkeypatch.setenv("DATEBOOK_FIRST_WEEKDAY", "funday")
    with pytest.raises(ValueError, match="Invalid day"):
        load_settings(tmp_path / "missing.env")


def test_settings_zone():
    """Test the ZoneInfo accessor."""
    assert Settings(tz="UTC").zone.key == "UTC"
