"""Tests for configuration adapter."""

from pathlib import Path

import pytest

from communauto_finder.adapters.config import AppConfig


def test_config_loads_defaults() -> None:
    """Given no environment variables, when loading config, then defaults are used."""
    config = AppConfig.for_testing()

    assert config.api_base_url == "https://restapifrontoffice.reservauto.net"
    assert config.api_timeout_seconds == 10.0
    assert config.poll_interval_seconds == 1.5
    assert config.max_polls is None
    assert config.city_id is None
    assert config.margin_km == 1.0
    assert config.log_level == "INFO"


def test_config_loads_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Given COMMAUTO_ environment variables, when loading config, then they are used."""
    monkeypatch.setenv("COMMAUTO_CITY_ID", "59")
    monkeypatch.setenv("COMMAUTO_LATITUDE", "45.5")
    monkeypatch.setenv("COMMAUTO_LONGITUDE", "-73.57")
    monkeypatch.setenv("COMMAUTO_POLL_INTERVAL_SECONDS", "3")
    monkeypatch.setenv("COMMAUTO_LOG_LEVEL", "debug")

    config = AppConfig.for_testing()

    assert config.city_id == 59
    assert config.latitude == 45.5
    assert config.longitude == -73.57
    assert config.poll_interval_seconds == 3.0
    assert config.log_level == "DEBUG"


def test_config_ignores_unprefixed_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Given a generic LOG_LEVEL variable, when loading config, then it is not picked up."""
    monkeypatch.setenv("LOG_LEVEL", "ERROR")

    config = AppConfig.for_testing()

    assert config.log_level == "INFO"


@pytest.mark.parametrize(
    ("field", "value", "message"),
    [
        ("poll_interval_seconds", 0, "greater than 0"),
        ("api_timeout_seconds", -1, "greater than 0"),
        ("max_polls", 0, "at least 1"),
        ("log_level", "LOUD", "log_level must be one of"),
    ],
)
def test_config_validates_values(field: str, value: object, message: str) -> None:
    """Given an invalid value, when loading config, then validation error is raised."""
    with pytest.raises(ValueError, match=message):
        AppConfig.for_testing(**{field: value})


def test_config_applies_toml_sections(tmp_path: Path) -> None:
    """Given a TOML file with [api] and [search], when loading it, then values are applied."""
    config_path = tmp_path / "communauto.toml"
    config_path.write_text(
        """
[api]
base_url = "http://localhost:9000"
timeout_seconds = 5
poll_interval_seconds = 2.5

[search]
city_id = 59
latitude = 45.50
longitude = -73.57
margin_km = 0.5
max_polls = 20
""",
        encoding="utf-8",
    )
    config = AppConfig.for_testing(config_file=str(config_path))

    toml_data = config.load_toml()

    assert toml_data["search"]["city_id"] == 59
    assert config.api_base_url == "http://localhost:9000"
    assert config.api_timeout_seconds == 5.0
    assert config.poll_interval_seconds == 2.5
    assert config.city_id == 59
    assert config.latitude == 45.50
    assert config.longitude == -73.57
    assert config.margin_km == 0.5
    assert config.max_polls == 20


def test_config_toml_keeps_values_not_in_file(tmp_path: Path) -> None:
    """Given a TOML file with only [search], when loading it, then API defaults remain."""
    config_path = tmp_path / "communauto.toml"
    config_path.write_text("[search]\ncity_id = 90\n", encoding="utf-8")
    config = AppConfig.for_testing(config_file=str(config_path), poll_interval_seconds=4.0)

    config.load_toml()

    assert config.city_id == 90
    assert config.poll_interval_seconds == 4.0
    assert config.api_base_url == "https://restapifrontoffice.reservauto.net"


def test_config_toml_rejects_invalid_interval(tmp_path: Path) -> None:
    """Given a zero poll interval in TOML, when loading it, then ValueError is raised."""
    config_path = tmp_path / "communauto.toml"
    config_path.write_text("[api]\npoll_interval_seconds = 0\n", encoding="utf-8")
    config = AppConfig.for_testing(config_file=str(config_path))

    with pytest.raises(ValueError, match="greater than 0"):
        config.load_toml()


def test_config_toml_rejects_non_table_section(tmp_path: Path) -> None:
    """Given 'search' that is not a table, when loading it, then ValueError is raised."""
    config_path = tmp_path / "communauto.toml"
    config_path.write_text('search = "montreal"\n', encoding="utf-8")
    config = AppConfig.for_testing(config_file=str(config_path))

    with pytest.raises(ValueError, match="'search' must be a table"):
        config.load_toml()


def test_config_raises_error_when_file_not_found(tmp_path: Path) -> None:
    """Given a missing config file, when loading it, then FileNotFoundError is raised."""
    config = AppConfig.for_testing(config_file=str(tmp_path / "missing.toml"))

    with pytest.raises(FileNotFoundError, match="Configuration file not found"):
        config.load_toml()


def test_config_returns_empty_dict_when_config_file_not_set() -> None:
    """Given no config file, when loading TOML, then an empty dict is returned."""
    config = AppConfig.for_testing()

    assert config.load_toml() == {}
