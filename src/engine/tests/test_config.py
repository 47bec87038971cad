"""Tests for configuration loading."""

import pytest

from foodloop.config import Config, get_config, reload_config


def test_defaults():
    config = Config()
    assert config.notifications.default_radius_km == 10.0
    assert config.notifications.earth_radius_km == 6371.0
    assert config.logging.level == "INFO"
    assert config.rating.scoring_file is None


def test_yaml_files(tmp_path):
    (tmp_path / "notifications.yaml").write_text(
        "notifications:\n"
        "  default_radius_km: 25\n"
        "logging:\n"
        "  level: debug\n"
    )
    (tmp_path / "safety_rating.yaml").write_text("scoring_factors: {}\n")

    config = Config.load(tmp_path)

    assert config.notifications.default_radius_km == 25.0
    assert config.notifications.earth_radius_km == 6371.0
    assert config.logging.level == "DEBUG"
    assert config.rating.scoring_file == str(tmp_path / "safety_rating.yaml")


def test_env_overrides_yaml(tmp_path, monkeypatch):
    (tmp_path / "notifications.yaml").write_text("notifications:\n  default_radius_km: 25\n")
    monkeypatch.setenv("FOODLOOP_DEFAULT_RADIUS_KM", "7.5")
    monkeypatch.setenv("FOODLOOP_LOG_LEVEL", "warning")

    config = Config.load(tmp_path)

    assert config.notifications.default_radius_km == 7.5
    assert config.logging.level == "WARNING"


def test_invalid_env_value(monkeypatch):
    monkeypatch.setenv("FOODLOOP_EARTH_RADIUS_KM", "big")
    with pytest.raises(ValueError):
        Config.load()


def test_missing_config_dir(tmp_path):
    config = Config.load(tmp_path / "absent")
    assert config.notifications.default_radius_km == 10.0


def test_get_config_is_cached():
    assert get_config() is get_config()


def test_bundled_config_dir_points_at_scoring_file():
    assert get_config().rating.scoring_file.endswith("safety_rating.yaml")


def test_reload_replaces_cached(tmp_path):
    (tmp_path / "notifications.yaml").write_text("notifications:\n  default_radius_km: 3\n")
    first = get_config()

    reloaded = reload_config(tmp_path)

    assert reloaded is not first
    assert get_config() is reloaded
    assert get_config().notifications.default_radius_km == 3.0
