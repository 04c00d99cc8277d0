import logging
import pytest
from pathlib import Path

from memoproxy.infrastructure.config import settings

@pytest.fixture
def fresh_settings():
    """Forgets loaded configuration before and after the test."""
    settings.reset_configuration()
    yield settings
    settings.reset_configuration()

def test_env_values_are_coerced(monkeypatch, fresh_settings):
    monkeypatch.setenv("MEMOPROXY_FEATURE_ENABLED", "true")
    monkeypatch.setenv("MEMOPROXY_RETRIES", "3")
    monkeypatch.setenv("MEMOPROXY_RATIO", "0.5")
    monkeypatch.setenv("MEMOPROXY_NAME", "store")

    assert fresh_settings.get_config("feature.enabled") is True
    assert fresh_settings.get_config("retries") == 3
    assert fresh_settings.get_config("ratio") == 0.5
    assert fresh_settings.get_config("name") == "store"
    assert fresh_settings.get_config("absent", "fallback") == "fallback"

def test_yaml_values_are_found_by_dotted_path(tmp_path: Path, monkeypatch, fresh_settings):
    monkeypatch.chdir(tmp_path)
    config_file = tmp_path / "config.yaml"
    config_file.write_text("cache:\n  dir: /tmp/from-yaml\nlogging:\n  level: debug\n")

    fresh_settings.load_configuration(config_file=config_file)

    assert fresh_settings.get_config("logging.level") == "debug"
    assert fresh_settings.get_log_level() == logging.DEBUG

def test_test_overrides_win_over_environment(monkeypatch, fresh_settings):
    monkeypatch.setenv("MEMOPROXY_CACHE_DIR", "/tmp/from-env")

    # the autouse fixture in conftest sets cache.dir for every test
    assert fresh_settings.get_cache_dir() != Path("/tmp/from-env")

    fresh_settings.clear_test_config()
    assert fresh_settings.get_cache_dir() == Path("/tmp/from-env")

def test_cache_dir_defaults_to_home(monkeypatch, fresh_settings):
    fresh_settings.clear_test_config()
    monkeypatch.delenv("MEMOPROXY_CACHE_DIR", raising=False)

    assert fresh_settings.get_cache_dir() == fresh_settings.DEFAULT_CACHE_DIR

def test_unknown_log_level_falls_back_to_info(fresh_settings):
    fresh_settings.set_config_for_testing({"logging.level": "chatty"})

    assert fresh_settings.get_log_level() == logging.INFO
