import logging
import logging.handlers

import pytest

from hud_exporter.core.config import (
    DEFAULT_UPDATE_INTERVAL_MS,
    Config,
    ExporterConfig,
    LoggingConfig,
    configure_logging,
    get_default_config_path,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "HUD_EXPORTER_ENABLED",
        "HUD_EXPORTER_BIND",
        "HUD_EXPORTER_START_DELAY",
        "HUD_EXPORTER_UPDATE_INTERVAL_MS",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = ExporterConfig()
    assert config.enabled is False
    assert config.bind_address == "16969"
    assert config.start_delay_seconds == 0
    assert config.update_interval_ms == 1000
    assert config.update_interval_seconds == 1.0


def test_invalid_interval_replaced(caplog):
    config = ExporterConfig(update_interval_ms=0)
    assert config.update_interval_ms == DEFAULT_UPDATE_INTERVAL_MS
    assert "Invalid metrics update interval" in caplog.text


def test_negative_delay_clamped():
    assert ExporterConfig(start_delay_seconds=-5).start_delay_seconds == 0


def test_missing_file_gives_defaults(tmp_path):
    config = Config.from_yaml(str(tmp_path / "missing.yaml"))
    assert config.exporter == ExporterConfig()
    assert config.logging == LoggingConfig()


def test_yaml_round_trip(tmp_path):
    path = tmp_path / "hud_exporter.yaml"
    original = Config(
        exporter=ExporterConfig(enabled=True, bind_address="127.0.0.1:9100",
                                start_delay_seconds=5, update_interval_ms=250),
        logging=LoggingConfig(level="DEBUG"),
    )
    original.to_yaml(str(path))

    loaded = Config.from_yaml(str(path))
    assert loaded.exporter == original.exporter
    assert loaded.logging.level == "DEBUG"


def test_partial_yaml(tmp_path):
    path = tmp_path / "partial.yaml"
    path.write_text("exporter:\n  enabled: true\n  bind_address: '9300'\n")
    config = Config.from_yaml(str(path))
    assert config.exporter.enabled is True
    assert config.exporter.bind_address == "9300"
    assert config.exporter.update_interval_ms == 1000


def test_env_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("HUD_EXPORTER_ENABLED", "true")
    monkeypatch.setenv("HUD_EXPORTER_BIND", "0.0.0.0:9400")
    monkeypatch.setenv("HUD_EXPORTER_START_DELAY", "2.5")
    monkeypatch.setenv("HUD_EXPORTER_UPDATE_INTERVAL_MS", "500")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")

    config = Config.from_yaml(str(tmp_path / "missing.yaml"))
    assert config.exporter.enabled is True
    assert config.exporter.bind_address == "0.0.0.0:9400"
    assert config.exporter.start_delay_seconds == 2.5
    assert config.exporter.update_interval_ms == 500
    assert config.logging.level == "WARNING"


def test_env_ignores_non_positive_interval(tmp_path, monkeypatch):
    monkeypatch.setenv("HUD_EXPORTER_UPDATE_INTERVAL_MS", "0")
    config = Config.from_yaml(str(tmp_path / "missing.yaml"))
    assert config.exporter.update_interval_ms == 1000


def test_default_config_path(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    assert get_default_config_path() == "config/hud_exporter.yaml"
    (tmp_path / "hud_exporter.yaml").write_text("{}")
    assert get_default_config_path() == "hud_exporter.yaml"


def test_configure_logging_adds_rotating_file(tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    log_file = tmp_path / "logs" / "exporter.log"
    try:
        configure_logging(LoggingConfig(level="debug", file_path=str(log_file), backup_count=2))
        assert root.level == logging.DEBUG
        file_handlers = [
            h for h in root.handlers if isinstance(h, logging.handlers.RotatingFileHandler)
        ]
        assert len(file_handlers) == 1
        assert file_handlers[0].backupCount == 2
        logging.getLogger("hud_exporter.test").info("hello")
        file_handlers[0].flush()
        assert "hello" in log_file.read_text()
    finally:
        for handler in root.handlers:
            if handler not in saved_handlers:
                handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
