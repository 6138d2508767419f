from unittest.mock import patch

from taskdesk.config import Settings, get_settings, resolve_path
from taskdesk.common.logger import get_logger


def test_config_defaults():
    settings = Settings()
    assert settings.port == 8765
    assert settings.app_name == "taskdesk"
    assert settings.app_dir is None
    assert settings.data_dir is None
    assert settings.config_filename == "config.json"
    assert settings.strict_path_switch is False


def test_settings_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("TASKDESK_PORT", "9000")
    monkeypatch.setenv("TASKDESK_APP_DIR", str(tmp_path))
    monkeypatch.setenv("TASKDESK_STRICT_PATH_SWITCH", "true")
    monkeypatch.setenv("TASKDESK_CORS_ORIGINS", "tauri://localhost, http://localhost:1420")
    get_settings.cache_clear()

    settings = get_settings()
    assert settings.port == 9000
    assert settings.app_dir == str(tmp_path)
    assert settings.strict_path_switch is True
    assert settings.cors_allow_origins == ["tauri://localhost", "http://localhost:1420"]


def test_resolve_path_keeps_absolute_paths(tmp_path):
    assert resolve_path(str(tmp_path)) == tmp_path.resolve()


def test_logger_creation(tmp_path):
    settings = Settings(log_dir=str(tmp_path), debug=True)
    with patch("taskdesk.common.logger.get_settings", return_value=settings):
        logger = get_logger("test.logger")
        assert logger.name == "test.logger"
        logger.info("Test message")

        log_file = tmp_path / "backend.log"
        assert log_file.exists()
        assert "Test message" in log_file.read_text(encoding="utf-8")


def test_sensitive_filter_masks_home_directories():
    import logging

    from taskdesk.common.logger import SensitiveDataFilter

    record = logging.LogRecord(
        "test", logging.INFO, __file__, 1, "Storage path set to /home/alice/todos", None, None
    )
    SensitiveDataFilter().filter(record)

    assert record.msg == "Storage path set to /home/~/todos"
