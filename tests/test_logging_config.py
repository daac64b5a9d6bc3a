import logging

from pythonjsonlogger.json import JsonFormatter

from app.base.config import settings
from app.base.logging_config import setup_logger


def test_json_logs_follow_settings(monkeypatch):
    monkeypatch.setattr(settings, "ENABLE_JSON_LOGS", True)
    logger = setup_logger("test-json")
    assert isinstance(logger.handlers[0].formatter, JsonFormatter)

    monkeypatch.setattr(settings, "ENABLE_JSON_LOGS", False)
    logger = setup_logger("test-plain")
    assert not isinstance(logger.handlers[0].formatter, JsonFormatter)


def test_level_and_log_dir_follow_settings(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "LOG_LEVEL", "error")
    monkeypatch.setattr(settings, "LOG_DIR", str(tmp_path / "logs"))
    logger = setup_logger("test-file", log_file="test.log")
    assert logger.level == logging.ERROR
    assert (tmp_path / "logs" / "test.log").exists()
