import json
import logging

import pytest
from pydantic import ValidationError

from kvserver.core.config import Settings
from kvserver.core.logging import JsonFormatter, request_id_ctx


def test_default_port_and_report_interval():
    settings = Settings()
    assert settings.port == 8080
    assert settings.report_interval_seconds == 5.0


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("PORT", "9090")
    monkeypatch.setenv("REPORT_INTERVAL_SECONDS", "0.5")
    settings = Settings()
    assert settings.port == 9090
    assert settings.report_interval_seconds == 0.5


@pytest.mark.parametrize(
    "overrides",
    [
        {"port": 0},
        {"port": 70000},
        {"report_interval_seconds": 0},
        {"max_body_bytes": 0},
        {"log_level": "chatty"},
    ],
)
def test_invalid_settings_rejected(overrides):
    with pytest.raises(ValidationError):
        Settings(**overrides)


def test_production_flag():
    assert Settings(env="Production").is_production
    assert not Settings(env="test").is_production


def test_json_formatter_includes_event_and_request_id():
    record = logging.LogRecord("kvserver.reporter", logging.INFO, __file__, 1, "server status", None, None)
    record.event = {"requests": 3, "database_size": 1}
    token = request_id_ctx.set("req-1")
    try:
        payload = json.loads(JsonFormatter().format(record))
    finally:
        request_id_ctx.reset(token)
    assert payload["message"] == "server status"
    assert payload["logger"] == "kvserver.reporter"
    assert payload["event"] == {"requests": 3, "database_size": 1}
    assert payload["request_id"] == "req-1"
