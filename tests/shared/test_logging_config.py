# tests/shared/test_logging_config.py
import logging

import structlog

from user_service.shared import logging_config
from user_service.shared.config import AppEnv, settings


class TestProcessors:

    def test_service_context_added(self):
        event = logging_config.add_service_context(None, "info", {"event": "user_created"})

        assert event["service"] == settings.APP_NAME
        assert event["env"] == settings.APP_ENV.value
        assert event["version"] == settings.APP_VERSION

    def test_service_context_keeps_explicit_values(self):
        event = logging_config.add_service_context(None, "info", {"event": "x", "service": "worker"})
        assert event["service"] == "worker"

    def test_no_span_ids_outside_a_trace(self):
        event = logging_config.add_open_telemetry_spans(None, "info", {"event": "x"})
        assert "trace_id" not in event
        assert "span_id" not in event


class TestRendererSelection:

    def test_json_format(self, monkeypatch):
        monkeypatch.setattr(settings, "LOG_FORMAT", "json")
        assert isinstance(logging_config.select_renderer(), structlog.processors.JSONRenderer)

    def test_console_format(self, monkeypatch):
        monkeypatch.setattr(settings, "LOG_FORMAT", "console")
        monkeypatch.setattr(settings, "APP_ENV", AppEnv.TESTING)
        assert isinstance(logging_config.select_renderer(), structlog.dev.ConsoleRenderer)

    def test_production_forces_json(self, monkeypatch):
        monkeypatch.setattr(settings, "LOG_FORMAT", "console")
        monkeypatch.setattr(settings, "APP_ENV", AppEnv.PRODUCTION)
        assert isinstance(logging_config.select_renderer(), structlog.processors.JSONRenderer)


class TestConfigureLogging:

    def test_repeated_calls_install_one_handler(self):
        logging_config.configure_logging()
        logging_config.configure_logging()

        ours = [h for h in logging.getLogger().handlers if h is logging_config._handler]
        assert len(ours) == 1
        assert isinstance(ours[0].formatter, structlog.stdlib.ProcessorFormatter)

    def test_access_log_is_quieted(self):
        logging_config.configure_logging()
        assert logging.getLogger("uvicorn.access").level >= logging.WARNING
