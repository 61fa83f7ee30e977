"""
Tests for log formatting and request body sanitization.
"""

import json
import logging

from fittrack.config import Settings
from fittrack.core.logging_config import (
    ColoredFormatter,
    JSONFormatter,
    filter_sensitive_data,
    setup_logging,
    truncate_large_data,
)
from fittrack.middleware.logging_middleware import _error_reason, _sanitize_body


def make_record(msg="hello", **extra):
    record = logging.LogRecord("fittrack.test", logging.INFO, __file__, 10, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestSensitiveData:
    def test_masks_nested_credentials(self):
        data = {
            "email": "alex@example.com",
            "password": "secret1",
            "nested": [{"access_token": "abc", "calories": 100}],
        }
        filtered = filter_sensitive_data(data)
        assert filtered["email"] == "alex@example.com"
        assert filtered["password"] == "***FILTERED***"
        assert filtered["nested"][0]["access_token"] == "***FILTERED***"
        assert filtered["nested"][0]["calories"] == 100

    def test_truncate(self):
        assert truncate_large_data("short", 10) == "short"
        assert truncate_large_data("x" * 20, 10).startswith("x" * 10 + "... (truncated")


class TestFormatters:
    def test_json_formatter_includes_extra_fields(self):
        record = make_record(extra_fields={"user_id": "u1", "token": "abc"})
        payload = json.loads(JSONFormatter().format(record))

        assert payload["message"] == "hello"
        assert payload["level"] == "INFO"
        assert payload["user_id"] == "u1"
        assert payload["token"] == "***FILTERED***"

    def test_colored_formatter_leaves_record_alone(self):
        record = make_record()
        output = ColoredFormatter("%(levelname)s %(message)s").format(record)
        assert "\033[" in output
        assert record.levelname == "INFO"


class TestSetupLogging:
    def test_file_handler_writes_json(self, tmp_path):
        log_file = tmp_path / "logs" / "app.log"
        settings = Settings(
            log_file_path=str(log_file),
            log_file_enabled=True,
            log_console_enabled=False,
            log_level="INFO",
        )
        root = logging.getLogger()
        saved = root.handlers[:]
        try:
            setup_logging(settings)
            logging.getLogger("fittrack.test").info("food logged")
            for handler in root.handlers:
                handler.flush()
            lines = [json.loads(line) for line in log_file.read_text().splitlines()]
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers[:] = saved

        assert any(line["message"] == "food logged" for line in lines)


class TestBodySanitizing:
    def test_json_body_is_masked(self):
        body = _sanitize_body([b'{"email": "a@b.co", ', b'"password": "secret1"}'], "application/json")
        assert "secret1" not in body
        assert "***FILTERED***" in body

    def test_binary_body_is_summarized(self):
        assert _sanitize_body([b"\x89PNG...."], "multipart/form-data; boundary=x") == (
            "<multipart/form-data; boundary=x, 8 bytes>"
        )

    def test_empty_body(self):
        assert _sanitize_body([], "application/json") is None

    def test_error_reason(self):
        assert _error_reason('{"detail": "Could not validate credentials"}') == (
            "Could not validate credentials"
        )
        assert _error_reason('{"error": "boom"}') == "boom"
        assert _error_reason(None) is None
