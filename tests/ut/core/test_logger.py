"""日志配置测试"""

from __future__ import annotations

import json
import logging

import pytest

from nuresolve.utils.logger import JSONFormatter, reset_logging, setup_logging


@pytest.fixture(autouse=True)
def _restore_root():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    reset_logging()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)


def _record(msg: str, exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        "nuresolve.test", logging.WARNING, __file__, 7, msg, (), exc_info,
    )


class TestJSONFormatter:
    def test_fields(self) -> None:
        data = json.loads(JSONFormatter().format(_record("缓存缺失")))
        assert data["level"] == "WARNING"
        assert data["logger"] == "nuresolve.test"
        assert data["message"] == "缓存缺失"
        assert data["line"] == 7
        assert "exception" not in data

    def test_exception(self) -> None:
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            import sys
            record = _record("failed", exc_info=sys.exc_info())
        data = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: boom" in data["exception"]


class TestSetupLogging:
    def test_single_handler(self) -> None:
        setup_logging("DEBUG")
        setup_logging("DEBUG")
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG

    def test_json_output(self) -> None:
        setup_logging("INFO", json_output=True)
        assert isinstance(logging.getLogger().handlers[0].formatter, JSONFormatter)

    def test_unknown_level_defaults_to_info(self) -> None:
        setup_logging("LOUD")
        assert logging.getLogger().level == logging.INFO
