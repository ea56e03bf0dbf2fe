from __future__ import annotations

import json
import logging
import sys

import pytest

from pragma_bench.utils.logging import JsonFormatter, _json_formatter, configure_logging

EXPECTED_ROWS = 500
EXPECTED_COMBINATIONS = 8


def _record(msg: str = "hello") -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


def test_json_formatter_promotes_standard_extra_fields() -> None:
    record = _record()
    record.rows = EXPECTED_ROWS
    record.strategy = "insert"

    payload = json.loads(_json_formatter(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.logger"
    assert payload["message"] == "hello"
    assert payload["rows"] == EXPECTED_ROWS
    assert payload["strategy"] == "insert"
    assert "pathname" not in payload


def test_json_formatter_supports_legacy_nested_extra_field() -> None:
    record = _record()
    record.extra = {"combinations": EXPECTED_COMBINATIONS}

    payload = json.loads(_json_formatter(record))

    assert payload["combinations"] == EXPECTED_COMBINATIONS
    assert "extra" not in payload


def test_json_formatter_renders_tuples_and_exceptions() -> None:
    try:
        raise RuntimeError("near \"PRAGMA\": syntax error")
    except RuntimeError:
        record = logging.LogRecord(
            name="test.logger",
            level=logging.ERROR,
            pathname=__file__,
            lineno=1,
            msg="[STRATEGY FAILED] insert",
            args=(),
            exc_info=sys.exc_info(),
        )
    record.pragmas = ("PRAGMA synchronous = OFF",)

    payload = json.loads(JsonFormatter().format(record))

    assert payload["pragmas"] == ["PRAGMA synchronous = OFF"]
    assert "RuntimeError" in payload["exc_info"]


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    sql = logging.getLogger("sqlalchemy")
    root_level, sql_level = root.level, sql.level
    yield
    for handler in list(root.handlers):
        if handler.get_name() == "default":
            root.removeHandler(handler)
            handler.close()
    root.setLevel(root_level)
    sql.setLevel(sql_level)


def test_debug_logging_keeps_sql_echo_quiet(restore_logging) -> None:
    configure_logging(level="DEBUG", json_logs=True)

    assert logging.getLogger().level == logging.DEBUG
    assert not logging.getLogger("sqlalchemy.engine.Engine").isEnabledFor(logging.INFO)
    (handler,) = [h for h in logging.getLogger().handlers if h.get_name() == "default"]
    assert isinstance(handler.formatter, JsonFormatter)


def test_sql_level_can_be_lowered(restore_logging) -> None:
    configure_logging(level="INFO", sql_level="INFO")

    assert logging.getLogger("sqlalchemy.engine.Engine").isEnabledFor(logging.INFO)
