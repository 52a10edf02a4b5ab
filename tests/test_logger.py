import json
import logging

import pytest

from rocketfactory import logger


@pytest.fixture(autouse=True)
def fresh_logger():
    logger._reset()
    yield
    logger._reset()


def _records(capsys):
    return [json.loads(line) for line in capsys.readouterr().out.splitlines()]


def test_global_logger_benchmark_setup_is_silent(capsys):
    logger.init_for_benchmark()
    logger.info("test message")
    assert capsys.readouterr().out == ""


def test_with_logger_adds_static_field(capsys):
    logger.init("info", True)
    log = logger.with_fields(static_field="static_value")
    log.info("test message")
    records = _records(capsys)
    assert len(records) == 1
    assert records[0]["message"] == "test message"
    assert records[0]["static_field"] == "static_value"
    assert records[0]["level"] == "INFO"


def test_with_context_logger(capsys):
    logger.init("info", True)
    with logger.context_scope("trace-123", "user-456"):
        logger.with_context().info("test message")
    record = _records(capsys)[0]
    assert record["trace_id"] == "trace-123"
    assert record["user_id"] == "user-456"


def test_chain_logger(capsys):
    logger.init("info", True)
    log = logger.with_fields(static_field="static_value")
    with logger.context_scope("trace-123", "user-456"):
        log.info("test message")
    record = _records(capsys)[0]
    assert record["static_field"] == "static_value"
    assert record["trace_id"] == "trace-123"
    assert record["user_id"] == "user-456"


@pytest.mark.parametrize(
    "name, expected",
    [
        ("debug", logging.DEBUG),
        ("INFO", logging.INFO),
        ("warn", logging.WARNING),
        ("Warning", logging.WARNING),
        ("error", logging.ERROR),
        ("bogus", logging.INFO),
    ],
)
def test_parse_level(name, expected):
    assert logger.parse_level(name) == expected


def test_fields_from_context():
    assert logger.fields_from_context() == {}
    with logger.context_scope("trace-123", ""):
        assert logger.fields_from_context() == {"trace_id": "trace-123"}
        with logger.context_scope("", "user-456"):
            assert logger.fields_from_context() == {"user_id": "user-456"}
        assert logger.fields_from_context() == {"trace_id": "trace-123"}
    assert logger.fields_from_context() == {}


def test_set_level_before_init_is_ignored(capsys):
    logger.set_level("debug")
    logger.init("info", True)
    logger.debug("hidden")
    assert capsys.readouterr().out == ""


def test_set_level_after_init_changes_threshold(capsys):
    logger.init("info", True)
    logger.debug("hidden")
    logger.set_level("debug")
    logger.debug("shown")
    records = _records(capsys)
    assert [r["message"] for r in records] == ["shown"]
    assert records[0]["level"] == "DEBUG"


def test_init_runs_only_once(capsys):
    logger.init("error", True)
    logger.init("debug", False)
    logger.info("ignored")
    logger.error("kept")
    records = _records(capsys)
    assert [r["message"] for r in records] == ["kept"]


def test_warn_level_name(capsys):
    logger.init("debug", True)
    logger.warn("careful")
    assert _records(capsys)[0]["level"] == "WARN"


def test_console_format(capsys):
    logger.init("info", False)
    logger.info("hello", key="v")
    parts = capsys.readouterr().out.rstrip("\n").split("\t")
    assert parts[1] == "INFO"
    assert parts[3] == "hello"
    assert json.loads(parts[4]) == {"key": "v"}


def test_caller_points_at_call_site(capsys):
    logger.init("info", True)
    logger.info("where")
    logger.with_fields().info("where again")
    records = _records(capsys)
    assert all("test_logger.py" in r["caller"] for r in records)


def test_fatal_logs_and_exits(capsys):
    logger.init("info", True)
    with pytest.raises(SystemExit) as excinfo:
        logger.fatal("dead")
    assert excinfo.value.code == 1
    assert _records(capsys)[0]["level"] == "FATAL"


def test_module_functions_require_init():
    with pytest.raises(RuntimeError):
        logger.info("nobody listens")


def test_with_helpers_without_init_are_silent(capsys):
    logger.with_fields(a=1).info("x")
    logger.with_context().error("y")
    assert capsys.readouterr().out == ""


def test_set_nop_logger_silences_output(capsys):
    logger.init("info", True)
    logger.set_nop_logger()
    logger.info("hidden")
    assert capsys.readouterr().out == ""


def test_get_logger_and_sync(capsys):
    assert logger.get_logger() is None
    logger.init("info", True)
    logger.get_logger().info("via instance", n=3)
    logger.sync()
    record = _records(capsys)[0]
    assert record["message"] == "via instance"
    assert record["n"] == 3


def test_noop_logger_writes_nothing(capsys):
    noop = logger.NoopLogger()
    noop.info("a", x=1)
    noop.error("b")
    assert capsys.readouterr().out == ""