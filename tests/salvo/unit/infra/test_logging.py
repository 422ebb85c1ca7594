import json
import logging

import pytest

from salvo.infra.logging import (
    JsonFormatter,
    LoggingConfig,
    build_logging_config,
    configure_logging,
    shutdown_logging,
)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    shutdown_logging()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_formatter_includes_fields_and_message() -> None:
    logger = logging.getLogger("test.json.formatter")
    record = logger.makeRecord(
        name=logger.name,
        level=logging.INFO,
        fn=__file__,
        lno=1,
        msg="hello %s",
        args=("world",),
        exc_info=None,
        extra={"custom": 1},
    )
    payload = json.loads(JsonFormatter().format(record))
    assert payload["msg"] == "hello world"
    assert payload["level"] == "INFO"
    assert payload["fields"] == {"custom": 1}


def test_build_logging_config_reads_level_and_format(monkeypatch) -> None:
    monkeypatch.delenv("SALVO_LOG_LEVEL", raising=False)
    monkeypatch.delenv("SALVO_LOG_DIR", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("LOG_FORMAT", "JSON")
    config = build_logging_config()
    assert config == LoggingConfig(level_name="DEBUG", console_format="json", file_path=None)
    monkeypatch.setenv("SALVO_LOG_LEVEL", "warning")
    assert build_logging_config().level_name == "WARNING"


def test_configure_logging_sets_root_level() -> None:
    configure_logging(LoggingConfig(level_name="DEBUG"))
    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1


def test_run_log_written_under_log_dir(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("SALVO_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    monkeypatch.setenv("LOG_FORMAT", "text")
    configure_logging(build_logging_config())

    logging.getLogger("test.logging.file.path").info("hello", extra={"turn": 3})
    shutdown_logging()

    files = list((tmp_path / "logs").glob("salvo_run_*.jsonl"))
    assert len(files) == 1
    lines = files[0].read_text(encoding="utf-8").splitlines()
    records = [json.loads(line) for line in lines]
    assert any(item["msg"] == "hello" and item["fields"] == {"turn": 3} for item in records)
