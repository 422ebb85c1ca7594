import logging

from salvo.infra.errors import (
    RECOVERABLE_RUNTIME_ERRORS,
    AmmunitionExhaustedError,
    Inconsistency,
    SalvoError,
    SensorError,
    log_recoverable,
    report_inconsistency,
)

logger = logging.getLogger("test.salvo.errors")


def test_salvo_errors_are_recoverable() -> None:
    assert issubclass(SalvoError, RECOVERABLE_RUNTIME_ERRORS)
    assert issubclass(SensorError, SalvoError)
    error = AmmunitionExhaustedError("block9")
    assert isinstance(error, RECOVERABLE_RUNTIME_ERRORS)
    assert error.weapon == "block9"
    assert "block9" in str(error)


def test_report_inconsistency_logs_warning(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger=logger.name):
        issue = report_inconsistency(logger, "multi_sink", "delta=5")
    assert issue == Inconsistency(kind="multi_sink", detail="delta=5")
    assert caplog.records[-1].levelno == logging.WARNING
    assert "multi_sink" in caplog.records[-1].getMessage()


def test_log_recoverable_attaches_traceback(caplog) -> None:
    with caplog.at_level(logging.DEBUG, logger=logger.name):
        try:
            raise OSError("window moved")
        except RECOVERABLE_RUNTIME_ERRORS:
            log_recoverable(logger, "sense_board_failed", level=logging.ERROR)
    record = caplog.records[-1]
    assert record.levelno == logging.ERROR
    assert record.getMessage() == "sense_board_failed"
    assert record.exc_info is not None
