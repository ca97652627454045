"""Tests for the logging setup."""

import logging

from escroll.logging.logging_setup import ColoredFormatter, ColorLogger, TimezoneFormatter, setup_logging


def _record(level: int, msg: str, *args, **attrs) -> logging.LogRecord:
    record = logging.LogRecord("escroll", level, __file__, 1, msg, args, None)
    record.__dict__.update(attrs)
    return record


class TestFormatters:

    def test_error_prefix_and_args(self) -> None:
        formatter = TimezoneFormatter("UTC", fmt="%(message)s")
        assert formatter.format(_record(logging.ERROR, "Read %d (%d/%d)", 0, 1, 5)) == "⛔ Read 0 (1/5)"

    def test_record_is_not_mutated(self) -> None:
        formatter = TimezoneFormatter("UTC", fmt="%(message)s")
        record = _record(logging.WARNING, "missing %d", 4)

        formatter.format(record)

        assert formatter.format(record) == "⚠️ missing 4"
        assert record.msg == "missing %d"

    def test_color(self) -> None:
        formatter = ColoredFormatter("UTC", fmt="%(message)s")
        assert formatter.format(_record(logging.INFO, "done", color="green")) == "\033[32mdone\033[0m"
        assert formatter.format(_record(logging.INFO, "done")) == "done"


class TestColorLogger:

    def test_color_is_passed_as_extra(self, caplog) -> None:
        logger = ColorLogger(logging.getLogger("escroll.tests.color"))

        with caplog.at_level(logging.INFO, logger="escroll.tests.color"):
            logger.info("finished %d", 3, color="cyan")

        assert caplog.records[0].getMessage() == "finished 3"
        assert caplog.records[0].color == "cyan"

    def test_records_point_at_the_caller(self, caplog) -> None:
        logger = ColorLogger(logging.getLogger("escroll.tests.color"))

        with caplog.at_level(logging.INFO, logger="escroll.tests.color"):
            logger.warning("Read 0 (%d/%d)", 1, 5)

        assert caplog.records[0].funcName == "test_records_point_at_the_caller"
        assert caplog.records[0].levelno == logging.WARNING

    def test_exception_attaches_traceback(self, caplog) -> None:
        logger = ColorLogger(logging.getLogger("escroll.tests.color"))

        with caplog.at_level(logging.ERROR, logger="escroll.tests.color"):
            try:
                raise RuntimeError("scroll task crashed")
            except RuntimeError:
                logger.exception("Scroll stream failed unexpectedly")

        assert caplog.records[0].exc_info[0] is RuntimeError


def test_setup_logging_writes_to_root_dir(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("ROOT_DIR", str(tmp_path))
    root = logging.getLogger()
    previous_handlers = root.handlers[:]

    try:
        logger = setup_logging()
        logger.info("hello")
        assert isinstance(logger, ColorLogger)
        assert (tmp_path / "logs" / "app.log").exists()
    finally:
        for handler in root.handlers:
            if handler not in previous_handlers:
                handler.close()
        root.handlers = previous_handlers
