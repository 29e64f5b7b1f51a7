"""Tests for logger cleanup cascade via BaseCloseable."""

import pytest

from jetgit.core.config import Config
from jetgit.core.log import ConsoleSink, FileSink, Logger, LogfireSink


def file_logger(tmp_path, name="test.log", console=False):
    logger = Logger(
        console=ConsoleSink(enabled=console),
        file=FileSink(enabled=True, path=str(tmp_path / name)),
        logfire=LogfireSink(enabled=False),
    )
    logger.setup(log_root=tmp_path, session_name="test")
    return logger


def test_context_manager_closes_file(tmp_path):
    logger = file_logger(tmp_path)
    assert not logger.file._file.closed

    with logger:
        logger.info("test message")

    assert logger.file._file.closed


def test_closes_on_exception(tmp_path):
    logger = file_logger(tmp_path)

    with pytest.raises(ValueError), logger:
        raise ValueError("test exception")

    assert logger.file._file.closed


def test_console_sink_close_is_harmless(tmp_path):
    logger = file_logger(tmp_path, console=True)

    logger.close()

    assert logger.file._file.closed


def test_config_close_cascades(tmp_path):
    """Config.close() reaches Logger.close() and the file sink."""
    config = Config(
        logger=Logger(
            console=ConsoleSink(enabled=False),
            file=FileSink(enabled=True, path=str(tmp_path / "cascade.log")),
            logfire=LogfireSink(enabled=False),
        ),
        log_root=tmp_path,
    )
    # The validator already set up the sinks as the global logger
    assert not config.logger.file._file.closed

    config.close()

    assert config.logger.file._file.closed


def test_written_and_flushed_on_close(tmp_path):
    logger = file_logger(tmp_path, name="written.log")

    with logger:
        logger.info("test message to file")

    assert "test message to file" in (tmp_path / "written.log").read_text()
