import logging

from file_server import config
from file_server.logger_config import LOG_FILE, LOGGER_NAME, setup_logger


def test_setup_logger_is_idempotent():
    logger = setup_logger()
    handlers = list(logger.handlers)

    assert setup_logger() is logger
    assert logger.handlers == handlers


def test_setup_logger_writes_file_and_console(tmp_path, monkeypatch):
    logger = logging.getLogger(LOGGER_NAME)
    saved_handlers = logger.handlers[:]
    logger.handlers.clear()
    monkeypatch.setattr(config, "LOG_LEVEL", "warning")

    try:
        setup_logger(str(tmp_path / "logs"))
        file_handler, console_handler = logger.handlers

        assert isinstance(file_handler, logging.FileHandler)
        assert file_handler.level == logging.DEBUG
        assert console_handler.level == logging.WARNING
        assert (tmp_path / "logs" / LOG_FILE).exists()
    finally:
        for handler in logger.handlers:
            handler.close()
        logger.handlers[:] = saved_handlers
