import logging

from tinyrender.logging_config import PACKAGE_LOGGER, setup_logging


def test_repeated_setup_does_not_stack_handlers():
    setup_logging()
    logger = setup_logging(logging.DEBUG)
    assert logger.name == PACKAGE_LOGGER
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1


def test_log_file_receives_child_loggers(tmp_path):
    log = tmp_path / "render.log"
    logger = setup_logging(logging.INFO, str(log))
    assert len(logger.handlers) == 2

    logging.getLogger("tinyrender.pipeline").info("hello from the pipeline")
    logging.getLogger("tinyrender.pipeline").debug("not at INFO")
    for handler in logger.handlers:
        handler.flush()

    text = log.read_text(encoding="utf-8")
    assert "tinyrender.pipeline - INFO - hello from the pipeline" in text
    assert "not at INFO" not in text
