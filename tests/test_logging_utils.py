import logging

from succinct.config import Config
from succinct.logging_utils import setup_logging_for


def test_debug_flag_from_config(tmp_path):
    logger, log_path = setup_logging_for(Config(log_dir=str(tmp_path), debug_logging=True))

    assert logger.level == logging.DEBUG
    assert log_path.endswith("succinct.log")
    assert tmp_path.is_dir()


def test_cli_debug_overrides_config(tmp_path):
    logger, _ = setup_logging_for(Config(log_dir=str(tmp_path)), debug=True)
    assert logger.level == logging.DEBUG

    logger, _ = setup_logging_for(Config(log_dir=str(tmp_path)))
    assert logger.level == logging.INFO
