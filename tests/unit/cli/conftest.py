"""Fixtures shared by CLI tests."""

import logging

import pytest


@pytest.fixture(autouse=True)
def reset_app_logger():
    """Drop handlers _configure_logging attached to the 'src' logger."""
    yield
    app_logger = logging.getLogger("src")
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()
    app_logger.setLevel(logging.NOTSET)


@pytest.fixture
def config_file(tmp_path):
    """Path to a config file that does not exist yet."""
    return str(tmp_path / "config.yaml")
