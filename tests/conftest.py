import logging

import pytest
from click.testing import CliRunner

from sql_indent.log import PACKAGE_LOGGER


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drops handlers the CLI attaches so they never outlive a test."""
    yield
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
