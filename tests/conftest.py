"""Pytest fixtures for ergokeys tests."""

import logging

import pytest

from tests.fixtures.keymaps import *
from tests.fixtures.stores import *


@pytest.fixture(autouse=True)
def reset_ergokeys_logger():
    """Undo configure_logging() so caplog keeps seeing ergokeys records."""
    yield
    logger = logging.getLogger("ergokeys")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
