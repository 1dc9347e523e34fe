from __future__ import annotations

import logging
from typing import Generator

import pytest

import forgekit.utils.logger as logger_module


@pytest.fixture(autouse=True)
def reset_forgekit_logging() -> Generator[None, None, None]:
    """Undo logging configuration left behind by CLI invocations.

    Yields:
        None
    """
    yield

    root_logger = logging.getLogger(logger_module.ROOT_LOGGER_NAME)
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)
    root_logger.propagate = True
