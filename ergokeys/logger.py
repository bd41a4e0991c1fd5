"""Logging setup for ergokeys.

Modules log through ``logging.getLogger(__name__)``; this only decides where
the ``ergokeys`` hierarchy ends up. Command-line runs go to stderr. The TUI
owns the terminal, so there records go to the Textual devtools console.
"""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "ergokeys"
LOG_FORMAT = "[ergokeys] %(levelname)s: %(message)s"


def configure_logging(debug: bool = False, textual: bool = False) -> logging.Logger:
    """Configure the ``ergokeys`` logger and return it.

    Calling it again replaces the previous handler.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    logger.handlers.clear()

    if textual:
        from textual.logging import TextualHandler

        handler: logging.Handler = TextualHandler()
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
