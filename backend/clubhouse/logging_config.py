"""Logging setup for the API process.

Configures the root logger once; modules obtain their own logger with
``logging.getLogger(__name__)``.
"""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger with a single console handler.

    Unknown level names fall back to INFO. Existing root handlers are
    replaced so repeated calls (e.g. reloads, tests) do not duplicate output.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()
    root.handlers.clear()
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(numeric_level)
