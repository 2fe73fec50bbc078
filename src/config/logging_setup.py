"""Process-wide logging configuration."""

import logging
import sys

_INITIALIZED = False


def configure_logging(level: str = "INFO") -> None:
    """Attach a stdout handler to the root logger once."""
    global _INITIALIZED
    if _INITIALIZED:
        return

    log_level = getattr(logging, level.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(log_level)
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
        root_logger.addHandler(handler)

    _INITIALIZED = True
