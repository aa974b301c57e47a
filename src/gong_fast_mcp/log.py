"""Logging configuration.

The MCP stdio transport owns stdout, so everything is written to stderr.
"""

import logging
import sys


def setup_logging(level: str = "info") -> logging.Logger:
    """Configure the ``gong_fast_mcp`` logger and return it."""
    logger = logging.getLogger("gong_fast_mcp")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    logger.handlers.clear()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    logger.addHandler(handler)
    logger.propagate = False

    return logger
