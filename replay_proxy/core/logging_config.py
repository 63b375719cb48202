"""Logging setup"""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO"):
    """Configure root logging for the proxy process"""
    logging.basicConfig(
        level=level.upper(),
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True  # Force reconfiguration
    )
    # Request lines are logged by the proxy itself
    logging.getLogger("httpx").setLevel(logging.WARNING)
