"""Logging helpers shared by the plugin modules."""

from __future__ import annotations

import logging
import os

PLUGIN_NAME = "bundle-license"
LOG_LEVEL_ENV_VAR = "BUNDLE_LICENSE_LOG_LEVEL"

logger = logging.getLogger("bundle_license")


def prefixed(msg: str) -> str:
    return f"[{PLUGIN_NAME}] -- {msg}"


def warn(msg: str) -> None:
    logger.warning(prefixed(msg))


def setup_logging(debug: bool = False) -> None:
    """Configure stdlib logging for command line use.

    ``--debug`` wins; otherwise BUNDLE_LICENSE_LOG_LEVEL (default: WARNING).
    """
    level = "DEBUG" if debug else os.environ.get(LOG_LEVEL_ENV_VAR, "WARNING").upper()
    logging.basicConfig(level=level, format="%(levelname)s %(message)s")
    logger.setLevel(level)
