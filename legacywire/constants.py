"""Constants used throughout legacywire.

This module defines the framework logger and the ordering bounds of registry post processors.
"""

import logging

LOGGER_NAME: str = "legacywire"
"""Logger name for legacywire diagnostics."""

LOGGER: logging.Logger = logging.getLogger(LOGGER_NAME)
"""Logger used by the scanner, the classification registry and the container."""

HIGHEST_PRECEDENCE: int = -(2**31)
"""Order value of a post processor that must run before all others."""

LOWEST_PRECEDENCE: int = 2**31 - 1
"""Order value of a post processor that runs after all others. The default."""
