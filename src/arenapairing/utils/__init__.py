"""Shared helpers: logger setup, id generation and small numeric helpers."""

# Arena Pairing
# Copyright (C) 2025  Arena Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import logging
import os
import random
from typing import Optional

from arenapairing.constants import DEFAULT_LOG_LEVEL, LOG_LEVEL_ENV

_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(name: str) -> logging.Logger:
    """Return a module logger configured with the package format.

    The level comes from the ``ARENAPAIRING_LOG_LEVEL`` environment variable.
    A handler is attached only once per logger.

    Args:
        name: Logger name, normally ``__name__``

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
    level_name = os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()
    logger.setLevel(getattr(logging, level_name, logging.WARNING))
    return logger


def set_package_log_level(level: int) -> None:
    """Change the level of every logger created for this package."""
    for name, logger in logging.root.manager.loggerDict.items():
        if name.startswith("arenapairing") and isinstance(logger, logging.Logger):
            logger.setLevel(level)


def generate_id(prefix: str, rng: Optional[random.Random] = None) -> str:
    """Generate a short unique identifier.

    Args:
        prefix: Readable prefix, e.g. the class or object kind
        rng: Random source; ids are reproducible when it is seeded

    Returns:
        An id such as ``match_3f9a01c2d4``
    """
    source = rng if rng is not None else random.Random()
    return f"{prefix.lower()}_{source.getrandbits(40):010x}"


def next_power_of_two(n: int) -> int:
    """Smallest power of two greater than or equal to ``n`` (n >= 1)."""
    size = 1
    while size < n:
        size *= 2
    return size
