"""Shared logging helpers for rbx-products."""

from __future__ import annotations

import logging

from .env import optional_env_var
from .errors import ConfigurationError

LOG_LEVEL_ENV = "RBX_PRODUCTS_LOG_LEVEL"


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Initialise the root logger once with sensible defaults.

    Parameters mirror ``logging.basicConfig`` with a simplified contract: we default
    to INFO level (or the level named by ``RBX_PRODUCTS_LOG_LEVEL``) and a terse
    format suitable for CLI output. An unknown level name in the environment
    raises :class:`ConfigurationError`. Pass ``force=True`` to reconfigure during tests
    or specialised entry points.
    """

    logging.basicConfig(
        level=level if level is not None else _level_from_env(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )


def _level_from_env() -> int:
    name = optional_env_var(LOG_LEVEL_ENV)
    if name is None:
        return logging.INFO
    level = logging.getLevelNamesMapping().get(name.upper())
    if level is None:
        raise ConfigurationError(f"{LOG_LEVEL_ENV} names an unknown log level: {name!r}")
    return level
