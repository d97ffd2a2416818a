"""Errors raised while reading rbx-products settings."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when an environment setting holds a value we cannot use."""
