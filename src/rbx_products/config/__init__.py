"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var
from .errors import ConfigurationError
from .http_resilience import RateLimit, RateLimitPolicy, ResilienceConfig
from .logging import configure_logging
from .roblox import ApiCredential, RobloxConfig, get_roblox_config
from .storage import CatalogConfig, get_catalog_config

__all__ = [
    "ApiCredential",
    "CatalogConfig",
    "ConfigurationError",
    "RateLimit",
    "RateLimitPolicy",
    "ResilienceConfig",
    "RobloxConfig",
    "configure_logging",
    "get_catalog_config",
    "get_roblox_config",
    "optional_env_var",
]
