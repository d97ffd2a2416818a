"""Roblox Open Cloud configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field
from threading import Lock

from rbx_products import __version__

from .env import optional_env_var
from .http_resilience import RateLimit, ResilienceConfig

ROBLOX_BASE_URL = "https://apis.roblox.com"
ROBLOX_TIMEOUT_SECONDS = 30.0
API_KEY_ENV = "RBX_API_KEY"
API_KEY_HEADER = "x-api-key"
DEFAULT_PAGE_SIZE = 100


class ApiCredential:
    """Settable holder for the optional API key shared by in-flight requests."""

    def __init__(self, value: str | None = None) -> None:
        self._lock = Lock()
        self._value = value

    def get(self) -> str | None:
        with self._lock:
            return self._value

    def set(self, value: str | None) -> None:
        with self._lock:
            self._value = value

    def __repr__(self) -> str:
        state = "set" if self.get() is not None else "unset"
        return f"ApiCredential({state})"


def default_roblox_resilience() -> ResilienceConfig:
    return ResilienceConfig(
        name="roblox",
        base_url=ROBLOX_BASE_URL,
        timeout_seconds=ROBLOX_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        default_headers={"User-Agent": f"rbx-products/{__version__}"},
    )


@dataclass(frozen=True)
class RobloxConfig:
    """Holds Roblox API configuration values."""

    credential: ApiCredential = field(default_factory=ApiCredential)
    resilience: ResilienceConfig = field(default_factory=default_roblox_resilience)
    api_key_header: str = API_KEY_HEADER
    page_size: int = DEFAULT_PAGE_SIZE


def get_roblox_config(*, resilience: ResilienceConfig | None = None) -> RobloxConfig:
    """Build the API configuration, reading the optional key from ``RBX_API_KEY``."""

    return RobloxConfig(
        credential=ApiCredential(optional_env_var(API_KEY_ENV)),
        resilience=resilience or default_roblox_resilience(),
    )
