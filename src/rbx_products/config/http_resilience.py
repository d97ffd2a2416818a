"""Configuration types for resilient HTTP clients."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(slots=True, frozen=True)
class RateLimitPolicy:
    """How ``429 Too Many Requests`` responses are retried.

    ``max_retries`` counts retries, not attempts: a request is sent at most
    ``max_retries + 1`` times before the last limited response is handed back.
    """

    max_retries: int = 5
    cushion_seconds: float = 0.075
    default_wait_seconds: float = 1.0
    wait_headers: tuple[str, ...] = ("retry-after", "x-ratelimit-reset")


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RateLimitPolicy = field(default_factory=RateLimitPolicy)
    ratelimit: RateLimit | None = None
    default_headers: Mapping[str, str] | None = None
