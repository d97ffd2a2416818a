from __future__ import annotations

import os
from typing import TYPE_CHECKING

import httpx
import pytest

from rbx_products.adapters.http_resilience import ResilientClient
from rbx_products.config.http_resilience import ResilienceConfig
from rbx_products.config.roblox import ApiCredential, RobloxConfig

os.environ.pop("RBX_API_KEY", None)
os.environ.pop("RBX_PRODUCTS_FILE", None)

if TYPE_CHECKING:
    from collections.abc import Callable

    type Handler = Callable[[httpx.Request], httpx.Response]
    type ClientFactory = Callable[[ResilienceConfig], ResilientClient]


TEST_BASE_URL = "https://apis.example.test"


@pytest.fixture
def roblox_config() -> RobloxConfig:
    return RobloxConfig(
        credential=ApiCredential("test-key"),
        resilience=ResilienceConfig(name="roblox-test", base_url=TEST_BASE_URL),
    )


@pytest.fixture
def mock_client_factory() -> Callable[[Handler], ClientFactory]:
    """Build ``RobloxClient`` factories that route through ``httpx.MockTransport``."""

    def build(handler: Handler) -> ClientFactory:
        def factory(resilience: ResilienceConfig) -> ResilientClient:
            return ResilientClient(resilience, transport=httpx.MockTransport(handler))

        return factory

    return build
