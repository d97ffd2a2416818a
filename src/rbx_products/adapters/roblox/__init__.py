"""Public interface for the Roblox adapter."""

from __future__ import annotations

from .client import RobloxAPIError, RobloxClient
from .schema import (
    DeveloperProduct,
    DeveloperProductPage,
    GamePass,
    GamePassPage,
    PriceInformation,
    ProductUpdateRequest,
)
from .translator import (
    build_update_request,
    translate_developer_product,
    translate_game_pass,
)

__all__ = [
    "DeveloperProduct",
    "DeveloperProductPage",
    "GamePass",
    "GamePassPage",
    "PriceInformation",
    "ProductUpdateRequest",
    "RobloxAPIError",
    "RobloxClient",
    "build_update_request",
    "translate_developer_product",
    "translate_game_pass",
]
