"""Minimal Pydantic models for the Roblox game pass and developer product APIs."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

REGIONAL_PRICING_FEATURE = "RegionalPricing"


class RobloxBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)


class PriceInformation(RobloxBaseModel):
    default_price_in_robux: int = 0
    enabled_features: list[str] | None = None

    @property
    def regional_pricing(self) -> bool | None:
        if self.enabled_features is None:
            return None
        return REGIONAL_PRICING_FEATURE in self.enabled_features


class GamePass(RobloxBaseModel):
    game_pass_id: int
    name: str
    description: str | None = None
    is_for_sale: bool = False
    icon_asset_id: int | None = None
    created_timestamp: str | None = None
    updated_timestamp: str | None = None
    price_information: PriceInformation | None = None


class DeveloperProduct(RobloxBaseModel):
    product_id: int
    name: str
    description: str | None = None
    universe_id: int | None = None
    is_for_sale: bool = False
    store_page_enabled: bool | None = None
    price_information: PriceInformation | None = None
    is_immutable: bool | None = None
    created_timestamp: str | None = None
    updated_timestamp: str | None = None


class CursorPage(RobloxBaseModel):
    next_page_token: str | None = None


class GamePassPage(CursorPage):
    game_passes: list[GamePass] = Field(default_factory=list["GamePass"])


class DeveloperProductPage(CursorPage):
    developer_products: list[DeveloperProduct] = Field(default_factory=list["DeveloperProduct"])


type MultipartForm = dict[str, tuple[None, str]]


class ProductUpdateRequest(RobloxBaseModel):
    """Body shared by the create and update endpoints of both resources."""

    name: str
    description: str | None = None
    is_for_sale: bool | None = None
    price: int | None = None
    is_regional_pricing_enabled: bool | None = None

    def to_form(self) -> MultipartForm:
        """Encode as ``multipart/form-data`` text fields (``httpx`` ``files=``)."""

        fields: dict[str, str] = {"name": self.name}
        if self.description is not None:
            fields["description"] = self.description
        if self.is_for_sale is not None:
            fields["isForSale"] = _form_bool(self.is_for_sale)
        if self.price is not None and self.price > 0:
            fields["price"] = str(self.price)
        if self.is_regional_pricing_enabled is not None:
            fields["isRegionalPricingEnabled"] = _form_bool(self.is_regional_pricing_enabled)
        return {key: (None, value) for key, value in fields.items()}


def _form_bool(value: bool) -> str:  # noqa: FBT001
    return "true" if value else "false"
