"""Translate Roblox payloads to catalog products and back."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rbx_products.domain.catalog import Product, ProductKind, RemoteProduct

from .schema import DeveloperProduct, GamePass, ProductUpdateRequest

if TYPE_CHECKING:
    from .schema import PriceInformation


def translate_game_pass(payload: GamePass) -> RemoteProduct:
    return RemoteProduct(
        kind=ProductKind.GAME_PASS,
        product=_to_product(
            product_id=payload.game_pass_id,
            name=payload.name,
            description=payload.description,
            is_for_sale=payload.is_for_sale,
            price_information=payload.price_information,
        ),
    )


def translate_developer_product(payload: DeveloperProduct) -> RemoteProduct:
    return RemoteProduct(
        kind=ProductKind.DEVELOPER_PRODUCT,
        product=_to_product(
            product_id=payload.product_id,
            name=payload.name,
            description=payload.description,
            is_for_sale=payload.is_for_sale,
            price_information=payload.price_information,
        ),
    )


def _to_product(
    *,
    product_id: int,
    name: str,
    description: str | None,
    is_for_sale: bool,
    price_information: PriceInformation | None,
) -> Product:
    return Product(
        id=product_id,
        name=name,
        description=description,
        active=is_for_sale,
        price=price_information.default_price_in_robux if price_information else 0,
        regional_pricing=price_information.regional_pricing if price_information else None,
    )


def build_update_request(product: Product) -> ProductUpdateRequest:
    """Request body for ``product``; any discount banner must already be applied."""

    return ProductUpdateRequest(
        name=product.display_title(),
        description=product.description,
        is_for_sale=product.active,
        price=product.effective_price(),
        is_regional_pricing_enabled=bool(product.regional_pricing),
    )
