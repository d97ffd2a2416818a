"""In-memory catalog of game passes and developer products.

The catalog mirrors the version-controlled ``products.toml`` file: global
metadata plus two slug-keyed collections. Derived values (effective price after
discount, display title, upload title) live on :class:`Product` so the diff and
upload stages agree on what is sent to the platform.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import re
    from collections.abc import Iterator

DEFAULT_DISCOUNT_PREFIX = "💲{}% OFF💲"
DISCOUNT_SLOT = "{}"


class ProductKind(StrEnum):
    """The two monetization record kinds served by distinct endpoints."""

    GAME_PASS = "game-pass"
    DEVELOPER_PRODUCT = "developer-product"

    @property
    def label(self) -> str:
        return _KIND_LABELS[self]

    @property
    def sort_order(self) -> int:
        # developer products are presented before game passes
        return 0 if self is ProductKind.DEVELOPER_PRODUCT else 1


_KIND_LABELS = {
    ProductKind.GAME_PASS: "GamePass",
    ProductKind.DEVELOPER_PRODUCT: "DevProduct",
}


@dataclass(slots=True, kw_only=True)
class Product:
    """A single pass or one-time product as stored in the catalog."""

    name: str
    id: int | None = None
    prefix: str | None = None
    description: str | None = None
    active: bool = True
    discount: int | None = None
    price: int = 0
    regional_pricing: bool | None = None

    def has_discount(self) -> bool:
        return self.discount is not None and self.discount > 0

    def effective_price(self) -> int:
        if self.discount is not None and self.discount > 0:
            return math.floor(self.price * (1 - self.discount / 100))
        return self.price

    def display_title(self) -> str:
        """Title shown to players: the raw name while discounted, else prefixed."""

        if self.has_discount():
            return self.name
        if self.prefix:
            return f"{self.prefix} {self.name}"
        return self.name

    def upload_title(self, discount_prefix: str | None = None) -> str:
        """Title pushed to the platform, including the discount banner if any."""

        return with_discount_prefix(self, discount_prefix).display_title()


def format_discount_prefix(template: str | None, discount: int) -> str:
    return (template or DEFAULT_DISCOUNT_PREFIX).replace(DISCOUNT_SLOT, str(discount))


def with_discount_prefix(product: Product, template: str | None) -> Product:
    """Return a copy of ``product`` whose name carries the discount banner."""

    if not product.has_discount() or product.discount is None:
        return replace(product)
    banner = format_discount_prefix(template, product.discount)
    return replace(product, name=f"{banner} {product.name}")


@dataclass(slots=True, kw_only=True)
class CatalogMetadata:
    universe_id: int
    discount_prefix: str | None = None
    luau_file: str | None = None
    name_filters: tuple[re.Pattern[str], ...] | None = None


@dataclass(slots=True, kw_only=True)
class Catalog:
    """Full local state: metadata plus passes and products keyed by slug."""

    metadata: CatalogMetadata
    gamepasses: dict[str, Product] = field(default_factory=dict["str", "Product"])
    products: dict[str, Product] = field(default_factory=dict["str", "Product"])

    def collection(self, kind: ProductKind) -> dict[str, Product]:
        if kind is ProductKind.GAME_PASS:
            return self.gamepasses
        return self.products

    def iter_entries(self) -> Iterator[tuple[ProductKind, str, Product]]:
        for kind in ProductKind:
            for key, product in self.collection(kind).items():
                yield kind, key, product

    def find_by_id(self, kind: ProductKind, product_id: int) -> tuple[str, Product] | None:
        """Return the first ``(key, product)`` in ``kind`` carrying ``product_id``."""

        for key, product in self.collection(kind).items():
            if product.id == product_id:
                return key, product
        return None

    def __len__(self) -> int:
        return len(self.gamepasses) + len(self.products)


@dataclass(slots=True, frozen=True)
class RemoteProduct:
    """A platform record already translated into catalog terms."""

    kind: ProductKind
    product: Product

    @property
    def id(self) -> int:
        if self.product.id is None:
            raise ValueError(f"Remote {self.kind} '{self.product.name}' has no id")
        return self.product.id
