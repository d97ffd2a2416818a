"""Ports the reconciliation services depend on."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .catalog import Catalog, Product, ProductKind, RemoteProduct
    from .diff import ConfirmedChange, ProductDiff


@runtime_checkable
class RemoteCatalog(Protocol):
    """Platform-side collection of passes and developer products."""

    async def fetch_all_products(self) -> list[RemoteProduct]: ...

    async def create_product(self, kind: ProductKind, product: Product) -> int:
        """Create ``product`` remotely and return the assigned id."""
        ...

    async def update_product(self, kind: ProductKind, product_id: int, product: Product) -> None:
        ...


@runtime_checkable
class CatalogRepository(Protocol):
    """Persistence of the local catalog and its generated export."""

    def load(self) -> Catalog: ...

    def save(self, catalog: Catalog) -> None: ...

    def export(self, catalog: Catalog) -> None:
        """Write the generated script file; no-op without a configured path."""
        ...


@runtime_checkable
class Confirmation(Protocol):
    """Human confirmation collaborator."""

    def approve(self, prompt: str, *, previews: Sequence[ProductDiff] = ()) -> bool: ...

    def select_changes(self, diffs: Sequence[ProductDiff]) -> list[ConfirmedChange]: ...


__all__ = ["CatalogRepository", "Confirmation", "RemoteCatalog"]
