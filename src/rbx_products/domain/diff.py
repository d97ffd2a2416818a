"""Field-level comparison between a local product and its remote counterpart."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .catalog import CatalogMetadata, Product, ProductKind

type FieldValue = str | int | bool


class ProductField(StrEnum):
    """Compared fields, declared in presentation order."""

    TITLE = "title"
    DESCRIPTION = "description"
    PRICE = "price"
    REGIONAL_PRICING = "regional-pricing"
    ACTIVE = "active"

    @property
    def label(self) -> str:
        return _FIELD_LABELS[self]


_FIELD_LABELS = {
    ProductField.TITLE: "Title",
    ProductField.DESCRIPTION: "Description",
    ProductField.PRICE: "Price",
    ProductField.REGIONAL_PRICING: "Regional Pricing",
    ProductField.ACTIVE: "Active",
}


class ChangeStatus(StrEnum):
    UNCHANGED = "unchanged"
    CHANGED = "changed"
    CREATED = "created"


@dataclass(slots=True, frozen=True)
class FieldChange:
    """One compared field: ``old`` is the remote value, ``new`` the local one."""

    field: ProductField
    status: ChangeStatus
    old: FieldValue | None
    new: FieldValue


@dataclass(slots=True, frozen=True, order=True)
class ConfirmedChange:
    """A ``(kind, id)`` pair the operator accepted for upload."""

    kind: ProductKind
    id: int


@dataclass(slots=True, frozen=True)
class ProductDiff:
    kind: ProductKind
    name: str
    id: int
    changes: tuple[FieldChange, ...]

    @property
    def key(self) -> ConfirmedChange:
        return ConfirmedChange(kind=self.kind, id=self.id)

    @property
    def changed(self) -> tuple[FieldChange, ...]:
        return tuple(change for change in self.changes if change.status is ChangeStatus.CHANGED)

    def has_changes(self) -> bool:
        return bool(self.changed)


def compare_field(field: ProductField, old: FieldValue, new: FieldValue) -> FieldChange:
    status = ChangeStatus.CHANGED if old != new else ChangeStatus.UNCHANGED
    return FieldChange(field=field, status=status, old=old, new=new)


def diff_product(
    local: Product,
    remote: Product,
    *,
    kind: ProductKind,
    metadata: CatalogMetadata | None = None,
) -> ProductDiff | None:
    """Compare ``local`` against ``remote``; ``None`` when nothing differs.

    The local side is reduced to the values an upload would send: the title
    includes the discount banner when ``metadata`` is given, the price is the
    discounted price and absent flags count as ``False``. A remote record without
    a description compares as the empty string.
    """

    if metadata is not None:
        title = local.upload_title(metadata.discount_prefix)
    else:
        title = local.display_title()

    changes = (
        compare_field(ProductField.TITLE, remote.name, title),
        compare_field(ProductField.DESCRIPTION, remote.description or "", local.description or ""),
        compare_field(ProductField.PRICE, remote.price, local.effective_price()),
        compare_field(
            ProductField.REGIONAL_PRICING,
            bool(remote.regional_pricing),
            bool(local.regional_pricing),
        ),
        compare_field(ProductField.ACTIVE, remote.active, local.active),
    )

    if not any(change.status is ChangeStatus.CHANGED for change in changes):
        return None

    return ProductDiff(
        kind=kind,
        name=local.name,
        id=local.id if local.id is not None else 0,
        changes=changes,
    )


def created_changes(product: Product) -> tuple[FieldChange, ...]:
    """Describe a product about to be created remotely, field by field."""

    values: tuple[tuple[ProductField, FieldValue], ...] = (
        (ProductField.TITLE, product.display_title()),
        (ProductField.DESCRIPTION, product.description or ""),
        (ProductField.PRICE, product.effective_price()),
        (ProductField.REGIONAL_PRICING, bool(product.regional_pricing)),
        (ProductField.ACTIVE, product.active),
    )
    return tuple(
        FieldChange(field=field, status=ChangeStatus.CREATED, old=None, new=value)
        for field, value in values
    )
