"""Fold freshly fetched remote records into the local catalog."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from .catalog import Product
from .naming import canonical_name, is_censored, slugify

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .catalog import Catalog, RemoteProduct

log = getLogger(__name__)


@dataclass(slots=True)
class MergeResult:
    """Summary of a download merge."""

    catalog: Catalog
    added: int = 0
    updated: int = 0


def merge_product(
    remote: Product,
    existing: Product | None,
    *,
    overwrite: bool,
    catalog: Catalog,
) -> Product:
    """Decide field by field which side wins for one remote record."""

    filters = catalog.metadata.name_filters
    keep_local = existing is not None and not overwrite

    if existing is not None and keep_local:
        name = canonical_name(existing.name, filters)
        prefix = existing.prefix
        description = existing.description
        price = existing.price
        regional_pricing = existing.regional_pricing
    else:
        name = canonical_name(remote.name, filters)
        prefix = None
        description = remote.description
        price = remote.price
        regional_pricing = remote.regional_pricing

    if (
        existing is not None
        and description is not None
        and description != existing.description
        and is_censored(description)
    ):
        log.warning(
            "Remote description for '%s' (id %s) looks censored, keeping local text",
            name,
            remote.id,
        )
        description = existing.description

    discount = existing.discount if existing is not None and existing.has_discount() else None

    return Product(
        id=remote.id,
        name=name,
        prefix=prefix,
        description=description,
        active=remote.active,
        discount=discount,
        price=price,
        regional_pricing=regional_pricing or None,
    )


def merge_remote_products(
    catalog: Catalog,
    remote_products: Iterable[RemoteProduct],
    *,
    overwrite: bool = False,
) -> MergeResult:
    """Merge ``remote_products`` into ``catalog`` in place.

    Matched records keep their catalog key; new records are keyed by the slug of
    their canonical name, suffixed with the remote id if that slug is taken.
    """

    result = MergeResult(catalog=catalog)
    for remote in remote_products:
        collection = catalog.collection(remote.kind)
        match = catalog.find_by_id(remote.kind, remote.id)
        existing = match[1] if match is not None else None

        merged = merge_product(remote.product, existing, overwrite=overwrite, catalog=catalog)

        if match is not None:
            key = match[0]
            result.updated += 1
        else:
            key = _new_key(merged, collection)
            result.added += 1
            log.debug("Adding %s '%s' (id %s) as '%s'", remote.kind, merged.name, remote.id, key)

        collection[key] = merged

    return result


def _new_key(product: Product, collection: dict[str, Product]) -> str:
    key = slugify(product.name) or str(product.id)
    if key in collection:
        key = f"{key}-{product.id}"
    return key
