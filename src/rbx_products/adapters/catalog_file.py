"""Round-trip TOML persistence for the local catalog.

Saving edits the existing document in place: only keys owned by the catalog
are written or removed, so comments, formatting and unknown keys survive.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

import tomlkit
from tomlkit.exceptions import TOMLKitError

from rbx_products.domain.catalog import Catalog, CatalogMetadata, Product, ProductKind
from rbx_products.domain.naming import compile_name_filters

from .luau_export import write_luau

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from tomlkit.items import Table
    from tomlkit.toml_document import TOMLDocument

    from rbx_products.config.storage import CatalogConfig

log = getLogger(__name__)

METADATA_KEY = "metadata"
SECTION_KEYS = {
    ProductKind.GAME_PASS: "gamepasses",
    ProductKind.DEVELOPER_PRODUCT: "products",
}


class CatalogFormatError(ValueError):
    """Raised when the catalog file cannot be interpreted."""


class CatalogExistsError(FileExistsError):
    """Raised when initialising over an existing catalog file."""


class TomlCatalogRepository:
    def __init__(self, config: CatalogConfig) -> None:
        self._config = config

    @property
    def path(self) -> Path:
        return self._config.resolve_catalog_path()

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Catalog:
        try:
            document = tomlkit.parse(self.path.read_text(encoding="utf-8"))
        except TOMLKitError as exc:
            raise CatalogFormatError(f"Malformed catalog file {self.path}: {exc}") from exc
        return catalog_from_mapping(document.unwrap())

    def save(self, catalog: Catalog) -> None:
        if self.path.exists():
            try:
                document = tomlkit.parse(self.path.read_text(encoding="utf-8"))
            except TOMLKitError as exc:
                raise CatalogFormatError(f"Malformed catalog file {self.path}: {exc}") from exc
        else:
            document = tomlkit.document()

        update_document(document, catalog)
        self.path.write_text(tomlkit.dumps(document), encoding="utf-8")
        log.debug("Saved %d products to %s", len(catalog), self.path)

    def export(self, catalog: Catalog) -> None:
        luau_file = catalog.metadata.luau_file
        if luau_file is None:
            return
        write_luau(catalog, self._config.resolve_export_path(luau_file))

    def initialise(self, catalog: Catalog) -> None:
        if self.exists():
            raise CatalogExistsError(f"{self.path} already exists")
        self.save(catalog)


def catalog_from_mapping(data: Mapping[str, Any]) -> Catalog:
    metadata = data.get(METADATA_KEY)
    if not isinstance(metadata, dict):
        raise CatalogFormatError("Missing [metadata] table")

    catalog = Catalog(metadata=_metadata_from_mapping(metadata))
    for kind, section in SECTION_KEYS.items():
        entries = data.get(section, {})
        if not isinstance(entries, dict):
            raise CatalogFormatError(f"[{section}] must be a table")
        collection = catalog.collection(kind)
        for key, entry in entries.items():
            if not isinstance(entry, dict):
                raise CatalogFormatError(f"[{section}.{key}] must be a table")
            collection[key] = _product_from_mapping(entry, where=f"{section}.{key}")
    return catalog


def _metadata_from_mapping(data: Mapping[str, Any]) -> CatalogMetadata:
    universe_id = data.get("universe-id")
    if not isinstance(universe_id, int) or isinstance(universe_id, bool):
        raise CatalogFormatError("metadata.universe-id must be an integer")

    filters = data.get("name-filters")
    name_filters = None
    if filters is not None:
        if not isinstance(filters, list) or not all(isinstance(f, str) for f in filters):
            raise CatalogFormatError("metadata.name-filters must be a list of strings")
        try:
            name_filters = compile_name_filters(filters)
        except ValueError as exc:
            raise CatalogFormatError(str(exc)) from exc

    return CatalogMetadata(
        universe_id=universe_id,
        discount_prefix=_optional(data, "discount-prefix", str, where="metadata"),
        luau_file=_optional(data, "luau-file", str, where="metadata"),
        name_filters=name_filters,
    )


def _product_from_mapping(data: Mapping[str, Any], *, where: str) -> Product:
    name = data.get("name")
    if not isinstance(name, str):
        raise CatalogFormatError(f"{where}.name must be a string")
    active = data.get("active")
    if not isinstance(active, bool):
        raise CatalogFormatError(f"{where}.active must be a boolean")
    price = data.get("price")
    if not isinstance(price, int) or isinstance(price, bool) or price < 0:
        raise CatalogFormatError(f"{where}.price must be a non-negative integer")

    discount = _optional(data, "discount", int, where=where)
    if discount is not None and not 0 <= discount <= 100:  # noqa: PLR2004
        raise CatalogFormatError(f"{where}.discount must be between 0 and 100")

    return Product(
        id=_optional(data, "id", int, where=where),
        name=name,
        prefix=_optional(data, "prefix", str, where=where),
        description=_optional(data, "description", str, where=where),
        active=active,
        discount=discount,
        price=price,
        regional_pricing=_optional(data, "regional-pricing", bool, where=where),
    )


def _optional[T](data: Mapping[str, Any], key: str, expected: type[T], *, where: str) -> T | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
        raise CatalogFormatError(f"{where}.{key} must be of type {expected.__name__}")
    return value


def update_document(document: TOMLDocument, catalog: Catalog) -> None:
    """Write ``catalog`` into ``document`` without disturbing foreign content."""

    metadata = _table(document, METADATA_KEY)
    meta = catalog.metadata
    _set_optional(metadata, "universe-id", meta.universe_id)
    _set_optional(metadata, "discount-prefix", meta.discount_prefix)
    _set_optional(metadata, "luau-file", meta.luau_file)
    filters = None if meta.name_filters is None else [p.pattern for p in meta.name_filters]
    _set_optional(metadata, "name-filters", filters)

    for kind, section in SECTION_KEYS.items():
        table = _table(document, section)
        for key, product in catalog.collection(kind).items():
            existing = table.get(key)
            if isinstance(existing, dict):
                _write_product(existing, product)
            else:
                entry = tomlkit.table()
                _write_product(entry, product)
                table[key] = entry


def _table(document: TOMLDocument, key: str) -> Table:
    existing = document.get(key)
    if isinstance(existing, dict):
        return existing  # type: ignore[return-value]
    table = tomlkit.table()
    document[key] = table
    return table


def _write_product(table: Any, product: Product) -> None:
    _set_optional(table, "id", product.id)
    _set_optional(table, "prefix", product.prefix)
    table["name"] = product.name
    _set_optional(table, "description", product.description)
    table["active"] = product.active
    _set_optional(table, "discount", product.discount)
    table["price"] = product.price
    _set_optional(table, "regional-pricing", product.regional_pricing)


def _set_optional(table: Any, key: str, value: object) -> None:
    if value is None:
        if key in table:
            del table[key]
        return
    if table.get(key) != value:
        table[key] = value
