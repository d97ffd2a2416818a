"""Generated Luau module mapping product titles to ids and prices."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from rbx_products.domain.catalog import Catalog, Product

log = getLogger(__name__)

HEADER = (
    "-- This file is automatically generated by rbx-products. "
    "Do not edit this file directly.\n"
    "export type Product = { id: number, price: number }\n"
)

_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t"}


def luau_string(value: str) -> str:
    return '"' + "".join(_ESCAPES.get(c, c) for c in value) + '"'


def _entry(product: Product) -> str:
    title = luau_string(product.display_title())
    return f"\t\t[{title}] = {{ id = {product.id or 0}, price = {product.effective_price()} }}"


def _entries(products: Iterable[Product]) -> str:
    ordered = sorted(products, key=lambda p: (p.id is not None, p.id or 0))
    lines = [_entry(product) for product in ordered]
    if not lines:
        return ""
    return ",\n".join(lines) + "\n"


def render_luau(catalog: Catalog) -> str:
    return (
        HEADER
        + "\nreturn {\n\tGamepasses = {\n"
        + _entries(catalog.gamepasses.values())
        + "\t} :: {[string]: Product},\n\n\tProducts = {\n"
        + _entries(catalog.products.values())
        + "\t} :: {[string]: Product}\n}"
    )


def write_luau(catalog: Catalog, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_luau(catalog), encoding="utf-8")
    log.debug("Wrote Luau export to %s", path)
