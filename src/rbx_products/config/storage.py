"""Catalog file location helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

DEFAULT_CATALOG_FILENAME: Final[str] = "products.toml"
CATALOG_FILE_ENV: Final[str] = "RBX_PRODUCTS_FILE"


@dataclass(frozen=True, slots=True)
class CatalogConfig:
    catalog_path: Path

    def resolve_catalog_path(self) -> Path:
        return self.catalog_path.expanduser().resolve()

    def resolve_export_path(self, export_file: str) -> Path:
        """Resolve an export path relative to the catalog file's directory."""

        candidate = Path(export_file).expanduser()
        if candidate.is_absolute():
            return candidate
        return self.resolve_catalog_path().parent / candidate


def get_catalog_config(path: str | Path | None = None) -> CatalogConfig:
    if path is not None:
        return CatalogConfig(catalog_path=Path(path))
    env_path = os.getenv(CATALOG_FILE_ENV)
    return CatalogConfig(catalog_path=Path(env_path or DEFAULT_CATALOG_FILENAME))
