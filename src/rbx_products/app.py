"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from rbx_products.adapters.catalog_file import TomlCatalogRepository
from rbx_products.adapters.roblox import RobloxClient
from rbx_products.config import get_catalog_config, get_roblox_config
from rbx_products.domain.catalog import DEFAULT_DISCOUNT_PREFIX, Catalog, CatalogMetadata
from rbx_products.domain.download import download_catalog
from rbx_products.domain.upload import upload_catalog

if TYPE_CHECKING:
    from collections.abc import Callable
    from contextlib import AbstractAsyncContextManager
    from pathlib import Path

    from rbx_products.config.roblox import RobloxConfig
    from rbx_products.domain.merge import MergeResult
    from rbx_products.domain.ports import CatalogRepository, Confirmation, RemoteCatalog
    from rbx_products.domain.upload import UploadResult

type RemoteFactory = Callable[[int], AbstractAsyncContextManager[RemoteCatalog]]

log = getLogger(__name__)

STARTER_UNIVERSE_ID = 1234
STARTER_LUAU_FILE = "products.luau"


def _default_remote_factory(config: RobloxConfig | None = None) -> RemoteFactory:
    effective_config = config or get_roblox_config()

    def factory(universe_id: int) -> RobloxClient:
        return RobloxClient(config=effective_config, universe_id=universe_id)

    return factory


def init_catalog(*, catalog_path: str | Path | None = None) -> Catalog:
    """Write a starter catalog file, refusing to replace an existing one."""

    repository = TomlCatalogRepository(get_catalog_config(catalog_path))
    catalog = Catalog(
        metadata=CatalogMetadata(
            universe_id=STARTER_UNIVERSE_ID,
            discount_prefix=DEFAULT_DISCOUNT_PREFIX,
            luau_file=STARTER_LUAU_FILE,
        )
    )
    repository.initialise(catalog)
    log.info("%s initialized successfully", repository.path)
    return catalog


def download_products(
    *,
    overwrite: bool = False,
    catalog_path: str | Path | None = None,
    repository: CatalogRepository | None = None,
    remote_factory: RemoteFactory | None = None,
) -> MergeResult:
    """Merge the universe's passes and products into the local catalog."""

    effective_repository = repository or TomlCatalogRepository(get_catalog_config(catalog_path))
    effective_factory = remote_factory or _default_remote_factory()

    async def run() -> MergeResult:
        universe_id = effective_repository.load().metadata.universe_id
        async with effective_factory(universe_id) as remote:
            return await download_catalog(
                repository=effective_repository,
                remote=remote,
                overwrite=overwrite,
            )

    result = asyncio.run(run())
    log.info("Finished download: added=%s, updated=%s", result.added, result.updated)
    return result


def sync_products(
    *,
    confirmation: Confirmation,
    overwrite: bool = False,
    catalog_path: str | Path | None = None,
    repository: CatalogRepository | None = None,
    remote_factory: RemoteFactory | None = None,
) -> UploadResult:
    """Create missing remote records and push confirmed local changes."""

    effective_repository = repository or TomlCatalogRepository(get_catalog_config(catalog_path))
    effective_factory = remote_factory or _default_remote_factory()

    async def run() -> UploadResult:
        universe_id = effective_repository.load().metadata.universe_id
        async with effective_factory(universe_id) as remote:
            return await upload_catalog(
                repository=effective_repository,
                remote=remote,
                confirmation=confirmation,
                overwrite=overwrite,
            )

    result = asyncio.run(run())
    log.info(
        "Finished sync: created=%d, failed=%d, updated=%d",
        len(result.created),
        len(result.failed),
        len(result.updated),
    )
    return result
