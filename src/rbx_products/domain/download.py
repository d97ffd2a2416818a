"""Download direction: pull remote state into the local catalog."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from .merge import MergeResult, merge_remote_products

if TYPE_CHECKING:
    from .ports import CatalogRepository, RemoteCatalog

log = getLogger(__name__)


async def download_catalog(
    *,
    repository: CatalogRepository,
    remote: RemoteCatalog,
    overwrite: bool = False,
) -> MergeResult:
    """Fetch every remote record, merge it into the catalog and persist the result."""

    log.info("Fetching local products")
    catalog = repository.load()

    log.info("Fetching remote products")
    remote_products = await remote.fetch_all_products()

    log.info(
        "Fetched %d local products, %d remote products",
        len(catalog),
        len(remote_products),
    )
    log.info("Merging local and remote products (overwrite: %s)", overwrite)
    result = merge_remote_products(catalog, remote_products, overwrite=overwrite)

    log.info(
        "Finished merging products (added=%d, updated=%d), saving to disk",
        result.added,
        result.updated,
    )
    repository.save(result.catalog)

    log.info("Writing generated export")
    repository.export(result.catalog)
    return result
