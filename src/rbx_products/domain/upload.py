"""Upload direction: create missing remote records and push confirmed diffs.

The creation phase is lenient: every create call is independent and a failure
only leaves that entry without an id. The modification phase is strict: the
first failed update aborts the remaining queue. The catalog is flushed after
creation and again before any error leaves :meth:`Uploader.run`.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from .catalog import Catalog, Product, ProductKind, RemoteProduct, with_discount_prefix
from .diff import ConfirmedChange, ProductDiff, created_changes, diff_product

if TYPE_CHECKING:
    from .ports import CatalogRepository, Confirmation, RemoteCatalog

log = getLogger(__name__)

CREATE_PROMPT = "Would you like to upload non-existent products?"
SYNC_PROMPT = "Would you like to sync products?"


@dataclass(slots=True, frozen=True)
class CreationCandidate:
    kind: ProductKind
    key: str
    product: Product


@dataclass(slots=True)
class UploadResult:
    created: list[ConfirmedChange] = field(default_factory=list["ConfirmedChange"])
    failed: list[CreationCandidate] = field(default_factory=list["CreationCandidate"])
    updated: list[ConfirmedChange] = field(default_factory=list["ConfirmedChange"])


@dataclass(slots=True)
class Uploader:
    catalog: Catalog
    remote_products: list[RemoteProduct]
    remote: RemoteCatalog
    repository: CatalogRepository
    confirmation: Confirmation
    overwrite: bool = False
    result: UploadResult = field(default_factory=UploadResult)

    async def run(self) -> UploadResult:
        try:
            await self.create_missing()
            await self.sync_modified()
        except Exception:
            self._persist()
            log.error("Failed to upload modified products, aborting upload")
            raise
        self._persist()
        return self.result

    def creation_candidates(self) -> list[CreationCandidate]:
        return [
            CreationCandidate(kind=kind, key=key, product=product)
            for kind, key, product in self.catalog.iter_entries()
            if product.id is None
        ]

    async def create_missing(self) -> None:
        candidates = self.creation_candidates()
        if not candidates:
            return

        if not self.overwrite:
            previews = [
                ProductDiff(
                    kind=candidate.kind,
                    name=candidate.product.name,
                    id=0,
                    changes=created_changes(candidate.product),
                )
                for candidate in candidates
            ]
            if not self.confirmation.approve(CREATE_PROMPT, previews=previews):
                log.info("Not uploading non-existent products")
                return

        log.info(
            "Uploading %d new product(s) in universe %s",
            len(candidates),
            self.catalog.metadata.universe_id,
        )
        outcomes = await asyncio.gather(
            *(self._create_one(candidate) for candidate in candidates)
        )

        # ids are written back in catalog order once every call has settled
        for candidate, product_id in zip(candidates, outcomes, strict=True):
            if product_id is None:
                self.result.failed.append(candidate)
                continue
            self.catalog.collection(candidate.kind)[candidate.key].id = product_id
            self.result.created.append(ConfirmedChange(kind=candidate.kind, id=product_id))

        self._persist()

    async def _create_one(self, candidate: CreationCandidate) -> int | None:
        product = with_discount_prefix(candidate.product, self.catalog.metadata.discount_prefix)
        try:
            product_id = await self.remote.create_product(candidate.kind, product)
        except Exception:
            log.exception("Failed to upload %s '%s'", candidate.kind, candidate.key)
            return None
        log.info("Uploaded %s '%s' with id %s", candidate.kind, product.name, product_id)
        return product_id

    def build_diffs(self) -> list[ProductDiff]:
        remote_by_key = {
            ConfirmedChange(kind=remote.kind, id=remote.id): remote.product
            for remote in self.remote_products
        }
        diffs: list[ProductDiff] = []
        for kind, _key, local in self.catalog.iter_entries():
            if local.id is None:
                continue
            remote = remote_by_key.get(ConfirmedChange(kind=kind, id=local.id))
            if remote is None:
                log.debug("Skipping %s id %s: not found remotely", kind, local.id)
                continue
            diff = diff_product(local, remote, kind=kind, metadata=self.catalog.metadata)
            if diff is not None:
                diffs.append(diff)
        diffs.sort(key=lambda diff: (diff.kind.sort_order, diff.id))
        return diffs

    async def sync_modified(self) -> None:
        diffs = self.build_diffs()
        if not diffs:
            log.info("No differences found between local and universe products")
            return

        if self.overwrite:
            confirmed = [diff.key for diff in diffs]
        else:
            confirmed = self.confirmation.select_changes(diffs)
            if not self.confirmation.approve(SYNC_PROMPT):
                log.info("User aborted sync")
                return

        if not confirmed:
            log.info("No changes to apply")
            return

        log.info("Syncing %d product(s)", len(confirmed))
        for change in confirmed:
            match = self.catalog.find_by_id(change.kind, change.id)
            if match is None:
                raise LookupError(f"No local {change.kind} with id {change.id}")
            local = match[1]
            product = with_discount_prefix(local, self.catalog.metadata.discount_prefix)
            await self.remote.update_product(change.kind, change.id, product)
            self.result.updated.append(change)
            log.info("Synced %s '%s' (id: %s)", change.kind, local.name, change.id)

        log.info("Finished syncing all gamepasses/products")

    def _persist(self) -> None:
        self.repository.save(self.catalog)
        self.repository.export(self.catalog)


async def upload_catalog(
    *,
    repository: CatalogRepository,
    remote: RemoteCatalog,
    confirmation: Confirmation,
    overwrite: bool = False,
) -> UploadResult:
    """Load the catalog, fetch remote state and run both upload phases."""

    log.info("Fetching local products")
    catalog = repository.load()

    log.info("Fetching remote products")
    remote_products = await remote.fetch_all_products()
    log.info(
        "Fetched %d local products, %d remote products",
        len(catalog),
        len(remote_products),
    )

    uploader = Uploader(
        catalog=catalog,
        remote_products=remote_products,
        remote=remote,
        repository=repository,
        confirmation=confirmation,
        overwrite=overwrite,
    )
    return await uploader.run()
