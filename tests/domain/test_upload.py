from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import pytest

from rbx_products.domain.catalog import Product, ProductKind
from rbx_products.domain.diff import ConfirmedChange
from rbx_products.domain.upload import CREATE_PROMPT, SYNC_PROMPT, Uploader, upload_catalog
from tests.support.catalogs import (
    FakeRemoteCatalog,
    InMemoryCatalogRepository,
    ScriptedConfirmation,
    make_catalog,
    remote_pass,
    remote_product,
    select_ids,
)

if TYPE_CHECKING:
    from rbx_products.domain.catalog import Catalog, RemoteProduct
    from rbx_products.domain.upload import UploadResult


def _run_upload(
    repository: InMemoryCatalogRepository,
    remote: FakeRemoteCatalog,
    confirmation: ScriptedConfirmation,
    *,
    overwrite: bool = False,
) -> UploadResult:
    return asyncio.run(
        upload_catalog(
            repository=repository,
            remote=remote,
            confirmation=confirmation,
            overwrite=overwrite,
        )
    )


def test_creation_failure_only_affects_failing_entry() -> None:
    catalog = make_catalog(
        gamepasses={"a": Product(name="A", price=100), "b": Product(name="B", price=200)},
        products={"c": Product(name="C", price=5)},
    )
    repository = InMemoryCatalogRepository(catalog)
    remote = FakeRemoteCatalog(failing_creates={"B"})
    confirmation = ScriptedConfirmation(answers=[True])

    result = _run_upload(repository, remote, confirmation)

    assert catalog.gamepasses["a"].id == 1000
    assert catalog.gamepasses["b"].id is None
    assert catalog.products["c"].id == 1001
    assert [candidate.key for candidate in result.failed] == ["b"]
    assert result.created == [
        ConfirmedChange(kind=ProductKind.GAME_PASS, id=1000),
        ConfirmedChange(kind=ProductKind.DEVELOPER_PRODUCT, id=1001),
    ]
    assert confirmation.prompts == [CREATE_PROMPT]
    assert len(confirmation.previews[0]) == 3
    first_save = repository.saved[0]
    assert first_save.gamepasses["a"].id == 1000
    assert first_save.products["c"].id == 1001


def test_ids_are_written_back_in_catalog_order_when_creates_finish_out_of_order() -> None:
    catalog = make_catalog(
        gamepasses={"a": Product(name="A"), "b": Product(name="B")},
        products={"c": Product(name="C")},
    )
    repository = InMemoryCatalogRepository(catalog)
    remote = FakeRemoteCatalog(create_delays={"A": 0.05, "C": 0.01})

    result = _run_upload(repository, remote, ScriptedConfirmation(), overwrite=True)

    assert [product.name for _, product in remote.created] == ["B", "C", "A"]
    assert catalog.gamepasses["a"].id == 1002
    assert catalog.gamepasses["b"].id == 1000
    assert catalog.products["c"].id == 1001
    assert result.created == [
        ConfirmedChange(kind=ProductKind.GAME_PASS, id=1002),
        ConfirmedChange(kind=ProductKind.GAME_PASS, id=1000),
        ConfirmedChange(kind=ProductKind.DEVELOPER_PRODUCT, id=1001),
    ]
    assert repository.saved[0].gamepasses["a"].id == 1002


def test_declined_creation_skips_phase_but_persists() -> None:
    catalog = make_catalog(gamepasses={"a": Product(name="A")})
    repository = InMemoryCatalogRepository(catalog)
    remote = FakeRemoteCatalog()

    result = _run_upload(repository, remote, ScriptedConfirmation(answers=[False]))

    assert remote.created == []
    assert catalog.gamepasses["a"].id is None
    assert result.created == []
    assert len(repository.saved) == 1
    assert len(repository.exported) == 1


def test_overwrite_creates_without_prompting() -> None:
    catalog = make_catalog(gamepasses={"vip": Product(name="VIP", price=1000, discount=20)})
    repository = InMemoryCatalogRepository(catalog)
    remote = FakeRemoteCatalog()

    _run_upload(repository, remote, ScriptedConfirmation(), overwrite=True)

    kind, created = remote.created[0]
    assert kind is ProductKind.GAME_PASS
    assert created.name == "💲20% OFF💲 VIP"
    assert created.effective_price() == 800
    assert catalog.gamepasses["vip"].name == "VIP"
    assert catalog.gamepasses["vip"].id == 1000


def _modified_catalog() -> tuple[Catalog, list[RemoteProduct]]:
    catalog = make_catalog(
        gamepasses={"pass": Product(id=5, name="Pass", price=50)},
        products={
            "nine": Product(id=9, name="Nine", price=90),
            "three": Product(id=3, name="Three", price=30),
            "stale": Product(id=77, name="Stale", price=1),
        },
    )
    remote_products = [
        remote_pass(5, "Pass", price=40),
        remote_product(9, "Nine", price=80),
        remote_product(3, "Three", price=20),
    ]
    return catalog, remote_products


def test_build_diffs_orders_products_before_passes_by_id() -> None:
    catalog, remote_products = _modified_catalog()
    uploader = Uploader(
        catalog=catalog,
        remote_products=remote_products,
        remote=FakeRemoteCatalog(remote_products),
        repository=InMemoryCatalogRepository(catalog),
        confirmation=ScriptedConfirmation(),
    )

    diffs = uploader.build_diffs()

    assert [(diff.kind, diff.id) for diff in diffs] == [
        (ProductKind.DEVELOPER_PRODUCT, 3),
        (ProductKind.DEVELOPER_PRODUCT, 9),
        (ProductKind.GAME_PASS, 5),
    ]


def test_only_selected_changes_are_synced() -> None:
    catalog, remote_products = _modified_catalog()
    repository = InMemoryCatalogRepository(catalog)
    remote = FakeRemoteCatalog(remote_products)
    confirmation = ScriptedConfirmation(answers=[True], select=select_ids(9))

    result = _run_upload(repository, remote, confirmation)

    assert [(kind, product_id) for kind, product_id, _ in remote.updated] == [
        (ProductKind.DEVELOPER_PRODUCT, 9)
    ]
    assert remote.updated[0][2].price == 90
    assert result.updated == [ConfirmedChange(kind=ProductKind.DEVELOPER_PRODUCT, id=9)]
    assert confirmation.prompts == [SYNC_PROMPT]
    assert len(confirmation.offered[0]) == 3


def test_declined_sync_sends_nothing() -> None:
    catalog, remote_products = _modified_catalog()
    repository = InMemoryCatalogRepository(catalog)
    remote = FakeRemoteCatalog(remote_products)

    result = _run_upload(repository, remote, ScriptedConfirmation(answers=[False]))

    assert remote.updated == []
    assert result.updated == []
    assert len(repository.saved) == 1


def test_empty_selection_sends_nothing() -> None:
    catalog, remote_products = _modified_catalog()
    remote = FakeRemoteCatalog(remote_products)
    confirmation = ScriptedConfirmation(answers=[True], select=select_ids())

    _run_upload(InMemoryCatalogRepository(catalog), remote, confirmation)

    assert remote.updated == []


def test_overwrite_syncs_every_diff_in_order() -> None:
    catalog, remote_products = _modified_catalog()
    remote = FakeRemoteCatalog(remote_products)
    confirmation = ScriptedConfirmation()

    _run_upload(InMemoryCatalogRepository(catalog), remote, confirmation, overwrite=True)

    assert [product_id for _, product_id, _ in remote.updated] == [3, 9, 5]
    assert confirmation.prompts == []
    assert confirmation.offered == []


def test_failed_update_aborts_queue_after_persisting() -> None:
    catalog, remote_products = _modified_catalog()
    catalog.gamepasses["new"] = Product(name="New")
    repository = InMemoryCatalogRepository(catalog)
    remote = FakeRemoteCatalog(remote_products, failing_updates={9})

    with pytest.raises(RuntimeError, match="update rejected for 9"):
        _run_upload(repository, remote, ScriptedConfirmation(), overwrite=True)

    assert [product_id for _, product_id, _ in remote.updated] == [3]
    assert catalog.gamepasses["new"].id == 1000
    assert repository.saved[-1].gamepasses["new"].id == 1000
    assert len(repository.exported) == 2


def test_nothing_to_do_still_persists() -> None:
    catalog = make_catalog(gamepasses={"vip": Product(id=1, name="VIP", price=10)})
    repository = InMemoryCatalogRepository(catalog)
    remote = FakeRemoteCatalog([remote_pass(1, "VIP", price=10)])

    result = _run_upload(repository, remote, ScriptedConfirmation())

    assert result.created == []
    assert result.updated == []
    assert len(repository.saved) == 1
