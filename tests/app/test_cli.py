from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from rbx_products.adapters.catalog_file import TomlCatalogRepository
from rbx_products.config.storage import CatalogConfig
from rbx_products.ui import cli as cli_module
from rbx_products.ui.confirm import AutoConfirmation, TerminalConfirmation

if TYPE_CHECKING:
    from pathlib import Path


def test_init_writes_starter_catalog(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "products.toml"

    cli_module.main(["--file", str(path), "init"])

    catalog = TomlCatalogRepository(CatalogConfig(catalog_path=path)).load()
    assert catalog.metadata.universe_id == 1234
    assert catalog.metadata.luau_file == "products.luau"
    assert catalog.metadata.discount_prefix == "💲{}% OFF💲"
    assert len(catalog) == 0


def test_init_refuses_existing_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "products.toml"
    path.write_text("# mine\n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["-f", str(path), "init"])

    assert excinfo.value.code == 1
    assert path.read_text(encoding="utf-8") == "# mine\n"


def test_download_passes_flags(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_download(**kwargs: object) -> None:
        captured.update(kwargs)

    monkeypatch.setattr(cli_module, "download_products", fake_download)

    cli_module.main(["-o", "download"])

    assert captured == {"overwrite": True, "catalog_path": None}


def test_sync_with_yes_uses_auto_confirmation(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_sync(**kwargs: object) -> None:
        captured.update(kwargs)

    monkeypatch.setattr(cli_module, "sync_products", fake_sync)

    cli_module.main(["-y", "-f", "custom.toml", "sync"])

    assert isinstance(captured["confirmation"], AutoConfirmation)
    assert captured["overwrite"] is False
    assert captured["catalog_path"] == "custom.toml"


def test_sync_prompts_by_default(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_sync(**kwargs: object) -> None:
        captured.update(kwargs)

    monkeypatch.setattr(cli_module, "sync_products", fake_sync)

    cli_module.main(["sync"])

    assert isinstance(captured["confirmation"], TerminalConfirmation)


def test_failure_exits_with_status_one(monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_sync(**_: object) -> None:
        raise RuntimeError("boom")

    monkeypatch.setattr(cli_module, "sync_products", failing_sync)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["sync"])

    assert excinfo.value.code == 1


def test_missing_command_is_usage_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main([])

    assert excinfo.value.code == 2


def test_unknown_log_level_exits_before_running(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    called: list[object] = []
    monkeypatch.setenv("RBX_PRODUCTS_LOG_LEVEL", "chatty")
    monkeypatch.setattr(cli_module, "download_products", lambda **kwargs: called.append(kwargs))

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["download"])

    assert excinfo.value.code == 1
    assert called == []
    assert "RBX_PRODUCTS_LOG_LEVEL" in capsys.readouterr().err


def test_verbose_flag_overrides_bad_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    called: list[object] = []
    monkeypatch.setenv("RBX_PRODUCTS_LOG_LEVEL", "chatty")
    monkeypatch.setattr(cli_module, "download_products", lambda **kwargs: called.append(kwargs))

    cli_module.main(["-v", "download"])

    assert len(called) == 1
