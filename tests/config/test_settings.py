from __future__ import annotations

from pathlib import Path

import pytest

from rbx_products.config import get_catalog_config, get_roblox_config
from rbx_products.config.storage import CatalogConfig


def test_roblox_config_reads_optional_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RBX_API_KEY", "secret")

    config = get_roblox_config()

    assert config.credential.get() == "secret"
    assert config.resilience.base_url == "https://apis.roblox.com"
    assert config.api_key_header == "x-api-key"


def test_roblox_config_without_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("RBX_API_KEY", raising=False)

    config = get_roblox_config()

    assert config.credential.get() is None
    assert "unset" in repr(config.credential)


def test_catalog_path_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RBX_PRODUCTS_FILE", "from-env.toml")

    assert get_catalog_config("explicit.toml").catalog_path == Path("explicit.toml")
    assert get_catalog_config().catalog_path == Path("from-env.toml")

    monkeypatch.delenv("RBX_PRODUCTS_FILE")
    assert get_catalog_config().catalog_path == Path("products.toml")


def test_export_path_is_relative_to_catalog(tmp_path: Path) -> None:
    config = CatalogConfig(catalog_path=tmp_path / "game" / "products.toml")

    assert config.resolve_export_path("out/products.luau") == (
        tmp_path.resolve() / "game" / "out" / "products.luau"
    )
    absolute = tmp_path / "elsewhere.luau"
    assert config.resolve_export_path(str(absolute)) == absolute
