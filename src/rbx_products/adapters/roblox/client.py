"""HTTP client for the Roblox Open Cloud game pass and developer product APIs."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from rbx_products.adapters.http_resilience import CredentialAuth, ResilientClient
from rbx_products.domain.catalog import ProductKind

from .schema import (
    CursorPage,
    DeveloperProduct,
    DeveloperProductPage,
    GamePass,
    GamePassPage,
    ProductUpdateRequest,
)
from .translator import build_update_request, translate_developer_product, translate_game_pass

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from rbx_products.config.http_resilience import ResilienceConfig
    from rbx_products.config.roblox import RobloxConfig
    from rbx_products.domain.catalog import Product, RemoteProduct

    type ClientFactory = Callable[[ResilienceConfig], ResilientClient]

log = getLogger(__name__)

GAME_PASSES_PATH = "/game-passes/v1/universes/{universe_id}/game-passes"
DEVELOPER_PRODUCTS_PATH = "/developer-products/v2/universes/{universe_id}/developer-products"


class RobloxAPIError(RuntimeError):
    """Raised when the Roblox API returns an unexpected response."""


class RobloxClient:
    """Async client bound to one universe; use as an ``async with`` context."""

    def __init__(
        self,
        *,
        config: RobloxConfig,
        universe_id: int,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self.universe_id = universe_id
        self._client_factory = client_factory or self._default_client_factory
        self._http: ResilientClient | None = None

    def _default_client_factory(self, resilience: ResilienceConfig) -> ResilientClient:
        auth = CredentialAuth(self._config.credential, header=self._config.api_key_header)
        return ResilientClient(resilience, auth=auth)

    async def __aenter__(self) -> RobloxClient:
        self._http = self._client_factory(self._resilience)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    @property
    def http(self) -> ResilientClient:
        if self._http is None:
            raise RobloxAPIError("RobloxClient used outside of its async context")
        return self._http

    def _collection_path(self, kind: ProductKind) -> str:
        template = GAME_PASSES_PATH if kind is ProductKind.GAME_PASS else DEVELOPER_PRODUCTS_PATH
        return template.format(universe_id=self.universe_id)

    async def fetch_game_passes(self) -> list[GamePass]:
        pages = await self._paginate(
            f"{self._collection_path(ProductKind.GAME_PASS)}/creator", GamePassPage
        )
        return [game_pass for page in pages for game_pass in page.game_passes]

    async def fetch_developer_products(self) -> list[DeveloperProduct]:
        pages = await self._paginate(
            f"{self._collection_path(ProductKind.DEVELOPER_PRODUCT)}/creator",
            DeveloperProductPage,
        )
        return [product for page in pages for product in page.developer_products]

    async def fetch_all_products(self) -> list[RemoteProduct]:
        game_passes = await self.fetch_game_passes()
        developer_products = await self.fetch_developer_products()
        log.debug(
            "Fetched %d game passes and %d developer products for universe %s",
            len(game_passes),
            len(developer_products),
            self.universe_id,
        )
        return [translate_game_pass(item) for item in game_passes] + [
            translate_developer_product(item) for item in developer_products
        ]

    async def _paginate[TPage: CursorPage](self, path: str, page_model: type[TPage]) -> list[TPage]:
        """Walk a cursor-paginated listing until the server stops returning a cursor."""

        pages: list[TPage] = []
        cursor: str | None = None
        while True:
            params = {"pageSize": str(self._config.page_size)}
            if cursor is not None:
                params["pageToken"] = cursor

            response = await self.http.get(path, params=params)
            response.raise_for_status()
            payload = response.json()
            if not isinstance(payload, dict):
                raise RobloxAPIError(f"Unexpected Roblox response payload from {path}")

            page = page_model.model_validate(payload)
            pages.append(page)
            if page.next_page_token is None:
                return pages
            cursor = page.next_page_token

    async def create_game_pass(self, request: ProductUpdateRequest) -> GamePass:
        payload = await self._create(ProductKind.GAME_PASS, request)
        return GamePass.model_validate(payload)

    async def create_developer_product(self, request: ProductUpdateRequest) -> DeveloperProduct:
        payload = await self._create(ProductKind.DEVELOPER_PRODUCT, request)
        return DeveloperProduct.model_validate(payload)

    async def update_game_pass(self, game_pass_id: int, request: ProductUpdateRequest) -> None:
        await self._update(ProductKind.GAME_PASS, game_pass_id, request)

    async def update_developer_product(
        self, product_id: int, request: ProductUpdateRequest
    ) -> None:
        await self._update(ProductKind.DEVELOPER_PRODUCT, product_id, request)

    async def create_product(self, kind: ProductKind, product: Product) -> int:
        request = build_update_request(product)
        if kind is ProductKind.GAME_PASS:
            return (await self.create_game_pass(request)).game_pass_id
        return (await self.create_developer_product(request)).product_id

    async def update_product(self, kind: ProductKind, product_id: int, product: Product) -> None:
        request = build_update_request(product)
        if kind is ProductKind.GAME_PASS:
            await self.update_game_pass(product_id, request)
        else:
            await self.update_developer_product(product_id, request)

    async def _create(self, kind: ProductKind, request: ProductUpdateRequest) -> dict[str, object]:
        path = self._collection_path(kind)
        response = await self.http.post(path, files=request.to_form())
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise RobloxAPIError(f"Unexpected Roblox response payload from {path}")
        return payload

    async def _update(
        self, kind: ProductKind, product_id: int, request: ProductUpdateRequest
    ) -> None:
        path = f"{self._collection_path(kind)}/{product_id}"
        response = await self.http.patch(path, files=request.to_form())
        response.raise_for_status()
