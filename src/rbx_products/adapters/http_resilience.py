from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING, TypedDict, Unpack

import httpx
from aiolimiter import AsyncLimiter

from rbx_products.config.http_resilience import RateLimitPolicy, ResilienceConfig

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Generator
    from types import TracebackType

    from httpx._client import UseClientDefault
    from httpx._types import (
        CookieTypes,
        HeaderTypes,
        QueryParamTypes,
        RequestContent,
        RequestData,
        RequestExtensions,
        RequestFiles,
        TimeoutTypes,
        URLTypes,
    )

    from rbx_products.config.roblox import ApiCredential

    type Sleeper = Callable[[float], Awaitable[None]]

log = getLogger(__name__)

TOO_MANY_REQUESTS = 429

__all__ = [
    "CredentialAuth",
    "RateLimitPolicy",
    "RateLimitTransport",
    "ResilienceConfig",
    "ResilientClient",
    "retry_wait_from_headers",
]


class CredentialAuth(httpx.Auth):
    """Attach the API key header when a credential is set; send as-is otherwise."""

    def __init__(self, credential: ApiCredential, *, header: str = "x-api-key") -> None:
        self._credential = credential
        self._header = header

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        token = self._credential.get()
        if token is not None:
            request.headers[self._header] = token
        yield request


def retry_wait_from_headers(headers: httpx.Headers, policy: RateLimitPolicy) -> float:
    """Seconds to wait before retrying, from the first header that parses."""

    for name in policy.wait_headers:
        raw = headers.get(name)
        if raw is None:
            continue
        try:
            seconds = int(raw.strip())
        except ValueError:
            continue
        if seconds >= 0:
            return float(seconds)
    return policy.default_wait_seconds


class RateLimitTransport(httpx.AsyncBaseTransport):
    """Retry ``429`` responses using the server's backoff hints.

    Every other response, error statuses included, is returned untouched. When
    the retry budget is spent the last limited response is returned rather than
    raised, so callers must check the status themselves.
    """

    def __init__(
        self,
        policy: RateLimitPolicy | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleeper | None = None,
    ) -> None:
        self.policy = policy or RateLimitPolicy()
        self._transport = transport or httpx.AsyncHTTPTransport()
        self._sleep = sleep or asyncio.sleep

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        replayable = await _buffer_request(request)
        attempt = 0
        while True:
            response = await self._transport.handle_async_request(request)
            if response.status_code != TOO_MANY_REQUESTS:
                return response
            if attempt >= self.policy.max_retries or not replayable:
                return response

            wait = retry_wait_from_headers(response.headers, self.policy)
            log.warning(
                "Rate limited on attempt %d for %s %s, retrying after %s seconds",
                attempt + 1,
                request.method,
                request.url.path,
                wait,
            )
            await response.aclose()
            await self._sleep(wait + self.policy.cushion_seconds)
            attempt += 1

    async def aclose(self) -> None:
        await self._transport.aclose()


async def _buffer_request(request: httpx.Request) -> bool:
    """Load the request body into memory so it can be sent again."""

    try:
        await request.aread()
    except httpx.StreamError:
        # only reachable for a streamed body already consumed upstream
        return False
    return True


class RequestOptions(TypedDict, total=False):
    content: RequestContent | None
    data: RequestData | None
    files: RequestFiles | None
    json: object
    params: QueryParamTypes | None
    headers: HeaderTypes | None
    cookies: CookieTypes | None
    follow_redirects: bool | UseClientDefault
    timeout: TimeoutTypes | UseClientDefault
    extensions: RequestExtensions | None


class AsyncClientOptions(TypedDict, total=False):
    base_url: str
    timeout: TimeoutTypes
    headers: HeaderTypes
    auth: httpx.Auth
    transport: httpx.AsyncBaseTransport


class ResilientClient:
    def __init__(
        self,
        config: ResilienceConfig,
        *,
        auth: httpx.Auth | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleeper | None = None,
    ) -> None:
        self.config = config
        self._limiter: AsyncLimiter | None = (
            AsyncLimiter(config.ratelimit.max_calls, config.ratelimit.per_seconds)
            if config.ratelimit
            else None
        )

        retry_transport = RateLimitTransport(config.retry, transport=transport, sleep=sleep)

        client_kwargs: AsyncClientOptions = {
            "timeout": config.timeout_seconds,
            "transport": retry_transport,
        }
        if config.base_url is not None:
            client_kwargs["base_url"] = config.base_url
        if config.default_headers:
            client_kwargs["headers"] = dict(config.default_headers)
        if auth is not None:
            client_kwargs["auth"] = auth

        self._client = httpx.AsyncClient(**client_kwargs)

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        url: URLTypes,
        **kwargs: Unpack[RequestOptions],
    ) -> httpx.Response:
        async def do_request() -> httpx.Response:
            return await self._client.request(method, url, **kwargs)

        return await self._send(do_request)

    async def get(
        self,
        url: URLTypes,
        **kwargs: Unpack[RequestOptions],
    ) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(
        self,
        url: URLTypes,
        **kwargs: Unpack[RequestOptions],
    ) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def patch(
        self,
        url: URLTypes,
        **kwargs: Unpack[RequestOptions],
    ) -> httpx.Response:
        return await self.request("PATCH", url, **kwargs)

    async def _send(self, func: Callable[[], Awaitable[httpx.Response]]) -> httpx.Response:
        if self._limiter is None:
            return await func()
        async with self._limiter:
            return await func()
