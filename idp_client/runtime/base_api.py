"""
Request execution shared by every generated API manager.
"""

import inspect
from dataclasses import dataclass, field, replace
from typing import Any, Awaitable, Callable, Mapping, Optional, Sequence, Tuple, Union

import httpx

from ..errors import ConfigurationError, FetchError, RequestTimeoutError, ResponseError
from ..logging import get_logger
from .middleware import FetchParams, Middleware, MiddlewareChain
from .request import (
    HTTPHeaders,
    RequestOptions,
    RequestOpts,
    build_url,
    merge_headers,
    serialize_body,
)
from .retry import RetryConfig, RetryPolicy, run_with_retry
from .timeout import DEFAULT_TIMEOUT_MS, TimeoutGuard
from .transport import HttpxTransport, Transport

ErrorParser = Callable[[httpx.Response], Union[BaseException, Awaitable[BaseException]]]


def default_parse_error(response: httpx.Response) -> ResponseError:
    """Build a ``ResponseError`` carrying the decoded body when it is JSON."""
    try:
        body: Any = response.json()
    except ValueError:
        body = response.text
    return ResponseError(response.status_code, body, dict(response.headers))


@dataclass(frozen=True)
class Configuration:
    """Settings shared read-only by every request of an API instance."""

    base_url: Optional[str] = None
    parse_error: ErrorParser = default_parse_error
    headers: HTTPHeaders = field(default_factory=dict)
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    retry: RetryConfig = field(default_factory=RetryConfig)
    middleware: Sequence[Middleware] = ()
    transport: Optional[Transport] = None


@dataclass(frozen=True)
class InitOverrideContext:
    """What an override function sees: the proposed options and the request description."""

    init: RequestOptions
    context: RequestOpts


InitOverrideResult = Union[RequestOptions, Mapping[str, Any], None]
InitOverrideFunction = Callable[
    [InitOverrideContext], Union[InitOverrideResult, Awaitable[InitOverrideResult]]
]
InitOverride = Union[Mapping[str, Any], RequestOptions, InitOverrideFunction]

_INIT_FIELDS = ("method", "headers", "body", "extensions")


def _apply_overrides(init: RequestOptions, overrides: Mapping[str, Any]) -> RequestOptions:
    """Replace the known fields of ``init``; any other key is carried in ``extensions``."""
    changes = {key: value for key, value in overrides.items() if key in _INIT_FIELDS}
    extra = {key: value for key, value in overrides.items() if key not in _INIT_FIELDS}
    if extra:
        changes["extensions"] = {**changes.get("extensions", init.extensions), **extra}
    if "method" in changes:
        changes["method"] = str(changes["method"]).upper()
    return replace(init, **changes)


class BaseAPI:
    """Base class for all generated API managers."""

    def __init__(self, configuration: Configuration):
        if configuration.base_url is None:
            raise ConfigurationError("Must provide a base URL for the API")
        if not isinstance(configuration.base_url, str) or len(configuration.base_url) == 0:
            raise ConfigurationError("The provided base URL is invalid")

        self.configuration = configuration
        self.middleware = MiddlewareChain(configuration.middleware)
        self.transport = configuration.transport or HttpxTransport()
        self.timeout_guard = TimeoutGuard(configuration.timeout_ms)
        self.retry_policy = RetryPolicy(configuration.retry)
        self.logger = get_logger("idp_client.runtime")

    async def request(self,
                      context: RequestOpts,
                      init_overrides: Optional[InitOverride] = None) -> httpx.Response:
        """Execute ``context`` and return the raw 2xx response, raising otherwise."""
        url, init = await self._create_fetch_params(context, init_overrides)
        response = await self._fetch(url, init)
        if 200 <= response.status_code < 300:
            return response

        error = self.configuration.parse_error(response)
        if inspect.isawaitable(error):
            error = await error
        self.logger.warning(
            "Request returned error status",
            method=init.method,
            url=url,
            status=response.status_code
        )
        raise error

    async def _create_fetch_params(self,
                                   context: RequestOpts,
                                   init_overrides: Optional[InitOverride]) -> Tuple[str, RequestOptions]:
        url = build_url(self.configuration.base_url, context)
        headers = merge_headers(self.configuration.headers, context.headers)
        proposed = RequestOptions(method=context.method, headers=headers, body=context.body)

        overrides: InitOverrideResult = None
        if callable(init_overrides):
            overrides = init_overrides(InitOverrideContext(init=proposed, context=context))
            if inspect.isawaitable(overrides):
                overrides = await overrides
        else:
            overrides = init_overrides

        if isinstance(overrides, RequestOptions):
            init = overrides
        elif overrides:
            init = _apply_overrides(proposed, overrides)
        else:
            init = proposed

        return url, replace(
            init,
            headers=merge_headers(init.headers),
            body=serialize_body(init.body)
        )

    async def _fetch_with_timeout(self, url: str, init: RequestOptions) -> httpx.Response:
        return await self.timeout_guard.run(lambda: self.transport.send(url, init))

    async def _fetch(self, url: str, init: RequestOptions) -> httpx.Response:
        fetch = self._fetch_with_timeout
        params = await self.middleware.run_pre(fetch, FetchParams(url=url, init=init))

        try:
            if self.configuration.retry.enabled:
                response = await run_with_retry(
                    lambda: fetch(params.url, params.init),
                    self.retry_policy
                )
            else:
                response = await fetch(params.url, params.init)
        except Exception as e:
            recovered = await self.middleware.run_on_error(fetch, params, e)
            if recovered is None:
                self.logger.error(
                    "Request failed",
                    method=params.init.method,
                    url=params.url,
                    error=str(e)
                )
                if isinstance(e, RequestTimeoutError):
                    raise
                raise FetchError(
                    e,
                    "The request failed and the interceptors did not return an alternative response"
                ) from e
            response = recovered

        return await self.middleware.run_post(fetch, params, response)

    async def aclose(self) -> None:
        """Close the transport."""
        await self.transport.aclose()
