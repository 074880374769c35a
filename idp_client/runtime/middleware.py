"""
Request interceptors and the contexts they receive.
"""

from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Sequence

import httpx

from .request import RequestOptions
from .response import clone_response

FetchAPI = Callable[[str, RequestOptions], Awaitable[httpx.Response]]


@dataclass(frozen=True)
class FetchParams:
    url: str
    init: RequestOptions


@dataclass(frozen=True)
class RequestContext:
    fetch: FetchAPI
    url: str
    init: RequestOptions


@dataclass(frozen=True)
class ResponseContext:
    fetch: FetchAPI
    url: str
    init: RequestOptions
    response: httpx.Response


@dataclass(frozen=True)
class ErrorContext:
    fetch: FetchAPI
    url: str
    init: RequestOptions
    error: BaseException
    response: Optional[httpx.Response] = None


class Middleware:
    """Base class for interceptors.

    Every hook is optional; returning ``None`` leaves the current value in
    place, anything else replaces it for the rest of the chain.
    """

    async def pre(self, context: RequestContext) -> Optional[FetchParams]:
        return None

    async def post(self, context: ResponseContext) -> Optional[httpx.Response]:
        return None

    async def on_error(self, context: ErrorContext) -> Optional[httpx.Response]:
        return None


class MiddlewareChain:
    """Folds the registered middleware over each phase in registration order."""

    def __init__(self, middleware: Sequence[Middleware] = ()):
        self.middleware = tuple(middleware)

    def __len__(self) -> int:
        return len(self.middleware)

    async def run_pre(self, fetch: FetchAPI, params: FetchParams) -> FetchParams:
        for middleware in self.middleware:
            replacement = await middleware.pre(
                RequestContext(fetch=fetch, url=params.url, init=params.init)
            )
            if replacement is not None:
                params = replacement
        return params

    async def run_on_error(self,
                           fetch: FetchAPI,
                           params: FetchParams,
                           error: BaseException) -> Optional[httpx.Response]:
        response: Optional[httpx.Response] = None
        for middleware in self.middleware:
            replacement = await middleware.on_error(
                ErrorContext(
                    fetch=fetch,
                    url=params.url,
                    init=params.init,
                    error=error,
                    response=clone_response(response) if response is not None else None,
                )
            )
            if replacement is not None:
                response = replacement
        return response

    async def run_post(self,
                       fetch: FetchAPI,
                       params: FetchParams,
                       response: httpx.Response) -> httpx.Response:
        for middleware in self.middleware:
            replacement = await middleware.post(
                ResponseContext(
                    fetch=fetch,
                    url=params.url,
                    init=params.init,
                    response=clone_response(response),
                )
            )
            if replacement is not None:
                response = replacement
        return response
