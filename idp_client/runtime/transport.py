"""
Pluggable transports performing a single HTTP exchange.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from ..logging import get_logger
from .request import FormData, RequestOptions


class Transport(ABC):
    """Performs one HTTP exchange.

    Implementations must return a fully read ``httpx.Response`` and must
    stop promptly when the awaiting task is cancelled.
    """

    @abstractmethod
    async def send(self, url: str, options: RequestOptions) -> httpx.Response:
        ...

    async def aclose(self) -> None:
        """Release any pooled connections."""


class HttpxTransport(Transport):
    """Default transport backed by a shared ``httpx.AsyncClient``."""

    def __init__(self,
                 client: Optional[httpx.AsyncClient] = None,
                 *,
                 transport: Optional[httpx.AsyncBaseTransport] = None,
                 proxy: Optional[str] = None):
        self._client = client
        self._owns_client = client is None
        self._transport = transport
        self._proxy = proxy
        self.logger = get_logger("idp_client.transport")

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            client_kwargs: Dict[str, Any] = {"timeout": None, "transport": self._transport}
            if self._proxy:
                client_kwargs["proxy"] = self._proxy
            # Deadlines are enforced by TimeoutGuard, not by httpx
            self._client = httpx.AsyncClient(**client_kwargs)
        return self._client

    async def send(self, url: str, options: RequestOptions) -> httpx.Response:
        request_kwargs: Dict[str, Any] = {"headers": dict(options.headers)}
        body = options.body
        if isinstance(body, FormData):
            request_kwargs["data"] = dict(body.data)
            if body.files:
                request_kwargs["files"] = dict(body.files)
        elif body is not None:
            request_kwargs["content"] = body
        if options.extensions:
            request_kwargs["extensions"] = dict(options.extensions)

        self.logger.debug("Sending request", method=options.method, url=url)
        return await self._get_client().request(options.method, url, **request_kwargs)

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
