"""
Typed wrappers around successful (2xx) raw responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import httpx

T = TypeVar("T")


def clone_response(response: httpx.Response) -> httpx.Response:
    """Return an independent copy of an already-read response."""
    headers = response.headers.copy()
    # Content is already decoded
    headers.pop("content-encoding", None)
    try:
        request = response.request
    except RuntimeError:
        request = None
    return httpx.Response(
        status_code=response.status_code,
        headers=headers,
        content=response.content,
        request=request,
        extensions=dict(response.extensions),
    )


@dataclass(frozen=True)
class ApiResponse(Generic[T]):
    data: T
    headers: httpx.Headers
    status: int
    status_text: str


class JSONApiResponse(ApiResponse[Any]):
    """Response whose body is decoded as JSON."""

    @classmethod
    def from_response(cls, raw: httpx.Response) -> "JSONApiResponse":
        return cls(raw.json(), raw.headers, raw.status_code, raw.reason_phrase)


class TextApiResponse(ApiResponse[str]):
    @classmethod
    def from_response(cls, raw: httpx.Response) -> "TextApiResponse":
        return cls(raw.text, raw.headers, raw.status_code, raw.reason_phrase)


class BlobApiResponse(ApiResponse[bytes]):
    @classmethod
    def from_response(cls, raw: httpx.Response) -> "BlobApiResponse":
        return cls(raw.content, raw.headers, raw.status_code, raw.reason_phrase)


class VoidApiResponse(ApiResponse[None]):
    """Response where the body is ignored."""

    @classmethod
    def from_response(cls, raw: httpx.Response) -> "VoidApiResponse":
        return cls(None, raw.headers, raw.status_code, raw.reason_phrase)
