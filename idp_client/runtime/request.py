"""
Request descriptions and the helpers generated managers use to build them.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union
from urllib.parse import quote

from ..errors import ConfigurationError, RequiredParameterError

COLLECTION_FORMATS = {
    "csv": ",",
    "ssv": " ",
    "tsv": "\t",
    "pipes": "|",
}

HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD")

QueryValue = Union[str, int, float, bool, None, List[Union[str, int, float, bool, None]]]
HTTPQuery = Mapping[str, QueryValue]
HTTPHeaders = Mapping[str, Optional[str]]


@dataclass(frozen=True)
class FormData:
    """Multipart or url-encoded form body, passed to the transport untouched."""

    data: Mapping[str, Any] = field(default_factory=dict)
    files: Optional[Mapping[str, Any]] = None


@dataclass(frozen=True)
class RequestOpts:
    """Description of a single API call as produced by a generated manager."""

    path: str
    method: str
    headers: HTTPHeaders = field(default_factory=dict)
    query: Optional[HTTPQuery] = None
    body: Any = None

    def __post_init__(self):
        if self.method.upper() not in HTTP_METHODS:
            raise ConfigurationError(f"Unsupported HTTP method: {self.method}")
        object.__setattr__(self, "method", self.method.upper())


@dataclass(frozen=True)
class RequestOptions:
    """Wire-level options handed to the transport."""

    method: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Any = None
    extensions: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class QueryParamConfig:
    is_array: bool = False
    is_collection_format_multi: bool = False
    collection_format: str = "csv"


def _encode_component(value: Any) -> str:
    # Same character set as JavaScript's encodeURIComponent
    if isinstance(value, bool):
        value = "true" if value else "false"
    return quote(str(value), safe="-_.!~*'()")


def querystring(params: HTTPQuery) -> str:
    """Render a query map; list values repeat the key and ``None`` values are skipped."""
    parts = []
    for key, value in params.items():
        if isinstance(value, (list, tuple)):
            parts.extend(
                f"{_encode_component(key)}={_encode_component(item)}"
                for item in value
                if item is not None
            )
        elif value is not None:
            parts.append(f"{_encode_component(key)}={_encode_component(value)}")
    return "&".join(parts)


def build_url(base_url: str, context: RequestOpts) -> str:
    """Concatenate base URL and path, adding a query string only when there is one."""
    url = base_url + context.path
    if context.query:
        query = querystring(context.query)
        # Avoid a dangling "?" when every value was skipped
        if query:
            url += f"?{query}"
    return url


def merge_headers(*sources: Optional[HTTPHeaders]) -> Dict[str, str]:
    """Merge header maps left to right; a later ``None`` value removes the key."""
    headers: Dict[str, str] = {}
    for source in sources:
        for key, value in (source or {}).items():
            if value is None:
                headers.pop(key, None)
            else:
                headers[key] = value
    return headers


def serialize_body(body: Any) -> Any:
    """Binary and form bodies pass through; everything else becomes JSON text."""
    if body is None or isinstance(body, (bytes, bytearray, FormData)):
        return body
    return json.dumps(body)


def path_param(value: Any) -> str:
    """Encode a value for substitution into a path template."""
    return _encode_component(value)


def validate_required_request_params(request_parameters: Mapping[str, Any], keys: Iterable[str]) -> None:
    """Raise ``RequiredParameterError`` for the first key that is missing or ``None``."""
    for key in keys:
        if request_parameters.get(key) is None:
            raise RequiredParameterError(key)


def apply_query_params(request_parameters: Mapping[str, Any],
                       keys: Iterable[Tuple[str, QueryParamConfig]]) -> Dict[str, QueryValue]:
    """Pick the query parameters present in ``request_parameters`` and format list values."""
    query: Dict[str, QueryValue] = {}
    for key, config in keys:
        value = request_parameters.get(key)
        if value is None:
            continue
        if config.is_array and not config.is_collection_format_multi:
            separator = COLLECTION_FORMATS[config.collection_format]
            value = separator.join(_stringify(item) for item in value)
        query[key] = value
    return query


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
