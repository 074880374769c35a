"""
Request-execution runtime shared by the generated API managers.

- request: request descriptions, query/header/body helpers
- response: typed wrappers for 2xx responses
- transport: pluggable HTTP exchange (httpx by default)
- timeout: per-attempt deadline with cancellation
- retry: retry policy and loop
- middleware: pre/post/on_error interceptors
- base_api: the executor tying them together
"""

from .base_api import (
    BaseAPI,
    Configuration,
    InitOverride,
    InitOverrideContext,
    default_parse_error,
)
from .middleware import (
    ErrorContext,
    FetchParams,
    Middleware,
    MiddlewareChain,
    RequestContext,
    ResponseContext,
)
from .request import (
    COLLECTION_FORMATS,
    FormData,
    QueryParamConfig,
    RequestOptions,
    RequestOpts,
    apply_query_params,
    build_url,
    merge_headers,
    path_param,
    querystring,
    serialize_body,
    validate_required_request_params,
)
from .response import (
    ApiResponse,
    BlobApiResponse,
    JSONApiResponse,
    TextApiResponse,
    VoidApiResponse,
    clone_response,
)
from .retry import RetryConfig, RetryDecision, RetryPolicy, run_with_retry
from .timeout import TimeoutGuard
from .transport import HttpxTransport, Transport

__all__ = [
    "ApiResponse",
    "BaseAPI",
    "BlobApiResponse",
    "COLLECTION_FORMATS",
    "Configuration",
    "ErrorContext",
    "FetchParams",
    "FormData",
    "HttpxTransport",
    "InitOverride",
    "InitOverrideContext",
    "JSONApiResponse",
    "Middleware",
    "MiddlewareChain",
    "QueryParamConfig",
    "RequestContext",
    "RequestOptions",
    "RequestOpts",
    "ResponseContext",
    "RetryConfig",
    "RetryDecision",
    "RetryPolicy",
    "TextApiResponse",
    "TimeoutGuard",
    "Transport",
    "VoidApiResponse",
    "apply_query_params",
    "build_url",
    "clone_response",
    "default_parse_error",
    "merge_headers",
    "path_param",
    "querystring",
    "run_with_retry",
    "serialize_body",
    "validate_required_request_params",
]
