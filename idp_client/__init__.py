"""
Client library for an identity platform's management and authentication APIs.

- runtime: resilient request execution (middleware, timeout, retry, errors)
- auth: ID token validation against a client secret or the tenant's JWKS
- management: Management API client and managers
- config: environment-driven settings via pydantic-settings
- logging: structlog configuration
- errors: error taxonomy shared by every module
"""

from .auth import IDTokenValidator, JWKSClient
from .config import ClientSettings, get_settings
from .errors import (
    ConfigurationError,
    FetchError,
    IdentityClientError,
    IdTokenValidationError,
    RequestTimeoutError,
    RequiredParameterError,
    ResponseError,
)
from .management import ManagementApiError, ManagementClient
from .runtime import BaseAPI, Configuration, Middleware, RetryConfig
from .version import __version__

__all__ = [
    "BaseAPI",
    "ClientSettings",
    "Configuration",
    "ConfigurationError",
    "FetchError",
    "IDTokenValidator",
    "IdTokenValidationError",
    "IdentityClientError",
    "JWKSClient",
    "ManagementApiError",
    "ManagementClient",
    "Middleware",
    "RequestTimeoutError",
    "RequiredParameterError",
    "ResponseError",
    "RetryConfig",
    "__version__",
    "get_settings",
]
