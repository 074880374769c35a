"""
Authentication-side helpers: ID token validation and the remote key set it relies on.
"""

from .id_token_validator import (
    DEFAULT_CLOCK_TOLERANCE,
    IDTokenValidator,
    RemoteKeySet,
    SymmetricKey,
)
from .jwks import JWKSClient

__all__ = [
    "DEFAULT_CLOCK_TOLERANCE",
    "IDTokenValidator",
    "JWKSClient",
    "RemoteKeySet",
    "SymmetricKey",
]
