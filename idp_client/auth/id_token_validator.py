"""
ID token validation: signature and header verification followed by ordered claim checks.
"""

import time
from typing import Any, Callable, Dict, Mapping, Optional, Union

import httpx
from jose import JWTError, jwt

from ..circuit_breaker import CircuitBreakerOpenError
from ..config import ClientSettings
from ..errors import ConfigurationError, IdTokenValidationError
from ..logging import configure_logging, get_logger
from .jwks import JWKSClient

DEFAULT_CLOCK_TOLERANCE = 60  # seconds

SYMMETRIC_ALGORITHMS = ("HS256", "HS384", "HS512")
ASYMMETRIC_ALGORITHMS = ("RS256", "RS384", "RS512", "ES256", "ES384", "ES512")

# Claims are checked below with their own messages; jose only checks the signature.
_SIGNATURE_ONLY = {
    "verify_signature": True,
    "verify_aud": False,
    "verify_iat": False,
    "verify_exp": False,
    "verify_nbf": False,
    "verify_iss": False,
    "verify_sub": False,
    "verify_jti": False,
    "verify_at_hash": False,
}


class SymmetricKey:
    """Client secret used for HS-family signatures."""

    def __init__(self, secret: str):
        self.secret = secret

    async def resolve(self, header: Mapping[str, Any]) -> str:
        return self.secret


class RemoteKeySet:
    """Keys published by the tenant domain, used for RS/ES-family signatures."""

    def __init__(self, jwks_client: JWKSClient):
        self.jwks_client = jwks_client

    async def resolve(self, header: Mapping[str, Any]) -> Dict[str, Any]:
        kid = header.get("kid")
        try:
            key = await self.jwks_client.get_signing_key(kid)
        except (httpx.HTTPError, CircuitBreakerOpenError, ValueError) as e:
            raise IdTokenValidationError("Unable to retrieve the signing key set") from e
        if key is None:
            raise IdTokenValidationError(
                f'Signing key "{kid}" was not found in the published key set'
            )
        return key


KeySource = Union[SymmetricKey, RemoteKeySet]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_string(value: Any) -> bool:
    return isinstance(value, str) and len(value) > 0


class IDTokenValidator:
    """Validates ID tokens issued by ``https://{domain}/`` for ``client_id``."""

    def __init__(self,
                 domain: str,
                 client_id: str,
                 client_secret: Optional[str] = None,
                 id_token_signing_alg: str = "RS256",
                 clock_tolerance: int = DEFAULT_CLOCK_TOLERANCE,
                 jwks_client: Optional[JWKSClient] = None,
                 clock: Callable[[], float] = time.time):
        self.alg = id_token_signing_alg
        self.audience = client_id
        self.issuer = f"https://{domain}/"
        self.clock_tolerance = clock_tolerance
        self._clock = clock
        self.logger = get_logger("idp_client.id_token")

        if self.alg in SYMMETRIC_ALGORITHMS:
            if not client_secret:
                raise ConfigurationError(
                    f"A client secret is required to validate ID tokens signed with {self.alg}"
                )
            self.key_source: KeySource = SymmetricKey(client_secret)
        elif self.alg in ASYMMETRIC_ALGORITHMS:
            self.key_source = RemoteKeySet(jwks_client or JWKSClient.for_domain(domain))
        else:
            raise ConfigurationError(f"Unsupported ID token signing algorithm: {self.alg}")

    @classmethod
    def from_settings(cls, settings: ClientSettings, **kwargs) -> "IDTokenValidator":
        """Build a validator from ``ClientSettings``; keyword arguments override them."""
        if not settings.domain:
            raise ConfigurationError("IDP_DOMAIN is not set")
        if not settings.client_id:
            raise ConfigurationError("IDP_CLIENT_ID is not set")
        if settings.log_level:
            configure_logging(log_level=settings.log_level)

        options: Dict[str, Any] = {
            "client_secret": settings.client_secret,
            "id_token_signing_alg": settings.id_token_signing_alg,
            "clock_tolerance": settings.clock_tolerance,
        }
        options.update(kwargs)
        return cls(settings.domain, settings.client_id, **options)

    async def validate(self,
                       id_token: str,
                       nonce: Optional[str] = None,
                       max_age: Optional[int] = None,
                       organization: Optional[str] = None) -> Dict[str, Any]:
        """Verify ``id_token`` and return its claims.

        Raises ``IdTokenValidationError`` describing the first failed check.
        """
        try:
            payload = await self._verify_signature(id_token)
            self._check_claims(payload, nonce=nonce, max_age=max_age, organization=organization)
        except IdTokenValidationError as e:
            self.logger.warning("ID token validation failed", error=e.message, claim=e.claim)
            raise

        self.logger.debug("ID token validated", sub=payload.get("sub"))
        return payload

    async def _verify_signature(self, id_token: str) -> Dict[str, Any]:
        try:
            header = jwt.get_unverified_header(id_token)
        except JWTError as e:
            raise IdTokenValidationError(f"ID token could not be decoded: {e}") from e

        if header.get("alg") != self.alg:
            raise IdTokenValidationError(
                f'Signature algorithm of "{header.get("alg")}" is not supported. '
                f'Expected the ID token to be signed with "{self.alg}".',
                claim="alg"
            )

        key = await self.key_source.resolve(header)
        try:
            return jwt.decode(id_token, key, algorithms=[self.alg], options=_SIGNATURE_ONLY)
        except JWTError as e:
            raise IdTokenValidationError(f"Invalid ID token signature: {e}") from e

    def _check_claims(self,
                      payload: Dict[str, Any],
                      nonce: Optional[str],
                      max_age: Optional[int],
                      organization: Optional[str]) -> None:
        # Issuer
        iss = payload.get("iss")
        if not _is_string(iss):
            raise IdTokenValidationError(
                "Issuer (iss) claim must be a string present in the ID token", claim="iss"
            )
        if iss != self.issuer:
            raise IdTokenValidationError(
                f'Issuer (iss) claim mismatch in the ID token; expected "{self.issuer}", found "{iss}"',
                claim="iss"
            )

        # Subject
        if not _is_string(payload.get("sub")):
            raise IdTokenValidationError(
                "Subject (sub) claim must be a string present in the ID token", claim="sub"
            )

        # Audience
        aud = payload.get("aud")
        aud_is_list = isinstance(aud, list) and all(isinstance(item, str) for item in aud)
        if not (_is_string(aud) or aud_is_list):
            raise IdTokenValidationError(
                "Audience (aud) claim must be a string or array of strings present in the ID token",
                claim="aud"
            )
        if aud_is_list and self.audience not in aud:
            raise IdTokenValidationError(
                f'Audience (aud) claim mismatch in the ID token; expected "{self.audience}" '
                f'but was not one of "{", ".join(aud)}"',
                claim="aud"
            )
        if isinstance(aud, str) and aud != self.audience:
            raise IdTokenValidationError(
                f'Audience (aud) claim mismatch in the ID token; expected "{self.audience}" but found "{aud}"',
                claim="aud"
            )

        # Organization
        if organization is not None:
            org_id = payload.get("org_id")
            if not _is_string(org_id):
                raise IdTokenValidationError(
                    "Organization Id (org_id) claim must be a string present in the ID token",
                    claim="org_id"
                )
            if org_id != organization:
                raise IdTokenValidationError(
                    f'Organization Id (org_id) claim value mismatch in the ID token; '
                    f'expected "{organization}", found "{org_id}"',
                    claim="org_id"
                )

        now = int(self._clock())

        # Expiration
        exp = payload.get("exp")
        if not exp or not _is_number(exp):
            raise IdTokenValidationError(
                "Expiration Time (exp) claim must be a number present in the ID token", claim="exp"
            )
        exp_time = exp + self.clock_tolerance
        if now > exp_time:
            raise IdTokenValidationError(
                f"Expiration Time (exp) claim error in the ID token; current time ({now}) "
                f"is after expiration time ({exp_time})",
                claim="exp"
            )

        # Issued at
        iat = payload.get("iat")
        if not iat or not _is_number(iat):
            raise IdTokenValidationError(
                "Issued At (iat) claim must be a number present in the ID token", claim="iat"
            )

        # Nonce
        if nonce is not None:
            token_nonce = payload.get("nonce")
            if not _is_string(token_nonce):
                raise IdTokenValidationError(
                    "Nonce (nonce) claim must be a string present in the ID token", claim="nonce"
                )
            if token_nonce != nonce:
                raise IdTokenValidationError(
                    f'Nonce (nonce) claim mismatch in the ID token; expected "{nonce}", found "{token_nonce}"',
                    claim="nonce"
                )

        # Authorized party
        if aud_is_list and len(aud) > 1:
            azp = payload.get("azp")
            if not _is_string(azp):
                raise IdTokenValidationError(
                    "Authorized Party (azp) claim must be a string present in the ID token "
                    "when Audience (aud) claim has multiple values",
                    claim="azp"
                )
            if azp != self.audience:
                raise IdTokenValidationError(
                    f'Authorized Party (azp) claim mismatch in the ID token; '
                    f'expected "{self.audience}", found "{azp}"',
                    claim="azp"
                )

        # Authentication time
        if max_age is not None:
            auth_time = payload.get("auth_time")
            if not auth_time or not _is_number(auth_time):
                raise IdTokenValidationError(
                    "Authentication Time (auth_time) claim must be a number present in the ID token "
                    "when Max Age (max_age) is specified",
                    claim="auth_time"
                )
            auth_valid_until = auth_time + max_age + self.clock_tolerance
            if now > auth_valid_until:
                raise IdTokenValidationError(
                    "Authentication Time (auth_time) claim in the ID token indicates that too much "
                    f"time has passed since the last end-user authentication. Current time ({now}) "
                    f"is after last auth at {auth_valid_until}",
                    claim="auth_time"
                )
