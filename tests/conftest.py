"""
Shared fixtures: signing keys, token minting and in-memory transports.
"""

import asyncio
from typing import Any, Callable, Dict, List

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from jose import jwk, jwt

from idp_client.runtime import HttpxTransport, RequestOptions, Transport

DOMAIN = "tenant.example.com"
ISSUER = f"https://{DOMAIN}/"
CLIENT_ID = "client-a"
CLIENT_SECRET = "a-client-secret-that-is-long-enough-for-hs256"
NOW = 1_700_000_000
KID = "test-key-1"


class ScriptedTransport(Transport):
    """Transport that plays back a list of responses or exceptions and records calls."""

    def __init__(self, outcomes: List[Any]):
        self.outcomes = list(outcomes)
        self.calls: List[Dict[str, Any]] = []

    async def send(self, url: str, options: RequestOptions) -> httpx.Response:
        self.calls.append({"url": url, "options": options})
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class SlowTransport(Transport):
    """Transport that never answers before ``delay`` seconds and notes cancellation."""

    def __init__(self, delay: float):
        self.delay = delay
        self.calls = 0
        self.cancelled = 0

    async def send(self, url: str, options: RequestOptions) -> httpx.Response:
        self.calls += 1
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled += 1
            raise
        return httpx.Response(200, json={"late": True})


@pytest.fixture
def mock_transport() -> Callable[[Callable], HttpxTransport]:
    """Factory wrapping an httpx handler in the default transport."""
    def _factory(handler: Callable[[httpx.Request], Any]) -> HttpxTransport:
        return HttpxTransport(transport=httpx.MockTransport(handler))
    return _factory


@pytest.fixture(scope="session")
def rsa_private_pem() -> str:
    """PEM encoded RSA private key."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")


@pytest.fixture(scope="session")
def rsa_public_jwk(rsa_private_pem) -> Dict[str, Any]:
    """Public half of the RSA key as a JWK."""
    public = jwk.construct(rsa_private_pem, algorithm="RS256").public_key().to_dict()
    public.update({"kid": KID, "use": "sig"})
    return public


@pytest.fixture
def jwks_payload(rsa_public_jwk) -> Dict[str, Any]:
    return {"keys": [rsa_public_jwk]}


@pytest.fixture
def id_token_claims() -> Dict[str, Any]:
    """Claims of a valid ID token at ``NOW``."""
    return {
        "iss": ISSUER,
        "sub": "user|123",
        "aud": CLIENT_ID,
        "exp": NOW + 3600,
        "iat": NOW,
    }


@pytest.fixture
def sign_hs256() -> Callable[..., str]:
    def _sign(claims: Dict[str, Any], algorithm: str = "HS256", secret: str = CLIENT_SECRET) -> str:
        return jwt.encode(claims, secret, algorithm=algorithm)
    return _sign


@pytest.fixture
def sign_rs256(rsa_private_pem) -> Callable[..., str]:
    def _sign(claims: Dict[str, Any], kid: str = KID) -> str:
        return jwt.encode(claims, rsa_private_pem, algorithm="RS256", headers={"kid": kid})
    return _sign
