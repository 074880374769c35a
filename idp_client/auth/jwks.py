"""
Remote JSON Web Key Set client used to verify asymmetrically signed tokens.
"""

import time
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import urlparse

import httpx

from ..circuit_breaker import CircuitBreaker
from ..logging import get_logger

JWKS_PATH = "/.well-known/jwks.json"


class JWKSClient:
    """Fetches and caches the signing keys a tenant domain publishes.

    The cache is read without locking. A lookup that misses triggers a
    refetch, at most once per ``refresh_cooldown`` seconds; concurrent
    refetches simply race and the last one wins.
    """

    def __init__(self,
                 jwks_url: str,
                 cache_ttl: float = 600,
                 http_timeout: float = 10.0,
                 refresh_cooldown: float = 30.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None,
                 clock: Callable[[], float] = time.time):
        self.jwks_url = jwks_url
        self.cache_ttl = cache_ttl
        self.http_timeout = http_timeout
        self.refresh_cooldown = refresh_cooldown
        self._transport = transport
        self._clock = clock
        self.logger = get_logger("idp_client.jwks")

        self._jwks_cache: Optional[Dict[str, Any]] = None
        self._cache_timestamp: float = 0
        self._last_forced_refresh: Optional[float] = None

        self.circuit_breaker = CircuitBreaker(
            f"jwks-{urlparse(jwks_url).netloc}",
            failure_threshold=5,
            recovery_timeout=30.0,
            expected_exceptions=(httpx.HTTPError, ValueError)
        )

    @classmethod
    def for_domain(cls, domain: str, **kwargs) -> "JWKSClient":
        """Client for the key set published at ``https://{domain}/.well-known/jwks.json``."""
        return cls(f"https://{domain}{JWKS_PATH}", **kwargs)

    def _cache_valid(self) -> bool:
        return (self._jwks_cache is not None
                and self._clock() - self._cache_timestamp < self.cache_ttl)

    async def _fetch_jwks(self) -> Dict[str, Any]:
        async with httpx.AsyncClient(timeout=self.http_timeout, transport=self._transport) as client:
            response = await client.get(self.jwks_url)
            response.raise_for_status()
            payload = response.json()
        if not isinstance(payload, dict) or not isinstance(payload.get("keys"), list):
            raise ValueError("JWKS response missing 'keys' array")
        return payload

    async def get_jwks(self, force: bool = False) -> Dict[str, Any]:
        """Get JWKS from cache or fetch it from the domain."""
        if not force and self._cache_valid():
            return self._jwks_cache

        try:
            jwks_data = await self.circuit_breaker.call(self._fetch_jwks)
        except Exception as e:
            self.logger.error("Failed to fetch JWKS", url=self.jwks_url, error=str(e))
            if self._jwks_cache is not None:
                self.logger.warning("Using stale JWKS cache due to fetch failure")
                return self._jwks_cache
            raise

        self._jwks_cache = jwks_data
        self._cache_timestamp = self._clock()
        self.logger.info("JWKS refreshed", keys_count=len(jwks_data["keys"]))
        return jwks_data

    @staticmethod
    def _find_key(keys: List[Dict[str, Any]], kid: str) -> Optional[Dict[str, Any]]:
        for key in keys:
            if key.get("kid") == kid:
                return key
        return None

    async def get_signing_key(self, kid: Optional[str]) -> Optional[Dict[str, Any]]:
        """Return the key with ``kid``, refetching once if it is not cached.

        Without a ``kid`` the whole key set is returned so every key is tried.
        """
        jwks = await self.get_jwks()
        if kid is None:
            return jwks

        key = self._find_key(jwks["keys"], kid)
        if key is not None:
            return key

        now = self._clock()
        if self._last_forced_refresh is not None and now - self._last_forced_refresh < self.refresh_cooldown:
            self.logger.warning("Key not found, refetch skipped during cooldown", kid=kid)
            return None

        # Key may have been rotated since the last fetch
        self._last_forced_refresh = now
        jwks = await self.get_jwks(force=True)
        key = self._find_key(jwks["keys"], kid)
        if key is None:
            self.logger.warning("Key not found", kid=kid)
        return key

    def clear_cache(self) -> None:
        """Drop the cached key set."""
        self._jwks_cache = None
        self._cache_timestamp = 0
        self.logger.info("JWKS cache cleared")
