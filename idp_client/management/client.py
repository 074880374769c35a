"""
Management API client wiring configuration, credentials and managers together.
"""

import base64
import json
import platform
from typing import Any, Dict, Mapping, Optional, Sequence

from ..config import ClientSettings
from ..errors import ConfigurationError
from ..logging import configure_logging, get_logger
from ..runtime import Configuration, HttpxTransport, Middleware, RetryConfig, Transport
from ..runtime.timeout import DEFAULT_TIMEOUT_MS
from ..version import __version__
from .errors import parse_management_error
from .managers import KeysManager, LogsManager

TELEMETRY_HEADER = "Client-Info"


def encode_client_info(client_info: Mapping[str, Any]) -> str:
    """Encode client information as url-safe base64 JSON for the telemetry header."""
    payload = json.dumps(dict(client_info), separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(payload).decode("ascii").rstrip("=")


def default_client_info() -> Dict[str, Any]:
    return {
        "name": "idp-client-python",
        "version": __version__,
        "env": {"python": platform.python_version()},
    }


class ManagementClient:
    """Entry point for the Management API of a tenant.

    All managers share one configuration and therefore one transport.
    """

    def __init__(self,
                 domain: str,
                 token: str,
                 *,
                 telemetry: bool = True,
                 client_info: Optional[Mapping[str, Any]] = None,
                 headers: Optional[Mapping[str, Optional[str]]] = None,
                 timeout_ms: int = DEFAULT_TIMEOUT_MS,
                 retry: Optional[RetryConfig] = None,
                 middleware: Sequence[Middleware] = (),
                 transport: Optional[Transport] = None):
        if not domain:
            raise ConfigurationError("Must provide a domain")
        if not token:
            raise ConfigurationError("Must provide a token")
        if client_info is not None and not isinstance(client_info.get("name"), str):
            raise ConfigurationError("The client_info must include a string name")

        default_headers: Dict[str, Optional[str]] = dict(headers or {})
        default_headers["Authorization"] = f"Bearer {token}"
        if telemetry:
            default_headers[TELEMETRY_HEADER] = encode_client_info(client_info or default_client_info())

        self.domain = domain
        self.logger = get_logger("idp_client.management")
        self.configuration = Configuration(
            base_url=f"https://{domain}/api/v2",
            parse_error=parse_management_error,
            headers=default_headers,
            timeout_ms=timeout_ms,
            retry=retry or RetryConfig(),
            middleware=tuple(middleware),
            transport=transport or HttpxTransport(),
        )

        self.keys = KeysManager(self.configuration)
        self.logs = LogsManager(self.configuration)
        self.logger.debug("Management client created", domain=domain, telemetry=telemetry)

    @classmethod
    def from_settings(cls, settings: ClientSettings, **kwargs) -> "ManagementClient":
        """Build a client from ``ClientSettings``; keyword arguments override them."""
        if not settings.token:
            raise ConfigurationError("IDP_TOKEN is not set")
        if settings.log_level:
            configure_logging(log_level=settings.log_level)
        options: Dict[str, Any] = {
            "telemetry": settings.telemetry,
            "timeout_ms": settings.timeout_ms,
            "retry": RetryConfig(enabled=settings.retry_enabled, max_attempts=settings.max_attempts),
        }
        options.update(kwargs)
        return cls(settings.domain, settings.token, **options)

    async def aclose(self) -> None:
        """Close the shared transport."""
        await self.configuration.transport.aclose()

    async def __aenter__(self) -> "ManagementClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
