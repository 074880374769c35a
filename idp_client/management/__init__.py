"""
Management API client and the managers built on the request runtime.
"""

from .client import TELEMETRY_HEADER, ManagementClient, encode_client_info
from .errors import ManagementApiError, parse_management_error
from .managers import KeysManager, LogsManager

__all__ = [
    "TELEMETRY_HEADER",
    "KeysManager",
    "LogsManager",
    "ManagementApiError",
    "ManagementClient",
    "encode_client_info",
    "parse_management_error",
]
