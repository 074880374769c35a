"""
Errors returned by the Management API.
"""

from typing import Any, Dict, Optional

import httpx

from ..errors import ResponseError


class ManagementApiError(ResponseError):
    """Non-2xx Management API response with the platform's error fields decoded."""

    def __init__(self,
                 status_code: int,
                 error: str,
                 message: str,
                 error_code: Optional[str] = None,
                 body: Any = None,
                 headers: Optional[Dict[str, str]] = None):
        self.error = error
        self.error_code = error_code
        super().__init__(status_code, body=body, headers=headers, message=message)
        if error_code:
            self.details["error_code"] = error_code


def parse_management_error(response: httpx.Response) -> ManagementApiError:
    """Map an error response to ``ManagementApiError``.

    Bodies that are not the platform's JSON error shape fall back to the
    raw text and the HTTP reason phrase.
    """
    try:
        body: Any = response.json()
    except ValueError:
        body = response.text

    if isinstance(body, dict):
        error = body.get("error") or response.reason_phrase
        message = body.get("message") or error
        error_code = body.get("errorCode")
    else:
        error = response.reason_phrase
        message = body or error
        error_code = None

    return ManagementApiError(
        response.status_code,
        error=error,
        message=message,
        error_code=error_code,
        body=body,
        headers=dict(response.headers)
    )
