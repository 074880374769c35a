from typing import Any, Dict, Mapping, Optional

from ...runtime import (
    ApiResponse,
    BaseAPI,
    InitOverride,
    JSONApiResponse,
    QueryParamConfig,
    RequestOpts,
    apply_query_params,
    path_param,
    validate_required_request_params,
)

_GET_ALL_QUERY = [
    ("page", QueryParamConfig()),
    ("per_page", QueryParamConfig()),
    ("sort", QueryParamConfig()),
    ("fields", QueryParamConfig()),
    ("include_fields", QueryParamConfig()),
    ("include_totals", QueryParamConfig()),
    ("from", QueryParamConfig()),
    ("take", QueryParamConfig()),
    ("q", QueryParamConfig()),
]


class LogsManager(BaseAPI):
    """Tenant log events."""

    async def get_all(self,
                      request_parameters: Optional[Mapping[str, Any]] = None,
                      init_overrides: Optional[InitOverride] = None) -> ApiResponse[Any]:
        """Search log events.

        Accepts ``page``, ``per_page``, ``sort``, ``fields``, ``include_fields``,
        ``include_totals``, ``from``, ``take`` and ``q``.
        """
        query = apply_query_params(request_parameters or {}, _GET_ALL_QUERY)

        response = await self.request(
            RequestOpts(path="/logs", method="GET", query=query),
            init_overrides
        )

        return JSONApiResponse.from_response(response)

    async def get(self,
                  request_parameters: Mapping[str, Any],
                  init_overrides: Optional[InitOverride] = None) -> ApiResponse[Dict[str, Any]]:
        """Get a log event by id."""
        validate_required_request_params(request_parameters, ["id"])

        response = await self.request(
            RequestOpts(
                path="/logs/{id}".replace("{id}", path_param(request_parameters["id"])),
                method="GET",
            ),
            init_overrides
        )

        return JSONApiResponse.from_response(response)
