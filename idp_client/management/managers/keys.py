from typing import Any, Dict, Mapping, Optional

from ...runtime import (
    ApiResponse,
    BaseAPI,
    InitOverride,
    JSONApiResponse,
    RequestOpts,
    path_param,
    validate_required_request_params,
)


class KeysManager(BaseAPI):
    """Application signing keys."""

    async def get(self,
                  request_parameters: Mapping[str, Any],
                  init_overrides: Optional[InitOverride] = None) -> ApiResponse[Dict[str, Any]]:
        """Get an application signing key by its key id.

        Raises ``RequiredParameterError`` when ``kid`` is missing.
        """
        validate_required_request_params(request_parameters, ["kid"])

        response = await self.request(
            RequestOpts(
                path="/keys/signing/{kid}".replace("{kid}", path_param(request_parameters["kid"])),
                method="GET",
            ),
            init_overrides
        )

        return JSONApiResponse.from_response(response)

    async def get_all(self, init_overrides: Optional[InitOverride] = None) -> ApiResponse[list]:
        """Get all application signing keys."""
        response = await self.request(
            RequestOpts(path="/keys/signing", method="GET"),
            init_overrides
        )

        return JSONApiResponse.from_response(response)

    async def rotate(self, init_overrides: Optional[InitOverride] = None) -> ApiResponse[Dict[str, Any]]:
        """Rotate the application signing key."""
        response = await self.request(
            RequestOpts(path="/keys/signing/rotate", method="POST"),
            init_overrides
        )

        return JSONApiResponse.from_response(response)

    async def revoke(self,
                     request_parameters: Mapping[str, Any],
                     init_overrides: Optional[InitOverride] = None) -> ApiResponse[Dict[str, Any]]:
        """Revoke an application signing key by its key id."""
        validate_required_request_params(request_parameters, ["kid"])

        response = await self.request(
            RequestOpts(
                path="/keys/signing/{kid}/revoke".replace("{kid}", path_param(request_parameters["kid"])),
                method="PUT",
            ),
            init_overrides
        )

        return JSONApiResponse.from_response(response)
