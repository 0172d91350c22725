"""
Identity provider client for the authorization-code exchange.
"""
from typing import Any, Dict, Optional

import httpx

from ..config.settings import Settings, settings as default_settings
from ..models.auth import TokenExchangeRequest
from ..exceptions.auth_exceptions import TokenExchangeException
from ..middleware.logging_config import LoggerMixin


class ProviderClient(LoggerMixin):
    """Client for the provider's OAuth2 token endpoint.

    Authorization codes are single-use, so a failed exchange is never retried.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        settings = settings or default_settings
        self.token_url = settings.token_url
        self.timeout = settings.provider_timeout_seconds
        self.request_format = settings.token_request_format
        self._transport = transport

    async def exchange_code(
        self,
        code: str,
        redirect_uri: str,
        client_id: str,
        code_verifier: str
    ) -> Dict[str, Any]:
        """Exchange an authorization code for the provider's token payload."""
        body = TokenExchangeRequest(
            code=code,
            redirect_uri=redirect_uri,
            client_id=client_id,
            code_verifier=code_verifier,
        ).model_dump()

        request_kwargs: Dict[str, Any] = {"headers": {"Accept": "application/json"}}
        if self.request_format == "form":
            request_kwargs["data"] = body
        else:
            request_kwargs["json"] = body

        self.logger.info(f"Exchanging authorization code at {self.token_url}")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.token_url, **request_kwargs)
        except httpx.HTTPError as e:
            self.logger.error(f"Token endpoint unreachable: {e!r}")
            raise TokenExchangeException(details=str(e) or e.__class__.__name__)

        if not response.is_success:
            details = self._error_details(response)
            self.logger.error(f"Token exchange rejected ({response.status_code}): {details}")
            raise TokenExchangeException(details=details)

        try:
            payload = response.json()
        except ValueError:
            payload = None
        if not isinstance(payload, dict):
            self.logger.error("Token endpoint returned a non-object body")
            raise TokenExchangeException(details="Malformed token response")

        self.logger.info("Token exchange succeeded")
        return payload

    @staticmethod
    def _error_details(response: httpx.Response) -> str:
        """Prefer the provider's error_description, then error, then the status line."""
        try:
            data = response.json()
        except ValueError:
            data = None
        if isinstance(data, dict):
            description = data.get("error_description") or data.get("error")
            if description:
                return str(description)
        return f"Request failed with status code {response.status_code}"
