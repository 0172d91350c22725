"""
Authentication service for the OAuth2 Authorization Code + PKCE flow.
"""
from typing import Any, Dict, Optional
from urllib.parse import urlencode

from ..config.settings import Settings, settings as default_settings
from ..exceptions.auth_exceptions import (
    InvalidCallbackException,
    InvalidRequestException,
    InvalidStateException,
)
from ..middleware.logging_config import LoggerMixin, state_prefix
from ..utils.crypto import generate_state, make_pkce_pair
from ..utils.state_store import TransactionStore
from ..utils.timestamps import utc_timestamp
from .provider_client import ProviderClient


def build_authorize_url(
    *,
    authorize_url: str,
    client_id: str,
    redirect_uri: str,
    scope: str,
    state: str,
    code_challenge: str,
    token_access_type: Optional[str] = "offline",
) -> str:
    """Build the provider /authorize URL."""
    params = {
        "client_id": client_id,
        "redirect_uri": redirect_uri,
        "response_type": "code",
    }
    if token_access_type:
        params["token_access_type"] = token_access_type
    params.update({
        "code_challenge": code_challenge,
        "code_challenge_method": "S256",
        "state": state,
        "scope": scope,
    })
    return f"{authorize_url}?{urlencode(params)}"


class AuthService(LoggerMixin):
    """Runs both halves of the login transaction against an injected store."""

    def __init__(
        self,
        store: TransactionStore,
        provider: ProviderClient,
        settings: Optional[Settings] = None
    ):
        self.store = store
        self.provider = provider
        self.settings = settings or default_settings

    def start_login(self, client_id: Optional[str], redirect_uri: Optional[str], scopes: Optional[str] = None) -> str:
        """Create a pending authorization and return the provider redirect URL."""
        if not _present(client_id) or not _present(redirect_uri):
            self.logger.warning("Login rejected: client_id or redirect_uri missing")
            raise InvalidRequestException()

        scope = scopes if _present(scopes) else self.settings.default_scope
        verifier, challenge = make_pkce_pair()
        state = generate_state()
        self.store.put(
            state,
            verifier=verifier,
            client_id=client_id,
            redirect_uri=redirect_uri,
            scopes=scope,
        )

        self.logger.info(f"Started login for client {client_id!r} with state {state_prefix(state)}")
        return build_authorize_url(
            authorize_url=self.settings.authorize_url,
            client_id=client_id,
            redirect_uri=redirect_uri,
            scope=scope,
            state=state,
            code_challenge=challenge,
            token_access_type=self.settings.token_access_type,
        )

    async def handle_callback(
        self,
        code: Optional[str],
        state: Optional[str],
        error: Optional[str] = None,
        error_description: Optional[str] = None
    ) -> Dict[str, Any]:
        """Consume the state and exchange the code for the provider's token payload."""
        if not _present(code) or not _present(state):
            if error:
                details = error_description or error
            else:
                details = "; ".join([
                    "Code provided" if _present(code) else "Code missing",
                    "State provided" if _present(state) else "State missing",
                ])
            self.logger.warning(f"Callback rejected: {details!r}")
            raise InvalidCallbackException(details=details)

        # Removed before the exchange so a slow or failed call cannot be replayed.
        record = self.store.consume(state)
        if record is None:
            raise InvalidStateException()

        token = await self.provider.exchange_code(
            code=code,
            redirect_uri=record.redirect_uri,
            client_id=record.client_id,
            code_verifier=record.verifier,
        )
        self.logger.info(f"Completed login for client {record.client_id!r}")
        return {
            "success": True,
            "token": token,
            "timestamp": utc_timestamp(),
        }


def _present(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())
