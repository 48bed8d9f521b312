"""
Async authentication service.

Exchanges a refresh token for a new access token.
"""
import json
from typing import Optional
from urllib.parse import urlencode

from .config import APIConfig
from ..exceptions import TransportError, TokenRefreshError
from ..logging import get_logger


class TokenRefreshService:
    """
    Refreshes the access token of an upload session.

    Only the refresh-token grant is supported; obtaining the refresh token
    in the first place is the caller's business.
    """

    GRANT_TYPE = 'refresh_token'

    def __init__(self, transport, config: Optional[APIConfig] = None):
        """
        Initialize auth service.

        Args:
            transport: HTTP transport used for the token request
            config: API configuration providing the token endpoint
        """
        self._transport = transport
        self._config = config or APIConfig.default()
        self._logger = get_logger('resumapy.auth')

    def build_refresh_url(self, credentials) -> str:
        """Token endpoint URL with the credentials in the query string."""
        query = urlencode({
            'client_id': credentials.client_id or '',
            'client_secret': credentials.client_secret or '',
            'refresh_token': credentials.refresh_token or '',
            'grant_type': self.GRANT_TYPE,
        })
        return f"{self._config.token_url}?{query}"

    async def refresh(self, session, observer) -> bool:
        """
        Replace ``session.credentials.access_token`` with a fresh token.

        Failures are reported through ``observer.on_error`` and leave the
        token untouched; they are never raised.

        Args:
            session: Upload session whose credentials are refreshed
            observer: Receives progress and error notifications

        Returns:
            True if the token was replaced
        """
        credentials = session.credentials
        self._logger.info("Refreshing access token")

        try:
            response = await self._transport.send('POST', self.build_refresh_url(credentials))
            if not response.ok:
                raise TokenRefreshError(
                    f"Token endpoint returned HTTP {response.status}",
                    response.status
                )
            try:
                payload = json.loads(response.body)
            except json.JSONDecodeError as e:
                raise TokenRefreshError(f"Malformed token response: {e}", response.status) from e

            access_token = payload.get('access_token') if isinstance(payload, dict) else None
            if not access_token:
                raise TokenRefreshError("Token response has no access_token", response.status)
        except TransportError as e:
            error = TokenRefreshError(f"Token refresh failed: {e}")
            self._logger.error(str(error))
            observer.on_error(error)
            return False
        except TokenRefreshError as e:
            self._logger.error(str(e))
            observer.on_error(e)
            return False

        observer.on_progress('Updating access token')
        credentials.access_token = access_token
        observer.on_progress('Access token refreshed')
        self._logger.info("Access token refreshed")
        return True
