"""
Upload session initiation.

Opens a resumable upload session and obtains its location URL.
"""
import json
from typing import Dict, Any, Optional, Tuple
from urllib.parse import quote

from ...api.config import APIConfig
from ...exceptions import AuthorizationError, TransportError, InvalidResponseError
from ...logging import get_logger

# Characters encodeURIComponent leaves alone besides letters, digits and '_.-~'
_URI_COMPONENT_SAFE = "!*'()"


def serialize_params(params: Optional[Dict[str, Any]]) -> str:
    """
    Serialize query parameters for appending to an existing query string.

    Args:
        params: Parameter names and values

    Returns:
        '&k1=v1&k2=v2' with each name and value URL-encoded, or '' when
        there are no parameters

    Example:
        >>> serialize_params({'part': 'snippet,status'})
        '&part=snippet%2Cstatus'
    """
    if not params:
        return ''
    pairs = [
        f"{quote(str(key), safe=_URI_COMPONENT_SAFE)}={quote(str(value), safe=_URI_COMPONENT_SAFE)}"
        for key, value in params.items()
    ]
    return '&' + '&'.join(pairs)


class SessionInitiator:
    """
    Creates resumable upload sessions.

    Responsibilities:
    - Resolve file size and MIME type
    - Send the session-creation request with the metadata document
    - Store the returned session location
    """

    UPLOAD_TYPE = 'resumable'

    def __init__(
        self,
        transport,
        file_system,
        mime_resolver,
        recovery,
        observer,
        config: Optional[APIConfig] = None
    ):
        """
        Initialize session initiator.

        Args:
            transport: HTTP transport
            file_system: File size provider
            mime_resolver: MIME type lookup
            recovery: Shared refresh/retry handler
            observer: Receives progress notifications
            config: API configuration with the target service
        """
        self._transport = transport
        self._fs = file_system
        self._mime = mime_resolver
        self._recovery = recovery
        self._observer = observer
        self._config = config or APIConfig.default()
        self._logger = get_logger('resumapy.upload.session')

    def resolve_file(self, session) -> None:
        """Populate ``file_size`` and ``mime_type`` on the session."""
        session.file_size = self._fs.size(session.file_path)
        session.mime_type = self._mime.guess_type(session.file_path)
        self._logger.debug(
            f"Resolved {session.file_path}: {session.file_size} bytes, {session.mime_type}"
        )

    def build_url(self, query_params: Optional[Dict[str, Any]] = None) -> str:
        return (
            f"{self._config.upload_url}?uploadType={self.UPLOAD_TYPE}"
            f"{serialize_params(query_params)}"
        )

    def build_request(self, session) -> Tuple[str, Dict[str, str], bytes]:
        """
        Build the session-creation request.

        Headers are rebuilt on every call so a refreshed token is used.

        Returns:
            Tuple of (url, headers, body)
        """
        body = json.dumps(session.config.metadata).encode('utf-8')
        headers = {
            'Host': self._config.host,
            'Authorization': f"Bearer {session.credentials.access_token}",
            'Content-Length': str(len(body)),
            'Content-Type': 'application/json; charset=UTF-8',
            'X-Upload-Content-Length': str(session.file_size),
            'X-Upload-Content-Type': session.mime_type,
        }
        return self.build_url(session.config.query_params), headers, body

    async def initiate(self, session) -> str:
        """
        Open the upload session.

        Args:
            session: Upload session to initiate

        Returns:
            Session location URL

        Raises:
            FileAccessError: If the file cannot be read
            UploadError: If the session cannot be created
        """
        self.resolve_file(session)
        self._logger.info(f"Requesting upload session for {session.file_path.name}")

        location = await self._recovery.run(
            session,
            lambda: self._request_session(session),
            'initiate'
        )

        session.session_location = location
        self._logger.info("Upload session acquired")
        self._observer.on_progress("Upload session acquired")
        return location

    async def _request_session(self, session) -> str:
        url, headers, body = self.build_request(session)
        response = await self._transport.send('POST', url, headers, body)

        if response.status == 401:
            raise AuthorizationError("Session request unauthorized")

        if not response.ok:
            raise TransportError(
                f"Session request failed: HTTP {response.status}",
                response.status
            )

        location = response.header('location')
        if not location:
            raise InvalidResponseError(
                "Session response has no location header",
                response.status
            )
        return location
