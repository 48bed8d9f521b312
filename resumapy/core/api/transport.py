"""
Async HTTP transport.

Thin aiohttp wrapper that turns every request into an ``HTTPResponse``
value. Status codes are never raised as exceptions here: callers branch
on ``status``. Only network-level failures raise ``TransportError``.
"""
import asyncio
from dataclasses import dataclass, field
from typing import Dict, Optional, Any
import aiohttp

from .config import APIConfig
from ..exceptions import TransportError
from ..logging import get_logger


def decode_body(data: bytes, charset: Optional[str]) -> str:
    """
    Decode a response body without ever failing.

    Undecodable bytes become U+FFFD; an unknown charset falls back to UTF-8.
    """
    try:
        return data.decode(charset or 'utf-8', errors='replace')
    except LookupError:
        return data.decode('utf-8', errors='replace')


@dataclass(frozen=True)
class HTTPResponse:
    """
    Response returned by a transport.

    Attributes:
        status: HTTP status code
        headers: Response headers with lower-cased names
        body: Decoded response body ('' when empty)
    """
    status: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ''

    @property
    def ok(self) -> bool:
        """True for 2xx responses."""
        return 200 <= self.status < 300

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower())

    @classmethod
    def build(cls, status: int, headers: Optional[Dict[str, str]] = None, body: str = '') -> 'HTTPResponse':
        """Create a response, normalizing header names."""
        normalized = {k.lower(): v for k, v in (headers or {}).items()}
        return cls(status=status, headers=normalized, body=body)


class AiohttpTransport:
    """
    HTTP transport backed by a pooled aiohttp session.

    Features:
    - Lazy session creation with configurable connector
    - Proxy, SSL and timeout support from ``APIConfig``
    - Redirects are not followed (308 carries upload state)

    Example:
        >>> async with AiohttpTransport(APIConfig.default()) as transport:
        ...     response = await transport.send('PUT', url, headers, body)
    """

    def __init__(
        self,
        config: Optional[APIConfig] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Initialize transport.

        Args:
            config: API configuration (uses defaults if not provided)
            session: Optional shared session (caller keeps ownership)
        """
        self._config = config or APIConfig.default()
        self._session = session
        self._owns_session = session is None
        self._connector: Optional[aiohttp.TCPConnector] = None
        self._logger = get_logger('resumapy.transport')

    async def __aenter__(self) -> 'AiohttpTransport':
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure session is created and open."""
        if self._session is None or self._session.closed:
            self._connector = aiohttp.TCPConnector(
                **self._config.get_connector_kwargs()
            )
            self._session = aiohttp.ClientSession(
                connector=self._connector,
                **self._config.get_session_kwargs()
            )
            self._owns_session = True
        return self._session

    async def close(self):
        """Close session if we own it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
        self._session = None

        if self._connector and not self._connector.closed:
            await self._connector.close()
        self._connector = None

    async def send(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Any = None
    ) -> HTTPResponse:
        """
        Send a request and return its response whatever the status.

        Args:
            method: HTTP method
            url: Absolute URL
            headers: Request headers
            body: bytes, str, async iterable of bytes, or None

        Returns:
            HTTPResponse

        Raises:
            TransportError: On connection, timeout or protocol failure
        """
        session = await self._ensure_session()
        request_headers = {k: str(v) for k, v in (headers or {}).items()}

        self._logger.debug(f"{method} {url}")

        try:
            async with session.request(
                method,
                url,
                data=body,
                headers=request_headers,
                allow_redirects=False,
                proxy=self._config.proxy.to_aiohttp_proxy() if self._config.proxy else None
            ) as response:
                text = decode_body(await response.read(), response.charset)
                self._logger.debug(f"{method} {url} -> {response.status}")
                return HTTPResponse.build(
                    response.status,
                    dict(response.headers),
                    text
                )
        except asyncio.TimeoutError as e:
            self._logger.error(f"Timeout on {method} {url}")
            raise TransportError(f"Request timed out: {method} {url}") from e
        except aiohttp.ClientError as e:
            self._logger.error(f"Network error on {method} {url}: {e}")
            raise TransportError(f"Network error: {e}") from e
