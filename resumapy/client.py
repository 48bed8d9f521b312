"""
High-level resumable upload client.

Example:
    >>> async with ResumableUploadClient() as client:
    ...     client.on('progress', print)
    ...     outcome = await client.upload(
    ...         "video.mp4",
    ...         Credentials(access_token="ya29..."),
    ...         metadata={"name": "video.mp4"}
    ...     )
    ...     print(outcome.resource)
"""
from pathlib import Path
from typing import Optional, Union, Dict, Any, Callable

from .core.api import APIConfig, AiohttpTransport, EventEmitter
from .core.upload import (
    UploadCoordinator,
    UploadConfig,
    UploadSession,
    UploadOutcome,
    Credentials,
    EmitterObserver,
)
from .core.upload.models import DEFAULT_CHUNK_SIZE
from .core.upload.observers import ProgressCallback
from .core.logging import get_logger


class ResumableUploadClient:
    """
    Uploads files to a Google-style resumable upload endpoint.

    Owns an aiohttp transport for the lifetime of the client; several
    uploads may run concurrently through it, each with its own session.

    Events (register with ``on``):
        progress(message: str)
        success(resource: dict)
        error(error: Exception)
    """

    def __init__(
        self,
        config: Optional[APIConfig] = None,
        transport=None,
        progress_callback: ProgressCallback = None
    ):
        """
        Initialize client.

        Args:
            config: API configuration (defaults to Google Drive v3)
            transport: Optional transport (an AiohttpTransport is created otherwise)
            progress_callback: Optional callback receiving UploadProgress
        """
        self._config = config or APIConfig.default()
        self._transport = transport or AiohttpTransport(self._config)
        self._owns_transport = transport is None
        self._events = EventEmitter()
        self._coordinator = UploadCoordinator(
            self._transport,
            self._config,
            observer=EmitterObserver(self._events),
            progress_callback=progress_callback
        )
        self._logger = get_logger('resumapy.client')

    async def __aenter__(self) -> 'ResumableUploadClient':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the transport if the client created it."""
        if self._owns_transport:
            await self._transport.close()

    @property
    def config(self) -> APIConfig:
        return self._config

    def on(self, event: str, callback: Callable) -> 'ResumableUploadClient':
        """Register an event handler."""
        self._events.on(event, callback)
        return self

    def off(self, event: str, callback: Optional[Callable] = None) -> 'ResumableUploadClient':
        """Remove an event handler."""
        self._events.off(event, callback)
        return self

    def create_session(
        self,
        file_path: Union[str, Path],
        credentials: Credentials,
        metadata: Optional[Dict[str, Any]] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        query_params: Optional[Dict[str, Any]] = None,
        retry_budget: Optional[int] = None
    ) -> UploadSession:
        """
        Build an upload session.

        ``retry_budget`` defaults to ``config.retry.budget``.
        """
        config = UploadConfig(
            file_path=file_path,
            metadata=metadata or {},
            chunk_size=chunk_size,
            query_params=query_params or {},
            retry_budget=self._config.retry.budget if retry_budget is None else retry_budget
        )
        return UploadSession(config=config, credentials=credentials)

    async def upload(
        self,
        file_path: Union[str, Path],
        credentials: Credentials,
        metadata: Optional[Dict[str, Any]] = None,
        **kwargs
    ) -> UploadOutcome:
        """
        Upload a file.

        Args:
            file_path: Path to file to upload
            credentials: OAuth credentials (refreshed in place on 401)
            metadata: Resource metadata document
            **kwargs: chunk_size, query_params, retry_budget

        Returns:
            UploadOutcome (failures are reported, not raised)
        """
        session = self.create_session(file_path, credentials, metadata, **kwargs)
        return await self._coordinator.upload(session)

    async def resume(
        self,
        file_path: Union[str, Path],
        credentials: Credentials,
        session_location: str,
        **kwargs
    ) -> UploadOutcome:
        """
        Continue an interrupted upload.

        Args:
            file_path: Same file as the original upload
            credentials: OAuth credentials
            session_location: Location URL of the original session
            **kwargs: chunk_size, retry_budget

        Returns:
            UploadOutcome (failures are reported, not raised)
        """
        session = self.create_session(file_path, credentials, **kwargs)
        return await self._coordinator.resume(session, session_location)
