"""
Upload coordinator.

Orchestrates the upload process using injected dependencies.
Depends on abstractions (transport, file system, MIME lookup, observer),
not concretions.
"""
from typing import Dict, Any, Optional

from .models import UploadSession, UploadOutcome
from .observers import NullObserver, ProgressCallback
from .protocols import FileSystemProtocol, MimeResolverProtocol, TransportProtocol, UploadObserver
from .services import (
    LocalFileSystem,
    MimeTypeResolver,
    RecoveryHandler,
    SessionInitiator,
    ChunkTransferEngine,
)
from ..api.async_auth import TokenRefreshService
from ..api.config import APIConfig
from ..api.retry import RetryStrategy, BudgetRetryStrategy
from ..exceptions import UploadError
from ..logging import get_logger

logger = get_logger('resumapy.upload.coordinator')


class UploadCoordinator:
    """
    Coordinates resumable uploads.

    Uses dependency injection for all components, making it:
    - Testable (stub the transport)
    - Extensible (swap file system, MIME lookup or retry strategy)

    Notifications go to the observer: ``on_progress`` throughout,
    then exactly one of ``on_success`` or ``on_error``. Upload failures are
    never raised; the returned ``UploadOutcome`` mirrors the notification.
    """

    def __init__(
        self,
        transport: TransportProtocol,
        config: Optional[APIConfig] = None,
        file_system: Optional[FileSystemProtocol] = None,
        mime_resolver: Optional[MimeResolverProtocol] = None,
        observer: Optional[UploadObserver] = None,
        retry_strategy: Optional[RetryStrategy] = None,
        token_service: Optional[TokenRefreshService] = None,
        progress_callback: ProgressCallback = None
    ):
        """
        Initialize upload coordinator.

        Args:
            transport: HTTP transport
            config: API configuration
            file_system: File access (local files by default)
            mime_resolver: MIME lookup (mimetypes by default)
            observer: Notification receiver
            retry_strategy: Retry decision (session budget by default)
            token_service: Token refresher
            progress_callback: Optional callback for structured progress
        """
        self._config = config or APIConfig.default()
        self._observer = observer or NullObserver()
        self._fs = file_system or LocalFileSystem()

        tokens = token_service or TokenRefreshService(transport, self._config)
        recovery = RecoveryHandler(
            tokens,
            self._observer,
            retry_strategy or BudgetRetryStrategy(self._config.retry)
        )
        self._initiator = SessionInitiator(
            transport,
            self._fs,
            mime_resolver or MimeTypeResolver(),
            recovery,
            self._observer,
            self._config
        )
        self._engine = ChunkTransferEngine(
            transport,
            self._fs,
            recovery,
            self._observer,
            progress_callback
        )

    @property
    def observer(self):
        return self._observer

    async def upload(self, session: UploadSession) -> UploadOutcome:
        """
        Upload a file from byte zero through a new session.

        Args:
            session: Configured upload session (reset before use)

        Returns:
            UploadOutcome with the final resource or the terminal error

        Raises:
            UploadInProgressError: If the session is already uploading
        """
        session.begin()
        logger.info(f"Starting upload: {session.file_path}")
        try:
            await self._initiator.initiate(session)
            resource = await self._engine.send(session)
        except UploadError as e:
            return self._fail(session, e)
        finally:
            session.finish()
        return self._succeed(session, resource)

    async def resume(self, session: UploadSession, session_location: str) -> UploadOutcome:
        """
        Continue an upload through an existing session location.

        The server is asked how many bytes it holds before sending more.

        Args:
            session: Configured upload session (reset before use)
            session_location: Location URL from an earlier initiation

        Returns:
            UploadOutcome with the final resource or the terminal error

        Raises:
            UploadInProgressError: If the session is already uploading
        """
        session.begin()
        logger.info(f"Resuming upload: {session.file_path}")
        try:
            self._initiator.resolve_file(session)
            session.session_location = session_location
            resource = await self._engine.query_status(session)
            if resource is None:
                self._observer.on_progress(f"Resuming from byte {session.bytes_acknowledged}")
                resource = await self._engine.send(session)
        except UploadError as e:
            return self._fail(session, e)
        finally:
            session.finish()
        return self._succeed(session, resource)

    def _succeed(self, session: UploadSession, resource: Dict[str, Any]) -> UploadOutcome:
        logger.info(f"Upload succeeded: {session.file_path} ({session.file_size} bytes)")
        self._observer.on_success(resource)
        return UploadOutcome.from_session(session, resource=resource)

    def _fail(self, session: UploadSession, error: UploadError) -> UploadOutcome:
        logger.error(
            f"Upload failed: {session.file_path} at byte {session.bytes_acknowledged}: {error}"
        )
        self._observer.on_error(error)
        return UploadOutcome.from_session(session, error=error)
