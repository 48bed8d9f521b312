"""
Data models for upload module.

Uses dataclasses for type-safe data structures. ``UploadSession`` is the
single mutable object carried through every step of one upload.
"""
from dataclasses import dataclass, field
from typing import Dict, Any, Optional
from pathlib import Path

from ...exceptions import UploadInProgressError

DEFAULT_CHUNK_SIZE = 8 * 1024 * 1024  # 8 MiB, the size Google recommends
DEFAULT_MIME_TYPE = 'application/octet-stream'


@dataclass
class Credentials:
    """
    OAuth credentials for the target service.

    Mutated in place when the access token is refreshed, so the caller's
    object always holds the current token.
    """
    access_token: str
    refresh_token: Optional[str] = None
    client_id: Optional[str] = None
    client_secret: Optional[str] = None

    @property
    def can_refresh(self) -> bool:
        """True when a refresh-token exchange is possible."""
        return bool(self.refresh_token)

    def __repr__(self) -> str:
        return f"Credentials(client_id={self.client_id!r}, can_refresh={self.can_refresh})"


@dataclass(frozen=True)
class ChunkInfo:
    """
    Byte range of one chunk.

    Attributes:
        start: First byte (inclusive)
        end: Last byte (exclusive)
        total: File size
    """
    start: int
    end: int
    total: int

    @property
    def size(self) -> int:
        """Returns chunk size."""
        return self.end - self.start

    @property
    def content_range(self) -> str:
        """Value of the Content-Range header for this chunk."""
        return f"bytes {self.start}-{self.end - 1}/{self.total}"


@dataclass
class UploadConfig:
    """
    Configuration for a single file upload.

    Attributes:
        file_path: Path to file to upload
        metadata: Resource metadata sent verbatim as the session body
        chunk_size: Upload granularity in bytes
        query_params: Extra query parameters for the session request
        retry_budget: Retries allowed (0 = none, negative = unlimited)
    """
    file_path: Path
    metadata: Dict[str, Any] = field(default_factory=dict)
    chunk_size: int = DEFAULT_CHUNK_SIZE
    query_params: Dict[str, Any] = field(default_factory=dict)
    retry_budget: int = 0

    def __post_init__(self):
        """Validate and normalize config."""
        if isinstance(self.file_path, str):
            self.file_path = Path(self.file_path)

        if self.chunk_size <= 0:
            raise ValueError("Chunk size must be positive")


@dataclass
class UploadProgress:
    """
    Upload progress information.

    Attributes:
        total_bytes: Total file size
        uploaded_bytes: Bytes the server has confirmed
    """
    total_bytes: int = 0
    uploaded_bytes: int = 0

    @property
    def percentage(self) -> float:
        """Returns upload progress as percentage."""
        if self.total_bytes == 0:
            return 100.0 if self.uploaded_bytes == 0 else 0.0
        return (self.uploaded_bytes / self.total_bytes) * 100

    @property
    def is_complete(self) -> bool:
        """Returns True if every byte is confirmed."""
        return self.uploaded_bytes >= self.total_bytes


@dataclass
class UploadSession:
    """
    State of one resumable upload.

    Configuration is fixed at construction; the remaining fields are
    derived when the upload starts and advanced by the upload steps.

    Invariants:
        - bytes_acknowledged never decreases and never exceeds file_size
        - session_location is set before any chunk is sent
        - refresh_attempted goes False -> True at most once per upload
        - only one upload runs on a session at a time
    """
    config: UploadConfig
    credentials: Credentials
    file_size: int = 0
    mime_type: str = DEFAULT_MIME_TYPE
    session_location: Optional[str] = None
    bytes_acknowledged: int = 0
    retry_budget: int = 0
    refresh_attempted: bool = False
    in_progress: bool = False

    def __post_init__(self):
        self.retry_budget = self.config.retry_budget

    @property
    def file_path(self) -> Path:
        return self.config.file_path

    @property
    def is_complete(self) -> bool:
        """True when the server holds every byte."""
        return self.bytes_acknowledged >= self.file_size

    @property
    def progress(self) -> UploadProgress:
        return UploadProgress(
            total_bytes=self.file_size,
            uploaded_bytes=self.bytes_acknowledged
        )

    def begin(self) -> None:
        """
        Claim the session for a new upload and reset derived state.

        Raises:
            UploadInProgressError: If an upload is already running
        """
        if self.in_progress:
            raise UploadInProgressError(f"Upload already in progress for {self.file_path}")
        self.in_progress = True
        self.file_size = 0
        self.mime_type = DEFAULT_MIME_TYPE
        self.session_location = None
        self.bytes_acknowledged = 0
        self.retry_budget = self.config.retry_budget
        self.refresh_attempted = False

    def finish(self) -> None:
        """Release the session after a terminal outcome."""
        self.in_progress = False

    def acknowledge(self, offset: int) -> bool:
        """
        Record the number of bytes the server holds.

        Args:
            offset: Bytes confirmed durable

        Returns:
            False (state unchanged) when the offset would move backwards
            or past the end of the file
        """
        if offset < self.bytes_acknowledged or offset > self.file_size:
            return False
        self.bytes_acknowledged = offset
        return True

    def complete(self) -> None:
        """Mark every byte as stored (the server returned the resource)."""
        self.bytes_acknowledged = self.file_size


@dataclass(frozen=True)
class UploadOutcome:
    """
    Terminal result of an upload.

    Exactly one of ``resource`` and ``error`` is set.
    """
    resource: Optional[Dict[str, Any]] = None
    error: Optional[Exception] = None
    bytes_acknowledged: int = 0
    session_location: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None

    @classmethod
    def from_session(
        cls,
        session: UploadSession,
        resource: Optional[Dict[str, Any]] = None,
        error: Optional[Exception] = None
    ) -> 'UploadOutcome':
        return cls(
            resource=resource,
            error=error,
            bytes_acknowledged=session.bytes_acknowledged,
            session_location=session.session_location
        )
