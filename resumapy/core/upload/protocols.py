"""
Protocol definitions for upload module.

Defines the collaborators the upload core depends on. Each has a default
implementation in ``services`` or ``core.api``; tests substitute stubs.
"""
from typing import Protocol, Dict, Any, Optional, AsyncIterator, AsyncContextManager
from pathlib import Path

from ..api.transport import HTTPResponse


class FileSystemProtocol(Protocol):
    """Read access to the file being uploaded."""

    def size(self, file_path: Path) -> int:
        """
        Size of the file in bytes.

        Raises:
            FileAccessError: If the file is missing or not a regular file
        """
        ...

    def open_range(
        self,
        file_path: Path,
        start: int,
        end: int
    ) -> AsyncContextManager[AsyncIterator[bytes]]:
        """
        Open a byte stream over ``[start, end)``.

        The stream is closed when the context exits.
        """
        ...


class MimeResolverProtocol(Protocol):
    """MIME type lookup."""

    def guess_type(self, file_path: Path) -> str:
        """Returns the MIME type, or a generic binary type when unknown."""
        ...


class TransportProtocol(Protocol):
    """HTTP transport."""

    async def send(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Any = None
    ) -> HTTPResponse:
        """
        Send a request and return the response for any status code.

        Raises:
            TransportError: On network-level failure
        """
        ...


class UploadObserver(Protocol):
    """Receives upload notifications."""

    def on_progress(self, message: str) -> None: ...
    def on_success(self, resource: Dict[str, Any]) -> None: ...
    def on_error(self, error: Exception) -> None: ...
