"""
Custom exceptions for resumable upload operations.

Every failure inside an upload is raised as one of these classes and
converted by the coordinator into a single ``error`` notification.
"""
from typing import Optional


class UploadError(Exception):
    """Base exception for all upload-related errors."""
    
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Error message
            status_code: HTTP status code (if a response was received)
        """
        self.status_code = status_code
        super().__init__(message)


class TransportError(UploadError):
    """Network failure or an HTTP status with no recovery path. Retryable."""
    pass


class InvalidResponseError(TransportError):
    """
    Response arrived but cannot be used.
    
    Raised for a session response without ``location``, a 308 without a
    usable ``range`` header, or a final body that is not JSON.
    """
    
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        header_value: Optional[str] = None
    ) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Error message
            status_code: HTTP status code of the offending response
            header_value: Raw header value that failed to parse (if any)
        """
        self.header_value = header_value
        super().__init__(message, status_code)


class AuthorizationError(UploadError):
    """Server rejected the access token (HTTP 401)."""
    
    def __init__(self, message: str = "Authorization denied", status_code: int = 401) -> None:
        super().__init__(message, status_code)


class TokenRefreshError(UploadError):
    """Refresh-token exchange failed."""
    pass


class FileAccessError(UploadError):
    """Source file is missing or unreadable."""
    pass


class UploadInProgressError(UploadError):
    """An upload is already running on this session."""
    pass
