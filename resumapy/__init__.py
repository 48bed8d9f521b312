"""
resumapy - Async client for Google-style resumable uploads.

Usage:
    >>> from resumapy import ResumableUploadClient, Credentials
    >>>
    >>> async with ResumableUploadClient() as client:
    ...     outcome = await client.upload("file.bin", Credentials("token"))
"""
import logging
from .client import ResumableUploadClient

# Configuration
from .core.api import (
    APIConfig,
    ProxyConfig,
    SSLConfig,
    TimeoutConfig,
    RetryConfig,
    AiohttpTransport,
    HTTPResponse,
)

# Upload core
from .core.upload import (
    UploadCoordinator,
    UploadSession,
    UploadConfig,
    UploadOutcome,
    UploadProgress,
    Credentials,
)

from .core.exceptions import (
    UploadError,
    TransportError,
    InvalidResponseError,
    AuthorizationError,
    TokenRefreshError,
    FileAccessError,
    UploadInProgressError,
)

__version__ = '1.0.0'


def setup_logging(level=logging.INFO):
    """
    Configure logging for resumapy modules.

    Args:
        level: Logging level (default: logging.INFO)
    """
    loggers = [
        'resumapy',
        'resumapy.client',
        'resumapy.transport',
        'resumapy.auth',
        'resumapy.upload.coordinator',
        'resumapy.upload.session',
        'resumapy.upload.chunk',
        'resumapy.upload.file',
        'resumapy.upload.recovery',
    ]

    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = True


__all__ = [
    'ResumableUploadClient',
    'UploadCoordinator',
    'UploadSession',
    'UploadConfig',
    'UploadOutcome',
    'UploadProgress',
    'Credentials',
    'APIConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'RetryConfig',
    'AiohttpTransport',
    'HTTPResponse',
    'UploadError',
    'TransportError',
    'InvalidResponseError',
    'AuthorizationError',
    'TokenRefreshError',
    'FileAccessError',
    'UploadInProgressError',
    'setup_logging',
]
