"""
Upload module for resumable uploads.

Session initiation, chunked transfer and failure recovery for Google-style
resumable upload endpoints.
"""
from .coordinator import UploadCoordinator
from .models import (
    Credentials,
    ChunkInfo,
    UploadConfig,
    UploadProgress,
    UploadSession,
    UploadOutcome,
)
from .observers import NullObserver, EmitterObserver
from .protocols import (
    FileSystemProtocol,
    MimeResolverProtocol,
    TransportProtocol,
    UploadObserver,
)

__all__ = [
    # Main classes
    'UploadCoordinator',
    
    # Models
    'Credentials',
    'ChunkInfo',
    'UploadConfig',
    'UploadProgress',
    'UploadSession',
    'UploadOutcome',
    
    # Observers
    'NullObserver',
    'EmitterObserver',
    
    # Protocols
    'FileSystemProtocol',
    'MimeResolverProtocol',
    'TransportProtocol',
    'UploadObserver',
]
