"""Upload models."""
from .upload_models import (
    Credentials,
    ChunkInfo,
    UploadConfig,
    UploadProgress,
    UploadSession,
    UploadOutcome,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_MIME_TYPE,
)

__all__ = [
    'Credentials',
    'ChunkInfo',
    'UploadConfig',
    'UploadProgress',
    'UploadSession',
    'UploadOutcome',
    'DEFAULT_CHUNK_SIZE',
    'DEFAULT_MIME_TYPE',
]
