"""Upload services module."""
from .file_service import FileValidator, LocalFileSystem
from .mime_service import MimeTypeResolver
from .recovery import RecoveryHandler
from .session_service import SessionInitiator, serialize_params
from .chunk_service import ChunkTransferEngine

__all__ = [
    'FileValidator',
    'LocalFileSystem',
    'MimeTypeResolver',
    'RecoveryHandler',
    'SessionInitiator',
    'serialize_params',
    'ChunkTransferEngine',
]
