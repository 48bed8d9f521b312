"""Upload notifications using Observer Pattern."""
from .event_emitter import EventEmitter, UploadEvents

__all__ = [
    'EventEmitter',
    'UploadEvents',
]
