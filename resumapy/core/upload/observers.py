"""Observer implementations for upload notifications."""
from typing import Dict, Any, Callable, Optional

from ..api.events import EventEmitter, UploadEvents
from .models import UploadProgress


class NullObserver:
    """Discards every notification."""

    def on_progress(self, message: str) -> None:
        pass

    def on_success(self, resource: Dict[str, Any]) -> None:
        pass

    def on_error(self, error: Exception) -> None:
        pass


class EmitterObserver:
    """
    Forwards notifications to an ``EventEmitter``.

    Lets callers subscribe with ``emitter.on('progress', ...)`` etc.
    """

    def __init__(self, emitter: EventEmitter):
        self._emitter = emitter

    @property
    def emitter(self) -> EventEmitter:
        return self._emitter

    def on_progress(self, message: str) -> None:
        self._emitter.emit(UploadEvents.PROGRESS, message)

    def on_success(self, resource: Dict[str, Any]) -> None:
        self._emitter.emit(UploadEvents.SUCCESS, resource)

    def on_error(self, error: Exception) -> None:
        self._emitter.emit(UploadEvents.ERROR, error)


ProgressCallback = Optional[Callable[[UploadProgress], None]]
