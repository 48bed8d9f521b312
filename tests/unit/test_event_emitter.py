"""Tests for the event emitter and observers."""
from unittest.mock import Mock

from resumapy.core.api.events import EventEmitter, UploadEvents
from resumapy.core.upload.observers import EmitterObserver, NullObserver


class TestEventEmitter:
    """Test suite for EventEmitter."""
    
    def test_on_and_emit(self):
        emitter = EventEmitter()
        handler = Mock()
        
        emitter.on('progress', handler)
        called = emitter.emit('progress', 'Bytes sent: 10')
        
        assert called
        handler.assert_called_once_with('Bytes sent: 10')
    
    def test_emit_without_handlers(self):
        assert EventEmitter().emit('progress', 'x') is False
    
    def test_handlers_run_in_order(self):
        emitter = EventEmitter()
        calls = []
        emitter.on('e', lambda: calls.append(1)).on('e', lambda: calls.append(2))
        
        emitter.emit('e')
        
        assert calls == [1, 2]
    
    def test_off_single_handler(self):
        emitter = EventEmitter()
        first, second = Mock(), Mock()
        emitter.on('e', first).on('e', second)
        
        emitter.off('e', first).emit('e')
        
        first.assert_not_called()
        second.assert_called_once()
    
    def test_off_all_handlers(self):
        emitter = EventEmitter()
        emitter.on('e', Mock())
        
        emitter.off('e')
        
        assert emitter.listener_count('e') == 0
    
    def test_once(self):
        emitter = EventEmitter()
        handler = Mock()
        emitter.once('e', handler)
        
        emitter.emit('e', 1)
        emitter.emit('e', 2)
        
        handler.assert_called_once_with(1)


class TestEmitterObserver:
    """Test suite for EmitterObserver."""
    
    def test_forwards_notifications(self):
        emitter = EventEmitter()
        received = []
        for event in UploadEvents.ALL:
            emitter.on(event, lambda value, event=event: received.append((event, value)))
        observer = EmitterObserver(emitter)
        error = RuntimeError('boom')
        
        observer.on_progress('Retrying')
        observer.on_success({'id': 'file-1'})
        observer.on_error(error)
        
        assert received == [
            ('progress', 'Retrying'),
            ('success', {'id': 'file-1'}),
            ('error', error),
        ]
    
    def test_null_observer_accepts_everything(self):
        observer = NullObserver()
        observer.on_progress('x')
        observer.on_success({})
        observer.on_error(RuntimeError())
