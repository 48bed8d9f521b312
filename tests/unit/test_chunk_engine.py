"""Tests for chunk transfer."""
import json
import pytest

from conftest import (
    StubTransport,
    RecordingObserver,
    response,
    resume_incomplete,
    patterned_bytes,
    SESSION_URL,
)
from resumapy.core.api import TokenRefreshService
from resumapy.core.exceptions import UploadError, TransportError, InvalidResponseError
from resumapy.core.upload.models import ChunkInfo
from resumapy.core.upload.services import LocalFileSystem, RecoveryHandler, ChunkTransferEngine


def build_engine(transport, observer, progress_callback=None):
    recovery = RecoveryHandler(TokenRefreshService(transport), observer)
    return ChunkTransferEngine(
        transport,
        LocalFileSystem(),
        recovery,
        observer,
        progress_callback
    )


@pytest.fixture
def started(make_session):
    """Factory for a session that already holds a location."""
    def _make(size=1000, chunk_size=400, **kwargs):
        session = make_session(size=size, chunk_size=chunk_size, **kwargs)
        session.begin()
        session.file_size = size
        session.mime_type = 'video/mp4'
        session.session_location = SESSION_URL
        return session
    return _make


class TestHeaders:
    """Test suite for chunk request framing."""
    
    def test_chunk_headers(self, started):
        session = started()
        engine = build_engine(StubTransport(), RecordingObserver())
        
        headers = engine.build_headers(session, ChunkInfo(400, 800, 1000))
        
        assert headers == {
            'Authorization': 'Bearer old-token',
            'Content-Length': '400',
            'Content-Type': 'video/mp4',
            'Content-Range': 'bytes 400-799/1000',
        }
    
    def test_status_headers(self, started):
        session = started()
        engine = build_engine(StubTransport(), RecordingObserver())
        
        headers = engine.build_status_headers(session)
        
        assert headers['Content-Length'] == '0'
        assert headers['Content-Range'] == 'bytes */1000'


class TestSend:
    """Test suite for ChunkTransferEngine.send."""
    
    @pytest.mark.asyncio
    async def test_requires_location(self, make_session, observer):
        session = make_session()
        
        with pytest.raises(UploadError):
            await build_engine(StubTransport(), observer).send(session)
    
    @pytest.mark.asyncio
    async def test_sends_chunks_in_order(self, started, observer):
        transport = StubTransport([
            resume_incomplete(399),
            resume_incomplete(799),
            response(200, body='{"id": "file-1"}'),
        ])
        session = started()
        
        resource = await build_engine(transport, observer).send(session)
        
        assert resource == {'id': 'file-1'}
        assert [r.headers['Content-Range'] for r in transport.requests] == [
            'bytes 0-399/1000',
            'bytes 400-799/1000',
            'bytes 800-999/1000',
        ]
        assert all(r.url == SESSION_URL for r in transport.requests)
        assert b''.join(r.body for r in transport.requests) == patterned_bytes(1000)
        assert observer.progress == ['Bytes sent: 400', 'Bytes sent: 800']
        assert session.bytes_acknowledged == 1000
    
    @pytest.mark.asyncio
    async def test_partial_acknowledgement_resends_from_offset(self, started, observer):
        transport = StubTransport([
            resume_incomplete(199),
            resume_incomplete(599),
            resume_incomplete(999),
            response(201, body='{"id": "file-1"}'),
        ])
        session = started()
        
        await build_engine(transport, observer).send(session)
        
        assert [r.headers['Content-Range'] for r in transport.requests] == [
            'bytes 0-399/1000',
            'bytes 200-599/1000',
            'bytes 600-999/1000',
            'bytes */1000',
        ]
    
    @pytest.mark.asyncio
    async def test_range_header_maps_to_next_offset(self, started, observer):
        transport = StubTransport([
            resume_incomplete(999999),
            response(200, body='{}'),
        ])
        session = started(size=2000000, chunk_size=1000000)
        
        await build_engine(transport, observer).send(session)
        
        assert observer.progress[0] == 'Bytes sent: 1000000'
        assert transport.requests[1].headers['Content-Range'] == 'bytes 1000000-1999999/2000000'
    
    @pytest.mark.asyncio
    async def test_empty_final_body(self, started, observer):
        transport = StubTransport([response(200)])
        
        resource = await build_engine(transport, observer).send(started(size=100, chunk_size=400))
        
        assert resource == {}
    
    @pytest.mark.asyncio
    async def test_empty_file_finalizes_with_status_query(self, started, observer):
        transport = StubTransport([response(200, body='{"id": "empty"}')])
        session = started(size=0)
        
        resource = await build_engine(transport, observer).send(session)
        
        assert resource == {'id': 'empty'}
        assert transport.requests[0].headers['Content-Range'] == 'bytes */0'
        assert transport.requests[0].body == b''
    
    @pytest.mark.asyncio
    async def test_missing_range_header_is_invalid(self, started, observer):
        transport = StubTransport([resume_incomplete()])
        
        with pytest.raises(InvalidResponseError):
            await build_engine(transport, observer).send(started())
    
    @pytest.mark.asyncio
    async def test_malformed_range_header_is_invalid(self, started, observer):
        transport = StubTransport([response(308, {'Range': 'lots'})])
        
        with pytest.raises(InvalidResponseError) as exc_info:
            await build_engine(transport, observer).send(started())
        
        assert exc_info.value.header_value == 'lots'
    
    @pytest.mark.asyncio
    async def test_regressing_range_rejected(self, started, observer):
        transport = StubTransport([resume_incomplete(799), resume_incomplete(399)])
        session = started()
        
        with pytest.raises(InvalidResponseError):
            await build_engine(transport, observer).send(session)
        
        assert session.bytes_acknowledged == 800
    
    @pytest.mark.asyncio
    async def test_range_past_end_rejected(self, started, observer):
        transport = StubTransport([resume_incomplete(5000)])
        session = started()
        
        with pytest.raises(InvalidResponseError):
            await build_engine(transport, observer).send(session)
        
        assert session.bytes_acknowledged == 0
    
    @pytest.mark.asyncio
    async def test_non_json_final_body_is_invalid(self, started, observer):
        transport = StubTransport([response(200, body='<html>')])
        
        with pytest.raises(InvalidResponseError):
            await build_engine(transport, observer).send(started(size=100))
    
    @pytest.mark.asyncio
    async def test_server_error_retried_from_last_offset(self, started, observer):
        transport = StubTransport([
            resume_incomplete(399),
            response(500),
            resume_incomplete(799),
            response(200, body='{"id": "file-1"}'),
        ])
        session = started(retry_budget=1)
        
        await build_engine(transport, observer).send(session)
        
        assert [r.headers['Content-Range'] for r in transport.requests] == [
            'bytes 0-399/1000',
            'bytes 400-799/1000',
            'bytes 400-799/1000',
            'bytes 800-999/1000',
        ]
        assert session.retry_budget == 0
    
    @pytest.mark.asyncio
    async def test_network_error_without_budget(self, started, observer):
        transport = StubTransport([TransportError('connection reset')])
        
        with pytest.raises(TransportError):
            await build_engine(transport, observer).send(started())
    
    @pytest.mark.asyncio
    async def test_progress_callback(self, started, observer):
        reports = []
        transport = StubTransport([
            resume_incomplete(399),
            resume_incomplete(799),
            response(200, body='{}'),
        ])
        
        await build_engine(transport, observer, reports.append).send(started())
        
        assert [p.uploaded_bytes for p in reports] == [400, 800, 1000]
        assert reports[-1].percentage == 100.0


class TestQueryStatus:
    """Test suite for ChunkTransferEngine.query_status."""
    
    @pytest.mark.asyncio
    async def test_partial_upload(self, started, observer):
        transport = StubTransport([resume_incomplete(599)])
        session = started()
        
        resource = await build_engine(transport, observer).query_status(session)
        
        assert resource is None
        assert session.bytes_acknowledged == 600
        assert transport.requests[0].method == 'PUT'
        assert transport.requests[0].headers['Content-Range'] == 'bytes */1000'
    
    @pytest.mark.asyncio
    async def test_nothing_stored_yet(self, started, observer):
        transport = StubTransport([resume_incomplete()])
        session = started()
        
        assert await build_engine(transport, observer).query_status(session) is None
        assert session.bytes_acknowledged == 0
    
    @pytest.mark.asyncio
    async def test_already_complete(self, started, observer):
        transport = StubTransport([response(200, body=json.dumps({'id': 'done'}))])
        session = started()
        
        resource = await build_engine(transport, observer).query_status(session)
        
        assert resource == {'id': 'done'}
        assert session.is_complete
