"""Pytest fixtures for resumapy tests."""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pytest

from resumapy.core.api import APIConfig, HTTPResponse
from resumapy.core.upload import Credentials, UploadConfig, UploadSession

SESSION_URL = 'https://www.googleapis.com/upload/drive/v3/files?uploadType=resumable&upload_id=abc'


def response(status: int, headers: Optional[Dict[str, str]] = None, body: str = '') -> HTTPResponse:
    """Shorthand for building a transport response."""
    return HTTPResponse.build(status, headers, body)


def session_created(location: str = SESSION_URL) -> HTTPResponse:
    return response(200, {'Location': location})


def resume_incomplete(last_byte: Optional[int] = None) -> HTTPResponse:
    headers = {'Range': f'bytes=0-{last_byte}'} if last_byte is not None else {}
    return response(308, headers)


@dataclass
class RecordedRequest:
    """A request seen by StubTransport."""
    method: str
    url: str
    headers: Dict[str, str]
    body: bytes


class StubTransport:
    """
    Scripted in-memory transport.

    Replies from ``responses`` in order, or from ``handler(request)`` when
    given. An Exception instance in place of a response is raised.
    """

    def __init__(self, responses=None, handler=None):
        self.requests: List[RecordedRequest] = []
        self._responses = list(responses or [])
        self._handler = handler
        self.closed = False

    async def send(self, method, url, headers=None, body=None):
        data = await self._read_body(body)
        request = RecordedRequest(method, url, dict(headers or {}), data)
        self.requests.append(request)

        result = self._handler(request) if self._handler else self._responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    async def close(self):
        self.closed = True

    def by_method(self, method: str) -> List[RecordedRequest]:
        return [r for r in self.requests if r.method == method]

    @staticmethod
    async def _read_body(body) -> bytes:
        if body is None:
            return b''
        if isinstance(body, bytes):
            return body
        if isinstance(body, str):
            return body.encode('utf-8')
        parts = []
        async for block in body:
            parts.append(block)
        return b''.join(parts)


@dataclass
class RecordingObserver:
    """Collects notifications."""
    progress: List[str] = field(default_factory=list)
    successes: List[dict] = field(default_factory=list)
    errors: List[Exception] = field(default_factory=list)

    def on_progress(self, message: str) -> None:
        self.progress.append(message)

    def on_success(self, resource) -> None:
        self.successes.append(resource)

    def on_error(self, error: Exception) -> None:
        self.errors.append(error)


def patterned_bytes(size: int) -> bytes:
    """Deterministic, non-repeating-per-KB content of ``size`` bytes."""
    block = bytes(range(256))
    return (block * (size // 256 + 1))[:size]


@pytest.fixture
def api_config():
    """Default API configuration."""
    return APIConfig.default()


@pytest.fixture
def credentials():
    """Credentials able to refresh."""
    return Credentials(
        access_token='old-token',
        refresh_token='refresh-me',
        client_id='client-id',
        client_secret='client-secret'
    )


@pytest.fixture
def observer():
    return RecordingObserver()


@pytest.fixture
def make_file(tmp_path):
    """Factory writing a file with patterned content."""
    def _make(size: int, name: str = 'payload.bin'):
        path = tmp_path / name
        path.write_bytes(patterned_bytes(size))
        return path
    return _make


@pytest.fixture
def make_session(make_file, credentials):
    """Factory for upload sessions over a fresh file."""
    def _make(size: int = 1000, chunk_size: int = 400, retry_budget: int = 0, **kwargs):
        path = kwargs.pop('file_path', None) or make_file(size)
        config = UploadConfig(
            file_path=path,
            chunk_size=chunk_size,
            retry_budget=retry_budget,
            **kwargs
        )
        return UploadSession(config=config, credentials=credentials)
    return _make
