"""
Chunk transfer service.

Sends the file to an open upload session one byte range at a time and
tracks how much of it the server has stored.
"""
import json
import re
from typing import Dict, Any, Optional

from ..models import ChunkInfo
from ..strategies import FixedSizeChunkingStrategy
from ...exceptions import UploadError, AuthorizationError, TransportError, InvalidResponseError
from ...logging import get_logger

RESUME_INCOMPLETE = 308

_BYTES_RANGE_RE = re.compile(r'^bytes[= ](\d+)-(\d+)$')


class ChunkTransferEngine:
    """
    Uploads file chunks to a session location.

    Responsibilities:
    - Frame each chunk with Content-Range
    - Interpret 2xx (done), 308 (resume) and failures
    - Advance ``bytes_acknowledged`` from the server's range header

    Only one chunk is in flight at a time, and each chunk's file stream is
    closed before the next one is opened.
    """

    def __init__(
        self,
        transport,
        file_system,
        recovery,
        observer,
        progress_callback=None
    ):
        """
        Initialize chunk transfer engine.

        Args:
            transport: HTTP transport
            file_system: Provides byte-range streams of the file
            recovery: Shared refresh/retry handler
            observer: Receives progress notifications
            progress_callback: Optional callback receiving UploadProgress
        """
        self._transport = transport
        self._fs = file_system
        self._recovery = recovery
        self._observer = observer
        self._progress_callback = progress_callback
        self._logger = get_logger('resumapy.upload.chunk')

    async def send(self, session) -> Dict[str, Any]:
        """
        Upload the remaining bytes of the file.

        Resumes from ``session.bytes_acknowledged``.

        Args:
            session: Initiated upload session

        Returns:
            Final resource description returned by the server

        Raises:
            UploadError: If the upload fails terminally
        """
        if not session.session_location:
            raise UploadError("Upload session has no location; initiate it first")

        chunking = FixedSizeChunkingStrategy(session.config.chunk_size)
        self._logger.info(
            f"Sending {session.file_size - session.bytes_acknowledged} bytes "
            f"from offset {session.bytes_acknowledged}"
        )

        while True:
            if session.is_complete:
                resource = await self._recovery.run(
                    session, lambda: self._finalize(session), 'finalize'
                )
            else:
                resource = await self._recovery.run(
                    session, lambda: self._send_next_chunk(session, chunking), 'send'
                )

            if resource is not None:
                session.complete()
                self._report_progress(session)
                self._logger.info(f"Upload of {session.file_path.name} complete")
                return resource

    async def query_status(self, session) -> Optional[Dict[str, Any]]:
        """
        Ask the server how many bytes of the session it holds.

        Updates ``bytes_acknowledged`` from the response.

        Returns:
            The final resource if the upload is already complete, else None
        """
        resource = await self._recovery.run(
            session, lambda: self._request_status(session), 'status'
        )
        if resource is not None:
            session.complete()
        return resource

    def build_headers(self, session, chunk: ChunkInfo) -> Dict[str, str]:
        return {
            'Authorization': f"Bearer {session.credentials.access_token}",
            'Content-Length': str(chunk.size),
            'Content-Type': session.mime_type,
            'Content-Range': chunk.content_range,
        }

    def build_status_headers(self, session) -> Dict[str, str]:
        return {
            'Authorization': f"Bearer {session.credentials.access_token}",
            'Content-Length': '0',
            'Content-Range': f"bytes */{session.file_size}",
        }

    async def _send_next_chunk(self, session, chunking) -> Optional[Dict[str, Any]]:
        chunk = chunking.chunk_at(session.bytes_acknowledged, session.file_size)
        headers = self.build_headers(session, chunk)
        self._logger.debug(f"PUT {chunk.content_range} ({chunk.size} bytes)")

        async with self._fs.open_range(session.file_path, chunk.start, chunk.end) as stream:
            response = await self._transport.send(
                'PUT', session.session_location, headers, stream
            )

        return self._process_response(session, response, missing_range_is_zero=False)

    async def _request_status(self, session) -> Optional[Dict[str, Any]]:
        headers = self.build_status_headers(session)
        self._logger.debug(f"PUT {headers['Content-Range']} (status query)")
        response = await self._transport.send(
            'PUT', session.session_location, headers, b''
        )
        return self._process_response(session, response, missing_range_is_zero=True)

    async def _finalize(self, session) -> Dict[str, Any]:
        resource = await self._request_status(session)
        if resource is None:
            raise InvalidResponseError(
                "Server holds every byte but did not complete the upload",
                RESUME_INCOMPLETE
            )
        return resource

    def _process_response(
        self,
        session,
        response,
        missing_range_is_zero: bool
    ) -> Optional[Dict[str, Any]]:
        """
        Interpret a response to a chunk or status request.

        Returns:
            The final resource on 2xx, None on a resume signal

        Raises:
            AuthorizationError: On 401
            InvalidResponseError: On an unusable 2xx body or 308 range
            TransportError: On any other status
        """
        if response.ok:
            return self._parse_resource(response)

        if response.status == RESUME_INCOMPLETE:
            offset = self._parse_range(response, missing_range_is_zero)
            if not session.acknowledge(offset):
                raise InvalidResponseError(
                    f"Range offset {offset} outside {session.bytes_acknowledged}-{session.file_size}",
                    response.status,
                    response.header('range')
                )
            self._observer.on_progress(f"Bytes sent: {session.bytes_acknowledged}")
            self._report_progress(session)
            return None

        if response.status == 401:
            raise AuthorizationError("Chunk upload unauthorized")

        raise TransportError(f"Chunk upload failed: HTTP {response.status}", response.status)

    def _parse_range(self, response, missing_range_is_zero: bool) -> int:
        """Number of bytes stored, from a ``range: bytes=0-N`` header (N + 1)."""
        bytes_range = response.header('range')
        if bytes_range is None and missing_range_is_zero:
            return 0

        match = _BYTES_RANGE_RE.match(bytes_range.strip()) if bytes_range else None
        if match is None:
            raise InvalidResponseError(
                'Resume response without a usable "range" header',
                response.status,
                bytes_range
            )
        return int(match.group(2)) + 1

    def _parse_resource(self, response) -> Dict[str, Any]:
        if not response.body.strip():
            return {}
        try:
            return json.loads(response.body)
        except json.JSONDecodeError as e:
            raise InvalidResponseError(
                f"Final response is not JSON: {e}",
                response.status
            ) from e

    def _report_progress(self, session) -> None:
        if self._progress_callback:
            self._progress_callback(session.progress)
