"""
File validation and reading services.

Single Responsibility: Each class handles one specific task.
"""
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Tuple, Union, AsyncIterator
import aiofiles

from ...exceptions import FileAccessError
from ...logging import get_logger


class FileValidator:
    """
    Validates files before upload.
    
    Responsibilities:
    - Check file existence
    - Verify file is not a directory
    - Get file size
    """
    
    def validate(self, file_path: Union[str, Path]) -> Tuple[Path, int]:
        """
        Validate a file for upload.
        
        Args:
            file_path: Path to the file
            
        Returns:
            Tuple of (validated Path, file size in bytes)
            
        Raises:
            FileAccessError: If the file doesn't exist or is not a regular file
        """
        path = Path(file_path) if isinstance(file_path, str) else file_path
        
        if not path.exists():
            raise FileAccessError(f"File not found: {path}")
        
        if not path.is_file():
            raise FileAccessError(f"Path is not a file: {path}")
        
        try:
            file_size = path.stat().st_size
        except OSError as e:
            raise FileAccessError(f"Cannot stat {path}: {e}") from e
        
        return path, file_size


class LocalFileSystem:
    """
    Local file access for uploads.
    
    Uses aiofiles for non-blocking I/O. Each range gets its own handle,
    closed when the ``open_range`` context exits.
    """
    
    BLOCK_SIZE = 64 * 1024
    
    def __init__(self, block_size: int = BLOCK_SIZE):
        """
        Initialize file system.
        
        Args:
            block_size: Size of the blocks yielded by range streams
        """
        self._block_size = block_size
        self._validator = FileValidator()
        self._logger = get_logger('resumapy.upload.file')
    
    def size(self, file_path: Path) -> int:
        _, file_size = self._validator.validate(file_path)
        return file_size
    
    @asynccontextmanager
    async def open_range(self, file_path: Path, start: int, end: int):
        """
        Open a byte stream over ``[start, end)``.
        
        Args:
            file_path: Path to the file
            start: Start position in bytes
            end: End position in bytes (exclusive)
            
        Yields:
            Async iterator of byte blocks
            
        Raises:
            FileAccessError: If the file cannot be opened
        """
        try:
            handle = await aiofiles.open(file_path, 'rb')
        except OSError as e:
            raise FileAccessError(f"Cannot open {file_path}: {e}") from e
        
        self._logger.debug(f"Opened range {start}-{end} of {file_path}")
        stream = self._iter_blocks(handle, end - start)
        try:
            await handle.seek(start)
            yield stream
        finally:
            await stream.aclose()
            await handle.close()
            self._logger.debug(f"Closed range {start}-{end} of {file_path}")
    
    async def _iter_blocks(self, handle, length: int) -> AsyncIterator[bytes]:
        remaining = length
        while remaining > 0:
            data = await handle.read(min(self._block_size, remaining))
            if not data:
                break
            remaining -= len(data)
            yield data
