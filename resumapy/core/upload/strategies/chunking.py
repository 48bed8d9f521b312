"""
Chunking strategies for resumable uploads.

The next chunk always starts at the offset the server has confirmed, so
strategies compute one chunk at a time from that offset.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import ChunkInfo, DEFAULT_CHUNK_SIZE


class BaseChunkingStrategy(ABC):
    """Abstract base class for chunking strategies."""
    
    @abstractmethod
    def chunk_at(self, offset: int, file_size: int) -> Optional[ChunkInfo]:
        """Chunk starting at ``offset``, or None when nothing is left."""
        pass
    
    def calculate_chunks(self, file_size: int) -> List[ChunkInfo]:
        """
        All chunks of a file when every chunk is accepted in full.
        
        Args:
            file_size: Total file size in bytes
            
        Returns:
            Contiguous chunks covering ``[0, file_size)``
        """
        chunks = []
        chunk = self.chunk_at(0, file_size)
        while chunk is not None:
            chunks.append(chunk)
            chunk = self.chunk_at(chunk.end, file_size)
        return chunks


class FixedSizeChunkingStrategy(BaseChunkingStrategy):
    """
    Fixed-size chunking strategy.
    
    Every chunk has ``chunk_size`` bytes except the last, which holds
    whatever remains.
    """
    
    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        """
        Initialize with chunk size.
        
        Args:
            chunk_size: Size of each chunk in bytes
        """
        if chunk_size <= 0:
            raise ValueError("Chunk size must be positive")
        self.chunk_size = chunk_size
    
    def chunk_at(self, offset: int, file_size: int) -> Optional[ChunkInfo]:
        if offset >= file_size:
            return None
        
        bytes_to_send = min(self.chunk_size, file_size - offset)
        return ChunkInfo(start=offset, end=offset + bytes_to_send, total=file_size)
