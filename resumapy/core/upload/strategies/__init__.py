"""Chunking strategies."""
from .chunking import BaseChunkingStrategy, FixedSizeChunkingStrategy

__all__ = [
    'BaseChunkingStrategy',
    'FixedSizeChunkingStrategy',
]
