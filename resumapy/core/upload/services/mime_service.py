"""MIME type detection."""
import mimetypes
from pathlib import Path
from typing import Union

from ..models import DEFAULT_MIME_TYPE


class MimeTypeResolver:
    """Guesses a file's MIME type from its name."""
    
    def __init__(self, default: str = DEFAULT_MIME_TYPE):
        self._default = default
    
    def guess_type(self, file_path: Union[str, Path]) -> str:
        mime_type, _ = mimetypes.guess_type(str(file_path))
        return mime_type or self._default
