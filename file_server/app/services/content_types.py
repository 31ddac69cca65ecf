import mimetypes
from pathlib import Path
from typing import Union

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def resolve_content_type(path: Union[str, Path]) -> str:
    """Map a filename to a media type by its extension."""
    guessed_type, _ = mimetypes.guess_type(str(path))
    return guessed_type or DEFAULT_CONTENT_TYPE
