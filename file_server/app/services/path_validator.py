import os
from typing import Union
from urllib.parse import unquote

from file_server.exceptions import PathValidationError
from file_server.logger_config import setup_logger

logger = setup_logger()

SEPARATORS = tuple(sep for sep in ("/", os.sep, os.altsep) if sep)
PARENT_TOKEN = ".."


def validate_resource_name(raw_path: Union[str, bytes]) -> str:
    """Turn a raw request path into a single-segment resource name.

    The path is percent-decoded first and checked afterwards, so encoded
    separators (``%2F``) and parent tokens (``%2E%2E``) are rejected too.

    Args:
        raw_path: The request path as received, e.g. ``/photo%20one.png``

    Returns:
        str: The decoded name, e.g. ``photo one.png``

    Raises:
        PathValidationError: If the name is empty, nested, contains ``..``
            or a NUL byte, or does not decode as UTF-8.
    """
    if isinstance(raw_path, bytes):
        raw_path = raw_path.decode("latin-1")

    try:
        pathname = unquote(raw_path, encoding="utf-8", errors="strict")
    except UnicodeDecodeError:
        logger.info(f"Rejected undecodable path: {raw_path!r}")
        raise PathValidationError("Bad request")

    # /file.ext -> file.ext
    name = pathname[1:] if pathname.startswith("/") else pathname

    if not name or "\x00" in name:
        logger.info(f"Rejected empty or malformed name: {raw_path!r}")
        raise PathValidationError("Bad request")

    if any(sep in name for sep in SEPARATORS) or PARENT_TOKEN in name:
        logger.info(f"Rejected nested path: {raw_path!r}")
        raise PathValidationError()

    return name
