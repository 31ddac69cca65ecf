"""Errors raised while serving a transfer, each bound to one HTTP outcome."""
from typing import Dict, Optional


class FileServerError(Exception):
    status_code = 500
    message = "Internal error"
    headers: Optional[Dict[str, str]] = None

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail or self.message)
        self.detail = detail or self.message


class PathValidationError(FileServerError):
    """Resource name is empty, nested or tries to leave the storage root."""

    status_code = 400
    message = "Nested paths are not allowed"


class NotFound(FileServerError):
    status_code = 404
    message = "Not found"


class Conflict(FileServerError):
    """Upload target already exists."""

    status_code = 409
    message = "File exists"


class SizeLimitExceeded(FileServerError):
    status_code = 413
    message = "File is too big!"
    # Otherwise some clients keep sending the body into a finished response
    headers = {"Connection": "close"}


class ClientAborted(FileServerError):
    """The peer went away mid-transfer; there is nobody to answer."""

    status_code = 499
    message = "Client closed request"


class StorageIOError(FileServerError):
    status_code = 500
    message = "Internal error"
    # The request body may still be in flight
    headers = {"Connection": "close"}
