from enum import Enum
from pathlib import Path
from typing import Optional


class SessionState(str, Enum):
    OPENING = "opening"
    TRANSFERRING = "transferring"
    ABORTING = "aborting"
    COMPLETED = "completed"


class Outcome(Enum):
    SUCCESS = (200, "OK")
    TOO_LARGE = (413, "File is too big!")
    CONFLICT = (409, "File exists")
    NOT_FOUND = (404, "Not found")
    CLIENT_ABORTED = (499, "Client closed request")
    INTERNAL_ERROR = (500, "Internal error")

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message


class TransferSession:
    def __init__(self, target: Path, limit: Optional[int] = None):
        """
        State of a single transfer, owned by the request that created it.

        Args:
            target: File being read or written
            limit: Byte ceiling for uploads, None for downloads
        """
        self.target = target
        self.limit = limit
        self.bytes_transferred = 0
        self.state = SessionState.OPENING
        self.outcome: Optional[Outcome] = None

    @property
    def committed(self) -> bool:
        return self.outcome is not None

    def start(self) -> None:
        """Move from opening to transferring once the file handle is ready."""
        if self.state is not SessionState.OPENING:
            raise RuntimeError(f"Cannot start transfer in state {self.state.value}")
        self.state = SessionState.TRANSFERRING

    def record(self, size: int) -> bool:
        """
        Add size bytes to the running total.

        Returns:
            bool: True if the total now exceeds the ceiling
        """
        self.bytes_transferred += size
        return self.limit is not None and self.bytes_transferred > self.limit

    def commit(self, outcome: Outcome) -> bool:
        """
        Fix the outcome of this session. Only the first call has an effect.

        Returns:
            bool: True if this call committed the outcome, False if one was
            already committed
        """
        if self.outcome is not None:
            return False
        self.outcome = outcome
        if outcome is Outcome.SUCCESS:
            self.state = SessionState.COMPLETED
        else:
            self.state = SessionState.ABORTING
        return True

    def finish(self) -> None:
        """Mark abort cleanup as done."""
        self.state = SessionState.COMPLETED

    def __repr__(self) -> str:
        outcome = self.outcome.name if self.outcome else None
        return (
            f"TransferSession(target={str(self.target)!r}, state={self.state.value}, "
            f"bytes={self.bytes_transferred}, outcome={outcome})"
        )
