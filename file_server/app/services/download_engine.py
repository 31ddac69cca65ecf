import asyncio
from pathlib import Path
from typing import AsyncIterator

import aiofiles

from file_server.app.services.content_types import resolve_content_type
from file_server.app.services.transfer_session import Outcome, TransferSession
from file_server.exceptions import NotFound, StorageIOError
from file_server.logger_config import setup_logger

logger = setup_logger()


class Download:
    """An opened file ready to be streamed to one client."""

    def __init__(self, session: TransferSession, file, content_type: str, chunk_size: int):
        self.session = session
        self.content_type = content_type
        self._file = file
        self._chunk_size = chunk_size
        self.body: AsyncIterator[bytes] = self._stream()

    async def _stream(self) -> AsyncIterator[bytes]:
        session = self.session
        try:
            while chunk := await self._file.read(self._chunk_size):
                session.record(len(chunk))
                yield chunk
        except OSError:
            # Headers are already out, the server can only drop the connection
            if session.commit(Outcome.INTERNAL_ERROR):
                logger.error(
                    f"Read failed after {session.bytes_transferred} bytes of {session.target}",
                    exc_info=True,
                )
            raise
        except (GeneratorExit, asyncio.CancelledError):
            if session.commit(Outcome.CLIENT_ABORTED):
                logger.info(f"Client went away while downloading {session.target.name}")
            raise
        else:
            session.commit(Outcome.SUCCESS)
            logger.debug(f"Sent {session.bytes_transferred} bytes of {session.target}")
        finally:
            await self._file.close()
            session.finish()

    async def close(self) -> None:
        """Stop streaming and release the file. Safe to call more than once."""
        await self.body.aclose()
        # The body may never have been iterated
        if self.session.commit(Outcome.CLIENT_ABORTED):
            logger.info(f"Download of {self.session.target.name} ended before streaming")
        await self._file.close()
        self.session.finish()


class DownloadEngine:
    def __init__(self, chunk_size: int = 64 * 1024):
        self.chunk_size = chunk_size

    async def open(self, path: Path) -> Download:
        """
        Open a file for streaming. Nothing is sent to the client here, so
        open failures can still be reported with a proper status code.

        Args:
            path: Absolute path of the file to send

        Raises:
            NotFound: If the file does not exist
            StorageIOError: If the file cannot be opened for any other reason
        """
        session = TransferSession(path)
        try:
            file = await aiofiles.open(path, "rb")
        except FileNotFoundError:
            session.commit(Outcome.NOT_FOUND)
            session.finish()
            logger.info(f"File not found: {path}")
            raise NotFound()
        except OSError as e:
            session.commit(Outcome.INTERNAL_ERROR)
            session.finish()
            logger.error(f"Error opening {path}: {str(e)}", exc_info=True)
            raise StorageIOError() from e

        session.start()
        return Download(session, file, resolve_content_type(path), self.chunk_size)
