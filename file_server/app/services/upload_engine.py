import asyncio
from typing import AsyncIterator

import aiofiles

from file_server.app.services.storage_manager import StorageManager
from file_server.app.services.transfer_session import Outcome, TransferSession
from file_server.exceptions import ClientAborted, Conflict, SizeLimitExceeded, StorageIOError
from file_server.logger_config import setup_logger

logger = setup_logger()


class UploadEngine:
    def __init__(self, storage_manager: StorageManager, limit_file_size: int):
        self.storage_manager = storage_manager
        self.limit_file_size = limit_file_size

    async def receive(self, name: str, chunks: AsyncIterator[bytes]) -> TransferSession:
        """Store an inbound byte stream as a new file.

        The target is created with an exclusive-create open, so an existing
        file, or one another request is still writing, is never touched. Any
        failure after the create removes the partial file.

        Args:
            name: Validated resource name
            chunks: The request body

        Returns:
            TransferSession: The completed session

        Raises:
            Conflict: If the target already exists
            SizeLimitExceeded: If the body is larger than the ceiling
            ClientAborted: If the client disconnected before the end of the body
            StorageIOError: If creating or writing the file failed
        """
        target = self.storage_manager.get_file_path(name)
        session = TransferSession(target, limit=self.limit_file_size)
        logger.info(f"Receiving upload request for {name}")

        try:
            file = await aiofiles.open(target, "xb")
        except FileExistsError:
            session.commit(Outcome.CONFLICT)
            session.finish()
            logger.info(f"Upload target already exists: {name}")
            raise Conflict()
        except OSError as e:
            # A failed exclusive create leaves nothing of ours on disk
            session.commit(Outcome.INTERNAL_ERROR)
            session.finish()
            logger.error(f"Error creating {target}: {str(e)}", exc_info=True)
            raise StorageIOError() from e

        session.start()
        try:
            try:
                async for chunk in chunks:
                    if session.record(len(chunk)):
                        raise SizeLimitExceeded()
                    if chunk:
                        await file.write(chunk)
            finally:
                await file.close()
        except SizeLimitExceeded:
            logger.warning(
                f"Upload of {name} exceeded {self.limit_file_size} bytes, aborting"
            )
            await self._abort(session, Outcome.TOO_LARGE)
            raise
        except ClientAborted:
            logger.info(
                f"Client disconnected after {session.bytes_transferred} bytes of {name}"
            )
            await self._abort(session, Outcome.CLIENT_ABORTED)
            raise
        except asyncio.CancelledError:
            logger.info(f"Upload of {name} cancelled")
            await asyncio.shield(self._abort(session, Outcome.CLIENT_ABORTED))
            raise
        except OSError as e:
            logger.error(f"Error writing {target}: {str(e)}", exc_info=True)
            await self._abort(session, Outcome.INTERNAL_ERROR)
            raise StorageIOError() from e

        # The handle is closed at this point, so the data has been flushed
        session.commit(Outcome.SUCCESS)
        logger.info(f"Stored {name} ({session.bytes_transferred} bytes)")
        return session

    async def _abort(self, session: TransferSession, outcome: Outcome) -> None:
        if not session.commit(outcome):
            logger.debug(f"{session!r} already committed, ignoring {outcome.name}")
            return
        await self.storage_manager.discard(session.target)
        session.finish()
