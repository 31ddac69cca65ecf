from pathlib import Path

import aiofiles.os

from file_server.logger_config import setup_logger

logger = setup_logger()


class StorageManager:
    def __init__(self, files_root: Path):
        self.files_root = files_root

    async def initialize(self):
        """Create the storage root if needed and report what it holds."""
        logger.info("Initializing storage manager...")

        self.files_root.mkdir(exist_ok=True, parents=True)
        logger.debug(f"Storage directory created/verified: {self.files_root}")

        file_count = sum(1 for entry in self.files_root.iterdir() if entry.is_file())
        logger.info(f"Storage root {self.files_root} holds {file_count} files")

    def get_file_path(self, name: str) -> Path:
        """Get the path where a file is stored. The namespace is flat."""
        return self.files_root / name

    async def discard(self, path: Path) -> None:
        """Delete a partial file. Missing files are fine, other failures are only logged."""
        try:
            await aiofiles.os.remove(path)
            logger.debug(f"Removed partial file {path}")
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove partial file {path}: {e}")
