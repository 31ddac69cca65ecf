"""Configuration settings for the file server."""
import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Directory paths
FILES_ROOT = os.getenv("FILE_SERVER_FILES_ROOT", "./files")
PUBLIC_ROOT = os.getenv("FILE_SERVER_PUBLIC_ROOT", "./public")
LOG_DIR = os.getenv("FILE_SERVER_LOG_DIR", "./logs")

# Console log level; the log file always records DEBUG
LOG_LEVEL = os.getenv("FILE_SERVER_LOG_LEVEL", "INFO")

# Transfer limits
LIMIT_FILE_SIZE = int(os.getenv("FILE_SERVER_LIMIT_FILE_SIZE", 1024 * 1024))  # 1MB
CHUNK_SIZE = int(os.getenv("FILE_SERVER_CHUNK_SIZE", 64 * 1024))  # 64KB

# Network
HOST = os.getenv("FILE_SERVER_HOST", "127.0.0.1")
PORT = int(os.getenv("FILE_SERVER_PORT", 3000))


class Settings(BaseModel):
    """Immutable runtime settings, read once at startup."""

    model_config = ConfigDict(frozen=True)

    files_root: Path
    public_root: Path
    limit_file_size: int = Field(ge=0)
    chunk_size: int = Field(default=64 * 1024, gt=0)

    @field_validator("files_root", "public_root")
    @classmethod
    def make_absolute(cls, v: Path) -> Path:
        return Path(v).expanduser().resolve()


def load_settings() -> Settings:
    return Settings(
        files_root=FILES_ROOT,
        public_root=PUBLIC_ROOT,
        limit_file_size=LIMIT_FILE_SIZE,
        chunk_size=CHUNK_SIZE,
    )
