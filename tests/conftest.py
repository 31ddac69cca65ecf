import pytest
from fastapi.testclient import TestClient

from file_server.app.services.storage_manager import StorageManager
from file_server.config import Settings
from file_server.main import create_app

TEST_LIMIT_FILE_SIZE = 10 * 1024  # 10KB
TEST_CHUNK_SIZE = 1024
LANDING_CONTENT = b"<h1>File Server</h1>"


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at isolated directories for each test."""
    files_root = tmp_path / "files"
    public_root = tmp_path / "public"
    files_root.mkdir()
    public_root.mkdir()
    (public_root / "index.html").write_bytes(LANDING_CONTENT)

    return Settings(
        files_root=files_root,
        public_root=public_root,
        limit_file_size=TEST_LIMIT_FILE_SIZE,
        chunk_size=TEST_CHUNK_SIZE,
    )


@pytest.fixture
def files_root(settings):
    return settings.files_root


@pytest.fixture
def storage_manager(settings):
    return StorageManager(settings.files_root)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
