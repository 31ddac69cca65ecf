from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
from urllib.parse import quote

import uvicorn
from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import PlainTextResponse, StreamingResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import ClientDisconnect

from file_server import config
from file_server.app.services.download_engine import Download, DownloadEngine
from file_server.app.services.path_validator import validate_resource_name
from file_server.app.services.storage_manager import StorageManager
from file_server.app.services.upload_engine import UploadEngine
from file_server.config import Settings, load_settings
from file_server.exceptions import ClientAborted, FileServerError
from file_server.logger_config import setup_logger

# Logger setup
logger = setup_logger()

LANDING_PAGE = "index.html"

router = APIRouter()


class FileStreamResponse(StreamingResponse):
    """Streaming response that always releases the file it reads from."""

    def __init__(self, download: Download):
        super().__init__(download.body, media_type=download.content_type)
        self.download = download

    async def __call__(self, scope, receive, send):
        try:
            await super().__call__(scope, receive, send)
        except ClientDisconnect:
            # Not a server fault, the download is closed below
            logger.debug(f"Client disconnected from {self.download.session.target.name}")
        finally:
            await self.download.close()


def get_raw_path(request: Request) -> bytes:
    """Path as sent by the client, before any percent-decoding."""
    raw_path = request.scope.get("raw_path")
    if not raw_path:
        return quote(request.scope["path"]).encode("ascii")
    return raw_path.split(b"?", 1)[0]


async def request_chunks(request: Request) -> AsyncIterator[bytes]:
    """Request body, one chunk at a time, as the server receives it."""
    try:
        async for chunk in request.stream():
            yield chunk
    except ClientDisconnect:
        raise ClientAborted()


@router.get("/")
async def get_landing_page(request: Request):
    """Serve the landing page from the public directory."""
    settings = request.app.state.settings
    download_engine = request.app.state.download_engine
    download = await download_engine.open(settings.public_root / LANDING_PAGE)
    return FileStreamResponse(download)


@router.get("/{name:path}")
async def download_file(request: Request):
    """Stream a stored file back to the client."""
    filename = validate_resource_name(get_raw_path(request))
    logger.info(f"Receiving download request for {filename}")

    storage_manager = request.app.state.storage_manager
    download_engine = request.app.state.download_engine
    download = await download_engine.open(storage_manager.get_file_path(filename))
    return FileStreamResponse(download)


@router.post("/{name:path}")
async def upload_file(request: Request):
    """Store the raw request body under the given name. Existing files are never replaced."""
    filename = validate_resource_name(get_raw_path(request))

    upload_engine = request.app.state.upload_engine
    await upload_engine.receive(filename, request_chunks(request))
    return PlainTextResponse("OK")


async def file_server_error_handler(request: Request, exc: FileServerError):
    if isinstance(exc, ClientAborted):
        # The connection is gone; the server drops whatever is returned here
        logger.debug(f"No response for aborted request {request.url.path}")
    return PlainTextResponse(exc.detail, status_code=exc.status_code, headers=exc.headers)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return PlainTextResponse(
        str(exc.detail), status_code=exc.status_code, headers=getattr(exc, "headers", None)
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application around an explicit, immutable settings value."""
    settings = settings or load_settings()
    storage_manager = StorageManager(settings.files_root)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await storage_manager.initialize()
        yield

    app = FastAPI(title="File Server", lifespan=lifespan)
    app.state.settings = settings
    app.state.storage_manager = storage_manager
    app.state.upload_engine = UploadEngine(storage_manager, settings.limit_file_size)
    app.state.download_engine = DownloadEngine(settings.chunk_size)

    app.include_router(router)
    app.add_exception_handler(FileServerError, file_server_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    return app


app = create_app()


def run():
    settings = app.state.settings
    logger.info("Starting file server...")
    logger.info(f"Files directory: {settings.files_root}")
    logger.info(f"Public directory: {settings.public_root}")
    logger.info(f"Upload limit: {settings.limit_file_size / (1024*1024):.2f} MB")
    uvicorn.run(app, host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    run()
