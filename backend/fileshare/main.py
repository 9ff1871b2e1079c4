"""Fileshare Backend Application.

This is the main entry point for the Fileshare service: upload a file, get a
short link, and share it. The link previews known media and text types or
offers a download.

Modules:
    - files: uploads, short-id registry, share pages and downloads
    - config: YAML-backed settings

Routes:
    - POST /upload, GET /f/{id}, GET /download/{id}
    - GET /health
    - everything else: static files from the public directory
"""
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from fileshare.config import get_config
from fileshare.files.router import router as files_router
from fileshare.files.service import FileStorageService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

# Silence per-part multipart parser logs (module name differs by release).
for _noisy in ("multipart", "python_multipart"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown events."""
    # Startup
    config = get_config()

    configured_level = getattr(logging, config.logging.level.upper(), None)
    if configured_level is not None:
        logging.getLogger().setLevel(configured_level)
        logger.info("Root logger level set to %s", config.logging.level.upper())

    service = FileStorageService.get_instance(config.storage.upload_dir)
    logger.info("Storing uploads in %s", service.upload_dir)

    yield  # Application runs here

    # Shutdown
    logger.info("Application shutdown complete")


# Create FastAPI application with metadata
app = FastAPI(
    title="Fileshare API",
    description="Upload a file and share it by short link",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(files_router)


@app.get("/health")
async def health() -> dict:
    """Health check endpoint.

    Returns:
        dict: Status object indicating the server is running.
    """
    return {"status": "ok"}


# Mounted last so the routes above take precedence over "/"
app.mount(
    "/",
    StaticFiles(directory=get_config().storage.public_dir, html=True),
    name="public",
)


def run() -> None:
    """Run the server on the configured host and port."""
    config = get_config()
    logger.info(f"Server running on http://{config.server.host}:{config.server.port}")
    uvicorn.run(app, host=config.server.host, port=config.server.port)


if __name__ == "__main__":
    run()
