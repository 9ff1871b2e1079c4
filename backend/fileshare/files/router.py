"""FastAPI router for upload, share-page and download endpoints."""
import asyncio
import html
import logging
from pathlib import Path
from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse, HTMLResponse, PlainTextResponse
from starlette.datastructures import UploadFile

from fileshare.config import get_config

from .presenter import render_preview
from .registry import FileNotRegisteredError
from .service import FileStorageService, get_file_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["files"])

# HTML template directory
TEMPLATES_DIR = Path(__file__).parent / "templates"

MISSING_FILE_MESSAGE = "No file was uploaded"
NOT_FOUND_MESSAGE = "File not found"


def _base_url(request: Request) -> str:
    # {scheme}://{host} as seen by the client
    return str(request.base_url).rstrip("/")


def get_share_url(request: Request, file_id: str) -> str:
    """Generate the share-page URL for a file."""
    return f"{_base_url(request)}/f/{file_id}"


def get_download_url(request: Request, file_id: str) -> str:
    """Generate the download URL for a file."""
    return f"{_base_url(request)}/download/{file_id}"


def _not_found() -> PlainTextResponse:
    return PlainTextResponse(NOT_FOUND_MESSAGE, status_code=404)


@router.post("/upload", response_class=HTMLResponse)
async def upload_file(
    request: Request,
    service: FileStorageService = Depends(get_file_service),
):
    """Store an uploaded file and answer with its share link.

    Any content is accepted; there is no size or type check. The ``file``
    form field must be a file part: a missing field, a plain text value or
    a file part without a filename all answer 400.

    Returns:
        HTMLResponse with the share URL, or 400 if no file part was sent
    """
    async with request.form() as form:
        file = form.get("file")
        if not isinstance(file, UploadFile) or not file.filename:
            logger.info("Upload rejected: no file part")
            return PlainTextResponse(MISSING_FILE_MESSAGE, status_code=400)

        stored = await asyncio.to_thread(service.save_upload, file.filename, file.file)

    share_url = get_share_url(request, stored.id)
    logger.info(f"File uploaded: {file.filename} stored as {stored.stored_name}")

    template = (TEMPLATES_DIR / "uploaded.html").read_text(encoding="utf-8")
    content = template.replace("{{ share_url }}", html.escape(share_url))
    return HTMLResponse(content=content)


@router.get("/f/{file_id}", response_class=HTMLResponse)
async def preview_file(
    request: Request,
    file_id: str,
    service: FileStorageService = Depends(get_file_service),
):
    """Serve the share page for a file.

    Known video, image, text and audio types are shown inline; anything
    else only gets a download link. Unknown ids answer 404 as plain text.
    """
    try:
        stored = service.get_file(file_id)
        file_path = service.get_file_path(stored)
    except FileNotRegisteredError:
        logger.info("Preview miss for id %s", file_id)
        return _not_found()

    # Text previews read from disk
    fragment = await asyncio.to_thread(
        render_preview,
        stored,
        file_path,
        download_url=get_download_url(request, file_id),
        max_bytes=get_config().storage.preview_max_bytes,
    )

    template = (TEMPLATES_DIR / "preview.html").read_text(encoding="utf-8")
    return HTMLResponse(content=template.replace("{{ content }}", fragment))


@router.get("/download/{file_id}")
async def download_file(
    file_id: str,
    service: FileStorageService = Depends(get_file_service),
):
    """Download a file by ID.

    The attachment is named after the stored ``{id}{ext}`` filename; the
    original upload name is not kept.
    """
    try:
        stored = service.get_file(file_id)
        file_path = service.get_file_path(stored)
    except FileNotRegisteredError:
        logger.info("Download miss for id %s", file_id)
        return _not_found()

    return FileResponse(path=file_path, filename=stored.stored_name)
