"""File storage service for Fileshare.

Handles file storage on disk and the short-id registry.
Files are stored in: {upload_dir}/{id}{ext}
"""
import logging
import secrets
import shutil
from pathlib import Path
from typing import BinaryIO, Optional

from fileshare.config import get_config

from .registry import FileNotRegisteredError, FileRegistry
from .schemas import StoredFile

logger = logging.getLogger(__name__)

# token_urlsafe(6) yields 8 characters from [A-Za-z0-9_-]
SHORT_ID_BYTES = 6


def generate_short_id() -> str:
    """Generate a compact, URL-safe, unguessable file id."""
    return secrets.token_urlsafe(SHORT_ID_BYTES)


class FileStorageService:
    """Service for managing uploads and their short ids."""

    _instance: Optional["FileStorageService"] = None
    _upload_dir: str = "uploads"

    def __init__(self, upload_dir: Optional[str] = None, registry: Optional[FileRegistry] = None):
        """Initialize the storage service and create the upload directory."""
        if upload_dir:
            self._upload_dir = upload_dir
        self.registry = registry if registry is not None else FileRegistry()
        self._ensure_upload_dir()

    @classmethod
    def get_instance(cls, upload_dir: Optional[str] = None) -> "FileStorageService":
        """Get or create the singleton instance."""
        if cls._instance is None:
            cls._instance = cls(upload_dir)
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance (for testing)."""
        cls._instance = None

    @property
    def upload_dir(self) -> Path:
        return Path(self._upload_dir)

    def _ensure_upload_dir(self) -> None:
        """Ensure the upload directory exists."""
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def save_upload(self, filename: str, source: BinaryIO) -> StoredFile:
        """Stream an upload to disk and register it under a new short id.

        The id is reserved before writing and only becomes visible to
        lookups after every byte has been written.

        Args:
            filename: Original filename, used only for its extension
            source: Readable binary file object with the upload's bytes

        Returns:
            The registered StoredFile

        Raises:
            IdExhaustedError: If no free id could be drawn
            OSError: If the file could not be written
        """
        file_id = self.registry.reserve(generate_short_id)
        stored = StoredFile.for_upload(file_id, filename)
        file_path = self.upload_dir / stored.stored_name

        try:
            with file_path.open("wb") as dst:
                shutil.copyfileobj(source, dst)
        except Exception:
            self.registry.release(file_id)
            file_path.unlink(missing_ok=True)
            raise

        self.registry.commit(file_id, stored.stored_name)
        logger.info(f"Saved file: {file_path} ({file_path.stat().st_size} bytes)")
        return stored

    def get_file(self, file_id: str) -> StoredFile:
        """Look up a registered file by id.

        Raises:
            FileNotRegisteredError: If the id is unknown
        """
        return StoredFile(id=file_id, stored_name=self.registry.get(file_id))

    def get_file_path(self, stored: StoredFile) -> Path:
        """Get the on-disk path of a registered file.

        Raises:
            FileNotRegisteredError: If the file is no longer on disk
        """
        file_path = self.upload_dir / stored.stored_name
        if not file_path.is_file():
            logger.warning("Registered file %s missing from disk", file_path)
            raise FileNotRegisteredError(stored.id)
        return file_path


def get_file_service() -> FileStorageService:
    """FastAPI dependency returning the process-wide storage service."""
    return FileStorageService.get_instance(get_config().storage.upload_dir)
