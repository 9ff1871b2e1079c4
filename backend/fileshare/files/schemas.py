"""Pydantic schemas for shared files.

This module defines the data models for file sharing:
- StoredFile: a registered upload, addressed by its short id
- PreviewKind: Enum for how a file is shown on its share page

Files are stored flat in the upload directory as ``{id}{ext}``, where ``ext``
is the extension of the original upload with its case preserved.
"""
import os
from enum import Enum

from pydantic import BaseModel, Field


class PreviewKind(str, Enum):
    """How a stored file is presented on its share page.

    - VIDEO: inline <video> player
    - IMAGE: inline <img>
    - TEXT: escaped contents inside <pre>
    - AUDIO: inline <audio> player
    - OTHER: download link only
    """
    VIDEO = "video"
    IMAGE = "image"
    TEXT = "text"
    AUDIO = "audio"
    OTHER = "other"


def split_extension(filename: str) -> str:
    """Return the extension of ``filename`` including its dot, or "".

    Only the last suffix counts and dot-files such as ``.bashrc`` have none.
    """
    return os.path.splitext(os.path.basename(filename))[1]


class StoredFile(BaseModel):
    """A file registered under a short id.

    The stored name is the only name the service keeps; the original upload
    filename is discarded after its extension has been taken.
    """
    id: str = Field(..., description="Short URL-safe file ID")
    stored_name: str = Field(..., description="Filename on disk ({id}{ext})")

    @classmethod
    def for_upload(cls, file_id: str, original_filename: str) -> "StoredFile":
        return cls(id=file_id, stored_name=f"{file_id}{split_extension(original_filename)}")

    @property
    def extension(self) -> str:
        """Lower-cased extension without the dot."""
        return split_extension(self.stored_name).lstrip(".").lower()
