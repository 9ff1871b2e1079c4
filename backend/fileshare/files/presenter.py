"""Share-page rendering for stored files.

Files are classified purely by extension, case-insensitively, against an
ordered list of groups. The first matching group wins, so ``ogg`` (listed
under both video and audio) always renders as video.

Every rendered fragment ends with a direct download link.
"""
import html
from pathlib import Path
from typing import Callable, FrozenSet, List, NamedTuple

from .schemas import PreviewKind, StoredFile, split_extension

Renderer = Callable[[StoredFile, Path, int], str]

TRUNCATION_NOTICE = "\n\n[preview truncated]"


class PreviewGroup(NamedTuple):
    kind: PreviewKind
    extensions: FrozenSet[str]
    render: Renderer


def escape_text(text: str) -> str:
    """Escape ``&``, ``<`` and ``>`` only; quotes are left as-is."""
    return html.escape(text, quote=False)


def _source_url(stored: StoredFile) -> str:
    return f"/download/{stored.id}"


def _render_video(stored: StoredFile, path: Path, max_bytes: int) -> str:
    media_type = html.escape(f"video/{stored.extension}")
    return (
        '<video controls style="max-width: 100%; height: auto;">\n'
        f'  <source src="{_source_url(stored)}" type="{media_type}">\n'
        "  Your browser does not support the video tag.\n"
        "</video>"
    )


def _render_image(stored: StoredFile, path: Path, max_bytes: int) -> str:
    return (
        f'<img src="{_source_url(stored)}" alt="uploaded image" '
        'style="max-width: 100%; height: auto;">'
    )


def read_text_preview(path: Path, max_bytes: int) -> str:
    """Read at most ``max_bytes`` of ``path`` as UTF-8.

    Invalid byte sequences (including a multi-byte character cut by the
    limit) are replaced rather than raising.
    """
    with path.open("rb") as fh:
        data = fh.read(max_bytes + 1)
    truncated = len(data) > max_bytes
    text = data[:max_bytes].decode("utf-8", errors="replace")
    if truncated:
        text += TRUNCATION_NOTICE
    return text


def _render_text(stored: StoredFile, path: Path, max_bytes: int) -> str:
    content = escape_text(read_text_preview(path, max_bytes))
    return f'<pre style="white-space: pre-wrap; word-wrap: break-word;">{content}</pre>'


def _render_audio(stored: StoredFile, path: Path, max_bytes: int) -> str:
    media_type = html.escape(f"audio/{stored.extension}")
    return (
        "<audio controls>\n"
        f'  <source src="{_source_url(stored)}" type="{media_type}">\n'
        "  Your browser does not support the audio tag.\n"
        "</audio>"
    )


def _render_other(stored: StoredFile, path: Path, max_bytes: int) -> str:
    return "<p>Preview is not available for this file type.</p>"


# Evaluated in order; the first match wins.
PREVIEW_GROUPS: List[PreviewGroup] = [
    PreviewGroup(PreviewKind.VIDEO, frozenset({"mp4", "webm", "ogg"}), _render_video),
    PreviewGroup(
        PreviewKind.IMAGE,
        frozenset({"png", "jpg", "jpeg", "gif", "bmp", "webp", "svg"}),
        _render_image,
    ),
    PreviewGroup(
        PreviewKind.TEXT,
        frozenset({"txt", "md", "html", "css", "js", "json", "csv"}),
        _render_text,
    ),
    PreviewGroup(PreviewKind.AUDIO, frozenset({"mp3", "wav", "ogg", "m4a"}), _render_audio),
]

FALLBACK_GROUP = PreviewGroup(PreviewKind.OTHER, frozenset(), _render_other)

DOWNLOAD_LABELS = {
    PreviewKind.VIDEO: "Download this video",
    PreviewKind.IMAGE: "Download this image",
    PreviewKind.TEXT: "Download this file",
    PreviewKind.AUDIO: "Download this audio",
    PreviewKind.OTHER: "Download this file",
}


def _match(stored_name: str) -> PreviewGroup:
    extension = split_extension(stored_name).lstrip(".").lower()
    for group in PREVIEW_GROUPS:
        if extension in group.extensions:
            return group
    return FALLBACK_GROUP


def classify(stored_name: str) -> PreviewKind:
    """Return the preview kind for a stored filename.

    Examples:
        >>> classify("abc.OGG")
        <PreviewKind.VIDEO: 'video'>
        >>> classify("abc.tar.gz")
        <PreviewKind.OTHER: 'other'>
    """
    return _match(stored_name).kind


def render_preview(stored: StoredFile, path: Path, download_url: str, max_bytes: int) -> str:
    """Render the share-page body for a stored file.

    Args:
        stored: The registered file
        path: Its location on disk (read only for text previews)
        download_url: Absolute URL of the file's download route
        max_bytes: Upper bound on bytes read for a text preview

    Returns:
        HTML fragment: the inline preview followed by a download link
    """
    group = _match(stored.stored_name)
    body = group.render(stored, path, max_bytes)
    label = DOWNLOAD_LABELS[group.kind]
    return f'{body}\n<br/>\n<a href="{html.escape(download_url)}">{label}</a>'
