"""In-memory registry mapping short ids to stored filenames.

The registry lives for the lifetime of the process: entries are added on each
successful upload, never removed, and lost on restart.

Ids go through two states. ``reserve`` claims a fresh id atomically so two
concurrent uploads can never draw the same one; ``commit`` publishes it once
the bytes are on disk. Only committed ids are visible to ``get``.
"""
import logging
import threading
from typing import Callable, Dict, Set

logger = logging.getLogger(__name__)

MAX_RESERVE_ATTEMPTS = 16


class FileNotRegisteredError(KeyError):
    """Raised when an id has no committed entry."""


class IdExhaustedError(RuntimeError):
    """Raised when no unused id could be drawn."""


class FileRegistry:
    """Thread-safe id -> stored filename mapping."""

    def __init__(self) -> None:
        self._entries: Dict[str, str] = {}
        self._reserved: Set[str] = set()
        self._lock = threading.Lock()

    def __contains__(self, file_id: object) -> bool:
        with self._lock:
            return file_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def put(self, file_id: str, stored_name: str) -> None:
        """Insert or overwrite the entry for ``file_id``."""
        with self._lock:
            self._entries[file_id] = stored_name
            self._reserved.discard(file_id)

    def get(self, file_id: str) -> str:
        """Return the stored filename for ``file_id``.

        Raises:
            FileNotRegisteredError: If the id was never committed.
        """
        with self._lock:
            try:
                return self._entries[file_id]
            except KeyError:
                raise FileNotRegisteredError(file_id) from None

    def reserve(self, generate: Callable[[], str], attempts: int = MAX_RESERVE_ATTEMPTS) -> str:
        """Draw ids from ``generate`` until one is free, and claim it.

        Args:
            generate: Zero-argument id factory.
            attempts: How many candidates to try before giving up.

        Returns:
            The reserved id.

        Raises:
            IdExhaustedError: If every candidate collided.
        """
        with self._lock:
            for _ in range(attempts):
                candidate = generate()
                if candidate in self._entries or candidate in self._reserved:
                    logger.warning("Short id collision on %s, retrying", candidate)
                    continue
                self._reserved.add(candidate)
                return candidate
        raise IdExhaustedError(f"No free id after {attempts} attempts")

    def commit(self, file_id: str, stored_name: str) -> None:
        """Publish a reserved id."""
        self.put(file_id, stored_name)

    def release(self, file_id: str) -> None:
        """Drop a reservation that will never be committed."""
        with self._lock:
            self._reserved.discard(file_id)
