"""
Storage service protocol.

Blobs are addressed by a generated name. Records keep that name and the
file is served back under ``/uploads/<name>``.
"""

from pathlib import PurePath
from typing import Protocol
from uuid import uuid4


def generate_blob_name(filename: str | None) -> str:
    """
    Build a unique blob name from a client filename.

    A random identifier is prefixed to the final path component, so the
    name never escapes the uploads directory.

    Args:
        filename: Original filename sent by the client

    Returns:
        str: Name to store the blob under
    """
    original = PurePath(filename or "").name.replace("\\", "_")
    return f"{uuid4().hex}{original or 'upload'}"


class StorageService(Protocol):
    """Protocol for blob storage backends."""

    async def save(self, name: str, data: bytes) -> str:
        """
        Persist ``data`` under ``name``.

        Returns:
            str: The stored name
        """
        ...

    async def delete(self, name: str) -> bool:
        """
        Remove a stored blob.

        Returns:
            bool: True if a blob was removed
        """
        ...

    async def exists(self, name: str) -> bool:
        """Return True when a blob is stored under ``name``."""
        ...
