"""
Storage services for uploaded images.

Usage:
    from blogapi.services.storage import get_storage_service

    storage = get_storage_service()
    name = await storage.save(generate_blob_name("cover.png"), data)
"""

from functools import lru_cache

from blogapi.services.storage.base import StorageService, generate_blob_name
from blogapi.services.storage.local import LocalStorage


@lru_cache(maxsize=1)
def get_storage_service() -> StorageService:
    """Return the shared storage backend."""
    return LocalStorage()


__all__ = ["LocalStorage", "StorageService", "generate_blob_name", "get_storage_service"]
