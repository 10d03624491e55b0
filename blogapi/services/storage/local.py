"""
Local filesystem storage implementation.

Files are written flat under the configured uploads directory.
"""

from pathlib import Path

import aiofiles
from aiofiles import os as aio_os

from blogapi.configs.settings import settings
from blogapi.decorators.with_retry import with_retry
from blogapi.errors.upload import StorageError
from blogapi.monitoring import get_logger

logger = get_logger(__name__)


class LocalStorage:
    """Store uploaded blobs on the local filesystem."""

    def __init__(self, base_path: Path | None = None) -> None:
        self.base_path = base_path or settings.UPLOADS_DIR
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _get_file_path(self, name: str) -> Path:
        path = (self.base_path / name).resolve()
        if path.parent != self.base_path.resolve():
            mssg = f"Refusing to store outside uploads directory: {name!r}"
            raise StorageError(mssg)
        return path

    async def save(self, name: str, data: bytes) -> str:
        """
        Write a blob, retrying transient filesystem errors.

        Args:
            name: Generated blob name
            data: Raw file bytes

        Returns:
            str: The stored name

        Raises:
            StorageError: If the write still fails after all retries
        """
        file_path = self._get_file_path(name)
        try:
            await self._write(file_path, data)
        except OSError as e:
            logger.exception(f"Failed to store blob {name}")
            raise StorageError from e
        logger.info(f"Stored blob {name} ({len(data)} bytes)")
        return name

    @with_retry(max_retries=settings.UPLOAD_MAX_RETRIES, exec_retry=OSError)
    async def _write(self, file_path: Path, data: bytes) -> None:
        async with aiofiles.open(file_path, "wb") as f:
            await f.write(data)

    async def delete(self, name: str) -> bool:
        """
        Remove a blob if it exists.

        Args:
            name: Stored blob name

        Returns:
            bool: True if a file was removed, False otherwise
        """
        file_path = self._get_file_path(name)
        try:
            await aio_os.remove(file_path)
        except FileNotFoundError:
            return False
        logger.info(f"Deleted blob {name}")
        return True

    async def exists(self, name: str) -> bool:
        return await aio_os.path.exists(self._get_file_path(name))
