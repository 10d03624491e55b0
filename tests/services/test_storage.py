# tests/services/test_storage.py
"""Tests for the blob store."""

from pathlib import Path
from typing import Any
from unittest.mock import patch

import aiofiles
import pytest

from blogapi.configs import settings
from blogapi.errors import StorageError
from blogapi.services.storage import LocalStorage, generate_blob_name


class TestGenerateBlobName:
    def test_keeps_original_name_as_suffix(self) -> None:
        name = generate_blob_name("cover.png")
        assert name.endswith("cover.png")
        assert len(name) == 32 + len("cover.png")

    def test_names_are_unique(self) -> None:
        assert generate_blob_name("a.png") != generate_blob_name("a.png")

    def test_strips_directories(self) -> None:
        name = generate_blob_name("../../etc/passwd")
        assert "/" not in name
        assert name.endswith("passwd")

    def test_missing_filename(self) -> None:
        assert generate_blob_name(None).endswith("upload")


class TestLocalStorage:
    """Tests for LocalStorage service."""

    @pytest.fixture
    def local_storage(self, tmp_path: Path) -> LocalStorage:
        return LocalStorage(base_path=tmp_path)

    @pytest.mark.asyncio
    async def test_save_and_delete(self, local_storage: LocalStorage, tmp_path: Path) -> None:
        name = await local_storage.save("abc.png", b"data")

        assert name == "abc.png"
        assert (tmp_path / "abc.png").read_bytes() == b"data"
        assert await local_storage.exists("abc.png")

        assert await local_storage.delete("abc.png") is True
        assert not await local_storage.exists("abc.png")

    @pytest.mark.asyncio
    async def test_delete_missing_blob(self, local_storage: LocalStorage) -> None:
        assert await local_storage.delete("never-stored.png") is False

    @pytest.mark.asyncio
    async def test_refuses_paths_outside_base(self, local_storage: LocalStorage) -> None:
        with pytest.raises(StorageError):
            await local_storage.save("../escape.png", b"data")

    @pytest.mark.asyncio
    async def test_retries_transient_errors(self, local_storage: LocalStorage, tmp_path: Path) -> None:
        real_open = aiofiles.open
        attempts = 0

        def flaky_open(*args: Any, **kwargs: Any) -> Any:
            nonlocal attempts
            attempts += 1
            if attempts == 1:
                msg = "device busy"
                raise OSError(msg)
            return real_open(*args, **kwargs)

        with patch("blogapi.services.storage.local.aiofiles.open", side_effect=flaky_open):
            await local_storage.save("retry.png", b"data")

        assert attempts == 2
        assert (tmp_path / "retry.png").exists()

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self, local_storage: LocalStorage) -> None:
        with (
            patch(
                "blogapi.services.storage.local.aiofiles.open",
                side_effect=OSError("disk full"),
            ) as mock_open,
            pytest.raises(StorageError),
        ):
            await local_storage.save("never.png", b"data")

        assert mock_open.call_count == settings.UPLOAD_MAX_RETRIES
