import asyncio
from pathlib import Path
from unittest.mock import patch

import pytest

from src.image_hosting_service.app.core.exceptions import (
    StorageError,
    StorageKeyExistsError,
)
from src.image_hosting_service.app.services.file_storage import FileStorageService


class TestFileStorageService:
    def test_init_creates_root_directory(self, test_settings):
        root = Path(test_settings.absolute_images_dir)
        assert not root.exists()

        FileStorageService(settings=test_settings)

        assert root.is_dir()

    def test_public_url(self, file_storage):
        assert file_storage.public_url("abc123.png") == (
            "http://cdn.test/static/images/abc123.png"
        )


class TestSave:
    async def test_save_writes_bytes(self, file_storage, png_bytes):
        key = await file_storage.save("abc123.png", png_bytes)

        assert key == "abc123.png"
        assert (file_storage.root_dir / key).read_bytes() == png_bytes

    async def test_save_never_overwrites(self, file_storage, png_bytes, jpeg_bytes):
        await file_storage.save("abc123.png", png_bytes)

        with pytest.raises(StorageKeyExistsError):
            await file_storage.save("abc123.png", jpeg_bytes)

        assert (file_storage.root_dir / "abc123.png").read_bytes() == png_bytes

    @pytest.mark.parametrize(
        "key", ["", "../escape.png", "nested/key.png", "..", "a\\b.png"]
    )
    async def test_invalid_keys_are_rejected(self, file_storage, png_bytes, key):
        with pytest.raises(StorageError, match="Invalid storage key"):
            await file_storage.save(key, png_bytes)

    async def test_disk_full_simulation(self, file_storage, png_bytes):
        with patch("aiofiles.open", side_effect=OSError("No space left on device")):
            with pytest.raises(StorageError, match="Failed to store image"):
                await file_storage.save("abc123.png", png_bytes)

        assert not (file_storage.root_dir / "abc123.png").exists()

    async def test_concurrent_saves_to_same_key(self, file_storage, png_bytes):
        results = await asyncio.gather(
            *(file_storage.save("race01.png", png_bytes) for _ in range(5)),
            return_exceptions=True,
        )

        stored = [r for r in results if r == "race01.png"]
        conflicts = [r for r in results if isinstance(r, StorageKeyExistsError)]
        assert len(stored) == 1
        assert len(conflicts) == 4


class TestReadAndDelete:
    async def test_read_returns_stored_bytes(self, file_storage, jpeg_bytes):
        await file_storage.save("abc123.jpg", jpeg_bytes)

        assert await file_storage.read("abc123.jpg") == jpeg_bytes

    async def test_read_missing_object(self, file_storage):
        with pytest.raises(StorageError, match="Object not found"):
            await file_storage.read("nothere.png")

    async def test_delete_removes_object(self, file_storage, png_bytes):
        await file_storage.save("abc123.png", png_bytes)

        await file_storage.delete("abc123.png")

        assert await file_storage.exists("abc123.png") is False

    async def test_delete_missing_object(self, file_storage):
        with pytest.raises(StorageError):
            await file_storage.delete("nothere.png")

    async def test_permission_error_on_delete(self, file_storage, png_bytes):
        await file_storage.save("abc123.png", png_bytes)

        with patch("aiofiles.os.remove", side_effect=PermissionError("denied")):
            with pytest.raises(StorageError, match="Failed to delete image"):
                await file_storage.delete("abc123.png")

    async def test_exists(self, file_storage, png_bytes):
        assert await file_storage.exists("abc123.png") is False
        await file_storage.save("abc123.png", png_bytes)
        assert await file_storage.exists("abc123.png") is True
        assert await file_storage.exists("../abc123.png") is False
