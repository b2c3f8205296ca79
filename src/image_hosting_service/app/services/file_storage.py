import asyncio
from pathlib import Path

import aiofiles
import aiofiles.os
from loguru import logger

from ..core.config import Settings, get_settings
from ..core.exceptions import StorageError, StorageKeyExistsError


class FileStorageService:
    """Flat object store keyed by bare file names under one directory."""

    def __init__(self, settings: Settings | None = None, root_dir: str | None = None):
        self.settings = settings or get_settings()
        self.root_dir = Path(root_dir or self.settings.absolute_images_dir)
        self._ensure_directories()

    def _ensure_directories(self) -> None:
        self.root_dir.mkdir(parents=True, exist_ok=True)

    def _resolve(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key in (".", "..") or ".." in key:
            raise StorageError(f"Invalid storage key: {key!r}")
        return self.root_dir / key

    async def save(self, key: str, data: bytes) -> str:
        path = self._resolve(key)
        created = False

        try:
            # "xb" refuses to replace an existing object
            async with aiofiles.open(path, "xb") as f:
                created = True
                await f.write(data)
        except FileExistsError:
            logger.warning(f"Storage key {key} already exists")
            raise StorageKeyExistsError(f"The resource already exists: {key}")
        except OSError as e:
            logger.error(f"Failed to write {key}: {e}")
            if created:
                await self._discard_partial(path)
            raise StorageError(f"Failed to store image: {e}")

        logger.info(f"Stored {len(data)} bytes at {key}")
        return key

    async def read(self, key: str) -> bytes:
        path = self._resolve(key)

        try:
            async with aiofiles.open(path, "rb") as f:
                return await f.read()
        except FileNotFoundError:
            raise StorageError(f"Object not found: {key}")
        except OSError as e:
            raise StorageError(f"Failed to read image: {e}")

    async def delete(self, key: str) -> None:
        path = self._resolve(key)

        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            raise StorageError(f"Object not found: {key}")
        except OSError as e:
            raise StorageError(f"Failed to delete image: {e}")

        logger.info(f"Deleted object {key}")

    async def exists(self, key: str) -> bool:
        try:
            path = self._resolve(key)
        except StorageError:
            return False
        return await asyncio.to_thread(path.is_file)

    def public_url(self, key: str) -> str:
        base = self.settings.PUBLIC_BASE_URL.rstrip("/")
        return f"{base}/static/images/{key}"

    async def _discard_partial(self, path: Path) -> None:
        try:
            await aiofiles.os.remove(path)
        except OSError as e:
            logger.warning(f"Could not remove partial object {path.name}: {e}")
