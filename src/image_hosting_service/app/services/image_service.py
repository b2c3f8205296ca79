import re

from loguru import logger

from ..core.config import Settings
from ..core.exceptions import (
    ForbiddenError,
    ImageNotFoundError,
    StorageError,
    UnauthenticatedError,
)
from ..models import Image as ImageModel
from .domain import Identity, ImageContent
from .file_storage import FileStorageService
from .image_repository import ImageRepository

_UNSAFE_HEADER_CHARS = re.compile(r"[^\x20-\x7e]")


def sanitize_filename(filename: str) -> str:
    """Replace everything outside printable ASCII with ``_``.

    Double quotes and backslashes are replaced as well since the result is
    placed inside a quoted ``Content-Disposition`` parameter.
    """
    safe = _UNSAFE_HEADER_CHARS.sub("_", filename)
    return safe.replace('"', "_").replace("\\", "_")


class ImageService:
    def __init__(
        self,
        file_storage: FileStorageService | None = None,
        image_repository: ImageRepository | None = None,
        settings: Settings = None,
    ):
        from ..core.config import get_settings

        self.settings = settings or get_settings()
        self.file_storage = file_storage or FileStorageService(self.settings)
        self.image_repository = image_repository or ImageRepository()

    async def list_images(self) -> list[ImageModel]:
        return await self.image_repository.list_all()

    async def get_image(self, image_id: str) -> ImageContent:
        image = await self.image_repository.get(image_id)
        if image is None:
            raise ImageNotFoundError()

        try:
            data = await self.file_storage.read(image.storage_path)
        except StorageError as e:
            # The record exists, so a missing object is a server fault
            logger.error(f"Failed to fetch object for image {image_id}: {e}")
            raise StorageError("Failed to fetch image")

        return ImageContent(
            data=data,
            content_type=image.mime_type,
            headers={
                "Cache-Control": f"public, max-age={self.settings.CACHE_MAX_AGE}, immutable",
                "Content-Disposition": f'inline; filename="{sanitize_filename(image.filename)}"',
            },
        )

    async def delete_image(self, image_id: str, identity: Identity | None) -> None:
        if identity is None:
            raise UnauthenticatedError()

        image = await self.image_repository.get(image_id)
        if image is None:
            raise ImageNotFoundError()

        if image.user_id != identity.id:
            logger.warning(
                f"User {identity.id} attempted to delete image {image_id} owned by {image.user_id}"
            )
            raise ForbiddenError()

        # Storage first, then metadata. No compensation if the second step fails.
        await self.file_storage.delete(image.storage_path)
        await self.image_repository.delete(image_id)

        logger.info(f"Deleted image {image_id} for user {identity.id}")
