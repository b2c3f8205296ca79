from loguru import logger
from tortoise.exceptions import IntegrityError

from ..core.exceptions import MetadataConflictError, MetadataError
from ..models import Image as ImageModel


class ImageRepository:
    def __init__(self):
        pass

    async def exists(self, image_id: str) -> bool:
        return await ImageModel.filter(id=image_id).exists()

    async def get(self, image_id: str) -> ImageModel | None:
        return await ImageModel.filter(id=image_id).first()

    async def list_all(self) -> list[ImageModel]:
        return await ImageModel.all().order_by("-created_at")

    async def create(
        self,
        image_id: str,
        filename: str,
        mime_type: str,
        size: int,
        storage_path: str,
        user_id: str,
    ) -> ImageModel:
        try:
            image = await ImageModel.create(
                id=image_id,
                filename=filename,
                mime_type=mime_type,
                size=size,
                storage_path=storage_path,
                user_id=user_id,
            )
        except IntegrityError as e:
            logger.warning(f"Image id {image_id} was taken before insert: {e}")
            raise MetadataConflictError(f"Image {image_id} already exists")
        except Exception as e:
            logger.error(f"Failed to insert image record {image_id}: {e}")
            raise MetadataError(str(e))

        logger.info(f"Created image record {image_id} for user {user_id}")
        return image

    async def delete(self, image_id: str) -> None:
        try:
            deleted = await ImageModel.filter(id=image_id).delete()
        except Exception as e:
            logger.error(f"Failed to delete image record {image_id}: {e}")
            raise MetadataError(str(e))

        if not deleted:
            raise MetadataError(f"Image record {image_id} was already removed")
