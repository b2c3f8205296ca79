from loguru import logger

from ..core.config import Settings
from ..core.exceptions import (
    IdentifierExhaustedError,
    MetadataConflictError,
    MetadataError,
    StorageKeyExistsError,
    UnauthenticatedError,
    UploadValidationError,
)
from .domain import Identity, UploadRequest, UploadResult
from .file_storage import FileStorageService
from .identifiers import IdentifierGenerator
from .image_repository import ImageRepository
from .signatures import SignatureValidator, extension_for, is_allowed_type

MAX_FILENAME_LENGTH = 255


class UploadPipeline:
    """Validates an uploaded image, assigns it a short id and persists it.

    The object is written before the metadata record. If the record insert
    fails the object is removed again so the two stores stay in step; a failure
    of that cleanup is only logged.
    """

    def __init__(
        self,
        file_storage: FileStorageService | None = None,
        image_repository: ImageRepository | None = None,
        signature_validator: SignatureValidator | None = None,
        identifier_generator: IdentifierGenerator | None = None,
        settings: Settings = None,
    ):
        from ..core.config import get_settings

        self.settings = settings or get_settings()
        self.file_storage = file_storage or FileStorageService(self.settings)
        self.image_repository = image_repository or ImageRepository()
        self.signature_validator = signature_validator or SignatureValidator()
        self.identifier_generator = identifier_generator or IdentifierGenerator(
            length=self.settings.ID_LENGTH,
            max_attempts=self.settings.ID_MAX_ATTEMPTS,
        )

    async def upload(
        self, request: UploadRequest, identity: Identity | None
    ) -> UploadResult:
        if identity is None:
            raise UnauthenticatedError()

        if request.file_data is None:
            raise UploadValidationError("No file provided")

        self._check_size(request.file_size_bytes)
        mime_type = self._check_type(request.content_type)

        if not self.signature_validator.validate(request.file_data, mime_type):
            logger.warning(
                f"Content of {request.original_filename!r} does not match {mime_type}"
            )
            raise UploadValidationError(
                "File content does not match declared file type"
            )

        extension = extension_for(mime_type)

        for attempt in range(1, self.settings.UPLOAD_RACE_RETRIES + 1):
            image_id = await self.identifier_generator.generate_unique(
                self.image_repository.exists
            )
            storage_path = f"{image_id}.{extension}"

            try:
                await self.file_storage.save(storage_path, request.file_data)
            except StorageKeyExistsError:
                logger.warning(
                    f"Lost race for {storage_path} on storage write (attempt {attempt})"
                )
                continue

            try:
                await self.image_repository.create(
                    image_id=image_id,
                    filename=self._record_filename(request, storage_path),
                    mime_type=mime_type,
                    size=request.file_size_bytes,
                    storage_path=storage_path,
                    user_id=identity.id,
                )
            except MetadataConflictError:
                logger.warning(
                    f"Lost race for id {image_id} on record insert (attempt {attempt})"
                )
                await self._discard_object(storage_path)
                continue
            except MetadataError:
                await self._discard_object(storage_path)
                raise

            logger.info(
                f"Uploaded {request.original_filename!r} as {image_id} for user {identity.id}"
            )
            return UploadResult(
                id=image_id,
                url=f"/{image_id}",
                public_url=self.file_storage.public_url(storage_path),
                storage_path=storage_path,
            )

        logger.error(
            f"Identifier races exhausted after {self.settings.UPLOAD_RACE_RETRIES} attempts"
        )
        raise IdentifierExhaustedError()

    def _check_size(self, size: int) -> None:
        max_size = self.settings.MAX_FILE_SIZE

        if size > max_size:
            raise UploadValidationError(
                f"File size exceeds maximum limit of {_format_limit(max_size)}"
            )

        if size == 0:
            raise UploadValidationError("File is empty")

    def _check_type(self, content_type: str | None) -> str:
        mime_type = (content_type or "").strip().lower()

        if not mime_type.startswith("image/"):
            raise UploadValidationError("Invalid file type")

        if not is_allowed_type(mime_type):
            raise UploadValidationError(f"File type {mime_type} is not allowed")

        return mime_type

    @staticmethod
    def _record_filename(request: UploadRequest, storage_path: str) -> str:
        filename = request.original_filename or storage_path
        return filename[:MAX_FILENAME_LENGTH]

    async def _discard_object(self, storage_path: str) -> None:
        try:
            await self.file_storage.delete(storage_path)
            logger.info(f"Removed orphaned object {storage_path}")
        except Exception as cleanup_error:
            logger.warning(f"Failed to remove object {storage_path}: {cleanup_error}")


def _format_limit(size: int) -> str:
    mb = 1024 * 1024
    if size % mb == 0:
        return f"{size // mb}MB"
    return f"{size} bytes"
