from functools import lru_cache

from fastapi import Depends, Request

from ..core.config import Settings, get_settings
from ..services.domain import Identity
from ..services.file_storage import FileStorageService
from ..services.identifiers import IdentifierGenerator
from ..services.identity import IdentityService
from ..services.image_repository import ImageRepository
from ..services.image_service import ImageService
from ..services.oauth import OAuthClient
from ..services.signatures import SignatureValidator
from ..services.upload_pipeline import UploadPipeline


@lru_cache()
def get_settings_dependency() -> Settings:
    return get_settings()


@lru_cache()
def get_file_storage() -> FileStorageService:
    settings = get_settings()
    return FileStorageService(settings)


@lru_cache()
def get_image_repository() -> ImageRepository:
    return ImageRepository()


@lru_cache()
def get_signature_validator() -> SignatureValidator:
    return SignatureValidator()


def get_identifier_generator(
    settings: Settings = Depends(get_settings_dependency),
) -> IdentifierGenerator:
    return IdentifierGenerator(
        length=settings.ID_LENGTH,
        max_attempts=settings.ID_MAX_ATTEMPTS,
    )


@lru_cache()
def get_identity_service() -> IdentityService:
    return IdentityService(settings=get_settings())


@lru_cache()
def get_oauth_client() -> OAuthClient:
    return OAuthClient(settings=get_settings())


def get_upload_pipeline(
    file_storage: FileStorageService = Depends(get_file_storage),
    image_repository: ImageRepository = Depends(get_image_repository),
    signature_validator: SignatureValidator = Depends(get_signature_validator),
    identifier_generator: IdentifierGenerator = Depends(get_identifier_generator),
    settings: Settings = Depends(get_settings_dependency),
) -> UploadPipeline:
    return UploadPipeline(
        file_storage=file_storage,
        image_repository=image_repository,
        signature_validator=signature_validator,
        identifier_generator=identifier_generator,
        settings=settings,
    )


def get_image_service(
    file_storage: FileStorageService = Depends(get_file_storage),
    image_repository: ImageRepository = Depends(get_image_repository),
    settings: Settings = Depends(get_settings_dependency),
) -> ImageService:
    return ImageService(
        file_storage=file_storage,
        image_repository=image_repository,
        settings=settings,
    )


async def get_current_identity(
    request: Request,
    identity_service: IdentityService = Depends(get_identity_service),
    settings: Settings = Depends(get_settings_dependency),
) -> Identity | None:
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    return await identity_service.resolve(token)
