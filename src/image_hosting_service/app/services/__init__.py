from .file_storage import FileStorageService
from .identifiers import IdentifierGenerator
from .identity import IdentityService, validate_redirect_path
from .image_repository import ImageRepository
from .image_service import ImageService, sanitize_filename
from .oauth import OAuthClient
from .signatures import SignatureValidator
from .upload_pipeline import UploadPipeline

__all__ = [
    "FileStorageService",
    "IdentifierGenerator",
    "IdentityService",
    "ImageRepository",
    "ImageService",
    "OAuthClient",
    "SignatureValidator",
    "UploadPipeline",
    "sanitize_filename",
    "validate_redirect_path",
]
