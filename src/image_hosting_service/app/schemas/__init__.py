from .image import DeleteResponse, ErrorResponse, ImageRecord, ImageUploadResponse
from .user import UserResponse

__all__ = [
    "DeleteResponse",
    "ErrorResponse",
    "ImageRecord",
    "ImageUploadResponse",
    "UserResponse",
]
