class ImageHostingError(Exception):
    """Base error carrying a client-facing message and an HTTP status class."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class UnauthenticatedError(ImageHostingError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class ForbiddenError(ImageHostingError):
    status_code = 403

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message)


class ImageNotFoundError(ImageHostingError):
    status_code = 404

    def __init__(self, message: str = "Image not found"):
        super().__init__(message)


class UploadValidationError(ImageHostingError):
    status_code = 400


class IdentifierExhaustedError(ImageHostingError):
    status_code = 500

    def __init__(self, message: str = "Failed to generate unique ID"):
        super().__init__(message)


class StorageError(ImageHostingError):
    status_code = 500


class StorageKeyExistsError(StorageError):
    pass


class MetadataError(ImageHostingError):
    status_code = 500


class MetadataConflictError(MetadataError):
    pass


class AuthProviderError(ImageHostingError):
    status_code = 502
