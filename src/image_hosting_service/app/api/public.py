from fastapi import APIRouter, Depends, File, Response, UploadFile
from loguru import logger

from ..core.dependencies import (
    get_current_identity,
    get_image_service,
    get_upload_pipeline,
)
from ..core.exceptions import ImageHostingError
from ..schemas import DeleteResponse, ErrorResponse, ImageRecord, ImageUploadResponse
from ..services.domain import Identity, UploadRequest
from ..services.image_service import ImageService
from ..services.upload_pipeline import UploadPipeline

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid upload"},
    401: {"model": ErrorResponse, "description": "Not signed in"},
    403: {"model": ErrorResponse, "description": "Not the owner"},
    404: {"model": ErrorResponse, "description": "Image not found"},
    500: {"model": ErrorResponse, "description": "Storage or metadata failure"},
}

router = APIRouter(responses=ERROR_RESPONSES)

# Registered last so /{image_id} never shadows the other routes
short_link_router = APIRouter(
    responses={404: ERROR_RESPONSES[404], 500: ERROR_RESPONSES[500]}
)


@router.get("/images", response_model=list[ImageRecord])
async def list_images(image_service: ImageService = Depends(get_image_service)):
    """
    List all stored images, newest first.

    Returns:
        List of image records
    """
    logger.info("Listing images")

    try:
        images = await image_service.list_images()
        return [ImageRecord.model_validate(image) for image in images]

    except Exception as e:
        logger.error(f"Error listing images: {e}")
        raise ImageHostingError(str(e))


@router.post("/images", response_model=ImageUploadResponse)
async def upload_image(
    file: UploadFile | None = File(None),
    identity: Identity | None = Depends(get_current_identity),
    pipeline: UploadPipeline = Depends(get_upload_pipeline),
):
    """
    Upload an image for the signed-in user.

    Args:
        file: Image file (JPEG, PNG, GIF, WEBP or SVG, at most 10MB)

    Returns:
        ImageUploadResponse with the new id, short-link path and public URL

    Raises:
        ImageHostingError: For unauthenticated callers, invalid files or storage errors
    """
    filename = file.filename if file else None
    logger.info(f"Received image upload request: {filename}")

    try:
        file_data = None
        content_type = None
        if file is not None:
            # One byte over the limit is enough to reject oversized files
            file_data = await file.read(pipeline.settings.MAX_FILE_SIZE + 1)
            content_type = file.content_type

        result = await pipeline.upload(
            UploadRequest(
                file_data=file_data,
                original_filename=filename,
                content_type=content_type,
            ),
            identity,
        )

        return ImageUploadResponse(
            id=result.id, url=result.url, public_url=result.public_url
        )

    except ImageHostingError as e:
        if e.status_code < 500:
            logger.warning(f"Rejected upload {filename}: {e.message}")
        raise

    except Exception as e:
        logger.error(f"Unexpected error uploading {filename}: {e}")
        raise ImageHostingError("Internal server error")


@router.get("/images/{image_id}")
async def get_image(
    image_id: str, image_service: ImageService = Depends(get_image_service)
):
    """Serve the stored bytes of an image."""
    return await _serve_image(image_id, image_service)


@router.delete("/images/{image_id}", response_model=DeleteResponse)
async def delete_image(
    image_id: str,
    identity: Identity | None = Depends(get_current_identity),
    image_service: ImageService = Depends(get_image_service),
):
    """
    Delete an image owned by the signed-in user.

    Raises:
        ImageHostingError: 401 when signed out, 404 for unknown ids,
            403 when the caller is not the owner
    """
    logger.info(f"Delete requested for image {image_id}")

    try:
        await image_service.delete_image(image_id, identity)
        return DeleteResponse(success=True)

    except ImageHostingError:
        raise
    except Exception as e:
        logger.error(f"Error deleting image {image_id}: {e}")
        raise ImageHostingError("Internal server error")


@short_link_router.get("/{image_id}")
async def serve_short_link(
    image_id: str, image_service: ImageService = Depends(get_image_service)
):
    """Public share URL for an image."""
    return await _serve_image(image_id, image_service)


async def _serve_image(image_id: str, image_service: ImageService) -> Response:
    logger.info(f"Serving image {image_id}")

    try:
        content = await image_service.get_image(image_id)
    except ImageHostingError:
        raise
    except Exception as e:
        logger.error(f"Error serving image {image_id}: {e}")
        raise ImageHostingError("Internal server error")

    return Response(
        content=content.data,
        media_type=content.content_type,
        headers=content.headers,
    )
