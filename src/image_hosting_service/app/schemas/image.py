from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ImageRecord(BaseModel):
    """Stored image metadata as returned by the listing endpoint"""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="Short public identifier")
    filename: str = Field(..., description="Original filename as uploaded")
    mime_type: str = Field(..., description="Declared content type")
    size: int = Field(..., description="File size in bytes")
    storage_path: str = Field(..., description="Object key in the image store")
    user_id: str = Field(..., description="Owner identifier")
    created_at: datetime = Field(..., description="When the image was uploaded")


class ImageUploadResponse(BaseModel):
    """Response model for successful image upload"""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Short public identifier")
    url: str = Field(..., description="Relative short-link path")
    public_url: str = Field(
        ..., alias="publicUrl", description="Durable public URL of the stored object"
    )


class DeleteResponse(BaseModel):
    success: bool = Field(default=True)


class ErrorResponse(BaseModel):
    """Error response model"""

    error: str = Field(..., description="Error message")
