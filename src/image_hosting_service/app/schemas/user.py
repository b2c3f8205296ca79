from pydantic import BaseModel, Field


class UserResponse(BaseModel):
    id: str = Field(..., description="User identifier")
    email: str | None = Field(None, description="Email address")
    avatar: str | None = Field(None, description="Avatar image URL")
    name: str | None = Field(None, description="Display name")
