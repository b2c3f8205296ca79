from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Identity:
    id: str
    email: str | None = None
    name: str | None = None
    avatar: str | None = None

    @classmethod
    def from_profile(cls, profile: dict[str, Any]) -> "Identity":
        metadata = profile.get("user_metadata") or profile
        return cls(
            id=str(profile.get("sub") or profile["id"]),
            email=profile.get("email"),
            name=metadata.get("full_name") or metadata.get("name"),
            avatar=metadata.get("avatar_url") or metadata.get("picture"),
        )


@dataclass
class UploadRequest:
    file_data: bytes | None
    original_filename: str | None
    content_type: str | None = None

    @property
    def file_size_bytes(self) -> int:
        return len(self.file_data) if self.file_data is not None else 0


@dataclass
class UploadResult:
    id: str
    url: str
    public_url: str
    storage_path: str


@dataclass
class ImageContent:
    data: bytes
    content_type: str
    headers: dict[str, str] = field(default_factory=dict)
