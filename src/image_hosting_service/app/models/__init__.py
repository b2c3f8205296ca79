from .image import Image
from .session import Session

__all__ = [
    "Image",
    "Session",
]
