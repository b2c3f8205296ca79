import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

from loguru import logger

from ..core.config import Settings
from ..models import Session
from .domain import Identity

DEFAULT_REDIRECT_PATH = "/"


def validate_redirect_path(path: str | None) -> str:
    """Only local absolute paths are allowed as post-login redirects."""
    if not path or not path.startswith("/") or "//" in path or ".." in path:
        return DEFAULT_REDIRECT_PATH
    return path


class IdentityService:
    def __init__(self, settings: Settings = None):
        from ..core.config import get_settings

        self.settings = settings or get_settings()

    async def create_session(self, profile: dict[str, Any]) -> str:
        identity = Identity.from_profile(profile)
        token = secrets.token_urlsafe(32)
        expires_at = datetime.now(timezone.utc) + timedelta(
            seconds=self.settings.SESSION_TTL_SECONDS
        )

        await Session.create(
            token=token,
            user_id=identity.id,
            email=identity.email,
            name=identity.name,
            avatar=identity.avatar,
            expires_at=expires_at,
        )

        logger.info(f"Created session for user {identity.id}")
        return token

    async def resolve(self, token: str | None) -> Identity | None:
        if not token:
            return None

        session = await Session.filter(token=token).first()
        if session is None:
            return None

        expires_at = session.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)

        if expires_at <= datetime.now(timezone.utc):
            logger.info(f"Session for user {session.user_id} expired")
            await session.delete()
            return None

        return Identity(
            id=session.user_id,
            email=session.email,
            name=session.name,
            avatar=session.avatar,
        )

    async def revoke(self, token: str | None) -> None:
        if not token:
            return

        deleted = await Session.filter(token=token).delete()
        if deleted:
            logger.info("Session revoked")
