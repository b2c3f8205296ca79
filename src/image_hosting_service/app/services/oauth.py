from typing import Any
from urllib.parse import urlencode

import httpx
from loguru import logger

from ..core.config import Settings
from ..core.exceptions import AuthProviderError


class OAuthClient:
    """Authorization-code flow against an OpenID Connect style provider."""

    def __init__(
        self,
        settings: Settings = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        from ..core.config import get_settings

        self.settings = settings or get_settings()
        self.http_client = http_client or httpx.AsyncClient(timeout=10.0)

    def authorization_url(self, redirect_uri: str, state: str) -> str:
        params = {
            "client_id": self.settings.OAUTH_CLIENT_ID,
            "redirect_uri": redirect_uri,
            "response_type": "code",
            "scope": " ".join(self.settings.OAUTH_SCOPES),
            "state": state,
        }
        return f"{self.settings.OAUTH_AUTHORIZE_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str, redirect_uri: str) -> dict[str, Any]:
        try:
            token_response = await self.http_client.post(
                self.settings.OAUTH_TOKEN_URL,
                data={
                    "grant_type": "authorization_code",
                    "code": code,
                    "redirect_uri": redirect_uri,
                    "client_id": self.settings.OAUTH_CLIENT_ID,
                    "client_secret": self.settings.OAUTH_CLIENT_SECRET,
                },
                headers={"Accept": "application/json"},
            )
            token_response.raise_for_status()
            access_token = token_response.json()["access_token"]

            userinfo_response = await self.http_client.get(
                self.settings.OAUTH_USERINFO_URL,
                headers={"Authorization": f"Bearer {access_token}"},
            )
            userinfo_response.raise_for_status()
            profile = userinfo_response.json()

        except httpx.HTTPStatusError as e:
            logger.error(
                f"OAuth provider returned HTTP {e.response.status_code}: {e.response.text}"
            )
            raise AuthProviderError("Failed to exchange authorization code")
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.error(f"OAuth code exchange failed: {e}")
            raise AuthProviderError("Failed to exchange authorization code")

        if not (profile.get("sub") or profile.get("id")):
            raise AuthProviderError("Provider profile has no user id")

        return profile

    async def cleanup(self):
        """Cleanup resources when service is shutting down"""
        await self.http_client.aclose()
