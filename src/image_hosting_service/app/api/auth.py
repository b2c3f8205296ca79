import secrets

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import RedirectResponse
from loguru import logger

from ..core.config import Settings
from ..core.dependencies import (
    get_current_identity,
    get_identity_service,
    get_oauth_client,
    get_settings_dependency,
)
from ..core.exceptions import AuthProviderError
from ..schemas import ErrorResponse, UserResponse
from ..services.domain import Identity
from ..services.identity import (
    DEFAULT_REDIRECT_PATH,
    IdentityService,
    validate_redirect_path,
)
from ..services.oauth import OAuthClient

router = APIRouter(
    responses={500: {"model": ErrorResponse, "description": "Session store failure"}}
)

STATE_COOKIE_NAME = "oauth_state"
NEXT_COOKIE_NAME = "oauth_next"
LOGIN_COOKIE_MAX_AGE = 600


def _site_url(settings: Settings) -> str:
    return settings.SITE_URL.rstrip("/")


def _callback_url(settings: Settings) -> str:
    return f"{_site_url(settings)}/auth/callback"


@router.get("/auth/login")
async def login(
    next_param: str | None = Query(None, alias="next"),
    oauth_client: OAuthClient = Depends(get_oauth_client),
    settings: Settings = Depends(get_settings_dependency),
):
    """Start the OAuth sign-in flow."""
    state = secrets.token_urlsafe(24)
    next_path = validate_redirect_path(next_param)

    response = RedirectResponse(
        oauth_client.authorization_url(_callback_url(settings), state)
    )
    for key, value in ((STATE_COOKIE_NAME, state), (NEXT_COOKIE_NAME, next_path)):
        response.set_cookie(
            key,
            value,
            max_age=LOGIN_COOKIE_MAX_AGE,
            httponly=True,
            samesite="lax",
            secure=settings.COOKIE_SECURE,
        )
    return response


@router.get("/auth/callback")
async def auth_callback(
    request: Request,
    code: str | None = None,
    state: str | None = None,
    next_param: str | None = Query(None, alias="next"),
    oauth_client: OAuthClient = Depends(get_oauth_client),
    identity_service: IdentityService = Depends(get_identity_service),
    settings: Settings = Depends(get_settings_dependency),
):
    """
    Exchange the provider's authorization code for a session.

    Redirects to the requested local path on success and to the home page
    on any failure.
    """
    next_path = validate_redirect_path(
        next_param or request.cookies.get(NEXT_COOKIE_NAME) or DEFAULT_REDIRECT_PATH
    )
    expected_state = request.cookies.get(STATE_COOKIE_NAME)

    token = None
    if code and state and expected_state and secrets.compare_digest(
        state.encode(), expected_state.encode()
    ):
        try:
            profile = await oauth_client.exchange_code(code, _callback_url(settings))
            token = await identity_service.create_session(profile)
        except AuthProviderError as e:
            logger.warning(f"Sign-in failed: {e.message}")
    else:
        logger.warning("Auth callback without a code or with a mismatched state")

    if token is None:
        response = RedirectResponse(f"{_site_url(settings)}{DEFAULT_REDIRECT_PATH}")
    else:
        response = RedirectResponse(f"{_site_url(settings)}{next_path}")
        response.set_cookie(
            settings.SESSION_COOKIE_NAME,
            token,
            max_age=settings.SESSION_TTL_SECONDS,
            httponly=True,
            samesite="lax",
            secure=settings.COOKIE_SECURE,
        )

    response.delete_cookie(STATE_COOKIE_NAME)
    response.delete_cookie(NEXT_COOKIE_NAME)
    return response


@router.post("/auth/signout")
async def sign_out(
    request: Request,
    identity_service: IdentityService = Depends(get_identity_service),
    settings: Settings = Depends(get_settings_dependency),
):
    await identity_service.revoke(request.cookies.get(settings.SESSION_COOKIE_NAME))

    response = RedirectResponse(DEFAULT_REDIRECT_PATH, status_code=303)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response


@router.get("/user", response_model=UserResponse | None)
async def get_user(identity: Identity | None = Depends(get_current_identity)):
    """Return the signed-in user's profile, or null when signed out."""
    if identity is None:
        return None

    return UserResponse(
        id=identity.id,
        email=identity.email,
        avatar=identity.avatar,
        name=identity.name,
    )
