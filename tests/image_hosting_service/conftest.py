from pathlib import Path
from unittest.mock import AsyncMock, Mock

import httpx
import pytest
from fastapi import FastAPI
from tortoise import Tortoise

from src.image_hosting_service.app.api import auth, health, public
from src.image_hosting_service.app.api.errors import register_exception_handlers
from src.image_hosting_service.app.core.config import Settings
from src.image_hosting_service.app.core.dependencies import (
    get_current_identity,
    get_file_storage,
    get_identity_service,
    get_oauth_client,
    get_settings_dependency,
)
from src.image_hosting_service.app.db.database import MODEL_MODULES
from src.image_hosting_service.app.services.domain import Identity
from src.image_hosting_service.app.services.file_storage import FileStorageService
from src.image_hosting_service.app.services.identity import IdentityService
from src.image_hosting_service.app.services.image_repository import ImageRepository
from src.image_hosting_service.app.services.image_service import ImageService
from src.image_hosting_service.app.services.oauth import OAuthClient
from src.image_hosting_service.app.services.upload_pipeline import UploadPipeline
from tests.shared_fixtures import SharedImageFixtures

OWNER_ID = "user-owner"
OTHER_USER_ID = "user-other"


@pytest.fixture
def temp_storage_dir(tmp_path):
    return tmp_path


@pytest.fixture
def test_settings(temp_storage_dir):
    return Settings(
        IMAGES_DIR=str(Path(temp_storage_dir) / "images"),
        DATABASE_URL=f"sqlite:///{Path(temp_storage_dir) / 'test.db'}",
        PUBLIC_BASE_URL="http://cdn.test",
        SITE_URL="http://testserver",
        OAUTH_CLIENT_ID="client-id",
        OAUTH_CLIENT_SECRET="client-secret",
        OAUTH_AUTHORIZE_URL="https://auth.test/authorize",
        OAUTH_TOKEN_URL="https://auth.test/token",
        OAUTH_USERINFO_URL="https://auth.test/userinfo",
        LOG_FILE=str(Path(temp_storage_dir) / "logs" / "test.log"),
    )


@pytest.fixture
async def db(temp_storage_dir):
    await Tortoise.init(
        db_url=f"sqlite://{Path(temp_storage_dir) / 'test.db'}",
        modules={"models": MODEL_MODULES},
    )
    await Tortoise.generate_schemas()
    yield
    await Tortoise.close_connections()


@pytest.fixture
def owner():
    return Identity(id=OWNER_ID, email="owner@example.com", name="Owner")


@pytest.fixture
def other_user():
    return Identity(id=OTHER_USER_ID, email="other@example.com", name="Other")


@pytest.fixture
def file_storage(test_settings):
    return FileStorageService(settings=test_settings)


@pytest.fixture
def image_repository():
    return ImageRepository()


@pytest.fixture
def upload_pipeline(test_settings, file_storage, image_repository):
    return UploadPipeline(
        file_storage=file_storage,
        image_repository=image_repository,
        settings=test_settings,
    )


@pytest.fixture
def image_service(test_settings, file_storage, image_repository):
    return ImageService(
        file_storage=file_storage,
        image_repository=image_repository,
        settings=test_settings,
    )


@pytest.fixture
def identity_service(test_settings):
    return IdentityService(settings=test_settings)


@pytest.fixture
def mock_oauth_client(test_settings):
    mock = Mock(spec=OAuthClient)
    mock.authorization_url = Mock(
        side_effect=lambda redirect_uri, state: (
            f"https://auth.test/authorize?state={state}"
        )
    )
    mock.exchange_code = AsyncMock(
        return_value={
            "sub": OWNER_ID,
            "email": "owner@example.com",
            "name": "Owner",
            "picture": "https://avatars.test/owner.png",
        }
    )
    return mock


@pytest.fixture
def png_bytes():
    data, _ = SharedImageFixtures.load_png()
    return data


@pytest.fixture
def jpeg_bytes():
    data, _ = SharedImageFixtures.load_jpeg()
    return data


@pytest.fixture
def current_identity():
    """Identity the test app resolves for every request; None means signed out."""
    return {"identity": None}


@pytest.fixture
def test_app(
    test_settings, file_storage, identity_service, mock_oauth_client, current_identity
):
    app = FastAPI()

    app.dependency_overrides[get_settings_dependency] = lambda: test_settings
    app.dependency_overrides[get_file_storage] = lambda: file_storage
    app.dependency_overrides[get_identity_service] = lambda: identity_service
    app.dependency_overrides[get_oauth_client] = lambda: mock_oauth_client
    app.dependency_overrides[get_current_identity] = (
        lambda: current_identity["identity"]
    )

    register_exception_handlers(app)
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(public.router)
    app.include_router(public.short_link_router)

    return app


@pytest.fixture
async def test_client(db, test_app):
    transport = httpx.ASGITransport(app=test_app)
    async with httpx.AsyncClient(
        transport=transport, base_url="http://testserver"
    ) as client:
        yield client
