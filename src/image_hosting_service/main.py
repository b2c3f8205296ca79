from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from loguru import logger

from src.image_hosting_service.app.api import auth, health, public
from src.image_hosting_service.app.api.errors import register_exception_handlers
from src.image_hosting_service.app.core.config import get_settings
from src.image_hosting_service.app.core.dependencies import get_oauth_client
from src.image_hosting_service.app.core.logging import configure_logging
from src.image_hosting_service.app.db.database import close_db, init_db

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings)
    logger.info("Starting Image Hosting Service...")

    database_dir = Path(settings.absolute_database_url.replace("sqlite:///", "")).parent
    for dir_path in [settings.absolute_images_dir, str(database_dir)]:
        Path(dir_path).mkdir(parents=True, exist_ok=True)

    logger.info("Storage directories initialized")

    await init_db()
    logger.info("Image Hosting Service startup complete")

    yield

    logger.info("Shutting down Image Hosting Service...")
    await get_oauth_client().cleanup()
    await close_db()


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        lifespan=lifespan,
        debug=settings.DEBUG,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Stored objects are immutable, so the store doubles as the public URL space
    Path(settings.absolute_images_dir).mkdir(parents=True, exist_ok=True)
    app.mount(
        "/static/images",
        StaticFiles(directory=settings.absolute_images_dir),
        name="images",
    )

    app.include_router(health.router, tags=["health"])
    app.include_router(auth.router, tags=["auth"])
    app.include_router(public.router, tags=["images"])
    app.include_router(public.short_link_router, tags=["share"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.image_hosting_service.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info",
    )
