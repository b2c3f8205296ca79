from loguru import logger
from tortoise import Tortoise, connections

from ..core.config import get_settings

MODEL_MODULES = [
    "src.image_hosting_service.app.models.image",
    "src.image_hosting_service.app.models.session",
]


async def init_db(database_url: str | None = None):
    try:
        settings = get_settings()
        database_url = database_url or settings.absolute_database_url

        # Tortoise uses sqlite://<path> rather than the SQLAlchemy-style sqlite:///
        if database_url.startswith("sqlite:///"):
            database_url = database_url.replace("sqlite:///", "sqlite://")

        await Tortoise.init(
            db_url=database_url,
            modules={"models": MODEL_MODULES},
        )

        await Tortoise.generate_schemas()

        logger.info("Database initialized successfully")

    except Exception as e:
        logger.error(f"Error initializing database: {e}")
        raise


async def close_db():
    try:
        await Tortoise.close_connections()
        logger.info("Database connections closed")
    except Exception as e:
        logger.error(f"Error closing database: {e}")
        raise


async def check_database_health() -> bool:
    """Run a trivial query against the default connection."""
    try:
        await connections.get("default").execute_query("SELECT 1")
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False
    return True
