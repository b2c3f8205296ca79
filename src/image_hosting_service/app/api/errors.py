from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from ..core.exceptions import ImageHostingError


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ImageHostingError)
    async def handle_image_hosting_error(request: Request, exc: ImageHostingError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})
