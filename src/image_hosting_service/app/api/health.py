from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ..db.database import check_database_health

router = APIRouter()


@router.get("/health")
async def health_check():
    database_ok = await check_database_health()
    body = {
        "status": "healthy" if database_ok else "unhealthy",
        "service": "image-hosting",
        "database": "ok" if database_ok else "unavailable",
    }
    return JSONResponse(body, status_code=200 if database_ok else 503)
