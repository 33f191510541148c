from fastapi import APIRouter
from sqlalchemy import text

from app.infrastructure.db import database

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness plus a real database round trip"""
    db_status = "disconnected"
    db_error = None
    try:
        if database.engine is None:
            db_status = "not_initialized"
        else:
            async with database.engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
            db_status = "connected"
    except Exception as exc:
        db_status = "error"
        db_error = str(exc)

    return {
        "status": "healthy",
        "service": "FuelEU Compliance Engine",
        "database": db_status,
        "database_error": db_error,
    }
