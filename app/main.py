"""
FastAPI Main Application
FuelEU compliance balance, banking and pooling service
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from app.config import settings
from app.core.logging import setup_logging
from app.infrastructure.db.database import async_session_factory, init_db, close_db
from app.infrastructure.db.seed import seed_routes

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager
    Handles database startup and shutdown
    """
    # ===================
    # STARTUP
    # ===================
    logger.info("=" * 60)
    logger.info("🚀 Starting FuelEU Compliance Engine (%s)", settings.APP_ENV)
    logger.info("=" * 60)

    logger.info("📊 Initializing database...")
    await init_db()
    logger.info("✅ Database initialized")

    if settings.SEED_DEMO_ROUTES:
        async with async_session_factory() as session:
            await seed_routes(session)

    logger.info("   ✅ API Server: http://%s:%s", settings.API_HOST, settings.API_PORT)
    logger.info("   ✅ API Docs: http://%s:%s/docs", settings.API_HOST, settings.API_PORT)

    yield

    # ===================
    # SHUTDOWN
    # ===================
    logger.info("🛑 Shutting down FuelEU Compliance Engine...")
    await close_db()
    logger.info("✅ Database connections closed")


# Create FastAPI app
app = FastAPI(
    title="FuelEU Maritime Compliance Engine",
    description="Compliance balance calculation, banking ledger and pooling",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "⚓ FuelEU Maritime Compliance Engine",
        "version": "1.0.0",
        "endpoints": {
            "routes": "/api/v1/routes",
            "compliance": "/api/v1/compliance/cb",
            "banking": "/api/v1/banking",
            "pools": "/api/v1/pools",
        },
        "docs": "/docs"
    }


# Import and include routers
from app.api.routes import banking, compliance, health, pooling, vessel_routes  # noqa: E402

app.include_router(health.router, tags=["Health"])
app.include_router(vessel_routes.router, prefix="/api/v1/routes", tags=["Routes"])
app.include_router(compliance.router, prefix="/api/v1/compliance", tags=["Compliance"])
app.include_router(banking.router, prefix="/api/v1/banking", tags=["Banking"])
app.include_router(pooling.router, prefix="/api/v1/pools", tags=["Pooling"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host=settings.API_HOST, port=settings.API_PORT, reload=settings.DEBUG)
