"""InfoLayer - points of interest and walking routes over a map.

Main FastAPI application.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from infolayer_api.config import settings
from infolayer_api.routers import info_router
from infolayer_api.routers.info import shutdown as shutdown_info_layer


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not settings.mapbox_api:
        logger.warning("MAPBOX_API is not set; tile and directions queries will be rejected")
    logger.info(
        f"{settings.app_name} online (tileset={settings.tileset}, "
        f"center={settings.map_center_lng:.4f},{settings.map_center_lat:.4f})"
    )
    yield
    shutdown_info_layer()
    logger.info(f"{settings.app_name} shutting down...")


app = FastAPI(
    title="InfoLayer",
    description="Points of interest and walking routes over a map",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(info_router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "operational",
        "version": "0.1.0",
        "system": settings.app_name,
    }
