"""API routers for the info layer."""

from infolayer_api.routers.info import router as info_router

__all__ = ["info_router"]
