"""API routes package."""

from dropserver.routes.paste_routes import router as paste_router
from dropserver.routes.upload_routes import router as upload_router

__all__ = ["paste_router", "upload_router"]
