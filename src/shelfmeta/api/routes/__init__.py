"""API routes package."""

from .health_routes import router as health_router
from .search_routes import router as search_router, get_cover_service, get_search_service

__all__ = ["health_router", "search_router", "get_cover_service", "get_search_service"]
