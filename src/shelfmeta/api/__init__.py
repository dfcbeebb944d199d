"""API 엔드포인트 패키지 - export only."""

from .routes import health_router, search_router, get_cover_service, get_search_service

__all__ = ["health_router", "search_router", "get_cover_service", "get_search_service"]
