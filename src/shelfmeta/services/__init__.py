"""Service layer - export only."""

from .cover_service import CoverService
from .search_service import SearchService

__all__ = ["CoverService", "SearchService"]
