"""헬스 체크 엔드포인트 (카탈로그 사이트는 호출하지 않음)"""
from datetime import datetime, timezone

from fastapi import APIRouter

from shelfmeta import __version__
from shelfmeta.core.config import settings
from shelfmeta.schemas.search_schema import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", timestamp=datetime.now(timezone.utc), version=__version__)


@router.get("/")
async def service_info() -> dict:
    """서비스 이름/버전/문서 위치"""
    return {
        "service": settings.api_title,
        "version": __version__,
        "catalog": settings.catalog_base_url,
        "docs": "/docs",
    }
