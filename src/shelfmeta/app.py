"""FastAPI 앱 팩토리

서비스 객체는 프로세스당 하나씩 만들어 app.state 에 둡니다.
테스트는 create_app() 에 대역 서비스를 넘겨 네트워크 없이 라우트를 검증합니다.
"""
from contextlib import asynccontextmanager
from typing import Optional, Tuple

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shelfmeta import __version__
from shelfmeta.api import health_router, search_router
from shelfmeta.core.config import settings
from shelfmeta.core.logging import logger, sanitize_for_log
from shelfmeta.crawlers import RetrievalClient
from shelfmeta.schemas.search_schema import ApiResponse
from shelfmeta.services import CoverService, SearchService


def build_services(client: Optional[RetrievalClient] = None) -> Tuple[SearchService, CoverService]:
    """검색/표지 서비스 생성 (RetrievalClient 세션 하나를 공유)"""
    client = client or RetrievalClient()
    return SearchService(client=client), CoverService(client=client)


@asynccontextmanager
async def lifespan(app: FastAPI):
    owns_services = app.state.search_service is None
    if owns_services:
        app.state.search_service, app.state.cover_service = build_services()
    logger.info(f"[APP] shelfmeta {__version__} ready (catalog={settings.catalog_base_url})")

    yield

    if not owns_services:
        return
    try:
        await app.state.search_service.close()
    except Exception as e:
        logger.warning(f"[APP] Session cleanup failed: {type(e).__name__}: {e}")
    logger.info("[APP] shutdown complete")


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """요청 검증 실패도 HTTP 200 + {success: false} 로 응답"""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ())[1:]) or "request"
    message = f"请求参数无效: {field} {first.get('msg', '')}".strip()
    logger.warning(f"[API] Request validation failed: {sanitize_for_log(message, 200)}")
    return JSONResponse(status_code=200, content=ApiResponse.fail(message).model_dump())


def create_app(
    search_service: Optional[SearchService] = None,
    cover_service: Optional[CoverService] = None,
) -> FastAPI:
    """
    FastAPI 앱 생성

    Args:
        search_service: 주입할 SearchService (없으면 lifespan 에서 생성)
        cover_service: 주입할 CoverService

    Returns:
        라우터가 등록된 FastAPI 인스턴스
    """
    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        lifespan=lifespan,
    )
    app.state.search_service = search_service
    app.state.cover_service = cover_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, request_validation_handler)

    for router in (health_router, search_router):
        app.include_router(router)

    return app
