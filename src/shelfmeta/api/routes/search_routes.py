"""Search Routes - HTTP Layer

HTTP Layer는 서비스 레이어로 요청을 위임하고, 모든 예외를
{success, data, error} 응답으로 바꾸는 변환 경계 역할만 수행합니다.
"""

from typing import List

from fastapi import APIRouter, Depends, Query, Request

from shelfmeta.core.exceptions import InvalidKeywordException, ValidationException
from shelfmeta.core.logging import logger, sanitize_for_log
from shelfmeta.schemas.search_schema import (
    ApiResponse,
    BatchSearchItem,
    BatchSearchRequest,
    CoverDownloadRequest,
    DetailMeta,
    DetailRequest,
    SearchResult,
)
from shelfmeta.services import CoverService, SearchService

router = APIRouter(prefix="/api/v1", tags=["search"])


def get_search_service(request: Request) -> SearchService:
    """app lifespan 에서 만든 SearchService"""
    return request.app.state.search_service


def get_cover_service(request: Request) -> CoverService:
    """app lifespan 에서 만든 CoverService"""
    return request.app.state.cover_service


@router.get("/search", response_model=ApiResponse[List[SearchResult]])
async def search_books(
    keyword: str = Query("", max_length=200),
    service: SearchService = Depends(get_search_service),
):
    """키워드로 카탈로그 검색"""
    if not keyword or not keyword.strip():
        return ApiResponse.fail(InvalidKeywordException().reason)

    try:
        results = await service.search(keyword.strip())
        return ApiResponse.ok(results)
    except Exception as e:
        logger.error(f"[API] 搜索书籍失败: keyword='{sanitize_for_log(keyword)}', error={e}")
        return ApiResponse.fail(str(e) or "搜索书籍失败")


@router.post("/search/detail", response_model=ApiResponse[DetailMeta])
async def fetch_detail(
    payload: DetailRequest,
    service: SearchService = Depends(get_search_service),
):
    """작품 상세 정보 (분류/플랫폼)"""
    try:
        detail = await service.fetch_detail(payload.source_url)
        return ApiResponse.ok(detail)
    except ValidationException as e:
        logger.warning(f"[API] Detail validation failed: {e.reason}")
        return ApiResponse.fail(e.reason)
    except Exception as e:
        logger.error(f"[API] 获取 youshu 作品详情失败: {e}")
        return ApiResponse.fail(str(e) or "获取作品详情失败")


@router.post("/search/cover", response_model=ApiResponse[str])
async def download_cover(
    payload: CoverDownloadRequest,
    service: CoverService = Depends(get_cover_service),
):
    """원격 표지 다운로드 → 로컬 파일 URI"""
    try:
        file_uri = await service.download(payload.url, title=payload.title)
        return ApiResponse.ok(file_uri)
    except ValidationException as e:
        logger.warning(f"[API] Cover validation failed: {e.reason}")
        return ApiResponse.fail(e.reason)
    except Exception as e:
        logger.error(f"[API] 下载封面失败: {e}")
        return ApiResponse.fail(str(e) or "下载封面失败")


@router.post("/search/batch", response_model=ApiResponse[List[BatchSearchItem]])
async def batch_search(
    payload: BatchSearchRequest,
    service: SearchService = Depends(get_search_service),
):
    """여러 제목 일괄 검색 (각 제목의 첫 번째 결과)"""
    keywords = [k.strip() for k in payload.keywords if k and k.strip()]
    if not keywords:
        return ApiResponse.fail(InvalidKeywordException().reason)

    try:
        items = await service.batch_search(keywords, concurrency=payload.concurrency)
        return ApiResponse.ok(items)
    except Exception as e:
        logger.error(f"[API] 批量搜索失败: {e}")
        return ApiResponse.fail(str(e) or "批量搜索失败")
