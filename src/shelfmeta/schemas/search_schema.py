"""Pydantic 스키마 정의"""
from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

UNKNOWN_AUTHOR = "未知作者"
EMPTY_DESCRIPTION = "暂无简介"

T = TypeVar("T")


class SearchResult(BaseModel):
    """검색 결과 한 건 (새 도서 레코드 사전 입력용)

    값이 없는 필드는 생략하지 않고 명시적인 기본값(빈 문자열/0/未知作者)으로 채웁니다.
    """
    model_config = ConfigDict(frozen=True)

    title: str = Field(..., min_length=1, description="작품명")
    author: str = Field(UNKNOWN_AUTHOR, description="작가")
    cover_url: str = Field("", description="표지 URL (이미지 프록시 경유)")
    platform: Optional[str] = Field(None, description="연재 플랫폼")
    category: str = Field("", description="분류")
    word_count: int = Field(0, ge=0, description="글자 수")
    description: str = Field(EMPTY_DESCRIPTION, description="소개")
    source_url: str = Field("", description="카탈로그 상세 페이지 URL")

    @field_validator("author")
    @classmethod
    def default_author(cls, v: str) -> str:
        return v.strip() or UNKNOWN_AUTHOR

    @field_validator("description")
    @classmethod
    def default_description(cls, v: str) -> str:
        return v.strip() or EMPTY_DESCRIPTION

    @field_validator("platform")
    @classmethod
    def empty_platform_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None


class DetailMeta(BaseModel):
    """상세 페이지에서 보강한 분류/플랫폼 (찾지 못하면 None)"""
    model_config = ConfigDict(frozen=True)

    category: Optional[str] = Field(None, description="분류")
    platform: Optional[str] = Field(None, description="연재 플랫폼")

    @property
    def is_complete(self) -> bool:
        return bool(self.category and self.platform)


class BatchSearchItem(BaseModel):
    """배치 검색 한 건의 결과 (입력 키워드와 위치로 대응)"""
    keyword: str
    success: bool
    data: Optional[SearchResult] = None
    error: Optional[str] = None


# ============================================================================
# API 요청/응답
# ============================================================================

class DetailRequest(BaseModel):
    source_url: str = Field("", max_length=2048, description="작품 상세 URL")


class CoverDownloadRequest(BaseModel):
    url: str = Field("", max_length=2048, description="원격 표지 URL")
    title: Optional[str] = Field(None, max_length=200, description="파일명에 사용할 제목")


class BatchSearchRequest(BaseModel):
    keywords: List[str] = Field(..., max_length=200, description="검색어 목록")
    concurrency: Optional[int] = Field(None, ge=1, le=16, description="동시 요청 수")


class ApiResponse(BaseModel, Generic[T]):
    """IPC 호환 응답 포맷 {success, data, error}"""
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: T) -> "ApiResponse[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "ApiResponse[T]":
        return cls(success=False, error=error)


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    version: str
