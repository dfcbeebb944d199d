"""설정 관리 - 환경 변수 로드 및 검증"""
from typing import List
from pydantic_settings import BaseSettings
from pydantic import field_validator


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # 카탈로그 사이트 (youshu.me)
    catalog_base_url: str = "https://youshu.me"
    catalog_user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
    )
    catalog_impersonate: str = "chrome110"
    catalog_max_clients: int = 20

    # 재시도 정책
    # - retrieval_timeouts_s: 시도별 타임아웃 (i번째 시도는 i번째 값 사용)
    # - retrieval_retry_delay_s: 선형 백오프 기본값 (delay * (attempt + 1))
    retrieval_timeouts_s: List[float] = [10.0, 15.0, 20.0]
    retrieval_retry_delay_s: float = 0.5

    # 인코딩: 헤더/meta 모두 없을 때 쓰는 지역 기본 인코딩
    fallback_encoding: str = "gbk"

    # 검색 결과
    search_max_results: int = 20
    image_proxy_template: str = "https://images.weserv.nl/?url={url}"

    # 배치 작업 동시성 (원격 호스트 보호용 상한)
    batch_concurrency: int = 4

    # 표지 다운로드
    cover_dir: str = "data/covers"
    cover_max_width: int = 640
    cover_quality: int = 80
    cover_timeout_s: float = 15.0

    # API
    api_title: str = "Shelf Meta Service"
    api_version: str = "1.0.0"
    api_description: str = "youshu.me 카탈로그에서 도서 메타데이터를 수집합니다."
    cors_origins: List[str] = ["*"]

    # 로깅
    log_level: str = "INFO"

    @field_validator("retrieval_timeouts_s")
    @classmethod
    def validate_timeouts(cls, v: List[float]) -> List[float]:
        if not v:
            raise ValueError("retrieval_timeouts_s must not be empty")
        if any(t <= 0 for t in v):
            raise ValueError("retrieval_timeouts_s must be positive")
        return v

    @field_validator("retrieval_retry_delay_s")
    @classmethod
    def validate_retry_delay(cls, v: float) -> float:
        if v < 0:
            raise ValueError("retrieval_retry_delay_s must be >= 0")
        return v

    @field_validator("search_max_results", "batch_concurrency", "catalog_max_clients")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("value must be positive")
        return v

    @field_validator("cover_quality")
    @classmethod
    def validate_cover_quality(cls, v: int) -> int:
        if not 1 <= v <= 100:
            raise ValueError("cover_quality must be between 1 and 100")
        return v

    @field_validator("catalog_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("catalog_base_url must start with http:// or https://")
        return v.rstrip("/")

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
