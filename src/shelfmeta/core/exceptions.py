"""커스텀 예외 정의 (Structured Exception Hierarchy)"""
from typing import Any, Optional


# 기본 예외 클래스
class ShelfMetaException(Exception):
    """기본 예외 클래스 - 모든 커스텀 예외의 부모"""
    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


# 네트워크(수집) 관련 예외
class RetrievalError(ShelfMetaException):
    """단일 GET 요청 실패

    transient=True 이면 재시도할 가치가 있는 네트워크 계층 실패,
    False 이면 재시도해도 소용없는 의미적 실패입니다.
    """
    transient: bool = False

    def __init__(self, message: str, error_code: str = "RETRIEVAL_ERROR", details: Optional[dict[str, Any]] = None):
        super().__init__(message, error_code or "RETRIEVAL_ERROR", details)


class TransientNetworkError(RetrievalError):
    """타임아웃/연결 리셋/DNS 실패 - 재시도 대상"""
    transient = True

    def __init__(self, url: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Transient network failure for {url}: {reason}"
        super().__init__(message, "NETWORK_TRANSIENT", details or {"url": url, "reason": reason})


class TerminalNetworkError(RetrievalError):
    """HTTP 4xx/5xx, 잘못된 URL 등 - 즉시 중단"""
    transient = False

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None, details: Optional[dict[str, Any]] = None):
        message = f"Request to {url} failed: {reason}"
        self.status_code = status_code
        super().__init__(
            message,
            "NETWORK_TERMINAL",
            details or {"url": url, "reason": reason, "status_code": status_code},
        )


# 서비스 레이어 예외 (원인 예외를 __cause__ 로 보존)
class SearchFailedException(ShelfMetaException):
    """검색 페이지 수집/해석 실패"""
    def __init__(self, keyword: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"抓取 youshu 数据失败: {reason}"
        super().__init__(message, "SEARCH_FAILED", details or {"keyword": keyword})

    def __str__(self) -> str:
        return self.message


class DetailFetchFailedException(ShelfMetaException):
    """상세 페이지 수집/해석 실패"""
    def __init__(self, source_url: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"获取作品详情失败: {reason}"
        super().__init__(message, "DETAIL_FAILED", details or {"source_url": source_url})

    def __str__(self) -> str:
        return self.message


class CoverDownloadException(ShelfMetaException):
    """표지 다운로드/변환 실패"""
    def __init__(self, url: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"下载封面失败: {reason}"
        super().__init__(message, "COVER_FAILED", details or {"url": url})

    def __str__(self) -> str:
        return self.message


# 유효성 검증 관련 예외
class ValidationException(ShelfMetaException):
    """유효성 검증 예외 (I/O 이전에 동기적으로 발생)"""
    def __init__(self, field: str, reason: str, details: Optional[dict[str, Any]] = None):
        self.reason = reason
        message = f"Validation failed for '{field}': {reason}"
        super().__init__(message, "VALIDATION_ERROR",
                        details or {"field": field, "reason": reason})

    def __str__(self) -> str:
        return self.reason


class InvalidKeywordException(ValidationException):
    """비어 있는 검색어"""
    def __init__(self, reason: str = "搜索关键词不能为空", details: Optional[dict[str, Any]] = None):
        super().__init__("keyword", reason, details)


class InvalidURLException(ValidationException):
    """비어 있거나 잘못된 URL"""
    def __init__(self, field: str, reason: str, details: Optional[dict[str, Any]] = None):
        super().__init__(field, reason, details)


# 실행기 관련 예외
class TaskCancelledError(ShelfMetaException):
    """취소 신호로 인해 디스패치되지 않은 작업"""
    def __init__(self, index: int, details: Optional[dict[str, Any]] = None):
        message = f"Task #{index} was not started (batch cancelled)"
        super().__init__(message, "TASK_CANCELLED", details or {"index": index})
