"""카탈로그 사이트 HTTP 클라이언트 (curl_cffi)

- 요청마다 AsyncSession을 만들면 TLS/커넥션 오버헤드가 커지므로
  프로세스 단위로 세션 하나를 재사용합니다 (앱 lifespan에서 생성/종료).
- 시도마다 타임아웃을 늘려가며 (10s → 15s → 20s) 재시도합니다.
- 네트워크 계층 실패(타임아웃/리셋/DNS)만 재시도하고,
  HTTP 의미 오류나 잘못된 URL은 즉시 중단합니다.
- 디코딩은 하지 않습니다. 바이트 그대로 돌려주고 해석은 EncodingResolver 몫.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from curl_cffi import CurlECode, CurlError
from curl_cffi.requests import AsyncSession

from shelfmeta.core.config import settings
from shelfmeta.core.exceptions import (
    RetrievalError,
    TerminalNetworkError,
    TransientNetworkError,
)
from shelfmeta.core.logging import logger, sanitize_for_log
from shelfmeta.utils.url import normalize_href


# 재시도 대상 curl 오류 코드
# - OPERATION_TIMEDOUT: 연결/응답 타임아웃 (중단된 요청 포함)
# - RECV_ERROR / SEND_ERROR / GOT_NOTHING: 연결 리셋
# - COULDNT_RESOLVE_HOST: DNS 조회 실패
TRANSIENT_CURL_CODES = frozenset(
    {
        CurlECode.OPERATION_TIMEDOUT,
        CurlECode.RECV_ERROR,
        CurlECode.SEND_ERROR,
        CurlECode.GOT_NOTHING,
        CurlECode.COULDNT_RESOLVE_HOST,
    }
)


@dataclass
class FetchResponse:
    """디코딩 전 응답"""

    url: str
    status_code: int
    headers: Dict[str, str]
    content: bytes

    @property
    def content_type(self) -> Optional[str]:
        return self.headers.get("content-type")


@dataclass
class RetrievalAttempt:
    """단일 시도 기록 (fetch 호출 안에서만 존재, 로깅용)"""

    url: str
    timeout_budget: float
    attempt_index: int
    outcome: str = "pending"
    error: Optional[str] = field(default=None)


def is_transient_error(error: BaseException) -> bool:
    """예외를 재시도 가능/불가로 분류합니다."""
    if isinstance(error, RetrievalError):
        return error.transient
    if isinstance(error, asyncio.TimeoutError):
        return True
    if isinstance(error, CurlError):
        code = getattr(error, "code", 0)
        return code in TRANSIENT_CURL_CODES
    return False


class RetrievalClient:
    """재시도/타임아웃 상향 정책을 가진 단일 논리 GET."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeouts_s: Optional[Sequence[float]] = None,
        retry_delay_s: Optional[float] = None,
        session: Optional[Any] = None,
    ) -> None:
        self.base_url = (base_url or settings.catalog_base_url).rstrip("/")
        self.timeouts_s: List[float] = list(timeouts_s or settings.retrieval_timeouts_s)
        self.retry_delay_s = settings.retrieval_retry_delay_s if retry_delay_s is None else retry_delay_s
        self._lock = asyncio.Lock()
        self._session = session
        self._owns_session = session is None

    async def _ensure_session(self) -> Any:
        async with self._lock:
            if self._session is not None:
                return self._session
            self._session = AsyncSession(
                impersonate=settings.catalog_impersonate,
                headers=self.default_headers(),
                allow_redirects=True,
                max_clients=settings.catalog_max_clients,
                trust_env=False,
            )
            return self._session

    def default_headers(self) -> Dict[str, str]:
        return {
            "User-Agent": settings.catalog_user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "zh-CN,zh;q=0.9,en-US;q=0.8,en;q=0.7",
            "Referer": self.base_url,
        }

    def build_url(self, path: str) -> str:
        return normalize_href(path, self.base_url)

    async def fetch(
        self,
        path: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        timeouts_s: Optional[Sequence[float]] = None,
    ) -> FetchResponse:
        """GET 요청을 재시도 정책에 따라 수행하고 원시 바이트를 반환.

        Args:
            path: 상대 경로("/search/...") 또는 절대 URL
            headers: 요청별 추가 헤더
            timeouts_s: 이번 호출에만 쓸 타임아웃 스케줄 (기본: 클라이언트 설정)

        Returns:
            FetchResponse: 상태 코드 [200, 400) 응답

        Raises:
            TransientNetworkError: 재시도 스케줄을 모두 소진한 경우
            TerminalNetworkError: HTTP 의미 오류/잘못된 URL 등 (재시도 없음)
        """
        url = self.build_url(path)
        if not url:
            raise TerminalNetworkError(path, "empty url")

        session = await self._ensure_session()
        schedule = list(timeouts_s or self.timeouts_s)
        last_error: Optional[RetrievalError] = None

        for attempt_index, timeout_s in enumerate(schedule):
            attempt = RetrievalAttempt(url=url, timeout_budget=timeout_s, attempt_index=attempt_index)
            try:
                response = await self._get_once(session, url, timeout_s, headers)
                attempt.outcome = "success"
                logger.debug(f"[RETRIEVAL] {attempt}")
                return response
            except TerminalNetworkError as e:
                attempt.outcome = "terminal"
                attempt.error = e.message
                logger.info(f"[RETRIEVAL] Terminal failure, not retrying: {attempt}")
                raise
            except Exception as e:
                if not is_transient_error(e):
                    attempt.outcome = "terminal"
                    attempt.error = f"{type(e).__name__}: {e}"
                    logger.info(f"[RETRIEVAL] Terminal failure, not retrying: {attempt}")
                    raise TerminalNetworkError(url, attempt.error) from e

                attempt.outcome = "transient"
                attempt.error = f"{type(e).__name__}: {e}"
                last_error = TransientNetworkError(url, attempt.error)
                last_error.__cause__ = e

                if attempt_index >= len(schedule) - 1:
                    logger.warning(
                        f"[RETRIEVAL] Retries exhausted after {len(schedule)} attempts: "
                        f"{sanitize_for_log(url, 120)}"
                    )
                    break

                delay = self.retry_delay_s * (attempt_index + 1)
                logger.info(f"[RETRIEVAL] Transient failure, retrying in {delay:.1f}s: {attempt}")
                await asyncio.sleep(delay)

        if last_error is None:
            raise TransientNetworkError(url, "no attempts")
        raise last_error

    async def _get_once(
        self,
        session: Any,
        url: str,
        timeout_s: float,
        headers: Optional[Dict[str, str]],
    ) -> FetchResponse:
        resp = await session.get(url, headers=headers, timeout=timeout_s, allow_redirects=True)
        status = getattr(resp, "status_code", 0) or 0
        if not 200 <= status < 400:
            raise TerminalNetworkError(url, f"HTTP {status}", status_code=status)

        raw_headers = getattr(resp, "headers", None) or {}
        return FetchResponse(
            url=url,
            status_code=status,
            headers={str(k).lower(): str(v) for k, v in raw_headers.items()},
            content=getattr(resp, "content", b"") or b"",
        )

    async def close(self) -> None:
        async with self._lock:
            if self._session is None or not self._owns_session:
                return
            try:
                await self._session.close()
            except Exception as e:
                logger.debug(f"[RETRIEVAL] Session close failed: {type(e).__name__}: {e}")
            self._session = None

    async def __aenter__(self) -> "RetrievalClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
