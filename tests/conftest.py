"""전역 테스트 설정

역할:
- 테스트 환경 구성
- 공통 Fake 주입 (네트워크 없는 세션/클라이언트)

금지:
- 실제 youshu.me 호출
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import pytest

# 프로젝트 루트/소스 경로 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
sys.path.insert(0, str(project_root / "src"))

from shelfmeta.crawlers.http_client import FetchResponse  # noqa: E402
from shelfmeta.utils.url import normalize_href  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def test_env() -> None:
    """테스트 환경 변수 설정 (세션 전역)"""
    os.environ["ENVIRONMENT"] = "test"
    os.environ["LOG_LEVEL"] = "INFO"


class FakeResponse:
    """curl_cffi Response 대역 (status_code/headers/content 만 사용)"""

    def __init__(self, status_code: int = 200, content: bytes = b"", headers: Optional[Dict[str, str]] = None):
        self.status_code = status_code
        self.content = content
        self.headers = headers or {}


class FakeSession:
    """AsyncSession 대역

    outcomes 를 호출 순서대로 돌려주고, 목록이 끝나면 마지막 항목을 반복합니다.
    예외 객체는 그대로 raise 합니다.
    """

    def __init__(self, outcomes: Sequence[Union[FakeResponse, BaseException]]):
        self.outcomes = list(outcomes)
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    async def get(self, url: str, headers=None, timeout=None, allow_redirects=True):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        outcome = self.outcomes[min(len(self.calls), len(self.outcomes)) - 1]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def close(self) -> None:
        self.closed = True


class FakeRetrievalClient:
    """RetrievalClient 대역 - 경로(또는 절대 URL)별로 준비된 바이트/예외를 반환"""

    base_url = "https://youshu.me"

    def __init__(
        self,
        pages: Optional[Dict[str, Union[bytes, BaseException]]] = None,
        default: Union[bytes, BaseException, None] = None,
        content_type: Optional[str] = None,
    ):
        self.pages = pages or {}
        self.default = default
        self.content_type = content_type
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    async def fetch(self, path: str, *, headers=None, timeouts_s=None) -> FetchResponse:
        self.calls.append({"path": path, "headers": headers, "timeouts_s": timeouts_s})
        url = normalize_href(path, self.base_url)
        outcome = self.pages.get(path, self.pages.get(url, self.default))
        if outcome is None:
            outcome = b""
        if isinstance(outcome, BaseException):
            raise outcome
        headers_out = {"content-type": self.content_type} if self.content_type else {}
        return FetchResponse(url=url, status_code=200, headers=headers_out, content=outcome)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_session_factory():
    return FakeSession


@pytest.fixture
def fake_response_factory():
    return FakeResponse


@pytest.fixture
def fake_client_factory():
    return FakeRetrievalClient
