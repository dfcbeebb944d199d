"""스키마/예외/설정 단위 테스트"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from shelfmeta.core.config import Settings
from shelfmeta.core.exceptions import (
    InvalidKeywordException,
    ShelfMetaException,
    TaskCancelledError,
    TerminalNetworkError,
    TransientNetworkError,
)
from shelfmeta.schemas.search_schema import (
    ApiResponse,
    BatchSearchRequest,
    DetailMeta,
    EMPTY_DESCRIPTION,
    SearchResult,
    UNKNOWN_AUTHOR,
)


class TestSearchResult:
    def test_defaults_are_explicit(self) -> None:
        result = SearchResult(title="三体")

        assert result.author == UNKNOWN_AUTHOR
        assert result.description == EMPTY_DESCRIPTION
        assert result.platform is None
        assert result.category == ""
        assert result.word_count == 0
        assert result.cover_url == ""

    def test_blank_values_fall_back(self) -> None:
        result = SearchResult(title="三体", author="  ", description="", platform=" ")

        assert result.author == UNKNOWN_AUTHOR
        assert result.description == EMPTY_DESCRIPTION
        assert result.platform is None

    def test_title_required(self) -> None:
        with pytest.raises(ValidationError):
            SearchResult(title="")

    def test_negative_word_count_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SearchResult(title="三体", word_count=-1)

    def test_frozen(self) -> None:
        result = SearchResult(title="三体")
        with pytest.raises(ValidationError):
            result.title = "球状闪电"


class TestApiResponse:
    def test_ok(self) -> None:
        response = ApiResponse[DetailMeta].ok(DetailMeta(category="科幻"))
        assert response.model_dump() == {
            "success": True,
            "data": {"category": "科幻", "platform": None},
            "error": None,
        }

    def test_fail(self) -> None:
        response = ApiResponse[str].fail("下载封面失败: timeout")
        assert response.success is False
        assert response.data is None
        assert response.error == "下载封面失败: timeout"


def test_batch_request_concurrency_bounds() -> None:
    assert BatchSearchRequest(keywords=["三体"]).concurrency is None
    with pytest.raises(ValidationError):
        BatchSearchRequest(keywords=["三体"], concurrency=0)


class TestExceptions:
    def test_base_format(self) -> None:
        error = ShelfMetaException("boom", "SOME_CODE", {"k": 1})
        assert str(error) == "[SOME_CODE] boom"
        assert error.details == {"k": 1}

    def test_network_errors(self) -> None:
        transient = TransientNetworkError("https://youshu.me", "timeout")
        terminal = TerminalNetworkError("https://youshu.me", "HTTP 403", status_code=403)

        assert transient.transient and not terminal.transient
        assert transient.error_code == "NETWORK_TRANSIENT"
        assert terminal.details["status_code"] == 403

    def test_validation_message_is_reason(self) -> None:
        assert str(InvalidKeywordException()) == "搜索关键词不能为空"

    def test_task_cancelled(self) -> None:
        error = TaskCancelledError(3)
        assert error.error_code == "TASK_CANCELLED"
        assert error.details == {"index": 3}


class TestSettings:
    def test_defaults(self) -> None:
        s = Settings(_env_file=None)
        assert s.retrieval_timeouts_s == [10.0, 15.0, 20.0]
        assert s.fallback_encoding == "gbk"
        assert s.search_max_results == 20
        assert s.catalog_base_url == "https://youshu.me"

    def test_empty_timeout_schedule_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, retrieval_timeouts_s=[])

    def test_base_url_trailing_slash_stripped(self) -> None:
        assert Settings(_env_file=None, catalog_base_url="https://youshu.me/").catalog_base_url == "https://youshu.me"

    def test_invalid_base_url_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, catalog_base_url="youshu.me")
