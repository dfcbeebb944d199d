"""도서 메타데이터 검색 서비스 - 수집/디코딩/파싱 오케스트레이션"""
from typing import List, Optional, Sequence
from urllib.parse import quote

from shelfmeta.core.config import settings
from shelfmeta.core.exceptions import (
    DetailFetchFailedException,
    InvalidURLException,
    SearchFailedException,
    ValidationException,
)
from shelfmeta.core.logging import logger, sanitize_for_log
from shelfmeta.crawlers.encoding import EncodingResolver
from shelfmeta.crawlers.http_client import RetrievalClient
from shelfmeta.crawlers.youshu.parsing import extract_detail, extract_search_results
from shelfmeta.engine import ConcurrencyExecutor, ExecutionReport, ProgressCallback
from shelfmeta.schemas.search_schema import BatchSearchItem, DetailMeta, SearchResult
from shelfmeta.utils.url import normalize_href

SEARCH_PATH_TEMPLATE = "/search/articlename/{keyword}/1.html"
NO_MATCH_MESSAGE = "未找到匹配结果"


def build_search_path(keyword: str) -> str:
    """검색어를 퍼센트 인코딩해 검색 경로를 만듭니다."""
    return SEARCH_PATH_TEMPLATE.format(keyword=quote(keyword.strip(), safe=""))


def _reason(error: BaseException) -> str:
    if isinstance(error, ValidationException):
        return error.reason
    message = getattr(error, "message", None)
    return message or str(error) or "网络异常"


class SearchService:
    """
    도서 메타데이터 검색 서비스 - SRP: 파이프라인 조율만 담당

    - 네트워크는 RetrievalClient
    - 인코딩 판별은 EncodingResolver
    - HTML 해석은 youshu.parsing
    - 배치 동시성은 ConcurrencyExecutor

    프로세스당 하나를 만들어 (app lifespan) 호출자에게 넘겨 씁니다.
    """

    def __init__(
        self,
        client: Optional[RetrievalClient] = None,
        resolver: Optional[EncodingResolver] = None,
        executor: Optional[ConcurrencyExecutor] = None,
    ):
        self.client = client or RetrievalClient()
        self.resolver = resolver or EncodingResolver()
        self.executor = executor or ConcurrencyExecutor(settings.batch_concurrency)

    async def _fetch_html(self, path: str) -> str:
        response = await self.client.fetch(path)
        return self.resolver.decode(response.content, response.content_type)

    async def search(self, keyword: str) -> List[SearchResult]:
        """
        키워드로 카탈로그 검색

        Args:
            keyword: 자유 입력 제목

        Returns:
            최대 search_max_results 건의 SearchResult (문서 순서).
            공백 키워드는 네트워크 호출 없이 빈 목록.

        Raises:
            SearchFailedException: 페이지 수집/디코딩/파싱 실패 (원인은 __cause__)
        """
        trimmed = (keyword or "").strip()
        if not trimmed:
            return []

        logger.info(f"[SEARCH] Search request: {sanitize_for_log(trimmed)}")
        try:
            html = await self._fetch_html(build_search_path(trimmed))
            results = extract_search_results(html, max_results=settings.search_max_results)
        except Exception as e:
            logger.error(f"[SEARCH] Search failed: keyword='{sanitize_for_log(trimmed)}', error={type(e).__name__}: {e}")
            raise SearchFailedException(trimmed, _reason(e)) from e

        logger.info(f"[SEARCH] {len(results)} results for: {sanitize_for_log(trimmed)}")
        return results

    async def fetch_detail(self, source_url: str) -> DetailMeta:
        """
        작품 상세 페이지에서 분류/플랫폼 보강

        Raises:
            InvalidURLException: source_url 이 비어 있음 (I/O 이전)
            DetailFetchFailedException: 수집/디코딩/파싱 실패
        """
        if not source_url or not source_url.strip():
            raise InvalidURLException("source_url", "作品链接不能为空")

        detail_url = normalize_href(source_url, self.client.base_url)
        logger.info(f"[SEARCH] Detail request: {sanitize_for_log(detail_url, 120)}")
        try:
            html = await self._fetch_html(detail_url)
            return extract_detail(html)
        except Exception as e:
            logger.error(f"[SEARCH] Detail fetch failed: url='{sanitize_for_log(detail_url, 120)}', error={type(e).__name__}: {e}")
            raise DetailFetchFailedException(detail_url, _reason(e)) from e

    async def batch_search(
        self,
        keywords: Sequence[str],
        concurrency: Optional[int] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[BatchSearchItem]:
        """
        여러 제목을 동시에 검색해 각 제목의 첫 번째 결과를 반환 (일괄 가져오기용)

        결과는 keywords 와 같은 순서/길이입니다.
        """
        tasks = [lambda kw=kw: self.search(kw) for kw in keywords]
        results = await self.executor.run(tasks, concurrency=concurrency, on_progress=on_progress)
        report = ExecutionReport.from_results(results)

        items: List[BatchSearchItem] = []
        for keyword, outcome in zip(keywords, report.outcomes):
            if not outcome.is_success:
                items.append(BatchSearchItem(keyword=keyword, success=False, error=outcome.error_message))
            elif not outcome.value:
                items.append(BatchSearchItem(keyword=keyword, success=False, error=NO_MATCH_MESSAGE))
            else:
                items.append(BatchSearchItem(keyword=keyword, success=True, data=outcome.value[0]))

        logger.info(f"[SEARCH] Batch search finished: {len(report.succeeded)}/{len(report)} fetched")
        return items

    async def enrich_with_details(
        self,
        results: Sequence[SearchResult],
        concurrency: Optional[int] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[SearchResult]:
        """
        검색 결과의 분류/플랫폼 중 빈 값만 상세 페이지로 보강

        상세 조회가 실패한 항목은 원래 값을 그대로 유지합니다.
        """
        tasks = [lambda r=r: self.fetch_detail(r.source_url) for r in results]
        details = await self.executor.run(tasks, concurrency=concurrency, on_progress=on_progress)

        enriched: List[SearchResult] = []
        for result, detail in zip(results, details):
            if isinstance(detail, BaseException):
                logger.warning(f"[SEARCH] Detail enrichment skipped for '{result.title}': {detail}")
                enriched.append(result)
                continue
            enriched.append(
                result.model_copy(
                    update={
                        "category": result.category or detail.category or "",
                        "platform": result.platform or detail.platform,
                    }
                )
            )
        return enriched

    async def close(self) -> None:
        await self.client.close()
