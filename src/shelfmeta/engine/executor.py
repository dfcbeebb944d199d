"""Concurrency Executor - bounded-parallelism task runner

여러 개의 독립 작업(검색/상세 조회 등)을 동시에 실행하되,
동시에 진행 중인 작업 수를 concurrency 로 제한합니다 (원격 호스트 보호).

- 슬라이딩 윈도우: 작업 하나가 끝나면 즉시 다음 작업을 시작 (세대 단위 배치 아님)
- 작업 실패는 해당 슬롯에 예외 객체로 기록, 다른 작업은 계속 진행
- 결과는 완료 순서가 아니라 제출 순서로 정렬
- 작업 본문은 들여다보지 않음 (도메인 독립)
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar, Union

from shelfmeta.core.exceptions import TaskCancelledError
from shelfmeta.core.logging import logger

T = TypeVar("T")

Task = Callable[..., Awaitable[T]]
ProgressCallback = Callable[[int, int], None]


def _accepts_token(task: Callable[..., object]) -> bool:
    """작업이 취소 토큰 인자를 받는지 확인.

    기본값이 있는 인자(lambda u=u: ...)는 토큰 자리로 보지 않습니다.
    """
    try:
        params = inspect.signature(task).parameters.values()
    except (TypeError, ValueError):
        return False
    for p in params:
        if p.kind == p.VAR_POSITIONAL:
            return True
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD) and p.default is p.empty:
            return True
    return False


class ConcurrencyExecutor:
    """최대 N개 작업만 동시에 실행하는 범용 실행기.

    Usage:
        executor = ConcurrencyExecutor(concurrency=4)
        results = await executor.run([lambda: fetch(u) for u in urls])
        # results[i] 는 urls[i] 의 결과 값 또는 예외 객체
    """

    def __init__(self, concurrency: int = 4):
        if concurrency < 1:
            raise ValueError(f"concurrency must be >= 1 (got {concurrency})")
        self.concurrency = concurrency

    async def run(
        self,
        tasks: Sequence[Task[T]],
        concurrency: Optional[int] = None,
        on_progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> List[Union[T, BaseException]]:
        """작업 목록을 제한된 동시성으로 실행.

        Args:
            tasks: 인자 없는 async callable 목록 (cancel_event 사용 시 토큰 1개를 받아도 됨)
            concurrency: 이번 실행의 동시성 (기본값: 생성자 값)
            on_progress: (완료 수, 전체 수) 콜백, 각 작업 결과 기록 직후 동기 호출
            cancel_event: 설정되면 아직 시작 안 한 작업은 시작하지 않음 (실행 중 작업은 중단하지 않음)

        Returns:
            제출 순서와 같은 길이/순서의 결과 목록 (실패 슬롯은 예외 객체)

        Raises:
            ValueError: concurrency < 1
        """
        limit = self.concurrency if concurrency is None else concurrency
        if limit < 1:
            raise ValueError(f"concurrency must be >= 1 (got {limit})")

        total = len(tasks)
        if total == 0:
            return []

        results: List[Union[T, BaseException, None]] = [None] * total
        cursor = 0
        completed = 0

        def _record(index: int, outcome: Union[T, BaseException]) -> None:
            nonlocal completed
            results[index] = outcome
            completed += 1
            if on_progress is not None:
                try:
                    on_progress(completed, total)
                except Exception as e:
                    logger.warning(f"[EXECUTOR] Progress callback failed: {type(e).__name__}: {e}")

        async def _invoke(task: Task[T]) -> T:
            if cancel_event is not None and _accepts_token(task):
                return await task(cancel_event)
            return await task()

        async def _worker(worker_id: int) -> None:
            nonlocal cursor
            while cursor < total:
                index = cursor
                cursor += 1

                if cancel_event is not None and cancel_event.is_set():
                    _record(index, TaskCancelledError(index))
                    continue

                try:
                    value = await _invoke(tasks[index])
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    logger.debug(f"[EXECUTOR] Task #{index} failed on worker {worker_id}: {type(e).__name__}: {e}")
                    _record(index, e)
                else:
                    _record(index, value)

        workers = min(limit, total)
        logger.debug(f"[EXECUTOR] Running {total} tasks with {workers} workers")
        await asyncio.gather(*(_worker(i) for i in range(workers)))

        return results  # type: ignore[return-value]
