"""Execution Report - index-aligned batch outcomes

ConcurrencyExecutor.run() 의 결과 목록(값 또는 예외)을 감싸
성공/실패 슬롯을 위치 그대로 조회할 수 있게 합니다.
"""

from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class TaskOutcome(Generic[T]):
    """작업 하나의 결과

    Attributes:
        index: 제출 순서상의 위치
        value: 성공 값 (실패 시 None)
        error: 포착된 예외 (성공 시 None)
    """

    index: int
    value: Optional[T] = None
    error: Optional[BaseException] = None

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def error_message(self) -> Optional[str]:
        if self.error is None:
            return None
        return str(self.error) or type(self.error).__name__


@dataclass(frozen=True)
class ExecutionReport(Generic[T]):
    """제출 순서로 정렬된 작업 결과 모음 (길이 = 제출한 작업 수)"""

    outcomes: List[TaskOutcome[T]]

    @classmethod
    def from_results(cls, results: List[Union[T, BaseException]]) -> "ExecutionReport[T]":
        outcomes: List[TaskOutcome[T]] = []
        for idx, item in enumerate(results):
            if isinstance(item, BaseException):
                outcomes.append(TaskOutcome(index=idx, error=item))
            else:
                outcomes.append(TaskOutcome(index=idx, value=item))
        return cls(outcomes=outcomes)

    def __len__(self) -> int:
        return len(self.outcomes)

    def __getitem__(self, index: int) -> TaskOutcome[T]:
        return self.outcomes[index]

    @property
    def succeeded(self) -> List[TaskOutcome[T]]:
        return [o for o in self.outcomes if o.is_success]

    @property
    def failed(self) -> List[TaskOutcome[T]]:
        return [o for o in self.outcomes if not o.is_success]

    def values(self) -> List[Optional[T]]:
        """위치 정렬된 값 목록 (실패 슬롯은 None)."""
        return [o.value for o in self.outcomes]
