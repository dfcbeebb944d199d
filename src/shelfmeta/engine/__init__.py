"""Engine Layer - batch execution primitives

This module provides the domain-independent engine layer:
- ConcurrencyExecutor: sliding-window bounded-concurrency task runner
- ExecutionReport / TaskOutcome: index-aligned batch results
"""

from .executor import ConcurrencyExecutor, ProgressCallback, Task
from .result import ExecutionReport, TaskOutcome

__all__ = [
    "ConcurrencyExecutor",
    "ProgressCallback",
    "Task",
    "ExecutionReport",
    "TaskOutcome",
]
