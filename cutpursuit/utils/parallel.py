"""Serial or threaded dispatch of independent tasks."""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional, TypeVar

T = TypeVar("T")
R = TypeVar("R")


def num_workers(num_ops: int, num_tasks: int, min_ops_per_thread: int = 10000, max_workers: Optional[int] = None) -> int:
    """Number of workers worth using for ``num_ops`` operations split in ``num_tasks`` tasks.

    Small workloads run serially: one worker per ``min_ops_per_thread``
    operations, never more than the tasks, the available processors, or
    ``max_workers``.
    """
    available = os.cpu_count() or 1
    if max_workers is not None:
        available = min(available, int(max_workers))
    workers = int(num_ops) // max(int(min_ops_per_thread), 1)
    return max(1, min(workers, int(num_tasks), available))


def parallel_map(fn: Callable[[T], R], tasks: Iterable[T], workers: int = 1) -> List[R]:
    """Apply ``fn`` to every task, on a thread pool when ``workers > 1``."""
    if workers <= 1:
        return [fn(task) for task in tasks]
    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(fn, tasks))
