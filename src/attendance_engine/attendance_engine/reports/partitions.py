"""Fetch independent date partitions concurrently and merge them by position.

Accumulation downstream is commutative, but results are still concatenated
in partition order (not completion order) so output stays deterministic.
Any failing partition aborts the whole fetch.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Callable, List, Sequence, Tuple, TypeVar

from ..common.datetime_utils import iter_month_ranges

logger = logging.getLogger(__name__)

T = TypeVar("T")
Partition = Tuple[date, date]


def month_partitions(start: date, end: date) -> List[Partition]:
    return list(iter_month_ranges(start, end))


def fetch_partitioned(
    fetch: Callable[[Partition], Sequence[T]],
    partitions: Sequence[Partition],
    *,
    max_workers: int,
) -> List[T]:
    if not partitions:
        return []

    if len(partitions) == 1 or max_workers <= 1:
        chunks = [fetch(p) for p in partitions]
    else:
        logger.debug("Fetching %d partitions with %d workers", len(partitions), max_workers)
        with ThreadPoolExecutor(max_workers=min(max_workers, len(partitions))) as pool:
            futures = [pool.submit(fetch, p) for p in partitions]
            chunks = []
            try:
                for future in futures:
                    chunks.append(future.result())
            except Exception:
                for future in futures:
                    future.cancel()
                raise

    return [item for chunk in chunks for item in chunk]
