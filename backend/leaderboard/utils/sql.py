"""
SQL utilities for consistent handling of query results.

SQLModel/SQLAlchemy may return COUNT results as int or as a 1-tuple/Row.
Use scalar_int() to safely coerce to int everywhere.

Large ``IN (...)`` lookups are split with chunked() so no single statement
carries more than QUERY_BATCH_SIZE ids.
"""
import os
from typing import Any, Iterator, List, Sequence, TypeVar

T = TypeVar("T")

QUERY_BATCH_SIZE = int(os.getenv("QUERY_BATCH_SIZE", "100"))


def scalar_int(x: Any) -> int:
    """Convert COUNT/aggregate result to int. Handles int or 1-tuple/Row."""
    if x is None:
        return 0
    try:
        return int(x[0])
    except (TypeError, IndexError):
        return int(x)


def chunked(items: Sequence[T], size: int = QUERY_BATCH_SIZE) -> Iterator[List[T]]:
    """Yield consecutive slices of at most ``size`` items."""
    if size <= 0:
        size = len(items) or 1
    for start in range(0, len(items), size):
        yield list(items[start:start + size])
