"""
Latest-wins deduplication on a natural key
"""

import logging
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _rank(value: Any) -> Tuple:
    # None ranks below every real value
    return (0,) if value is None else (1, value)


def resolve_latest(
    records: Iterable[T],
    key_fn: Callable[[T], Optional[Hashable]],
    order_fn: Callable[[T], Any],
) -> List[T]:
    """
    Keep exactly one record per natural key: the one with the greatest
    ``order_fn`` value.

    Records whose key is None are dropped, since they cannot be keyed
    downstream. When several records share the greatest order value, the
    one that came first in ``records`` wins. The result lists keys in
    order of first appearance.
    """
    latest: Dict[Hashable, T] = {}
    seen = 0
    dropped = 0

    for record in records:
        seen += 1
        key = key_fn(record)
        if key is None:
            dropped += 1
            continue
        current = latest.get(key)
        if current is None or _rank(order_fn(record)) > _rank(order_fn(current)):
            latest[key] = record

    logger.debug(
        f"Deduplicated {seen} records to {len(latest)} "
        f"({dropped} without key, {seen - dropped - len(latest)} superseded)"
    )
    return list(latest.values())
