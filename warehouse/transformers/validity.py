"""
Validity windows for versioned product records.

Each version of a product is valid from its own start date up to the day
before the next version starts. The latest version has an open end and is
the current one.
"""

from collections import defaultdict
from datetime import date, timedelta
from typing import Callable, Dict, Hashable, List, NamedTuple, Optional, Sequence, TypeVar

T = TypeVar("T")


class ValidityWindow(NamedTuple):
    start: Optional[date]
    end: Optional[date]

    @property
    def is_current(self) -> bool:
        return self.start is not None and self.end is None


def assign_end_dates(starts: Sequence[date]) -> List[Optional[date]]:
    """
    End dates for the versions of one key, given their start dates in
    ascending order.

    Equal start dates are resolved in sequence order: the earlier version
    is closed on its own start date so its end never precedes its start.
    Both versions then cover that one day.
    """
    ends: List[Optional[date]] = []
    for current, following in zip(starts, starts[1:]):
        ends.append(max(current, following - timedelta(days=1)))
    if starts:
        ends.append(None)
    return ends


def resolve_validity_windows(
    versions: Sequence[T],
    key_fn: Callable[[T], Optional[Hashable]],
    start_fn: Callable[[T], Optional[date]],
) -> List[ValidityWindow]:
    """
    Compute one window per version, returned in input order.

    Versions are grouped by ``key_fn`` and ordered by (start date, input
    position). Versions without a key stand alone. Versions without a start
    date cannot be placed on the timeline: they get an empty window and are
    never current.
    """
    windows: List[ValidityWindow] = [ValidityWindow(None, None)] * len(versions)
    groups: Dict[Hashable, List[int]] = defaultdict(list)

    for index, version in enumerate(versions):
        start = start_fn(version)
        if start is None:
            continue
        key = key_fn(version)
        if key is None:
            windows[index] = ValidityWindow(start, None)
            continue
        groups[key].append(index)

    for indexes in groups.values():
        ordered = sorted(indexes, key=lambda i: (start_fn(versions[i]), i))
        starts = [start_fn(versions[i]) for i in ordered]
        for index, start, end in zip(ordered, starts, assign_end_dates(starts)):
            windows[index] = ValidityWindow(start, end)

    return windows
