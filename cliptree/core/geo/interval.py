"""
Intervals of curve parameters and the set algebra on sorted interval lists
that is needed to trim curves against nested clip regions.

All list operations expect their inputs sorted by `low` and pairwise
disjoint, and return new lists in the same form.
"""
from dataclasses import dataclass
from typing import Iterable, List


@dataclass(frozen=True)
class Interval:
    """A closed parameter interval [low, high]."""

    low: float
    high: float

    @property
    def length(self) -> float:
        return self.high - self.low

    def is_null(self) -> bool:
        return self.high < self.low

    def contains(self, value: float) -> bool:
        return self.low <= value <= self.high

    def fraction_to_parameter(self, fraction: float) -> float:
        return self.low + fraction * (self.high - self.low)


def sort_intervals(intervals: Iterable[Interval]) -> List[Interval]:
    return sorted(intervals, key=lambda r: (r.low, r.high))


def consolidate(intervals: Iterable[Interval]) -> List[Interval]:
    """
    Sorts the intervals and merges any that overlap or touch.
    """
    result: List[Interval] = []
    for interval in sort_intervals(intervals):
        if interval.is_null():
            continue
        if result and interval.low <= result[-1].high:
            if interval.high > result[-1].high:
                result[-1] = Interval(result[-1].low, interval.high)
        else:
            result.append(interval)
    return result


def difference_sorted(
    data_a: List[Interval], data_b: List[Interval]
) -> List[Interval]:
    """
    Set difference A - B of two sorted, disjoint interval lists.

    Pieces of A that B cuts down to zero length are dropped, so the
    boundaries shared by A and B belong to neither output piece's interior.
    """
    result: List[Interval] = []
    i_b = 0
    n_b = len(data_b)
    for range_a in data_a:
        low = range_a.low
        high = range_a.high
        while i_b < n_b:
            range_b = data_b[i_b]
            if range_b.high < low:
                i_b += 1
            elif range_b.high <= high:
                if range_b.low > low:
                    result.append(Interval(low, range_b.low))
                low = range_b.high
                i_b += 1
            else:
                # B ends beyond range_a; it may still cut into the next A.
                if range_b.low < high:
                    high = range_b.low
                break
        if low < high:
            result.append(Interval(low, high))
    return result


def intersect_sorted(
    data_a: List[Interval], data_b: List[Interval]
) -> List[Interval]:
    """Set intersection of two sorted, disjoint interval lists."""
    result: List[Interval] = []
    i_a = 0
    i_b = 0
    while i_a < len(data_a) and i_b < len(data_b):
        range_a = data_a[i_a]
        range_b = data_b[i_b]
        low = max(range_a.low, range_b.low)
        high = min(range_a.high, range_b.high)
        if low <= high:
            result.append(Interval(low, high))
        if range_a.high < range_b.high:
            i_a += 1
        else:
            i_b += 1
    return result


def union_sorted(
    data_a: List[Interval], data_b: List[Interval]
) -> List[Interval]:
    """Set union of two interval lists."""
    return consolidate(list(data_a) + list(data_b))


def complement_sorted(
    intervals: List[Interval], low: float = 0.0, high: float = 1.0
) -> List[Interval]:
    """
    Parts of [low, high] not covered by the sorted, disjoint intervals.
    """
    return difference_sorted([Interval(low, high)], intervals)
