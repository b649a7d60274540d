"""Closed character-offset intervals used as interval-tree keys."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Interval:
    """
    Inclusive span ``[start, end]`` of character offsets.

    Ordering is by start, then end (field order), so two distinct disjoint
    intervals never compare equal.
    """
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < 0:
            raise ValueError(f"Interval offsets must be non-negative: {self}")
        if self.start > self.end:
            raise ValueError(f"Interval start exceeds end: {self}")

    def overlaps(self, other: Interval) -> bool:
        return self.start <= other.end and other.start <= self.end

    def __len__(self) -> int:
        return self.end - self.start + 1

    def __str__(self) -> str:
        return f"[{self.start}, {self.end}]"
