"""Find the pair of queued stamped values that brackets a target timestamp."""

from __future__ import annotations

import bisect
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")


class InterpolationResult(Enum):
    """Outcome of a search."""

    SUCCESS = "success"  # values covering the target were found
    FAILURE = "failure"  # all values are newer than the target
    WAITING = "waiting"  # all values are older than the target


class SearchMode(Enum):
    LINEAR = "linear"
    BINARY = "binary"


@dataclass(frozen=True)
class InterpolationMatch:
    """Result of a search; the value fields are set only on success."""

    result: InterpolationResult
    left: Optional[tuple[float, Any]] = None
    right: Optional[tuple[float, Any]] = None
    remove_cursor: Optional[int] = None


class InterpolationHelper(Generic[V]):
    """A time-ordered stream of values searched for a bracketing pair."""

    def __init__(self, search_mode: SearchMode = SearchMode.LINEAR) -> None:
        self.search_mode = search_mode
        self._stamps: list[float] = []
        self._values: list[V] = []

    def empty(self) -> bool:
        return not self._stamps

    def __len__(self) -> int:
        return len(self._stamps)

    def leftmost_time(self) -> float:
        """Oldest timestamp, or 0.0 when empty."""
        return self._stamps[0] if self._stamps else 0.0

    def rightmost_time(self) -> float:
        """Newest timestamp, or 0.0 when empty."""
        return self._stamps[-1] if self._stamps else 0.0

    def add(self, stamp: float, value: V) -> None:
        """Append a value; values older than the newest one are ignored."""
        if self._stamps and self._stamps[-1] > stamp:
            logger.warning("inserting non-ordered values!!")
            return
        self._stamps.append(stamp)
        self._values.append(value)

    def find(self, stamp: float) -> InterpolationMatch:
        """Find the neighbouring values around ``stamp``."""
        if not self._stamps or self._stamps[-1] < stamp:
            return InterpolationMatch(InterpolationResult.WAITING)
        if self._stamps[0] > stamp:
            return InterpolationMatch(InterpolationResult.FAILURE)

        if self.search_mode is SearchMode.LINEAR:
            right = 1
            while right < len(self._stamps) and self._stamps[right] < stamp:
                right += 1
        else:
            right = bisect.bisect_left(self._stamps, stamp)

        left = right - 1
        if (
            left < 0
            or right >= len(self._stamps)
            or self._stamps[left] > stamp
            or self._stamps[right] < stamp
        ):
            raise RuntimeError("invalid interpolation search condition")

        return InterpolationMatch(
            InterpolationResult.SUCCESS,
            left=(self._stamps[left], self._values[left]),
            right=(self._stamps[right], self._values[right]),
            remove_cursor=left - 1,
        )

    def erase(self, remove_cursor: int) -> None:
        """Drop the ``remove_cursor`` oldest values."""
        if remove_cursor <= 0:
            return
        del self._stamps[:remove_cursor]
        del self._values[:remove_cursor]