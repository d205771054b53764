# core/series.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, NamedTuple, Protocol, runtime_checkable

import numpy as np

from seriesfit.config import get_settings

from .exceptions import InvalidArgument


class TimeValuePair(NamedTuple):
    """One observation: integer time index + real value."""

    time: int
    value: float


@runtime_checkable
class SeriesLike(Protocol):
    """Structural interface of an input series (read by models, reindexed by a workspace)."""

    name: str
    description: str | None

    @property
    def points(self) -> list[TimeValuePair]: ...

    @property
    def min_time(self) -> int: ...

    @property
    def max_time(self) -> int: ...

    @property
    def is_contiguous(self) -> bool: ...

    def size(self) -> int: ...

    def range(self, start_time: int, end_time: int) -> list[TimeValuePair]: ...

    def value_at(self, time: int) -> float | None: ...

    def reindex(self, start_index: int) -> bool: ...


@dataclass(slots=True)
class Series:
    """
    Mutable, insertion-ordered collection of (time, value) observations.

    Times are not required to be sorted or unique. Bounds of an empty
    series are all 0.
    """

    name: str
    description: str | None = None
    _points: list[TimeValuePair] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise InvalidArgument("Series.name must be a non-empty string.")

    @classmethod
    def from_pairs(
        cls,
        name: str,
        pairs: Iterable[tuple[int, float]],
        *,
        description: str | None = None,
    ) -> "Series":
        series = cls(name=name, description=description)
        for t, v in pairs:
            series.add_point(t, v)
        return series

    # ---- container API ----
    @property
    def points(self) -> list[TimeValuePair]:
        return self._points

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[TimeValuePair]:
        return iter(self._points)

    def __str__(self) -> str:
        return f"{self.name}: {len(self._points)} data points"

    def size(self) -> int:
        return len(self._points)

    # ---- derived bounds ----
    @property
    def min_time(self) -> int:
        return min(p.time for p in self._points) if self._points else 0

    @property
    def max_time(self) -> int:
        return max(p.time for p in self._points) if self._points else 0

    @property
    def min_value(self) -> float:
        return min(p.value for p in self._points) if self._points else 0.0

    @property
    def max_value(self) -> float:
        return max(p.value for p in self._points) if self._points else 0.0

    @property
    def is_contiguous(self) -> bool:
        """True when stored times run ascending in steps of exactly one."""
        times = self.times
        if times.size == 0:
            return False
        return bool(np.all(np.diff(times) == 1))

    # ---- numpy views ----
    @property
    def times(self) -> np.ndarray:
        return np.fromiter((p.time for p in self._points), dtype=np.int64, count=len(self._points))

    @property
    def values(self) -> np.ndarray:
        return np.fromiter((p.value for p in self._points), dtype=float, count=len(self._points))

    def to_numpy(self) -> tuple[np.ndarray, np.ndarray]:
        # Always fresh arrays: the point list is the source of truth.
        return self.times, self.values

    # ---- mutation ----
    def add_point(self, time: int, value: float) -> None:
        self._points.append(TimeValuePair(int(time), float(value)))

    def reindex(self, start_index: int) -> bool:
        """
        Rewrite every time to a contiguous run starting at `start_index`.

        Stored order and values are preserved. Returns False (and leaves the
        series untouched) when empty or already starting at `start_index`.
        """
        if not self._points or self.min_time == start_index:
            return False
        self._points[:] = [
            TimeValuePair(start_index + i, p.value) for i, p in enumerate(self._points)
        ]
        return True

    def clear(self) -> bool:
        if not self._points:
            return False
        self._points.clear()
        return True

    # ---- queries ----
    def range(self, start_time: int, end_time: int) -> list[TimeValuePair]:
        return [p for p in self._points if start_time <= p.time <= end_time]

    def value_at(self, time: int) -> float | None:
        for p in self._points:
            if p.time == time:
                return p.value
        return None

    def clone(self, new_name: str | None = None) -> "Series":
        name = new_name if new_name is not None else f"{self.name}{get_settings().copy_suffix}"
        copy = Series(name=name, description=self.description)
        copy._points.extend(self._points)
        return copy
