# models/filtration.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from seriesfit.config import Settings, get_settings
from seriesfit.core.exceptions import DegenerateInput
from seriesfit.core.series import Series, SeriesLike

from . import fit
from .base import positive_int, require_fitted, require_series


logger = logging.getLogger(__name__)


def moving_average(values: np.ndarray, window_size: int) -> np.ndarray:
    """Mean of every run of `window_size` consecutive values (len - w + 1 outputs)."""
    values = np.asarray(values, dtype=float)
    if window_size > values.size:
        raise DegenerateInput(
            f"Window size {window_size} exceeds series length {values.size}."
        )
    return sliding_window_view(values, window_size).mean(axis=1)


@dataclass(slots=True)
class MaFiltration:
    """
    Simple moving-average smoothing of a borrowed series.

    Values are averaged in stored order. The derived series is shorter than
    the original by `window_size - 1` points and is aligned to its trailing
    edge: it starts at `min_time + window_size - 1`.
    """

    original: SeriesLike | None
    window_size: int = 5
    settings: Settings | None = field(default=None, repr=False)

    name: str = field(default="", init=False)
    description: str = field(default="", init=False)
    derived: Series | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.window_size = positive_int(self.window_size, "Window size")
        source = self.original.name if self.original is not None else "<none>"
        self.name = f"Moving Average Filtration for: {source} window: {self.window_size}"
        self.description = "This model applies a moving average filter to smooth time series data."
        self.compute()

    def _smooth(self, series: SeriesLike | None) -> Series:
        series = require_series(series)
        settings = self.settings or get_settings()

        n = series.size()
        w = self.window_size
        values = np.array([p.value for p in series.points], dtype=float)
        averages = moving_average(values, w)

        if settings.warn_non_contiguous and not series.is_contiguous:
            logger.warning(
                "Series '%s' is not contiguously indexed; smoothed times may not "
                "line up with the original",
                series.name,
            )

        start = n - (n - w) + (series.min_time - 1)

        derived = Series(name="Moving Average", description=f"Moving average with window size {w}")
        for i, avg in enumerate(averages):
            derived.add_point(start + i, avg)

        logger.debug(
            "Smoothed '%s' (%d points) with window %d into %d points starting at %d",
            series.name, n, w, derived.size(), start,
        )
        return derived

    def compute(self) -> None:
        self.derived = self._smooth(self.original)

    def set_data_and_compute(self, series: SeriesLike) -> None:
        """Swap the borrowed series and re-smooth; state is unchanged on failure."""
        derived = self._smooth(series)
        self.original = series
        self.derived = derived

    # ---- fit quality ----
    def aligned_values(self) -> tuple[np.ndarray, np.ndarray]:
        """
        Original values restricted to the derived time range (stored order)
        against the derived values.
        """
        original, derived = require_fitted(self)
        actual = np.array(
            [p.value for p in original.range(derived.min_time, derived.max_time)], dtype=float
        )
        predicted = derived.values
        return actual, predicted

    def mean_squared_error(self) -> float:
        return fit.mean_squared_error(*self.aligned_values())

    def r_squared(self) -> float:
        return fit.r_squared(*self.aligned_values())

