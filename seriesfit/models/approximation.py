# models/approximation.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np
from numpy.polynomial import polynomial as P

from seriesfit.config import Settings, get_settings
from seriesfit.core.exceptions import InvalidArgument, InvalidState
from seriesfit.core.series import Series, SeriesLike

from . import fit
from .base import positive_int, require_fitted, require_series


logger = logging.getLogger(__name__)

NOT_CALCULATED = "Model not calculated"


def horner(coefficients: tuple[float, ...], time: float) -> float:
    """Evaluate `sum(c[i] * time**i)` with coefficients ordered low to high."""
    result = coefficients[-1]
    for c in reversed(coefficients[:-1]):
        result = result * time + c
    return float(result)


def _format_magnitude(value: float, decimals: int) -> str:
    text = f"{value:.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


@dataclass(slots=True)
class Approximation:
    """
    Least-squares polynomial fit of `degree` over a borrowed series.

    Coefficients are ordered from lowest to highest power, so a quadratic
    `a*x^2 + b*x + c` is stored as `(c, b, a)`. The derived series covers
    every integer time between the original's min and max time.
    """

    original: SeriesLike | None
    degree: int = 1
    settings: Settings | None = field(default=None, repr=False)

    name: str = field(default="", init=False)
    description: str = field(default="", init=False)
    coefficients: tuple[float, ...] | None = field(default=None, init=False, repr=False)
    derived: Series | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.degree = positive_int(self.degree, "Polynomial degree")
        source = self.original.name if self.original is not None else "<none>"
        self.name = f"Polynomial Approximation for: {source} degree: {self.degree}"
        self.description = f"Polynomial approximation model (degree {self.degree})"
        self.compute()

    # ---- computation ----
    def _fit(self, series: SeriesLike | None) -> tuple[tuple[float, ...], Series]:
        series = require_series(series)

        ordered = sorted(series.points, key=lambda p: p.time)
        x = np.array([p.time for p in ordered], dtype=float)
        y = np.array([p.value for p in ordered], dtype=float)

        if np.unique(x).size <= self.degree:
            logger.warning(
                "Degree %d fit over %d distinct times in '%s' is under-determined",
                self.degree, np.unique(x).size, series.name,
            )

        coefficients = tuple(float(c) for c in P.polyfit(x, y, self.degree))

        derived = Series(
            name=f"Polynomial Approximation (Degree {self.degree})",
            description=f"Polynomial approximation of degree {self.degree} for {series.name}",
        )
        for t in range(series.min_time, series.max_time + 1):
            derived.add_point(t, horner(coefficients, t))

        logger.debug(
            "Fitted degree %d polynomial to '%s' (%d points): %s",
            self.degree, series.name, series.size(), coefficients,
        )
        return coefficients, derived

    def compute(self) -> None:
        self.coefficients, self.derived = self._fit(self.original)

    def set_data_and_compute(self, series: SeriesLike) -> None:
        """Swap the borrowed series and refit; state is unchanged on failure."""
        coefficients, derived = self._fit(series)
        self.original = series
        self.coefficients, self.derived = coefficients, derived

    # ---- evaluation ----
    def evaluate(self, time: float) -> float:
        if not self.coefficients:
            raise InvalidState("Model has not been calculated yet. Call compute() first.")
        return horner(self.coefficients, time)

    def evaluate_range(self, start_time: int, end_time: int) -> Series:
        if not self.coefficients:
            raise InvalidState("Model has not been calculated yet. Call compute() first.")
        if end_time < start_time:
            raise InvalidArgument("End time must be greater than or equal to start time.")

        out = Series(
            name=f"Approximation [{start_time}-{end_time}]",
            description=(
                f"Polynomial approximation (degree {self.degree}) "
                f"from time {start_time} to {end_time}"
            ),
        )
        for t in range(start_time, end_time + 1):
            out.add_point(t, horner(self.coefficients, t))
        return out

    def formula(self) -> str:
        """
        Human-readable polynomial, e.g. ``"3 - 2x + 0.5x^2"``.

        Near-zero terms are left out; a fully empty polynomial renders "0".
        """
        if not self.coefficients:
            return NOT_CALCULATED

        settings = self.settings or get_settings()
        parts: list[str] = []
        for power, c in enumerate(self.coefficients):
            if abs(c) < settings.coefficient_epsilon:
                continue
            magnitude = round(abs(c), settings.formula_decimals)
            if magnitude == 0:
                continue

            term = _format_magnitude(magnitude, settings.formula_decimals)
            if power == 1:
                term += "x"
            elif power > 1:
                term += f"x^{power}"

            if not parts:
                parts.append(f"-{term}" if c < 0 else term)
            else:
                parts.append(f" - {term}" if c < 0 else f" + {term}")

        return "".join(parts) if parts else "0"

    # ---- fit quality ----
    def aligned_values(self) -> tuple[np.ndarray, np.ndarray]:
        """
        Every original value (stored order) against the derived value at the
        same time.
        """
        original, derived = require_fitted(self)
        by_time: dict[int, float] = {}
        for p in derived.points:
            by_time.setdefault(p.time, p.value)

        actual = np.array([p.value for p in original.points], dtype=float)
        try:
            predicted = np.array([by_time[p.time] for p in original.points], dtype=float)
        except KeyError as e:
            raise InvalidState(
                f"Derived series has no value at time {e.args[0]}; the original "
                "series changed since the last compute()."
            ) from e
        return actual, predicted

    def mean_squared_error(self) -> float:
        return fit.mean_squared_error(*self.aligned_values())

    def r_squared(self) -> float:
        return fit.r_squared(*self.aligned_values())
