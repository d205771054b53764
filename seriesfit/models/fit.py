# models/fit.py
"""
Goodness-of-fit measures shared by every model variant.

Both functions take the aligned value arrays a model produces (see
`Model.aligned_values`): `actual` is the reference taken from the original
series, `predicted` the matching values of the derived series.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Sequence

import numpy as np

from seriesfit.core.exceptions import DegenerateInput, InvalidArgument

if TYPE_CHECKING:
    from .base import Model


logger = logging.getLogger(__name__)


def _aligned(actual: Sequence[float], predicted: Sequence[float]) -> tuple[np.ndarray, np.ndarray]:
    a = np.asarray(actual, dtype=float)
    p = np.asarray(predicted, dtype=float)

    if a.ndim != 1 or p.ndim != 1:
        raise InvalidArgument(f"Expected 1D arrays, got shapes {a.shape} and {p.shape}")
    if a.size != p.size:
        raise InvalidArgument(
            f"`actual` and `predicted` must have same length, got {a.size} vs {p.size}"
        )
    if a.size == 0:
        raise DegenerateInput("Cannot evaluate a fit over zero points.")
    return a, p


def mean_squared_error(actual: Sequence[float], predicted: Sequence[float]) -> float:
    a, p = _aligned(actual, predicted)
    return float(np.mean((a - p) ** 2))


def r_squared(actual: Sequence[float], predicted: Sequence[float]) -> float:
    """
    Coefficient of determination `1 - SS_res / SS_tot`, with `SS_tot` taken
    around the mean of `actual`.

    A constant `actual` has `SS_tot == 0`: the result is 1.0 when `predicted`
    matches it to within rounding noise scaled to the data, and NaN otherwise.
    """
    a, p = _aligned(actual, predicted)
    ss_res = float(np.sum((a - p) ** 2))
    ss_tot = float(np.sum((a - a.mean()) ** 2))

    # Constant reference: SS_tot is zero up to rounding of the mean.
    if np.all(a == a[0]):
        scale = max(1.0, float(np.abs(a).max()))
        if np.allclose(a, p, rtol=1e-9, atol=1e-9 * scale):
            return 1.0
        logger.debug("R^2 undefined for constant reference (SS_res=%g)", ss_res)
        return math.nan
    return 1.0 - ss_res / ss_tot


@dataclass(frozen=True, slots=True)
class FitReport:
    """MSE and R^2 of one model, plus how many aligned points went into them."""

    model_name: str
    mse: float
    r_squared: float
    n_points: int


def evaluate(model: "Model") -> FitReport:
    actual, predicted = model.aligned_values()
    return FitReport(
        model_name=model.name,
        mse=mean_squared_error(actual, predicted),
        r_squared=r_squared(actual, predicted),
        n_points=int(np.asarray(actual).size),
    )


def compare(models: Iterable["Model"]) -> list[FitReport]:
    """
    Evaluate several models and rank them by ascending MSE (best first).

    Ties keep the input order.
    """
    reports = [evaluate(m) for m in models]
    return sorted(reports, key=lambda r: r.mse)
