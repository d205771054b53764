# models/base.py
from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np

from seriesfit.core.exceptions import DegenerateInput, InvalidArgument, InvalidState
from seriesfit.core.series import Series, SeriesLike


@runtime_checkable
class Model(Protocol):
    """
    Capability set shared by every model variant.

    A model borrows its `original` series and owns its `derived` series,
    which stays None until the first successful `compute()`.
    """

    name: str
    description: str
    original: SeriesLike | None
    derived: Series | None

    def compute(self) -> None: ...

    def aligned_values(self) -> tuple[np.ndarray, np.ndarray]: ...

    def mean_squared_error(self) -> float: ...

    def r_squared(self) -> float: ...


def require_series(series: SeriesLike | None) -> SeriesLike:
    """Return `series` if it can be modelled, raise otherwise."""
    if series is None:
        raise InvalidState("No original series provided.")
    if series.size() == 0:
        raise DegenerateInput(f"Series '{series.name}' is empty.")
    return series


def require_fitted(model: Model) -> tuple[SeriesLike, Series]:
    if model.original is None or model.derived is None:
        raise InvalidState("Original series or derived series is not set; call compute() first.")
    return model.original, model.derived


def positive_int(value: object, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidArgument(f"{what} must be an integer, got {type(value).__name__}.")
    if value < 1:
        raise InvalidArgument(f"{what} must be at least 1, got {value}.")
    return int(value)
