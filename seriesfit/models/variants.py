# models/variants.py
from __future__ import annotations

from enum import Enum
from typing import Union

from seriesfit.config import Settings
from seriesfit.core.exceptions import InvalidArgument
from seriesfit.core.series import SeriesLike

from .approximation import Approximation
from .filtration import MaFiltration


AnyModel = Union[Approximation, MaFiltration]


class ModelKind(str, Enum):
    APPROXIMATION = "approximation"
    MA_FILTRATION = "ma_filtration"


MODEL_REGISTRY: dict[ModelKind, type] = {
    ModelKind.APPROXIMATION: Approximation,
    ModelKind.MA_FILTRATION: MaFiltration,
}


def kind_of(model: AnyModel) -> ModelKind:
    for kind, cls in MODEL_REGISTRY.items():
        if isinstance(model, cls):
            return kind
    raise InvalidArgument(f"Unknown model type: {type(model).__name__}")


def build_model(
    kind: ModelKind | str,
    series: SeriesLike,
    parameter: int,
    *,
    settings: Settings | None = None,
) -> AnyModel:
    """
    Construct (and compute) a model of the given kind.

    `parameter` is the polynomial degree for an approximation and the window
    size for a moving-average filtration.
    """
    try:
        kind = ModelKind(kind)
    except ValueError as e:
        raise InvalidArgument(f"Unknown model kind: {kind!r}") from e

    cls = MODEL_REGISTRY[kind]
    return cls(series, parameter, settings=settings)
