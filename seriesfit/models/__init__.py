# seriesfit/models/__init__.py
"""
Models computed from a Series.

- Model: capability interface (compute, aligned_values, MSE, R^2)
- Approximation: least-squares polynomial fit, Horner evaluation
- MaFiltration: sliding-window moving average
- fit: shared MSE / R^2 evaluator and model comparison
"""

from .base import Model
from .approximation import Approximation, horner
from .filtration import MaFiltration, moving_average
from .fit import FitReport, compare, evaluate, mean_squared_error, r_squared
from .variants import AnyModel, ModelKind, build_model, kind_of


__all__ = [
    # contract
    "Model",
    "AnyModel",
    "ModelKind",
    "build_model",
    "kind_of",

    # variants
    "Approximation",
    "MaFiltration",
    "horner",
    "moving_average",

    # fit evaluation
    "FitReport",
    "evaluate",
    "compare",
    "mean_squared_error",
    "r_squared",
]
