# seriesfit/core/exceptions.py
from __future__ import annotations


class CoreError(Exception):
    """Base error for all seriesfit exceptions."""


# ---- Validation / construction errors ----
class InvalidArgument(CoreError, ValueError):
    """Raised when a parameter is malformed (degree < 1, reversed range, ...)."""


# ---- Operation ordering errors ----
class InvalidState(CoreError, RuntimeError):
    """Raised when an operation needs data or a prior compute that is missing."""


class DegenerateInput(InvalidState):
    """
    Raised when parameters are individually valid but infeasible for the data:
    an empty series, or a window wider than the series.
    """


# ---- Lookup errors (also behave like KeyError for dict-like APIs) ----
class SeriesNotFound(CoreError, KeyError):
    """Raised when a requested series name is not registered."""


class ModelNotFound(CoreError, KeyError):
    """Raised when a requested model name is not registered."""
