# seriesfit/core/__init__.py
"""
Core data model for seriesfit.

This module defines the input/output container shared by every model:
- Series: mutable, ordered (time, value) observations with derived bounds
- TimeValuePair: a single observation
- SeriesLike: structural interface accepted by the models

The core layer knows nothing about fitting or smoothing.
"""

from .series import Series, SeriesLike, TimeValuePair
from .exceptions import (
    CoreError,
    InvalidArgument,
    InvalidState,
    DegenerateInput,
    SeriesNotFound,
    ModelNotFound,
)


__all__ = [
    # data model
    "Series",
    "SeriesLike",
    "TimeValuePair",

    # exceptions
    "CoreError",
    "InvalidArgument",
    "InvalidState",
    "DegenerateInput",
    "SeriesNotFound",
    "ModelNotFound",
]
