"""Lasso regression by cyclic coordinate descent."""

from lassocd.models.coordinate_descent import (
    CoordinateDescentResult,
    LassoInputError,
    fit_lasso_cd,
    lasso_cd,
    soft_threshold,
)
from lassocd.models.lasso import LassoCD

__version__ = "0.1.0"

__all__ = [
    "CoordinateDescentResult",
    "LassoCD",
    "LassoInputError",
    "fit_lasso_cd",
    "lasso_cd",
    "soft_threshold",
]
