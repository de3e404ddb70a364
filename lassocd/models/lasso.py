"""Lasso estimator wrapping the coordinate-descent core with standardization."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import numpy as np

from data.preprocess import (
    StandardizationConfig,
    StandardizeResult,
    apply_standardization,
    rescale_coefficients,
)
from lassocd.metrics.regression import r2
from lassocd.models.coordinate_descent import CoordinateDescentResult, fit_lasso_cd

__all__ = ["LassoCD"]

logger = logging.getLogger(__name__)

_STANDARDIZE_METHODS = {"unit_variance", "unit_l2", "none"}


@dataclass
class LassoCD:
    """
    Lasso regression fitted by cyclic coordinate descent.

    With ``fit_intercept=True`` the design is centred (and scaled unless
    ``standardize="none"``), the response is centred, the core solver runs on
    the transformed data and the coefficients are mapped back to the original
    units. ``lam`` applies to the transformed problem.
    """

    lam: float = 1.0
    max_iter: int = 1000
    tol: float = 1e-6
    standardize: str = "unit_variance"
    fit_intercept: bool = True

    # Runtime state (accessible after fit)
    coef_: Optional[np.ndarray] = field(default=None, init=False)
    intercept_: float = field(default=0.0, init=False)
    n_iter_: int = field(default=0, init=False)
    converged_: bool = field(default=False, init=False)
    result_: Optional[CoordinateDescentResult] = field(default=None, init=False)

    def __post_init__(self) -> None:
        method = str(self.standardize).lower()
        if method not in _STANDARDIZE_METHODS:
            raise ValueError(
                f"Unknown standardization '{self.standardize}'; expected one of {sorted(_STANDARDIZE_METHODS)}."
            )
        if not self.fit_intercept and method != "none":
            raise ValueError("Standardization requires fit_intercept=True; use standardize='none'.")
        self.standardize = method

    def prepare_inputs(self, X: Any, y: Any) -> Tuple[np.ndarray, np.ndarray, Optional[StandardizeResult]]:
        """Return the (X, y) pair the core solver sees, plus the transform used."""
        X = np.asarray(X, dtype=float)
        y = np.asarray(y, dtype=float).reshape(-1)
        if not self.fit_intercept:
            return X, y, None
        method = "center" if self.standardize == "none" else self.standardize
        prepared = apply_standardization(X, y, StandardizationConfig(X=method, y_center=True))
        return prepared.X, prepared.y, prepared

    def fit(self, X: Any, y: Any) -> "LassoCD":
        X_fit, y_fit, prepared = self.prepare_inputs(X, y)
        result = fit_lasso_cd(X_fit, y_fit, self.lam, max_iter=self.max_iter, tol=self.tol)

        if prepared is not None:
            coef, intercept = rescale_coefficients(
                result.coef, prepared.x_mean, prepared.x_scale, prepared.y_mean
            )
        else:
            coef, intercept = result.coef.copy(), 0.0

        self.coef_ = coef
        self.intercept_ = intercept
        self.n_iter_ = result.n_iter
        self.converged_ = result.converged
        self.result_ = result
        logger.debug(
            "LassoCD fit: lam=%g, nonzero=%d/%d, n_iter=%d",
            self.lam,
            int(np.count_nonzero(coef)),
            coef.size,
            result.n_iter,
        )
        return self

    def predict(self, X: Any) -> np.ndarray:
        if self.coef_ is None:
            raise RuntimeError("Model must be fitted before calling predict().")
        X = np.asarray(X, dtype=float)
        return X @ self.coef_ + self.intercept_

    def score(self, X: Any, y: Any) -> float:
        """Coefficient of determination on (X, y)."""
        return r2(y, self.predict(X))

    def get_posterior_summaries(self) -> Dict[str, Any]:
        if self.coef_ is None:
            raise RuntimeError("Model must be fitted before requesting summaries.")
        return {
            "coef": self.coef_.copy(),
            "intercept": float(self.intercept_),
            "n_iter": int(self.n_iter_),
            "converged": bool(self.converged_),
        }
