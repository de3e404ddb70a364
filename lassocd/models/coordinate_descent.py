# lassocd/models/coordinate_descent.py
"""Cyclic coordinate descent for the Lasso.

Solves ``argmin_beta 0.5 * ||y - X beta||^2 + lam * ||beta||_1`` one coordinate
at a time, keeping the residual ``r = y - X beta`` up to date incrementally.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple

import numpy as np

__all__ = [
    "LassoInputError",
    "CoordinateDescentResult",
    "soft_threshold",
    "validate_inputs",
    "fit_lasso_cd",
    "lasso_cd",
]

logger = logging.getLogger(__name__)

SweepCallback = Callable[[int, np.ndarray, np.ndarray], None]


class LassoInputError(ValueError):
    """Raised when solver inputs are malformed."""


@dataclass
class CoordinateDescentResult:
    """Outcome of a single coordinate-descent run."""

    coef: np.ndarray
    n_iter: int
    converged: bool
    max_change_trace: np.ndarray
    residual: np.ndarray
    skipped_columns: Tuple[int, ...] = field(default_factory=tuple)

    def as_dict(self) -> dict[str, Any]:
        return {
            "coef": self.coef.tolist(),
            "n_iter": int(self.n_iter),
            "converged": bool(self.converged),
            "max_change_trace": self.max_change_trace.tolist(),
            "skipped_columns": list(self.skipped_columns),
        }


def soft_threshold(z: float, lam: float) -> float:
    """Proximal operator of ``lam * |.|``: shrink ``z`` toward zero by ``lam``."""
    if z > lam:
        return z - lam
    if z < -lam:
        return z + lam
    return 0.0


def validate_inputs(
    X: Any,
    y: Any,
    lam: float,
    max_iter: int,
    tol: float,
) -> tuple[np.ndarray, np.ndarray]:
    """Check shapes and parameters; return X and y as float64 arrays."""
    X_arr = np.asarray(X, dtype=float)
    y_arr = np.asarray(y, dtype=float)

    if X_arr.ndim != 2:
        raise LassoInputError(f"X must be two-dimensional, received shape {X_arr.shape}.")
    if y_arr.ndim == 2 and y_arr.shape[1] == 1:
        y_arr = y_arr.reshape(-1)
    if y_arr.ndim != 1:
        raise LassoInputError(f"y must be one-dimensional, received shape {y_arr.shape}.")
    if X_arr.shape[0] != y_arr.shape[0]:
        raise LassoInputError(
            f"X has {X_arr.shape[0]} rows but y has {y_arr.shape[0]} entries."
        )
    if not np.all(np.isfinite(X_arr)) or not np.all(np.isfinite(y_arr)):
        raise LassoInputError("X and y must contain only finite values.")

    lam_f = float(lam)
    if not math.isfinite(lam_f) or lam_f < 0.0:
        raise LassoInputError(f"lam must be a finite non-negative number, got {lam!r}.")
    tol_f = float(tol)
    if not math.isfinite(tol_f) or tol_f < 0.0:
        raise LassoInputError(f"tol must be a finite non-negative number, got {tol!r}.")
    try:
        iters = int(max_iter)
    except (TypeError, ValueError) as exc:
        raise LassoInputError(f"max_iter must be a positive integer, got {max_iter!r}.") from exc
    if isinstance(max_iter, bool) or iters != max_iter or iters <= 0:
        raise LassoInputError(f"max_iter must be a positive integer, got {max_iter!r}.")

    return X_arr, y_arr


def fit_lasso_cd(
    X: Any,
    y: Any,
    lam: float,
    max_iter: int = 1000,
    tol: float = 1e-6,
    *,
    callback: Optional[SweepCallback] = None,
) -> CoordinateDescentResult:
    """
    Run cyclic coordinate descent and report convergence details.

    Parameters
    ----------
    X: (n, p) design matrix. Used as given; no centring or scaling happens here.
    y: (n,) response.
    lam: L1 penalty strength (>= 0).
    max_iter: maximum number of full sweeps over the coordinates.
    tol: stop once the largest coefficient change within a sweep is below tol.
    callback: optional ``callback(j, beta, r)`` invoked after every coordinate
        update with the live coefficient and residual buffers (read-only).

    Notes
    -----
    Columns with zero squared norm carry no information and would divide by
    zero; they are skipped and their coefficient stays at 0.
    """
    X_arr, y_arr = validate_inputs(X, y, lam, max_iter, tol)
    lam = float(lam)
    tol = float(tol)
    max_iter = int(max_iter)
    _, p = X_arr.shape
    # column-major so every X[:, j] read is contiguous
    X_arr = np.asfortranarray(X_arr)

    beta = np.zeros(p, dtype=float)
    r = y_arr.copy()  # r = y - X @ beta with beta = 0
    col_norm2 = np.einsum("ij,ij->j", X_arr, X_arr)

    skipped = tuple(int(j) for j in np.flatnonzero(col_norm2 == 0.0))
    if skipped:
        logger.warning("Skipping %d all-zero column(s): %s", len(skipped), list(skipped))
    active = [j for j in range(p) if col_norm2[j] > 0.0]

    trace: List[float] = []
    converged = False
    for it in range(max_iter):
        max_change = 0.0
        for j in active:
            X_j = X_arr[:, j]
            norm2 = col_norm2[j]
            beta_old = beta[j]

            rho = float(X_j @ r) + norm2 * beta_old
            beta_new = soft_threshold(rho / norm2, lam / norm2)
            beta[j] = beta_new

            delta = beta_old - beta_new
            if delta != 0.0:
                r += X_j * delta
            max_change = max(max_change, abs(delta))

            if callback is not None:
                callback(j, beta, r)

        trace.append(max_change)
        logger.debug("sweep %d: max_change=%.3e", it + 1, max_change)
        if max_change < tol:
            converged = True
            break

    n_iter = len(trace)
    if converged:
        logger.info("Coordinate descent converged after %d sweep(s).", n_iter)
    else:
        logger.warning(
            "Coordinate descent did not converge within %d sweep(s) (last max_change=%.3e).",
            max_iter,
            trace[-1] if trace else float("nan"),
        )

    return CoordinateDescentResult(
        coef=beta,
        n_iter=n_iter,
        converged=converged,
        max_change_trace=np.asarray(trace, dtype=float),
        residual=r,
        skipped_columns=skipped,
    )


def lasso_cd(
    X: Any,
    y: Any,
    lam: float,
    max_iter: int = 1000,
    tol: float = 1e-6,
) -> np.ndarray:
    """Estimate Lasso coefficients (no intercept, no standardization)."""
    return fit_lasso_cd(X, y, lam, max_iter=max_iter, tol=tol).coef
