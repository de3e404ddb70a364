"""Optimality and convergence diagnostics for coordinate-descent fits."""
from __future__ import annotations

from typing import Any, Dict

import numpy as np

from lassocd.models.coordinate_descent import CoordinateDescentResult

Array = np.ndarray


def lasso_objective(X: Array, y: Array, coef: Array, lam: float) -> float:
    """``0.5 * ||y - X coef||^2 + lam * ||coef||_1``."""
    resid = np.asarray(y, dtype=float) - np.asarray(X, dtype=float) @ np.asarray(coef, dtype=float)
    return float(0.5 * resid @ resid + lam * np.abs(coef).sum())


def lambda_max(X: Array, y: Array) -> float:
    """Smallest penalty for which the all-zero vector is optimal."""
    corr = np.asarray(X, dtype=float).T @ np.asarray(y, dtype=float)
    return float(np.max(np.abs(corr))) if corr.size else 0.0


def residual_gap(X: Array, y: Array, coef: Array, residual: Array) -> float:
    """Largest absolute difference between a maintained residual and ``y - X coef``."""
    direct = np.asarray(y, dtype=float) - np.asarray(X, dtype=float) @ np.asarray(coef, dtype=float)
    if direct.size == 0:
        return 0.0
    return float(np.max(np.abs(direct - np.asarray(residual, dtype=float))))


def kkt_violation(X: Array, y: Array, coef: Array, lam: float) -> float:
    """
    Largest violation of the Lasso optimality conditions.

    With ``g = X^T (y - X coef)``: active coordinates need ``g_j = lam * sign(coef_j)``,
    inactive ones need ``|g_j| <= lam``. All-zero columns are ignored.
    """
    X = np.asarray(X, dtype=float)
    coef = np.asarray(coef, dtype=float)
    grad = X.T @ (np.asarray(y, dtype=float) - X @ coef)
    informative = np.einsum("ij,ij->j", X, X) > 0.0
    active = (coef != 0.0) & informative
    inactive = (coef == 0.0) & informative

    viol = np.zeros_like(grad)
    viol[active] = np.abs(grad[active] - lam * np.sign(coef[active]))
    viol[inactive] = np.maximum(np.abs(grad[inactive]) - lam, 0.0)
    return float(viol.max()) if viol.size else 0.0


def is_monotone(trace: Array, slack: float = 0.0) -> bool:
    """
    Whether a per-sweep change trace is non-increasing up to ``slack``.

    A soft check: coordinate descent does not guarantee it, but convex,
    well-conditioned problems behave this way.
    """
    arr = np.asarray(trace, dtype=float)
    if arr.size < 2:
        return True
    return bool(np.all(np.diff(arr) <= slack))


def summarize_convergence(
    result: CoordinateDescentResult,
    X: Array,
    y: Array,
    lam: float,
) -> Dict[str, Any]:
    """Collect convergence diagnostics in a JSON-ready dictionary."""
    trace = np.asarray(result.max_change_trace, dtype=float)
    return {
        "n_iter": int(result.n_iter),
        "converged": bool(result.converged),
        "final_max_change": float(trace[-1]) if trace.size else None,
        "max_change_monotone": is_monotone(trace),
        "objective": lasso_objective(X, y, result.coef, lam),
        "kkt_violation": kkt_violation(X, y, result.coef, lam),
        "residual_gap": residual_gap(X, y, result.coef, result.residual),
        "lambda_max": lambda_max(X, y),
        "n_nonzero": int(np.count_nonzero(result.coef)),
        "skipped_columns": list(result.skipped_columns),
    }
