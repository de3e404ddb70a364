"""Standardization helpers used around the coordinate-descent core."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import numpy as np

__all__ = [
    "StandardizationConfig",
    "StandardizeResult",
    "standardize_X",
    "center_y",
    "apply_standardization",
    "rescale_coefficients",
]

_EPS = 1e-12


@dataclass(frozen=True)
class StandardizationConfig:
    """Configuration for feature/target standardization."""

    X: str = "unit_variance"
    y_center: bool = True


@dataclass
class StandardizeResult:
    """Result of applying standardization to a dataset."""

    X: np.ndarray
    y: Optional[np.ndarray]
    x_mean: Optional[np.ndarray] = None
    x_scale: Optional[np.ndarray] = None
    y_mean: Optional[float] = None
    config: StandardizationConfig = field(default_factory=StandardizationConfig)


def standardize_X(
    X: np.ndarray,
    method: Optional[str] = "unit_variance",
    eps: float = _EPS,
) -> tuple[np.ndarray, Optional[np.ndarray], Optional[np.ndarray]]:
    """
    Standardize the feature matrix.

    ``"center"`` only removes column means. Constant columns get scale 1 so
    they become exactly zero after centring.
    """

    arr = np.asarray(X, dtype=float)
    if arr.ndim != 2:
        raise ValueError(f"X must be two-dimensional, received shape {arr.shape}.")
    if method is None or str(method).lower() == "none":
        return arr.copy(), None, None

    method_l = str(method).lower()
    mean = arr.mean(axis=0, keepdims=True) if arr.shape[0] else np.zeros((1, arr.shape[1]))
    centered = arr - mean

    if method_l == "unit_variance":
        scale = np.std(centered, axis=0, keepdims=True)
    elif method_l == "unit_l2":
        scale = np.linalg.norm(centered, axis=0, keepdims=True)
    elif method_l == "center":
        scale = np.ones_like(mean)
    else:
        raise ValueError(f"Unknown standardization method '{method}'.")
    degenerate = np.std(centered, axis=0, keepdims=True) < eps
    scale = np.where(degenerate, 1.0, scale)
    # centring a constant column can leave rounding residue of order 1e-17
    centered = np.where(degenerate, 0.0, centered)

    standardized = centered / scale
    return standardized, mean.squeeze(0), scale.squeeze(0)


def center_y(y: np.ndarray) -> tuple[np.ndarray, float]:
    """Center response vector to zero mean."""

    arr = np.asarray(y, dtype=float).reshape(-1)
    mean = float(arr.mean()) if arr.size else 0.0
    return arr - mean, mean


def apply_standardization(
    X: np.ndarray,
    y: Optional[np.ndarray],
    config: StandardizationConfig | None = None,
) -> StandardizeResult:
    """Apply feature/target standardization returning transformed arrays."""

    cfg = config or StandardizationConfig()
    X_std, x_mean, x_scale = standardize_X(X, cfg.X)

    y_std: Optional[np.ndarray]
    y_mean: Optional[float]
    if y is None:
        y_std = None
        y_mean = None
    elif cfg.y_center:
        y_std, y_mean = center_y(y)
    else:
        y_std = np.asarray(y, dtype=float).reshape(-1)
        y_mean = None

    return StandardizeResult(
        X=X_std,
        y=y_std,
        x_mean=x_mean,
        x_scale=x_scale,
        y_mean=y_mean,
        config=cfg,
    )


def rescale_coefficients(
    coef_std: np.ndarray,
    x_mean: Optional[np.ndarray],
    x_scale: Optional[np.ndarray],
    y_mean: Optional[float],
) -> tuple[np.ndarray, float]:
    """
    Map coefficients fitted on standardized data back to the original units.

    Returns ``(coef, intercept)`` with ``coef = coef_std / x_scale`` and
    ``intercept = mean(y) - x_mean . coef``.
    """

    coef = np.asarray(coef_std, dtype=float).reshape(-1).copy()
    if x_scale is not None:
        coef = coef / np.asarray(x_scale, dtype=float)
    intercept = 0.0 if y_mean is None else float(y_mean)
    if x_mean is not None:
        intercept -= float(np.asarray(x_mean, dtype=float) @ coef)
    return coef, intercept
