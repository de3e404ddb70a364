"""Support-recovery metrics backed by sklearn."""
from __future__ import annotations

import numpy as np
from sklearn.metrics import f1_score, precision_score, recall_score


def support(coef: np.ndarray, atol: float = 0.0) -> np.ndarray:
    """Boolean mask of coefficients whose magnitude exceeds ``atol``."""
    return np.abs(np.asarray(coef, dtype=float).reshape(-1)) > atol


def true_positive_rate(beta_true: np.ndarray, coef: np.ndarray, atol: float = 0.0) -> float:
    """Fraction of truly active features that were selected (recall)."""
    return float(recall_score(support(beta_true), support(coef, atol), zero_division=0))


def false_discovery_rate(beta_true: np.ndarray, coef: np.ndarray, atol: float = 0.0) -> float:
    """Fraction of selected features that are truly inactive."""
    selected = support(coef, atol)
    if not selected.any():
        return 0.0
    return float(1.0 - precision_score(support(beta_true), selected, zero_division=0))


def support_f1(beta_true: np.ndarray, coef: np.ndarray, atol: float = 0.0) -> float:
    """F1 score between true and estimated supports."""
    return float(f1_score(support(beta_true), support(coef, atol), zero_division=0))
