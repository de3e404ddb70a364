"""Synthetic sparse-regression data generators."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Sequence

import math
import numpy as np

__all__ = [
    "GeneratorError",
    "SyntheticConfig",
    "SyntheticDataset",
    "DEFAULT_BETA",
    "generate_synthetic",
    "synthetic_config_from_dict",
]

DEFAULT_BETA = (3.0, -2.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0)


class GeneratorError(ValueError):
    """Raised when an invalid synthetic configuration is provided."""


@dataclass
class SyntheticConfig:
    """
    Parameters for a linear-Gaussian scenario ``y = X beta + sigma * eps``.

    Either give ``beta`` explicitly (its length must equal ``p``) or let the
    generator draw ``n_active`` non-zero coefficients of magnitude
    ``signal_scale`` with random signs. ``correlation`` is the AR(1) coefficient
    between neighbouring columns (0 gives independent standard normals).
    """

    n: int = 100
    p: int = 10
    beta: Optional[Sequence[float]] = None
    n_active: int = 2
    signal_scale: float = 2.0
    noise_sigma: float = 1.0
    correlation: float = 0.0
    zero_columns: Sequence[int] = field(default_factory=tuple)
    seed: Optional[int] = None
    name: Optional[str] = None


@dataclass
class SyntheticDataset:
    """Generated synthetic dataset together with metadata."""

    X: np.ndarray
    y: np.ndarray
    beta: np.ndarray
    noise_sigma: float
    info: Dict[str, object] = field(default_factory=dict)


def _draw_design(rng: np.random.Generator, n: int, p: int, rho: float) -> np.ndarray:
    if abs(rho) < 1e-12:
        return rng.standard_normal((n, p))
    if not (-0.999 <= rho <= 0.999):
        raise GeneratorError("AR1 correlation requires rho in [-0.999, 0.999].")
    eps = rng.standard_normal((n, p))
    design = np.empty((n, p), dtype=float)
    design[:, 0] = eps[:, 0]
    scale = math.sqrt(max(1.0 - rho * rho, 1e-8))
    for j in range(1, p):
        design[:, j] = rho * design[:, j - 1] + scale * eps[:, j]
    return design


def _resolve_beta(config: SyntheticConfig, rng: np.random.Generator) -> np.ndarray:
    if config.beta is not None:
        beta = np.asarray(list(config.beta), dtype=float)
        if beta.shape != (config.p,):
            raise GeneratorError(f"beta must have length p={config.p}, received {beta.shape[0]}.")
        return beta

    k = int(config.n_active)
    if k < 0 or k > config.p:
        raise GeneratorError(f"n_active must lie in [0, {config.p}], got {k}.")
    beta = np.zeros(config.p, dtype=float)
    if k:
        idx = np.sort(rng.choice(config.p, size=k, replace=False))
        signs = rng.choice([-1.0, 1.0], size=k)
        beta[idx] = signs * float(config.signal_scale)
    return beta


def generate_synthetic(config: SyntheticConfig, *, rng: Optional[np.random.Generator] = None) -> SyntheticDataset:
    if config.n <= 0 or config.p <= 0:
        raise GeneratorError("Both n and p must be positive.")
    if config.noise_sigma < 0:
        raise GeneratorError("noise_sigma must be non-negative.")

    local_rng = rng or np.random.default_rng(config.seed)
    X = _draw_design(local_rng, config.n, config.p, float(config.correlation))
    beta = _resolve_beta(config, local_rng)

    zero_cols = sorted({int(j) for j in config.zero_columns})
    for j in zero_cols:
        if j < 0 or j >= config.p:
            raise GeneratorError(f"zero_columns index {j} outside valid feature range [0, {config.p}).")
    if zero_cols:
        X[:, zero_cols] = 0.0

    noise = local_rng.normal(0.0, float(config.noise_sigma), size=config.n)
    y = X @ beta + noise

    info: Dict[str, object] = {
        "active_idx": np.flatnonzero(beta),
        "zero_columns": np.asarray(zero_cols, dtype=int),
        "seed": config.seed,
        "name": config.name,
        "correlation": float(config.correlation),
    }
    return SyntheticDataset(X=X, y=y, beta=beta, noise_sigma=float(config.noise_sigma), info=info)


def synthetic_config_from_dict(
    data_cfg: Mapping[str, object],
    *,
    seed: Optional[int] = None,
    name: Optional[str] = None,
) -> SyntheticConfig:
    """Build a :class:`SyntheticConfig` from the ``data`` section of a run config."""
    beta = data_cfg.get("beta")
    if beta is not None and not isinstance(beta, Sequence):
        raise GeneratorError("data.beta must be a list of numbers.")
    p_default = len(beta) if beta is not None else len(DEFAULT_BETA)
    if beta is None and "n_active" not in data_cfg and int(data_cfg.get("p", p_default)) == len(DEFAULT_BETA):
        beta = DEFAULT_BETA

    cfg_seed = data_cfg.get("seed", seed)
    return SyntheticConfig(
        n=int(data_cfg.get("n", 100)),
        p=int(data_cfg.get("p", p_default)),
        beta=None if beta is None else [float(b) for b in beta],
        n_active=int(data_cfg.get("n_active", 2)),
        signal_scale=float(data_cfg.get("signal_scale", 2.0)),
        noise_sigma=float(data_cfg.get("noise_sigma", 1.0)),
        correlation=float(data_cfg.get("correlation", 0.0)),
        zero_columns=tuple(int(j) for j in data_cfg.get("zero_columns", ()) or ()),
        seed=None if cfg_seed is None else int(cfg_seed),
        name=name or data_cfg.get("name"),
    )
