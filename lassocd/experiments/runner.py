"""
Experiment orchestration for coordinate-descent Lasso runs.

:func:`run_experiment` is the public entry point invoked by the CLI
(`python -m lassocd.cli.run_experiment`). It expects a fully merged
configuration dictionary and an output directory where artefacts are written:

* ``dataset.npz``: train/test arrays plus the true coefficients.
* ``coefficients.json``: estimated and true coefficients.
* ``convergence.json``: sweep trace and optimality diagnostics.
* ``metrics.json``: prediction and support-recovery metrics.

With ``experiments.repeats > 1`` each repeat uses ``seed + index`` and writes
into ``repeat_XXX/``; the root directory then only keeps ``summary.json`` and
the averaged ``metrics.json``.
"""

from __future__ import annotations

import logging
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import numpy as np

from data.generators import generate_synthetic, synthetic_config_from_dict
from data.splits import train_test_split_indices
from lassocd.diagnostics.convergence import summarize_convergence
from lassocd.metrics.regression import mae, r2, rmse
from lassocd.metrics.selection import false_discovery_rate, support_f1, true_positive_rate
from lassocd.models.lasso import LassoCD
from lassocd.utils.config_parser import solver_params_from_config
from lassocd.utils.io import save_json
from lassocd.utils.logging_utils import Timer, progress

logger = logging.getLogger(__name__)


class ExperimentError(RuntimeError):
    """Raised when a configuration-driven experiment cannot be executed."""


def _to_serializable(value: Any) -> Any:
    """Convert NumPy / Path rich objects into JSON serialisable forms."""
    if isinstance(value, (np.generic,)):
        return value.item()
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, Mapping):
        return {k: _to_serializable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_serializable(v) for v in value]
    if isinstance(value, Path):
        return str(value)
    return value


def _resolve_seed(*candidates: Any) -> Optional[int]:
    for cand in candidates:
        if cand is None:
            continue
        try:
            return int(cand)
        except (TypeError, ValueError):
            continue
    return None


def _build_model(config: Mapping[str, Any]) -> LassoCD:
    params = solver_params_from_config(config)
    model_cfg = config.get("model") or {}
    std_cfg = config.get("standardization") or {}
    # centring y is what fitting an intercept means for LassoCD
    fit_intercept = model_cfg.get("fit_intercept")
    if fit_intercept is None:
        fit_intercept = std_cfg.get("y_center", True)
    standardize = model_cfg.get("standardize", std_cfg.get("X", "none"))
    return LassoCD(
        lam=params["lam"],
        max_iter=params["max_iter"],
        tol=params["tol"],
        standardize="none" if standardize is None else str(standardize),
        fit_intercept=bool(fit_intercept),
    )


def _evaluate(
    model: LassoCD,
    beta_true: np.ndarray,
    X_test: np.ndarray,
    y_test: np.ndarray,
) -> Dict[str, Optional[float]]:
    coef = model.coef_
    metrics: Dict[str, Optional[float]] = {
        "RMSE": None,
        "MAE": None,
        "R2": None,
        "CoefL2Error": float(np.linalg.norm(coef - beta_true)),
        "TPR": true_positive_rate(beta_true, coef),
        "FDR": false_discovery_rate(beta_true, coef),
        "SupportF1": support_f1(beta_true, coef),
        "NonZero": float(np.count_nonzero(coef)),
    }
    if y_test.size:
        preds = model.predict(X_test)
        metrics["RMSE"] = rmse(y_test, preds)
        metrics["MAE"] = mae(y_test, preds)
        metrics["R2"] = r2(y_test, preds) if y_test.size > 1 else None
    return metrics


def _run_single(config: Mapping[str, Any], out_dir: Path, *, seed: Optional[int]) -> Dict[str, Any]:
    data_cfg = config.get("data") or {}
    data_type = str(data_cfg.get("type", "synthetic")).lower()
    if data_type != "synthetic":
        raise ExperimentError(f"Unsupported data type '{data_type}'; only 'synthetic' is available.")

    # the per-repeat seed wins over data.seed
    data_cfg = {k: v for k, v in data_cfg.items() if k != "seed"}
    dataset = generate_synthetic(synthetic_config_from_dict(data_cfg, seed=seed, name=config.get("name")))
    split = train_test_split_indices(
        dataset.X.shape[0],
        test_ratio=float(data_cfg.get("test_ratio", 0.0)),
        seed=seed,
    )
    X_train, y_train = dataset.X[split.train], dataset.y[split.train]
    X_test, y_test = dataset.X[split.test], dataset.y[split.test]

    model = _build_model(config)
    with Timer(name="lasso_cd", logger=logger) as timer:
        model.fit(X_train, y_train)

    X_fit, y_fit, _ = model.prepare_inputs(X_train, y_train)
    convergence = summarize_convergence(model.result_, X_fit, y_fit, model.lam)
    convergence["max_change_trace"] = model.result_.max_change_trace
    convergence["elapsed_seconds"] = timer.elapsed

    metrics = _evaluate(model, dataset.beta, X_test, y_test)

    out_dir.mkdir(parents=True, exist_ok=True)
    np.savez(
        out_dir / "dataset.npz",
        X_train=X_train,
        y_train=y_train,
        X_test=X_test,
        y_test=y_test,
        beta_true=dataset.beta,
    )
    save_json(
        _to_serializable({
            "coef": model.coef_,
            "intercept": model.intercept_,
            "beta_true": dataset.beta,
        }),
        out_dir / "coefficients.json",
    )
    save_json(_to_serializable(convergence), out_dir / "convergence.json")
    save_json(_to_serializable(metrics), out_dir / "metrics.json")

    logger.info(
        "lam=%g: converged=%s after %d sweep(s), nonzero=%d, test RMSE=%s",
        model.lam,
        model.converged_,
        model.n_iter_,
        int(np.count_nonzero(model.coef_)),
        "n/a" if metrics["RMSE"] is None else f"{metrics['RMSE']:.4f}",
    )
    return {
        "seed": seed,
        "metrics": metrics,
        "converged": bool(model.converged_),
        "n_iter": int(model.n_iter_),
    }


def _average_metrics(records: List[Mapping[str, Any]]) -> Dict[str, Optional[float]]:
    keys = records[0]["metrics"].keys() if records else []
    averaged: Dict[str, Optional[float]] = {}
    for key in keys:
        values = [r["metrics"][key] for r in records if r["metrics"].get(key) is not None]
        averaged[key] = float(np.mean(values)) if values else None
    return averaged


def run_experiment(config: Mapping[str, Any], output_dir: Path | str) -> Dict[str, Any]:
    """
    Execute the experiment described by ``config``.

    Args:
        config: Fully merged experiment configuration.
        output_dir: Directory where artefacts should be written.

    Returns:
        Dictionary with metrics and bookkeeping information.
    """

    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    effective_config = deepcopy(dict(config))
    experiments_cfg = effective_config.get("experiments") or {}
    repeats = max(1, int(experiments_cfg.get("repeats", 1) or 1))
    base_seed = _resolve_seed(effective_config.get("seed"), (effective_config.get("data") or {}).get("seed"))

    records: List[Dict[str, Any]] = []
    repeat_dirs: List[str] = []
    for idx in progress(range(repeats), total=repeats, desc="repeats", disable=repeats == 1):
        seed = None if base_seed is None else base_seed + idx
        run_dir = output_path if repeats == 1 else output_path / f"repeat_{idx + 1:03d}"
        record = _run_single(effective_config, run_dir, seed=seed)
        record["repeat"] = idx + 1
        records.append(record)
        if repeats > 1:
            repeat_dirs.append(str(run_dir))

    metrics = _average_metrics(records)
    summary = {
        "status": "OK",
        "model": "lasso_cd",
        "repeats": repeats,
        "metrics": metrics,
        "repeat_metrics": records,
        "artifacts": {"repeat_dirs": repeat_dirs},
    }
    save_json(_to_serializable(summary), output_path / "summary.json")
    if repeats > 1:
        save_json(_to_serializable(metrics), output_path / "metrics.json")
    return _to_serializable(summary)


__all__ = ["run_experiment", "ExperimentError"]
