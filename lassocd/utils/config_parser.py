"""YAML configuration loader with command-line overrides."""
from __future__ import annotations

import copy
from functools import reduce
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping

import yaml

DEFAULT_SOLVER_PARAMS: Dict[str, Any] = {"lam": 1.0, "max_iter": 1000, "tol": 1e-6}


def load_config(path: Path) -> dict[str, Any]:
    """Load a YAML config file into a dictionary."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config {path} must be a YAML mapping at top-level.")
    return data


def _cast_value(v: str) -> Any:
    low = v.lower()
    if low in {"true", "false"}:
        return low == "true"
    if low in {"null", "none"}:
        return None
    try:
        return int(v)
    except ValueError:
        pass
    try:
        return float(v)
    except ValueError:
        return v


def parse_overrides(pairs: Iterable[str]) -> Dict[str, Any]:
    """
    Parse CLI overrides like:
      ['model.lam=0.5', 'data.n=200', 'seed=3']

    Returns a nested dict merged later into config.
    """
    root: Dict[str, Any] = {}
    for item in pairs:
        if "=" not in item:
            raise ValueError(f"Override must be key=value, got: '{item}'")
        k, v = item.split("=", 1)
        keys = k.strip().split(".")
        if not all(keys):
            raise ValueError(f"Malformed override key: '{k}'")
        d = reduce(lambda acc, kk: acc.setdefault(kk, {}), keys[:-1], root)
        if not isinstance(d, dict):
            raise ValueError(f"Key path conflict at '{k}'")
        d[keys[-1]] = _cast_value(v.strip())
    return root


def merge_overrides(config: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge nested overrides into a copy of ``config``."""
    merged = copy.deepcopy(dict(config))
    for key, value in overrides.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = merge_overrides(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def solver_params_from_config(config: Mapping[str, Any]) -> Dict[str, Any]:
    """Extract ``lam``, ``max_iter`` and ``tol`` from the ``model`` section."""
    model = config.get("model") or {}
    if not isinstance(model, Mapping):
        raise ValueError("'model' section must be a mapping.")
    params = dict(DEFAULT_SOLVER_PARAMS)
    for key in params:
        if model.get(key) is not None:
            params[key] = model[key]
    lam = float(params["lam"])
    tol = float(params["tol"])
    max_iter = params["max_iter"]
    if lam < 0:
        raise ValueError(f"model.lam must be non-negative, got {lam}.")
    if tol < 0:
        raise ValueError(f"model.tol must be non-negative, got {tol}.")
    if isinstance(max_iter, bool) or int(max_iter) != max_iter or int(max_iter) <= 0:
        raise ValueError(f"model.max_iter must be a positive integer, got {max_iter!r}.")
    return {"lam": lam, "max_iter": int(max_iter), "tol": tol}
