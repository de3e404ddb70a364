# lassocd/cli/run_experiment.py
from __future__ import annotations

import argparse
import datetime as _dt
import logging
import sys
import traceback
from pathlib import Path
from typing import Any, Dict, List

from lassocd.experiments.runner import run_experiment
from lassocd.utils.config_parser import load_config, merge_overrides, parse_overrides
from lassocd.utils.io import save_json, save_yaml
from lassocd.utils.logging_utils import log_config, setup_logging


def _verbosity_to_level(verbosity: int) -> int:
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def _load_and_merge_configs(paths: List[Path]) -> Dict[str, Any]:
    """Load YAML configs and merge them from left to right."""
    cfg: Dict[str, Any] = {}
    for p in paths:
        cfg = merge_overrides(cfg, load_config(p))
    return cfg


def _timestamp() -> str:
    return _dt.datetime.now().strftime("%Y%m%d-%H%M%S")


def _derive_run_dir(base_out: Path, exp_name: str | None) -> Path:
    tag = exp_name if exp_name else "exp"
    return base_out / f"{tag}-{_timestamp()}"


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Fit a coordinate-descent Lasso on a configured dataset.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--config",
        "-c",
        nargs="*",
        type=str,
        default=[],
        help="YAML config files (merged from left to right).",
    )
    parser.add_argument(
        "--override",
        "-o",
        nargs="*",
        default=[],
        help="Override config keys: e.g., model.lam=0.5 data.n=200",
    )
    parser.add_argument(
        "--outdir",
        type=str,
        default="outputs/runs",
        help="Base output directory for this run.",
    )
    parser.add_argument(
        "--name",
        type=str,
        default=None,
        help="Experiment name tag used in run directory naming.",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Optional log file path.",
    )
    parser.add_argument(
        "--verbosity",
        "-v",
        action="count",
        default=0,
        help="Increase logging verbosity (-v INFO, -vv DEBUG).",
    )

    args = parser.parse_args(argv)
    logger = setup_logging(_verbosity_to_level(args.verbosity), log_file=args.log_file)

    try:
        cfg_paths = [Path(p).expanduser().resolve() for p in args.config]
        for p in cfg_paths:
            if not p.exists():
                raise FileNotFoundError(f"Config not found: {p}")

        base_cfg = _load_and_merge_configs(cfg_paths)
        resolved_cfg = merge_overrides(base_cfg, parse_overrides(args.override or []))
        name = args.name or resolved_cfg.get("name")

        run_dir = _derive_run_dir(Path(args.outdir).expanduser().resolve(), name)
        resolved_cfg.setdefault("io", {})
        resolved_cfg["io"]["run_dir"] = str(run_dir)
        log_config(logger, resolved_cfg)

        save_yaml(resolved_cfg, run_dir / "resolved_config.yaml")
        summary = run_experiment(resolved_cfg, run_dir)
        save_json(summary["metrics"], run_dir / "metrics.json")

        print(f"[OK] Run finished. Artifacts in: {run_dir}")
        return 0
    except Exception:
        print("[FATAL] Experiment failed:\n", file=sys.stderr)
        traceback.print_exc()
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
