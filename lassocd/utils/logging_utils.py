# lassocd/utils/logging_utils.py
from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping, Optional, Tuple

from rich.console import Console
from rich.logging import RichHandler
from tqdm import tqdm

PACKAGE_LOGGER = "lassocd"
_FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """Route the package logger to a rich stderr console and, optionally, a file."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = RichHandler(console=Console(stderr=True), show_path=False, markup=False)
    console.setLevel(level)
    logger.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)
    return logger


class Timer:
    """Wall-clock timer for a ``with`` block; the duration lands in ``elapsed``."""

    def __init__(self, name: str = "task", logger: Optional[logging.Logger] = None) -> None:
        self.name = name
        self.logger = logger
        self.elapsed = 0.0
        self._start = 0.0

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.elapsed = time.perf_counter() - self._start
        if self.logger is None:
            return
        if exc_type is None:
            self.logger.info("%s took %.3fs", self.name, self.elapsed)
        else:
            self.logger.warning("%s failed after %.3fs", self.name, self.elapsed)


def progress(iterable: Iterable, total: Optional[int] = None, desc: Optional[str] = None,
             disable: bool = False) -> Iterable:
    """tqdm bar over ``iterable``; single-step loops usually pass ``disable=True``."""
    return tqdm(iterable, total=total, desc=desc, disable=disable, leave=False)


def _flatten(cfg: Mapping[str, Any], prefix: str = "") -> Iterator[Tuple[str, Any]]:
    for key in sorted(cfg):
        value = cfg[key]
        dotted = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping) and value:
            yield from _flatten(value, dotted)
        else:
            yield dotted, value


def log_config(logger: logging.Logger, cfg: Mapping[str, Any]) -> None:
    """Log the resolved configuration as dotted ``key = value`` lines."""
    for key, value in _flatten(cfg):
        logger.info("config %s = %r", key, value)
