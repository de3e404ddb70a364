from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from lassocd.models.coordinate_descent import soft_threshold


@pytest.mark.parametrize(
    "z, lam, expected",
    [
        (3.0, 1.0, 2.0),
        (-0.5, 1.0, 0.0),
        (0.2, 0.5, 0.0),
        (-4.0, 1.5, -2.5),
        (1.0, 1.0, 0.0),
        (-1.0, 1.0, 0.0),
        (0.7, 0.0, 0.7),
    ],
)
def test_soft_threshold_reference_values(z, lam, expected):
    assert soft_threshold(z, lam) == pytest.approx(expected)


def test_soft_threshold_zero_band_and_shrinkage():
    rng = np.random.default_rng(0)
    for z, lam in zip(rng.normal(scale=3.0, size=200), rng.uniform(0.0, 2.0, size=200)):
        out = soft_threshold(float(z), float(lam))
        if abs(z) <= lam:
            assert out == 0.0
        elif z > lam:
            assert out == pytest.approx(z - lam)
        else:
            assert out == pytest.approx(z + lam)
        # never flips sign, never grows in magnitude
        assert out * z >= 0.0
        assert abs(out) <= abs(z)
