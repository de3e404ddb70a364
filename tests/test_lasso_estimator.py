from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import numpy.testing as npt
import pytest
from sklearn.linear_model import Lasso as SklearnLasso

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from lassocd.models.coordinate_descent import lasso_cd
from lassocd.models.lasso import LassoCD


def _shifted_regression(n: int = 120, seed: int = 0):
    rng = np.random.default_rng(seed)
    scales = np.array([1.0, 10.0, 0.1, 5.0])
    offsets = np.array([2.0, -30.0, 0.5, 7.0])
    X = rng.standard_normal((n, 4)) * scales + offsets
    beta = np.array([1.5, 0.0, -20.0, 0.3])
    y = 4.0 + X @ beta + 0.01 * rng.standard_normal(n)
    return X, y, beta


def test_intercept_and_units_recovered_without_penalty():
    X, y, _ = _shifted_regression()
    model = LassoCD(lam=0.0, tol=1e-12, max_iter=20_000).fit(X, y)

    design = np.c_[np.ones(X.shape[0]), X]
    ols, *_ = np.linalg.lstsq(design, y, rcond=None)
    npt.assert_allclose(model.intercept_, ols[0], atol=1e-6)
    npt.assert_allclose(model.coef_, ols[1:], atol=1e-6)
    assert model.converged_


def test_centering_only_matches_sklearn_with_intercept():
    X, y, _ = _shifted_regression(seed=1)
    lam = 30.0
    ours = LassoCD(lam=lam, standardize="none", fit_intercept=True, tol=1e-10, max_iter=50_000).fit(X, y)
    reference = SklearnLasso(alpha=lam / X.shape[0], fit_intercept=True, tol=1e-12, max_iter=200_000).fit(X, y)

    npt.assert_allclose(ours.coef_, reference.coef_, atol=1e-4)
    npt.assert_allclose(ours.intercept_, reference.intercept_, atol=1e-3)


def test_without_intercept_is_identical_to_core():
    rng = np.random.default_rng(2)
    X = rng.standard_normal((40, 5))
    y = X @ np.array([1.0, 0.0, -1.0, 0.0, 2.0]) + rng.standard_normal(40)

    model = LassoCD(lam=0.7, standardize="none", fit_intercept=False).fit(X, y)
    assert np.array_equal(model.coef_, lasso_cd(X, y, lam=0.7))
    assert model.intercept_ == 0.0


def test_constant_column_gets_exact_zero():
    X, y, _ = _shifted_regression(seed=3)
    X[:, 1] = 0.1
    model = LassoCD(lam=0.5).fit(X, y)

    assert np.all(np.isfinite(model.coef_))
    assert model.coef_[1] == 0.0
    assert model.result_.skipped_columns == (1,)


def test_predict_and_score():
    X, y, _ = _shifted_regression(seed=4)
    model = LassoCD(lam=0.1).fit(X, y)
    preds = model.predict(X[:7])
    assert preds.shape == (7,)
    assert model.score(X, y) > 0.99

    summary = model.get_posterior_summaries()
    assert set(summary) == {"coef", "intercept", "n_iter", "converged"}
    summary["coef"][0] = 123.0
    assert model.coef_[0] != 123.0


def test_unfitted_model_raises():
    model = LassoCD()
    with pytest.raises(RuntimeError):
        model.predict(np.zeros((2, 3)))
    with pytest.raises(RuntimeError):
        model.get_posterior_summaries()


def test_invalid_configuration_rejected():
    with pytest.raises(ValueError):
        LassoCD(standardize="robust")
    with pytest.raises(ValueError):
        LassoCD(fit_intercept=False)
    assert LassoCD(standardize="UNIT_L2").standardize == "unit_l2"


def test_constant_column_with_inexact_mean_is_skipped_without_penalty():
    rng = np.random.default_rng(11)
    X = rng.standard_normal((37, 3))
    X[:, 1] = 0.1
    y = 1.0 + X @ np.array([1.0, 0.0, -1.0]) + 0.1 * rng.standard_normal(37)

    model = LassoCD(lam=0.0, tol=1e-10).fit(X, y)
    assert model.coef_[1] == 0.0
    assert model.result_.skipped_columns == (1,)

    ols, *_ = np.linalg.lstsq(np.c_[np.ones(37), X[:, [0, 2]]], y, rcond=None)
    npt.assert_allclose(model.intercept_, ols[0], atol=1e-6)
    npt.assert_allclose(model.coef_[[0, 2]], ols[1:], atol=1e-6)
