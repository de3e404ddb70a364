"""Behavioural tests for the coordinate-descent Lasso core."""
from __future__ import annotations

import logging
import sys
from pathlib import Path

import numpy as np
import numpy.testing as npt
import pytest
from sklearn.linear_model import Lasso as SklearnLasso

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from lassocd.diagnostics.convergence import lambda_max
from lassocd.models.coordinate_descent import (
    LassoInputError,
    fit_lasso_cd,
    lasso_cd,
    soft_threshold,
)


def _make_regression(n: int = 100, p: int = 10, seed: int = 0, noise: float = 1.0):
    rng = np.random.default_rng(seed)
    X = rng.standard_normal((n, p))
    beta = np.zeros(p)
    beta[:2] = [3.0, -2.0]
    y = X @ beta + noise * rng.standard_normal(n)
    return X, y, beta


def test_recovers_sparse_signal_on_reference_scenario():
    X, y, beta_true = _make_regression(seed=1)
    beta = lasso_cd(X, y, lam=0.5)

    assert beta.shape == (10,)
    assert np.sign(beta[0]) == 1.0 and np.sign(beta[1]) == -1.0
    npt.assert_allclose(beta[:2], beta_true[:2], atol=0.4)
    assert np.all(np.abs(beta[2:]) < 0.35)


def test_matches_sklearn_lasso_objective_scaling():
    X, y, _ = _make_regression(n=80, p=6, seed=2)
    lam = 12.0
    ours = lasso_cd(X, y, lam=lam, max_iter=10_000, tol=1e-10)

    reference = SklearnLasso(
        alpha=lam / X.shape[0], fit_intercept=False, tol=1e-12, max_iter=100_000
    ).fit(X, y)
    npt.assert_allclose(ours, reference.coef_, atol=1e-5)


def test_residual_matches_direct_recomputation_after_every_update():
    X, y, _ = _make_regression(n=60, p=8, seed=3)
    gaps = []

    def _audit(j, beta, r):
        gaps.append(np.max(np.abs((y - X @ beta) - r)))

    result = fit_lasso_cd(X, y, lam=2.0, callback=_audit)

    assert len(gaps) == result.n_iter * X.shape[1]
    assert max(gaps) <= 1e-8 * max(1.0, np.abs(y).max())
    npt.assert_allclose(result.residual, y - X @ result.coef, atol=1e-10)


def test_identical_inputs_give_bit_identical_output():
    X, y, _ = _make_regression(seed=4)
    first = lasso_cd(X, y, lam=0.8)
    second = lasso_cd(X.copy(), y.copy(), lam=0.8)
    assert np.array_equal(first, second)


def test_memory_layout_does_not_change_the_solution():
    X, y, _ = _make_regression(n=60, p=12, seed=8)
    c_order = fit_lasso_cd(np.ascontiguousarray(X), y, lam=2.0, tol=1e-10)
    f_order = fit_lasso_cd(np.asfortranarray(X), y, lam=2.0, tol=1e-10)
    strided = fit_lasso_cd(X[:, ::2], y, lam=2.0, tol=1e-10)

    assert np.array_equal(c_order.coef, f_order.coef)
    assert c_order.n_iter == f_order.n_iter
    npt.assert_allclose(strided.residual, y - X[:, ::2] @ strided.coef, atol=1e-10)


def test_large_penalty_zeroes_everything_in_one_sweep():
    X, y, _ = _make_regression(seed=5)
    result = fit_lasso_cd(X, y, lam=lambda_max(X, y))

    assert np.all(result.coef == 0.0)
    assert result.n_iter == 1
    assert result.converged
    npt.assert_array_equal(result.residual, y)


def test_zero_penalty_reaches_least_squares():
    X, y, _ = _make_regression(n=200, p=5, seed=6)
    beta = lasso_cd(X, y, lam=0.0, max_iter=10_000, tol=1e-12)
    ols, *_ = np.linalg.lstsq(X, y, rcond=None)
    npt.assert_allclose(beta, ols, atol=1e-8)


def test_orthonormal_design_solved_by_single_sweep():
    rng = np.random.default_rng(7)
    Q, _ = np.linalg.qr(rng.standard_normal((50, 4)))
    y = rng.standard_normal(50) * 3.0
    lam = 0.9

    result = fit_lasso_cd(Q, y, lam=lam)
    expected = np.array([soft_threshold(float(q @ y), lam) for q in Q.T])

    npt.assert_allclose(result.coef, expected, atol=1e-12)
    assert result.converged
    assert result.n_iter == 2
    assert result.max_change_trace[1] < result.max_change_trace[0]


def test_zero_column_is_skipped_without_nan(caplog):
    X, y, _ = _make_regression(seed=8)
    X[:, 3] = 0.0

    with caplog.at_level(logging.WARNING, logger="lassocd.models.coordinate_descent"):
        result = fit_lasso_cd(X, y, lam=0.5)

    assert np.all(np.isfinite(result.coef))
    assert result.coef[3] == 0.0
    assert result.skipped_columns == (3,)
    assert any("all-zero" in rec.getMessage() for rec in caplog.records)


def test_all_zero_design_returns_zero_vector():
    X = np.zeros((5, 3))
    y = np.arange(5.0)
    result = fit_lasso_cd(X, y, lam=0.1)

    npt.assert_array_equal(result.coef, np.zeros(3))
    assert result.skipped_columns == (0, 1, 2)
    assert result.converged and result.n_iter == 1


def test_iteration_budget_exhaustion_returns_partial_estimate():
    X, y, _ = _make_regression(seed=9)
    result = fit_lasso_cd(X, y, lam=0.5, max_iter=1, tol=0.0)

    assert not result.converged
    assert result.n_iter == 1
    assert result.max_change_trace.shape == (1,)
    assert np.any(result.coef != 0.0)


def test_inputs_are_not_modified():
    X, y, _ = _make_regression(seed=10)
    X_before, y_before = X.copy(), y.copy()
    lasso_cd(X, y, lam=1.0)
    npt.assert_array_equal(X, X_before)
    npt.assert_array_equal(y, y_before)


def test_column_vector_response_is_accepted():
    X, y, _ = _make_regression(seed=11)
    npt.assert_array_equal(lasso_cd(X, y.reshape(-1, 1), lam=0.5), lasso_cd(X, y, lam=0.5))


@pytest.mark.parametrize(
    "kwargs",
    [
        {"lam": -0.1},
        {"lam": float("nan")},
        {"tol": -1e-6},
        {"max_iter": 0},
        {"max_iter": -5},
        {"max_iter": 2.5},
        {"max_iter": True},
        {"max_iter": "ten"},
    ],
)
def test_invalid_parameters_rejected(kwargs):
    X, y, _ = _make_regression(n=20, p=3, seed=12)
    params = {"lam": 0.5, "max_iter": 100, "tol": 1e-6}
    params.update(kwargs)
    with pytest.raises(LassoInputError):
        fit_lasso_cd(X, y, **params)


def test_shape_problems_rejected_before_iterating():
    X, y, _ = _make_regression(n=20, p=3, seed=13)
    calls = []

    with pytest.raises(LassoInputError):
        fit_lasso_cd(X, y[:-1], lam=0.5, callback=lambda *args: calls.append(args))
    with pytest.raises(LassoInputError):
        fit_lasso_cd(X[:, 0], y, lam=0.5)
    with pytest.raises(LassoInputError):
        fit_lasso_cd(X, np.c_[y, y], lam=0.5)
    bad = X.copy()
    bad[0, 0] = np.inf
    with pytest.raises(LassoInputError):
        fit_lasso_cd(bad, y, lam=0.5)
    assert calls == []


def test_lasso_input_error_is_value_error():
    assert issubclass(LassoInputError, ValueError)


def test_result_as_dict_is_plain_python():
    X, y, _ = _make_regression(n=30, p=4, seed=14)
    payload = fit_lasso_cd(X, y, lam=1.0).as_dict()
    assert set(payload) == {"coef", "n_iter", "converged", "max_change_trace", "skipped_columns"}
    assert isinstance(payload["coef"], list) and len(payload["coef"]) == 4
