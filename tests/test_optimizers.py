"""
オプティマイザとコールバックのテスト
"""

import warnings

import numpy as np
import pytest

from softmax_boost.models import (
    SoftmaxRegressionFunction,
    LBFGSOptimizer,
    GradientDescentOptimizer,
    AdamOptimizer,
    PrintLoss,
    StoreLoss,
    EarlyStopAtMinLoss
)


@pytest.fixture
def objective():
    rng = np.random.default_rng(0)
    centers = np.array([[-1.0, 0.0], [1.0, 0.0], [0.0, 1.5]])
    labels = np.repeat(np.arange(3), 40)
    data = (centers[labels] + rng.normal(scale=0.8, size=(120, 2))).T
    return SoftmaxRegressionFunction(data, labels, 3, lambda_=0.01, fit_intercept=True, random_state=0)


@pytest.fixture
def reference_minimum(objective):
    _, value = LBFGSOptimizer().minimize(objective, np.zeros((3, 3)))
    return value


def test_lbfgs_reaches_stationary_point(objective):
    parameters, value = LBFGSOptimizer().minimize(objective, objective.initial_point())

    assert parameters.shape == (3, 3)
    assert value == pytest.approx(objective.evaluate(parameters))
    assert np.max(np.abs(objective.gradient(parameters))) < 1e-4


def test_gradient_descent_approaches_minimum(objective, reference_minimum):
    optimizer = GradientDescentOptimizer(step_size=0.5, max_iterations=5000, tolerance=1e-10)
    parameters, value = optimizer.minimize(objective, np.zeros((3, 3)))

    assert value == pytest.approx(objective.evaluate(parameters))
    assert value == pytest.approx(reference_minimum, abs=1e-3)
    assert 0 < optimizer.n_iterations_ <= 5000


def test_adam_approaches_minimum(objective, reference_minimum):
    optimizer = AdamOptimizer(step_size=0.01, batch_size=16, max_iterations=30000, tolerance=1e-6)
    parameters, value = optimizer.minimize(objective, np.zeros((3, 3)))

    assert value == pytest.approx(objective.evaluate(parameters))
    assert value < np.log(3.0)
    assert value == pytest.approx(reference_minimum, abs=0.05)


def test_optimizers_do_not_modify_initial_point(objective):
    initial = np.zeros((3, 3))
    for optimizer in [LBFGSOptimizer(max_iterations=5),
                      GradientDescentOptimizer(max_iterations=5),
                      AdamOptimizer(max_iterations=5)]:
        with warnings.catch_warnings():
            # 反復回数が少ないため未収束の警告は無視
            warnings.simplefilter("ignore", RuntimeWarning)
            optimizer.minimize(objective, initial)
        np.testing.assert_array_equal(initial, np.zeros((3, 3)))


def test_lbfgs_warns_when_not_converged(objective):
    with pytest.warns(RuntimeWarning):
        LBFGSOptimizer(max_iterations=1).minimize(objective, np.zeros((3, 3)))


def test_callback_stops_lbfgs(objective):
    """コールバックが停止を要求したら終了"""
    store = StoreLoss()
    LBFGSOptimizer().minimize(objective, np.zeros((3, 3)), store, lambda *args: True)
    assert len(store.history) == 1


def test_callback_stops_gradient_descent(objective):
    optimizer = GradientDescentOptimizer(max_iterations=100)
    optimizer.minimize(objective, np.zeros((3, 3)), lambda *args: True)
    assert optimizer.n_iterations_ == 1


def test_early_stop_at_min_loss():
    early_stop = EarlyStopAtMinLoss(patience=2)
    values = [3.0, 2.0, 2.5, 2.1]
    requests = [early_stop(None, None, None, value) for value in values]
    assert requests == [False, False, False, True]
    assert early_stop.best_objective == 2.0


def test_early_stop_ends_adam(objective):
    store = StoreLoss()
    optimizer = AdamOptimizer(step_size=1.0, batch_size=8, max_iterations=100000, tolerance=0.0)
    optimizer.minimize(objective, np.zeros((3, 3)), store, EarlyStopAtMinLoss(patience=5))
    assert optimizer.n_iterations_ < 100000
    assert len(store.history) == optimizer.n_iterations_


def test_print_loss(objective, capsys):
    printer = PrintLoss(every=2)
    GradientDescentOptimizer(max_iterations=4, tolerance=0.0).minimize(objective, np.zeros((3, 3)), printer)

    lines = capsys.readouterr().out.strip().splitlines()
    assert printer.iteration == 4
    assert len(lines) == 2
    assert "GradientDescentOptimizer" in lines[0]


def test_store_loss_records_every_iteration(objective):
    store = StoreLoss()
    optimizer = GradientDescentOptimizer(step_size=0.1, max_iterations=10, tolerance=0.0)
    optimizer.minimize(objective, np.zeros((3, 3)), store)
    assert len(store.history) == 10
    assert store.history == sorted(store.history, reverse=True)


def test_invalid_hyper_parameters():
    with pytest.raises(ValueError):
        LBFGSOptimizer(num_basis=0)
    with pytest.raises(ValueError):
        LBFGSOptimizer(max_iterations=0)
    with pytest.raises(ValueError):
        GradientDescentOptimizer(step_size=0.0)
    with pytest.raises(ValueError):
        AdamOptimizer(batch_size=0)
    with pytest.raises(ValueError):
        AdamOptimizer(beta1=1.0)
    with pytest.raises(ValueError):
        PrintLoss(every=0)
    with pytest.raises(ValueError):
        EarlyStopAtMinLoss(patience=0)


def test_get_params():
    params = AdamOptimizer(step_size=0.05).get_params()
    assert params['step_size'] == 0.05
    assert 'n_iterations_' not in params
