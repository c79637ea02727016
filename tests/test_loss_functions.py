"""
ExponentialLossのテスト
"""

import numpy as np
import pytest

from softmax_boost.models import ExponentialLoss


def test_all_zero_residuals_give_zero_weights():
    """残差が全て0なら重みも全て0（ゼロ除算の回避）"""
    weights = ExponentialLoss.calculate(np.array([0.0, 0.0, 0.0]))
    np.testing.assert_array_equal(weights, np.zeros(3))


def test_reference_values():
    weights = ExponentialLoss.calculate(np.array([-2.0, 4.0, 0.0]))
    expected = [1 - np.exp(-0.5), 1 - np.exp(-1.0), 0.0]

    np.testing.assert_allclose(weights, expected, atol=1e-4)
    np.testing.assert_allclose(weights, [0.3935, 0.6321, 0.0], atol=1e-4)


def test_weights_stay_in_unit_interval():
    residuals = np.random.default_rng(0).normal(scale=5.0, size=1000)
    residuals[0] = abs(residuals).max() + 1.0
    weights = ExponentialLoss.calculate(residuals)

    assert weights.shape == residuals.shape
    assert np.all(weights >= 0.0)
    assert np.all(weights < 1.0)


def test_sign_does_not_matter():
    weights = ExponentialLoss.calculate([3.0, -3.0, 1.5, -1.5])
    assert weights[0] == pytest.approx(weights[1])
    assert weights[2] == pytest.approx(weights[3])
    assert weights[0] > weights[2]


def test_zero_maximum_uses_unit_divisor():
    weights = ExponentialLoss.calculate([0.0, -1.0])
    np.testing.assert_allclose(weights, [0.0, 1 - np.exp(-1.0)])


def test_negative_maximum_divides_by_the_maximum():
    """最大値が負の場合は補正せずその値で割るため、重みは[0, 1)に収まらない"""
    weights = ExponentialLoss.calculate([-2.0, -1.0])
    np.testing.assert_allclose(weights, [1 - np.exp(2.0), 1 - np.exp(1.0)])
    np.testing.assert_allclose(weights, [-6.3890561, -1.71828183], atol=1e-6)
    assert np.all(weights < 0.0)


def test_accepts_lists_and_empty_input():
    assert isinstance(ExponentialLoss.calculate([1.0, 2.0]), np.ndarray)
    assert ExponentialLoss.calculate([]).shape == (0,)


def test_nan_propagates():
    """NaNは検証せずにそのまま伝播する"""
    weights = ExponentialLoss.calculate([1.0, np.nan, 2.0])
    assert np.all(np.isnan(weights))
