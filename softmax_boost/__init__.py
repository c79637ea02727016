"""
softmax_boost: softmax regression trained through pluggable optimizers, and
the exponential-loss sample reweighting rule used by boosting regressors.
"""

from .models import (
    SoftmaxRegression,
    SoftmaxRegressionFunction,
    LBFGSOptimizer,
    GradientDescentOptimizer,
    AdamOptimizer,
    PrintLoss,
    StoreLoss,
    EarlyStopAtMinLoss,
    ExponentialLoss
)

__version__ = "0.1.0"

__all__ = [
    'SoftmaxRegression',
    'SoftmaxRegressionFunction',
    'LBFGSOptimizer',
    'GradientDescentOptimizer',
    'AdamOptimizer',
    'PrintLoss',
    'StoreLoss',
    'EarlyStopAtMinLoss',
    'ExponentialLoss'
]
