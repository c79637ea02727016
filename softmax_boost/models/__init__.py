"""
Models Package

- base: LinearClassifierBase, the shared row-major estimator interface
- softmax_components: softmax regression, its objective and optimizers
- loss_functions: ExponentialLoss for boosting sample reweighting
"""

from .base import LinearClassifierBase
from .loss_functions import ExponentialLoss
from .softmax_components import (
    SoftmaxRegression,
    SoftmaxRegressionFunction,
    Optimizer,
    LBFGSOptimizer,
    GradientDescentOptimizer,
    AdamOptimizer,
    PrintLoss,
    StoreLoss,
    EarlyStopAtMinLoss
)

__all__ = [
    'LinearClassifierBase',
    'ExponentialLoss',
    'SoftmaxRegression',
    'SoftmaxRegressionFunction',
    'Optimizer',
    'LBFGSOptimizer',
    'GradientDescentOptimizer',
    'AdamOptimizer',
    'PrintLoss',
    'StoreLoss',
    'EarlyStopAtMinLoss'
]
