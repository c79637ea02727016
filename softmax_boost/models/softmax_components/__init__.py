"""
Softmax Regression Components Package

This package contains the modular components of the softmax regression
classifier: the objective, the optimizers that minimize it, optimizer
callbacks, and the data transforms they share.
"""

from .data_transforms import (
    _add_intercept_row,
    _softmax_columns,
    _log_softmax_columns,
    _one_hot_columns,
    _validate_labels,
    _parameter_penalty_mask
)
from .objective import SoftmaxRegressionFunction, compute_probabilities
from .optimizers import Optimizer, LBFGSOptimizer, GradientDescentOptimizer, AdamOptimizer
from .callbacks import PrintLoss, StoreLoss, EarlyStopAtMinLoss
from .softmax_core import SoftmaxRegression

__all__ = [
    '_add_intercept_row',
    '_softmax_columns',
    '_log_softmax_columns',
    '_one_hot_columns',
    '_validate_labels',
    '_parameter_penalty_mask',
    'SoftmaxRegressionFunction',
    'compute_probabilities',
    'Optimizer',
    'LBFGSOptimizer',
    'GradientDescentOptimizer',
    'AdamOptimizer',
    'PrintLoss',
    'StoreLoss',
    'EarlyStopAtMinLoss',
    'SoftmaxRegression'
]
