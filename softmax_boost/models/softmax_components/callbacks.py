"""
Optimizer Callbacks

Callbacks are plain callables invoked by the optimizers after every
iteration as ``callback(optimizer, objective, parameters, objective_value)``.
A truthy return value asks the optimizer to stop.
"""

import numpy as np
from typing import List


class PrintLoss:
    """
    目的関数値を表示するコールバック

    Attributes:
    -----------
    every : int
        表示間隔（反復回数）
    iteration : int
        これまでの呼び出し回数
    """

    def __init__(self, every: int = 1):
        if every < 1:
            raise ValueError(f"every must be positive, got {every}")
        self.every = every
        self.iteration = 0

    def __call__(self, optimizer, objective, parameters: np.ndarray, objective_value: float) -> bool:
        self.iteration += 1
        if self.iteration % self.every == 0:
            print(f"[{type(optimizer).__name__}] iteration {self.iteration}: objective = {objective_value:.6f}")
        return False


class StoreLoss:
    """Record every objective value seen during optimization."""

    def __init__(self):
        self.history: List[float] = []

    def __call__(self, optimizer, objective, parameters: np.ndarray, objective_value: float) -> bool:
        self.history.append(float(objective_value))
        return False


class EarlyStopAtMinLoss:
    """
    Stop once the objective has not improved for `patience` consecutive
    iterations.
    """

    def __init__(self, patience: int = 10):
        if patience < 1:
            raise ValueError(f"patience must be positive, got {patience}")
        self.patience = patience
        self.best_objective = np.inf
        self.steps_without_improvement = 0

    def __call__(self, optimizer, objective, parameters: np.ndarray, objective_value: float) -> bool:
        if objective_value < self.best_objective:
            self.best_objective = objective_value
            self.steps_without_improvement = 0
            return False

        self.steps_without_improvement += 1
        return self.steps_without_improvement >= self.patience
