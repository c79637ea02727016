"""
Optimizers

Every optimizer exposes one operation::

    minimize(objective, initial_parameters, *callbacks) -> (parameters, objective_value)

`objective` provides `evaluate_with_gradient(parameters)` (and, for
mini-batch optimizers, the separable form `num_functions`, `shuffle` and
`evaluate_with_gradient(parameters, begin, batch_size)`). The optimizers own
their convergence logic; the model only shapes the objective.
"""

import warnings
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Tuple

import numpy as np
from scipy.optimize import minimize


class Optimizer(ABC):
    """
    オプティマイザの抽象基底クラス

    Attributes:
    -----------
    n_iterations_ : int
        直前のminimizeで実行した反復回数
    """

    def __init__(self):
        self.n_iterations_ = 0

    @abstractmethod
    def minimize(self, objective, initial_parameters: np.ndarray,
                 *callbacks: Callable) -> Tuple[np.ndarray, float]:
        """
        目的関数を最小化

        Parameters:
        -----------
        objective : SoftmaxRegressionFunction
            最小化する目的関数
        initial_parameters : array-like
            初期パラメータ
        *callbacks : callable
            各反復後に呼ばれるコールバック

        Returns:
        --------
        parameters : array-like
            最適化後のパラメータ
        objective_value : float
            最終的な目的関数値
        """
        pass

    def _run_callbacks(self, callbacks, objective, parameters: np.ndarray, objective_value: float) -> bool:
        # 全てのコールバックを呼んだ上で、どれか1つでも停止を要求したら終了
        requests = [bool(callback(self, objective, parameters, objective_value)) for callback in callbacks]
        return any(requests)

    def get_params(self) -> Dict[str, Any]:
        return {key: value for key, value in vars(self).items() if not key.endswith('_')}


class LBFGSOptimizer(Optimizer):
    """
    L-BFGS backed by ``scipy.optimize.minimize(method="L-BFGS-B")``.

    Parameters:
    -----------
    num_basis : int, default=10
        Number of memory points kept for the Hessian approximation
    max_iterations : int, default=10000
        Maximum number of iterations
    min_gradient_norm : float, default=1e-6
        Stop when the largest gradient component falls below this value
    tolerance : float, default=1e-10
        Stop when the relative objective decrease falls below this value
    """

    def __init__(self, num_basis: int = 10, max_iterations: int = 10000,
                 min_gradient_norm: float = 1e-6, tolerance: float = 1e-10):
        super().__init__()
        if num_basis < 1:
            raise ValueError(f"num_basis must be positive, got {num_basis}")
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be positive, got {max_iterations}")
        if min_gradient_norm < 0 or tolerance < 0:
            raise ValueError(f"min_gradient_norm and tolerance must be non-negative, got {min_gradient_norm}, {tolerance}")
        self.num_basis = num_basis
        self.max_iterations = max_iterations
        self.min_gradient_norm = min_gradient_norm
        self.tolerance = tolerance

    def minimize(self, objective, initial_parameters: np.ndarray,
                 *callbacks: Callable) -> Tuple[np.ndarray, float]:
        shape = initial_parameters.shape
        stopped_by_callback = []

        def fun(flat_parameters):
            value, gradient = objective.evaluate_with_gradient(flat_parameters.reshape(shape))
            return value, gradient.ravel()

        def callback(intermediate_result):
            parameters = intermediate_result.x.reshape(shape)
            if self._run_callbacks(callbacks, objective, parameters, intermediate_result.fun):
                stopped_by_callback.append(True)
                raise StopIteration

        result = minimize(
            fun,
            np.array(initial_parameters, dtype=np.float64).ravel(),
            jac=True,
            method="L-BFGS-B",
            callback=callback if callbacks else None,
            options={
                'maxcor': self.num_basis,
                'maxiter': self.max_iterations,
                'ftol': self.tolerance,
                'gtol': self.min_gradient_norm
            }
        )
        self.n_iterations_ = int(result.nit)

        if not result.success and not stopped_by_callback:
            warnings.warn(f"L-BFGS did not converge: {result.message}", RuntimeWarning)

        return result.x.reshape(shape), float(result.fun)


class GradientDescentOptimizer(Optimizer):
    """
    Full-batch gradient descent.

    Parameters:
    -----------
    step_size : float, default=0.01
        Step size of each update
    max_iterations : int, default=100000
        Maximum number of updates (0 means no limit)
    tolerance : float, default=1e-5
        Stop when the objective changes by less than this amount
    """

    def __init__(self, step_size: float = 0.01, max_iterations: int = 100000, tolerance: float = 1e-5):
        super().__init__()
        if step_size <= 0:
            raise ValueError(f"step_size must be positive, got {step_size}")
        if max_iterations < 0:
            raise ValueError(f"max_iterations must be non-negative, got {max_iterations}")
        self.step_size = step_size
        self.max_iterations = max_iterations
        self.tolerance = tolerance

    def minimize(self, objective, initial_parameters: np.ndarray,
                 *callbacks: Callable) -> Tuple[np.ndarray, float]:
        parameters = np.array(initial_parameters, dtype=np.float64)
        objective_value, gradient = objective.evaluate_with_gradient(parameters)

        iteration = 0
        while self.max_iterations == 0 or iteration < self.max_iterations:
            iteration += 1
            parameters = parameters - self.step_size * gradient
            new_value, gradient = objective.evaluate_with_gradient(parameters)

            converged = abs(objective_value - new_value) < self.tolerance
            objective_value = new_value

            if self._run_callbacks(callbacks, objective, parameters, objective_value) or converged:
                break

            if not np.isfinite(objective_value):
                warnings.warn("Gradient descent diverged; returning the last iterate", RuntimeWarning)
                break

        self.n_iterations_ = iteration
        return parameters, float(objective_value)


class AdamOptimizer(Optimizer):
    """
    Mini-batch Adam over a separable objective.

    Parameters:
    -----------
    step_size : float, default=0.001
        Base step size
    batch_size : int, default=32
        Number of samples per update
    beta1 : float, default=0.9
        Decay rate of the first moment
    beta2 : float, default=0.999
        Decay rate of the second moment
    epsilon : float, default=1e-8
        Denominator fuzz term
    max_iterations : int, default=100000
        Maximum number of updates (0 means no limit)
    tolerance : float, default=1e-5
        Stop when the epoch objective changes by less than this amount
    shuffle : bool, default=True
        Reshuffle sample order before every epoch
    """

    def __init__(self, step_size: float = 0.001, batch_size: int = 32, beta1: float = 0.9,
                 beta2: float = 0.999, epsilon: float = 1e-8, max_iterations: int = 100000,
                 tolerance: float = 1e-5, shuffle: bool = True):
        super().__init__()
        if step_size <= 0:
            raise ValueError(f"step_size must be positive, got {step_size}")
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        if not (0.0 <= beta1 < 1.0 and 0.0 <= beta2 < 1.0):
            raise ValueError(f"beta1 and beta2 must be in [0, 1), got {beta1}, {beta2}")
        if max_iterations < 0:
            raise ValueError(f"max_iterations must be non-negative, got {max_iterations}")
        self.step_size = step_size
        self.batch_size = batch_size
        self.beta1 = beta1
        self.beta2 = beta2
        self.epsilon = epsilon
        self.max_iterations = max_iterations
        self.tolerance = tolerance
        self.shuffle = shuffle

    def minimize(self, objective, initial_parameters: np.ndarray,
                 *callbacks: Callable) -> Tuple[np.ndarray, float]:
        parameters = np.array(initial_parameters, dtype=np.float64)
        n_functions = objective.num_functions()
        if self.shuffle:
            objective.shuffle()

        first_moment = np.zeros_like(parameters)
        second_moment = np.zeros_like(parameters)

        epoch_objective = 0.0
        last_objective = np.inf
        current_function = 0

        iteration = 0
        while self.max_iterations == 0 or iteration < self.max_iterations:
            iteration += 1
            effective_batch = min(self.batch_size, n_functions - current_function)
            batch_value, gradient = objective.evaluate_with_gradient(
                parameters, current_function, effective_batch
            )
            epoch_objective += batch_value * effective_batch / n_functions

            # バイアス補正をステップサイズに畳み込んだAdam更新
            first_moment = self.beta1 * first_moment + (1.0 - self.beta1) * gradient
            second_moment = self.beta2 * second_moment + (1.0 - self.beta2) * gradient * gradient
            scaled_step = self.step_size * np.sqrt(1.0 - self.beta2 ** iteration) \
                          / (1.0 - self.beta1 ** iteration)
            parameters = parameters - scaled_step * first_moment / (np.sqrt(second_moment) + self.epsilon)

            if self._run_callbacks(callbacks, objective, parameters, batch_value):
                break

            current_function += effective_batch
            if current_function >= n_functions:
                # エポック終了時に収束判定
                if not np.isfinite(epoch_objective):
                    warnings.warn("Adam diverged; returning the last iterate", RuntimeWarning)
                    break
                if abs(last_objective - epoch_objective) < self.tolerance:
                    break
                last_objective = epoch_objective
                epoch_objective = 0.0
                current_function = 0
                if self.shuffle:
                    objective.shuffle()

        self.n_iterations_ = iteration
        return parameters, float(objective.evaluate(parameters))
