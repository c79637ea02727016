"""
Softmax Regression Objective

This module holds the differentiable objective minimized when training
softmax regression: the L2-regularized negative mean log-likelihood and its
analytic gradient. Optimizers consume it through `evaluate`, `gradient` and
`evaluate_with_gradient`; the separable form (`num_functions`, `shuffle`,
`begin`/`batch_size`) serves mini-batch optimizers.
"""

import numpy as np
from typing import Tuple, Optional
from .data_transforms import (
    _add_intercept_row,
    _softmax_columns,
    _log_softmax_columns,
    _one_hot_columns,
    _parameter_penalty_mask
)


class SoftmaxRegressionFunction:
    """
    正則化付き負の対数尤度とその勾配を計算するクラス

    Attributes:
    -----------
    data : array-like, shape=(n_features (+1), n_samples)
        学習データ（fit_interceptの場合は定数1の行を追加済み）
    labels : array-like, shape=(n_samples,)
        クラスラベル
    num_classes : int
        クラス数
    lambda_ : float
        L2正則化係数
    fit_intercept : bool
        バイアス列を持つかどうか
    """

    def __init__(self, data: np.ndarray, labels: np.ndarray, num_classes: int,
                 lambda_: float = 0.0001, fit_intercept: bool = False,
                 random_state: Optional[int] = None):
        # fit_interceptの場合のみコピーが発生する。元のdataは変更しない
        self.data = _add_intercept_row(data) if fit_intercept else data
        self.labels = labels
        self.num_classes = num_classes
        self.lambda_ = lambda_
        self.fit_intercept = fit_intercept
        self.ground_truth = _one_hot_columns(labels, num_classes)
        self.rng = np.random.default_rng(random_state)

        # シャッフル用のサンプル順序
        self.order = np.arange(self.data.shape[1])
        self.penalty_mask = _parameter_penalty_mask(
            num_classes, self.data.shape[0], fit_intercept
        )

    def initial_point(self) -> np.ndarray:
        """
        Small random starting parameters.

        Returns:
        --------
        parameters : array-like, shape=(num_classes, n_cols)
            0.005 * standard normal draws
        """
        return 0.005 * self.rng.standard_normal((self.num_classes, self.data.shape[0]))

    def num_functions(self) -> int:
        """Number of separable terms (one per sample)."""
        return self.data.shape[1]

    def shuffle(self) -> None:
        """Permute the order in which batches visit the samples."""
        self.order = self.rng.permutation(self.data.shape[1])

    def regularization(self, parameters: np.ndarray) -> float:
        """lambda/2 * squared norm of the non-bias weights."""
        masked = parameters * self.penalty_mask
        return 0.5 * self.lambda_ * float(np.sum(masked * masked))

    def evaluate(self, parameters: np.ndarray, begin: int = 0,
                 batch_size: Optional[int] = None) -> float:
        """
        目的関数値を計算

        Parameters:
        -----------
        parameters : array-like, shape=(num_classes, n_cols)
            評価するパラメータ
        begin : int, default=0
            バッチの開始位置（シャッフル後の順序）
        batch_size : int, optional
            バッチサイズ（Noneの場合は全サンプル）

        Returns:
        --------
        objective : float
            負の平均対数尤度 + 正則化項
        """
        x, labels, _ = self._batch(begin, batch_size)
        log_probabilities = _log_softmax_columns(parameters @ x)
        log_likelihood = np.mean(log_probabilities[labels, np.arange(labels.shape[0])])
        return float(-log_likelihood + self.regularization(parameters))

    def gradient(self, parameters: np.ndarray, begin: int = 0,
                 batch_size: Optional[int] = None) -> np.ndarray:
        """Gradient of `evaluate` with respect to every parameter."""
        return self.evaluate_with_gradient(parameters, begin, batch_size)[1]

    def evaluate_with_gradient(
        self,
        parameters: np.ndarray,
        begin: int = 0,
        batch_size: Optional[int] = None
    ) -> Tuple[float, np.ndarray]:
        """
        目的関数値と勾配を同時に計算

        Parameters:
        -----------
        parameters : array-like, shape=(num_classes, n_cols)
            評価するパラメータ
        begin : int, default=0
            バッチの開始位置
        batch_size : int, optional
            バッチサイズ（Noneの場合は全サンプル）

        Returns:
        --------
        objective : float
            目的関数値
        gradient : array-like, shape=(num_classes, n_cols)
            勾配
        """
        x, labels, ground_truth = self._batch(begin, batch_size)
        n_samples = labels.shape[0]

        log_probabilities = _log_softmax_columns(parameters @ x)
        probabilities = np.exp(log_probabilities)
        log_likelihood = np.mean(log_probabilities[labels, np.arange(n_samples)])
        objective = float(-log_likelihood + self.regularization(parameters))

        # 勾配: (P - Y) X^T / n + lambda * theta（バイアス列は正則化しない）
        gradient = (probabilities - ground_truth) @ x.T / n_samples
        gradient += self.lambda_ * parameters * self.penalty_mask

        return objective, gradient

    def _batch(self, begin: int, batch_size: Optional[int]) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Select the columns of one batch.

        The full-data path returns the stored arrays without indexing.
        """
        n_samples = self.data.shape[1]
        if batch_size is None and begin == 0:
            return self.data, self.labels, self.ground_truth

        end = n_samples if batch_size is None else min(begin + batch_size, n_samples)
        if begin < 0 or begin >= end:
            raise ValueError(f"Invalid batch [{begin}, {end}) for {n_samples} samples")

        columns = self.order[begin:end]
        return self.data[:, columns], self.labels[columns], self.ground_truth[:, columns]


def compute_probabilities(parameters: np.ndarray, data: np.ndarray, fit_intercept: bool) -> np.ndarray:
    """
    Softmax probabilities of `data` (shape=(n_features, n_samples)) under
    `parameters`, without any regularization term.
    """
    if fit_intercept:
        logits = parameters[:, :-1] @ data + parameters[:, -1:]
    else:
        logits = parameters @ data
    return _softmax_columns(logits)
