"""
Boosting Loss Functions

This module contains the loss used by a boosting regressor to turn the
residuals of one ensemble member into sample weights for the next one.
"""

import numpy as np


class ExponentialLoss:
    """
    指数損失によるサンプル重みの計算

    Loss = 1 - exp(-|error| / max(error))

    状態を持たず、ブースティングの反復回数も管理しない。
    """

    @staticmethod
    def calculate(error_vec) -> np.ndarray:
        """
        残差ベクトルから各サンプルの重みを計算

        Parameters:
        -----------
        error_vec : array-like, shape=(n_samples,)
            各サンプルの残差（符号付き、有限値であること）

        Returns:
        --------
        loss : array-like, shape=(n_samples,)
            最大値が非負なら [0, 1) の範囲の重み。残差が全て0の場合は全て0。
            最大値が負の場合はその値で割るため、重みは負になる
        """
        error_vec = np.asarray(error_vec, dtype=np.float64)
        if error_vec.size == 0:
            return np.zeros_like(error_vec)

        max_error = np.max(error_vec)
        # ゼロ除算を避ける
        if max_error == 0:
            max_error = 1.0

        return 1.0 - np.exp(-np.abs(error_vec) / max_error)
