"""
線形分類器基底クラスモジュール

このモジュールは、多クラス線形分類器の抽象基底クラスを提供します。
行優先（shape=(n_samples, n_features)）のscikit-learn互換インターフェースと、
共通の評価・パラメータ管理機能を定義します。
"""

from abc import ABC, abstractmethod
import numpy as np
import sklearn.metrics as skm
from sklearn.utils.validation import check_array
from typing import Dict, List, Tuple, Optional, Any


class LinearClassifierBase(ABC):
    """
    多クラス線形分類器の抽象基底クラス

    このクラスは、すべての線形分類器に共通するインターフェースを定義します。
    各実装はこのクラスを継承し、抽象メソッドを実装する必要があります。

    Attributes:
    -----------
    num_classes : int
        クラス数
    random_state : int or None
        乱数シード
    verbose : int
        出力レベル（0: 出力なし）
    """

    def __init__(self, num_classes: int = 0, random_state: Optional[int] = None,
                 verbose: int = 0, **kwargs):
        """
        初期化メソッド

        Parameters:
        -----------
        num_classes : int, default=0
            クラス数（0の場合は学習時に決定）
        random_state : int, optional
            乱数シード
        verbose : int, default=0
            出力レベル
        **kwargs : dict
            追加のパラメータ
        """
        self._num_classes = int(num_classes)
        self.random_state = random_state
        self.verbose = verbose

        # 追加のパラメータを設定
        for key, value in kwargs.items():
            setattr(self, key, value)

    @abstractmethod
    def fit(self, X: np.ndarray, y: np.ndarray, *args, **kwargs) -> 'LinearClassifierBase':
        """
        行優先データでモデルを学習

        Parameters:
        -----------
        X : array-like, shape=(n_samples, n_features)
            入力特徴量
        y : array-like, shape=(n_samples,)
            クラスラベル

        Returns:
        --------
        self : LinearClassifierBase
            学習済みモデル
        """
        pass

    @abstractmethod
    def predict_proba(self, X: np.ndarray) -> np.ndarray:
        """
        クラス確率を予測

        Parameters:
        -----------
        X : array-like, shape=(n_samples, n_features)
            入力特徴量

        Returns:
        --------
        probabilities : array-like, shape=(n_samples, num_classes)
            各クラスの確率
        """
        pass

    def predict(self, X: np.ndarray) -> np.ndarray:
        """
        クラスラベルを予測（確率最大のクラス、同値の場合は小さい番号）

        Parameters:
        -----------
        X : array-like, shape=(n_samples, n_features)
            入力特徴量

        Returns:
        --------
        y_pred : array-like, shape=(n_samples,)
            予測ラベル
        """
        return np.argmax(self.predict_proba(X), axis=1)

    def score(self, X: np.ndarray, y: np.ndarray) -> float:
        """Mean accuracy on the given row-major data."""
        X, y = self._validate_input(X, y)
        return float(np.mean(self.predict(X) == y))

    def _validate_input(self, X: np.ndarray, y: Optional[np.ndarray] = None) -> Tuple[np.ndarray, Optional[np.ndarray]]:
        """
        入力データの検証と前処理

        Parameters:
        -----------
        X : array-like
            入力特徴量
        y : array-like, optional
            クラスラベル

        Returns:
        --------
        X : np.ndarray
            検証・変換後の入力特徴量
        y : np.ndarray or None
            検証・変換後のラベル
        """
        X = np.asarray(X)
        # Xを2次元配列に変換
        if X.ndim == 1:
            X = X.reshape(-1, 1)
        X = check_array(X, dtype=np.float64)

        if y is not None:
            y = np.asarray(y).reshape(-1)

            # サンプル数の一致を確認
            if X.shape[0] != y.shape[0]:
                raise ValueError(f"X ({X.shape[0]} samples) and y ({y.shape[0]} samples) have different numbers of samples")

        return X, y

    def evaluate(self, X: np.ndarray, y: np.ndarray, metrics: List[str] = ['accuracy']) -> Dict[str, float]:
        """
        モデルの評価

        Parameters:
        -----------
        X : array-like, shape=(n_samples, n_features)
            入力特徴量
        y : array-like, shape=(n_samples,)
            真のクラスラベル
        metrics : list of str, default=['accuracy']
            使用する評価指標のリスト（'accuracy', 'log_loss', 'macro_f1'）

        Returns:
        --------
        results : dict
            各評価指標の値
        """
        # 入力検証
        X, y = self._validate_input(X, y)

        # 予測
        y_proba = self.predict_proba(X)
        y_pred = np.argmax(y_proba, axis=1)

        # 結果格納用辞書
        results = {}

        for metric in metrics:
            if metric.lower() == 'accuracy':
                results['accuracy'] = float(skm.accuracy_score(y, y_pred))

            elif metric.lower() == 'log_loss':
                results['log_loss'] = float(skm.log_loss(y, y_proba, labels=np.arange(y_proba.shape[1])))

            elif metric.lower() == 'macro_f1':
                results['macro_f1'] = float(skm.f1_score(y, y_pred, average='macro',
                                                         labels=np.arange(y_proba.shape[1]),
                                                         zero_division=0))

            else:
                raise ValueError(f"Unknown metric: {metric}")

        return results

    def get_params(self) -> Dict[str, Any]:
        """
        モデルパラメータの取得

        Returns:
        --------
        params : dict
            モデルパラメータ
        """
        return {
            'num_classes': self._num_classes,
            'random_state': self.random_state,
            'verbose': self.verbose
        }

    def set_params(self, **params) -> 'LinearClassifierBase':
        """
        モデルパラメータの設定

        Parameters:
        -----------
        **params : dict
            設定するパラメータ

        Returns:
        --------
        self : LinearClassifierBase
            パラメータを更新したモデル
        """
        valid_keys = self.get_params()
        for key, value in params.items():
            if key in valid_keys:
                setattr(self, key, value)
            else:
                raise ValueError(f"Invalid parameter: {key}")
        return self
