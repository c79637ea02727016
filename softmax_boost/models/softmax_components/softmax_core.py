"""
Softmax Regression Core Module

This module contains the SoftmaxRegression class: a multi-class linear
classifier trained by handing a regularized softmax objective to a
pluggable optimizer.

Data passed to `train`, `classify` and `compute_accuracy` holds one sample
per column (shape=(n_features, n_samples)). The row-major `fit`/`predict`
interface inherited from `LinearClassifierBase` transposes to this layout.

Example:
--------
>>> model = SoftmaxRegression(input_size=data.shape[0], num_classes=3)
>>> model.train(data, labels, 3, LBFGSOptimizer(num_basis=5, max_iterations=100))
>>> predictions = model.classify(test_data)
"""

import json
import numpy as np
from typing import Any, Callable, Dict, Optional, Tuple, Union
from sklearn.exceptions import NotFittedError
from sklearn.utils.validation import check_array

from ..base import LinearClassifierBase
from .data_transforms import _validate_labels
from .objective import SoftmaxRegressionFunction, compute_probabilities
from .optimizers import LBFGSOptimizer, Optimizer


class SoftmaxRegression(LinearClassifierBase):
    """
    Softmax regression (multinomial logistic regression)

    The parameter matrix has one row per class; when `fit_intercept` is set a
    trailing column holds the bias of each class. Be sure to train the model
    before calling `classify` or `compute_accuracy`.

    Parameters:
    -----------
    input_size : int, default=0
        Size of the input feature vector (0: infer from the training data)
    num_classes : int, default=0
        Number of classes (0: set by `train`)
    fit_intercept : bool, default=False
        Whether to add an intercept term; cannot change after construction
    lambda_ : float, default=0.0001
        L2-regularization constant
    random_state : int, optional
        Seed for the initial point and mini-batch shuffling
    verbose : int, default=0
        Print a summary after every training run when positive
    """

    def __init__(self,
                 input_size: int = 0,
                 num_classes: int = 0,
                 fit_intercept: bool = False,
                 lambda_: float = 0.0001,
                 random_state: Optional[int] = None,
                 verbose: int = 0):
        super().__init__(num_classes=num_classes, random_state=random_state, verbose=verbose)
        self.input_size = input_size
        self._fit_intercept = bool(fit_intercept)
        self.lambda_ = lambda_

        # 学習後に設定される属性
        self._parameters = None
        self.objective_value_ = None
        self.n_iterations_ = None

    @classmethod
    def from_data(cls,
                  data: np.ndarray,
                  labels: np.ndarray,
                  num_classes: int,
                  optimizer: Optional[Optimizer] = None,
                  lambda_: float = 0.0001,
                  fit_intercept: bool = False,
                  *callbacks: Callable,
                  random_state: Optional[int] = None,
                  verbose: int = 0) -> 'SoftmaxRegression':
        """
        Construct the model and train it immediately on `data`.

        Parameters:
        -----------
        data : array-like, shape=(n_features, n_samples)
            Training data, one sample per column
        labels : array-like, shape=(n_samples,)
            Class index of every sample
        num_classes : int
            Number of classes
        optimizer : Optimizer, optional
            Optimizer to use (default: LBFGSOptimizer())
        lambda_ : float, default=0.0001
            L2-regularization constant
        fit_intercept : bool, default=False
            Whether to add an intercept term
        *callbacks : callable
            Callbacks forwarded to the optimizer

        Returns:
        --------
        model : SoftmaxRegression
            Trained model
        """
        data = np.asarray(data)
        input_size = data.shape[0] if data.ndim == 2 else 0
        model = cls(input_size=input_size, num_classes=num_classes, fit_intercept=fit_intercept,
                    lambda_=lambda_, random_state=random_state, verbose=verbose)
        model.train(data, labels, num_classes, optimizer, *callbacks)
        return model

    # ------------------------------------------------------------------
    # accessors
    # ------------------------------------------------------------------

    @property
    def num_classes(self) -> int:
        return self._num_classes

    @num_classes.setter
    def num_classes(self, value: int) -> None:
        self._num_classes = int(value)

    @property
    def lambda_(self) -> float:
        return self._lambda

    @lambda_.setter
    def lambda_(self, value: float) -> None:
        if value < 0:
            raise ValueError(f"lambda_ must be non-negative, got {value}")
        self._lambda = float(value)

    @property
    def fit_intercept(self) -> bool:
        # パラメータの形が変わるため、構築後の変更は不可
        return self._fit_intercept

    @property
    def parameters(self) -> Optional[np.ndarray]:
        """
        The live parameter matrix, shape=(num_classes, feature_size() + fit_intercept).

        The array itself is returned, not a copy: in-place edits (for
        example to warm-start the next `train` call) change the model.
        """
        return self._parameters

    @parameters.setter
    def parameters(self, value: np.ndarray) -> None:
        value = np.asarray(value, dtype=np.float64)
        if value.ndim != 2:
            raise ValueError(f"parameters must be a 2-D matrix, got {value.ndim} dimensions")
        if self._fit_intercept and value.shape[1] < 1:
            raise ValueError("parameters need a bias column when fit_intercept is set")
        self._parameters = value

    def feature_size(self) -> int:
        """
        Dimensionality of the input features, recovered from the parameters.
        """
        self._check_is_trained()
        return self._parameters.shape[1] - 1 if self._fit_intercept else self._parameters.shape[1]

    # ------------------------------------------------------------------
    # training
    # ------------------------------------------------------------------

    def train(self,
              data: np.ndarray,
              labels: np.ndarray,
              num_classes: int,
              optimizer: Optional[Optimizer] = None,
              *callbacks: Callable) -> float:
        """
        ソフトマックス回帰を学習

        Parameters:
        -----------
        data : array-like, shape=(n_features, n_samples)
            学習データ（各列が1サンプル）
        labels : array-like, shape=(n_samples,)
            各サンプルのクラスラベル（[0, num_classes)の整数）
        num_classes : int
            クラス数（2以上）
        optimizer : Optimizer, optional
            使用するオプティマイザ（デフォルト: LBFGSOptimizer()）
        *callbacks : callable
            オプティマイザに渡すコールバック

        Returns:
        --------
        objective_value : float
            最終パラメータでの目的関数値
        """
        # 重い計算の前に入力を検証
        data = check_array(data, dtype=np.float64, ensure_min_samples=1, ensure_min_features=1)
        labels = _validate_labels(labels, data.shape[1], num_classes)
        num_classes = int(num_classes)
        n_features = data.shape[0]

        if optimizer is None:
            optimizer = LBFGSOptimizer()

        objective = SoftmaxRegressionFunction(
            data, labels, num_classes,
            lambda_=self.lambda_,
            fit_intercept=self._fit_intercept,
            random_state=self.random_state
        )

        # 形が合う既存パラメータがあればウォームスタート
        expected_shape = (num_classes, n_features + int(self._fit_intercept))
        if self._parameters is not None and self._parameters.shape == expected_shape:
            initial_point = self._parameters.copy()
        else:
            initial_point = objective.initial_point()

        parameters, objective_value = optimizer.minimize(objective, initial_point, *callbacks)

        self._parameters = np.asarray(parameters, dtype=np.float64).reshape(expected_shape)
        self._num_classes = num_classes
        # input_sizeが0または不一致の場合はデータの行数に合わせる
        self.input_size = n_features
        self.objective_value_ = float(objective_value)
        self.n_iterations_ = getattr(optimizer, 'n_iterations_', None)

        if self.verbose > 0:
            self.print_training_summary()

        return self.objective_value_

    def fit(self, X: np.ndarray, y: np.ndarray, optimizer: Optional[Optimizer] = None,
            *callbacks: Callable) -> 'SoftmaxRegression':
        """
        Train on row-major data (shape=(n_samples, n_features)).

        When `num_classes` is unset it becomes max(y) + 1 (at least 2).
        """
        X, y = self._validate_input(X, y)
        num_classes = self._num_classes
        if num_classes == 0:
            y_int = _validate_labels(y, X.shape[0], np.iinfo(np.intp).max)
            num_classes = max(int(y_int.max()) + 1, 2) if y_int.size > 0 else 2

        self.train(X.T, y, num_classes, optimizer, *callbacks)
        return self

    # ------------------------------------------------------------------
    # classification
    # ------------------------------------------------------------------

    def classify(self, dataset: np.ndarray,
                 return_probabilities: bool = False) -> Union[int, np.ndarray, Tuple[np.ndarray, np.ndarray]]:
        """
        データを分類

        1次元の入力は1点として扱い、予測ラベル（int）を返す。
        2次元の入力は各列を1点として扱い、予測ラベルの配列を返す。
        最大確率のクラスが複数ある場合は番号の小さいクラスを選ぶ。

        Parameters:
        -----------
        dataset : array-like, shape=(n_features,) or (n_features, n_samples)
            分類するデータ
        return_probabilities : bool, default=False
            Trueの場合、(labels, probabilities) を返す（2次元入力のみ）

        Returns:
        --------
        label : int
            1次元入力の場合の予測ラベル
        labels : array-like, shape=(n_samples,)
            2次元入力の場合の予測ラベル
        probabilities : array-like, shape=(num_classes, n_samples)
            return_probabilities=Trueの場合のクラス確率
        """
        dataset = np.asarray(dataset)

        if dataset.ndim == 1:
            if return_probabilities:
                raise ValueError("return_probabilities requires a 2-D dataset")
            probabilities = self.classify_probabilities(dataset.reshape(-1, 1))
            return int(np.argmax(probabilities[:, 0]))

        probabilities = self.classify_probabilities(dataset)
        labels = np.argmax(probabilities, axis=0)

        if return_probabilities:
            return labels, probabilities
        return labels

    def classify_probabilities(self, dataset: np.ndarray) -> np.ndarray:
        """
        Class probabilities of every column of `dataset`.

        Parameters:
        -----------
        dataset : array-like, shape=(n_features, n_samples)
            Points to classify

        Returns:
        --------
        probabilities : array-like, shape=(num_classes, n_samples)
            Softmax probabilities under the current parameters; every column
            sums to one
        """
        self._check_is_trained()
        dataset = np.asarray(dataset)
        if dataset.ndim == 1:
            dataset = dataset.reshape(-1, 1)
        dataset = check_array(dataset, dtype=np.float64, ensure_min_samples=1, ensure_min_features=0)

        if dataset.shape[0] != self.feature_size():
            raise ValueError(f"dataset has {dataset.shape[0]} features, but the model expects {self.feature_size()}")

        return compute_probabilities(self._parameters, dataset, self._fit_intercept)

    def compute_accuracy(self, test_data: np.ndarray, labels: np.ndarray) -> float:
        """
        Fraction of columns of `test_data` whose predicted label equals `labels`.

        Parameters:
        -----------
        test_data : array-like, shape=(n_features, n_samples)
            Points to classify
        labels : array-like, shape=(n_samples,)
            True labels

        Returns:
        --------
        accuracy : float
            Value in [0, 1]
        """
        test_data = np.asarray(test_data)
        labels = np.asarray(labels).reshape(-1)
        if test_data.ndim != 2 or test_data.shape[1] != labels.shape[0]:
            n_points = test_data.shape[1] if test_data.ndim == 2 else 1
            raise ValueError(f"test_data ({n_points} samples) and labels ({labels.shape[0]} labels) have different numbers of samples")

        predictions = self.classify(test_data)
        return float(np.mean(predictions == labels))

    def predict_proba(self, X: np.ndarray) -> np.ndarray:
        """
        Row-major class probabilities, shape=(n_samples, num_classes).
        """
        X, _ = self._validate_input(X)
        return self.classify_probabilities(X.T).T

    def _check_is_trained(self) -> None:
        if self._parameters is None:
            raise NotFittedError("SoftmaxRegression has not been trained yet; call train() before classify()")

    # ------------------------------------------------------------------
    # parameters, persistence and reporting
    # ------------------------------------------------------------------

    def get_params(self) -> Dict[str, Any]:
        params = super().get_params()
        params.update({
            'input_size': self.input_size,
            'fit_intercept': self._fit_intercept,
            'lambda_': self.lambda_
        })
        return params

    def set_params(self, **params) -> 'SoftmaxRegression':
        # fit_interceptは構築後に変更不可（同じ値の指定のみ許可）
        if 'fit_intercept' in params:
            if bool(params.pop('fit_intercept')) != self._fit_intercept:
                raise ValueError("fit_intercept cannot be changed after construction")
        return super().set_params(**params)

    def to_dict(self) -> Dict[str, Any]:
        """
        Serializable state: parameters, num_classes, lambda and fit_intercept.

        `input_size` is not stored; it is recovered from `feature_size()`.
        """
        return {
            'parameters': None if self._parameters is None else self._parameters.tolist(),
            'num_classes': int(self._num_classes),
            'lambda': self.lambda_,
            'fit_intercept': self._fit_intercept
        }

    @classmethod
    def from_dict(cls, state: Dict[str, Any]) -> 'SoftmaxRegression':
        """Restore a model written by `to_dict`."""
        missing = {'parameters', 'num_classes', 'lambda', 'fit_intercept'} - set(state)
        if missing:
            raise ValueError(f"Missing fields in serialized model: {sorted(missing)}")

        model = cls(num_classes=state['num_classes'],
                    fit_intercept=state['fit_intercept'],
                    lambda_=state['lambda'])
        if state['parameters'] is not None:
            model.parameters = np.array(state['parameters'], dtype=np.float64)
            if model.parameters.shape[0] != model.num_classes:
                raise ValueError(f"parameters have {model.parameters.shape[0]} rows, but num_classes is {model.num_classes}")
            model.input_size = model.feature_size()
        return model

    def save_json(self, file_path: str) -> None:
        """
        モデルをJSONファイルに保存

        Parameters:
        -----------
        file_path : str
            保存先のパス
        """
        with open(file_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

        if self.verbose > 0:
            print(f"Model saved to {file_path}")

    @classmethod
    def load_json(cls, file_path: str) -> 'SoftmaxRegression':
        """Load a model written by `save_json`."""
        with open(file_path, 'r') as f:
            return cls.from_dict(json.load(f))

    def print_training_summary(self) -> None:
        """
        Print training summary
        """
        print(f"\n=== SoftmaxRegression Training Summary ===")
        print(f"Classes: {self._num_classes}")
        print(f"Input size: {self.input_size}")
        print(f"Fit intercept: {self._fit_intercept}")
        print(f"Lambda: {self.lambda_}")

        if self.objective_value_ is not None:
            print(f"Final objective: {self.objective_value_:.6f}")
        if self.n_iterations_ is not None:
            print(f"Optimizer iterations: {self.n_iterations_}")
