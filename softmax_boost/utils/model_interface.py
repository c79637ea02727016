"""
モデルインターフェース統一テスト用モジュール

このモジュールは、ソフトマックス回帰を各オプティマイザで学習・評価するための
ユーティリティ（合成データ生成、学習・予測時間の計測、正則化パスの計算）を提供します。
"""

import numpy as np
from typing import Dict, List, Tuple, Optional
import time
from ..models.softmax_components import (
    SoftmaxRegression,
    Optimizer,
    LBFGSOptimizer,
    GradientDescentOptimizer,
    AdamOptimizer
)


def generate_gaussian_clusters(n_samples: int = 200, n_features: int = 2, n_classes: int = 2,
                               separation: float = 6.0, test_size: float = 0.5,
                               random_state: Optional[int] = None) -> Tuple:
    """
    クラスごとに中心の異なるガウス分布から分類データを生成

    Parameters:
    -----------
    n_samples : int, default=200
        サンプル数
    n_features : int, default=2
        特徴量の数
    n_classes : int, default=2
        クラス数
    separation : float, default=6.0
        クラス中心間のスケール（大きいほど分離しやすい）
    test_size : float, default=0.5
        テストデータの割合
    random_state : int, optional
        乱数シード

    Returns:
    --------
    X_train : array-like, shape=(n_train, n_features)
        訓練用入力特徴量
    y_train : array-like, shape=(n_train,)
        訓練用ラベル
    X_test : array-like, shape=(n_test, n_features)
        テスト用入力特徴量
    y_test : array-like, shape=(n_test,)
        テスト用ラベル
    """
    rng = np.random.default_rng(random_state)

    # クラス中心を生成
    centers = rng.normal(scale=separation, size=(n_classes, n_features))

    # 各サンプルのクラスを均等に割り当て、ランダムに並べ替え
    y = rng.permutation(np.arange(n_samples) % n_classes)
    X = centers[y] + rng.normal(size=(n_samples, n_features))

    # 訓練データとテストデータに分割
    n_test = int(n_samples * test_size)
    n_train = n_samples - n_test

    X_train, X_test = X[:n_train], X[n_train:]
    y_train, y_test = y[:n_train], y[n_train:]

    return X_train, y_train, X_test, y_test


def run_model_interface(model: SoftmaxRegression, X_train: np.ndarray, y_train: np.ndarray,
                        X_test: np.ndarray, y_test: np.ndarray,
                        optimizer: Optional[Optimizer] = None,
                        metrics: List[str] = ['accuracy', 'log_loss', 'macro_f1']) -> Dict:
    """
    モデルを学習・評価し、学習時間と予測時間を計測

    Parameters:
    -----------
    model : SoftmaxRegression
        テストするモデル
    X_train, y_train : array-like
        訓練データ（行優先）
    X_test, y_test : array-like
        テストデータ（行優先）
    optimizer : Optimizer, optional
        使用するオプティマイザ
    metrics : list of str
        評価指標

    Returns:
    --------
    results : dict
        学習時間、予測時間、評価結果、最終目的関数値
    """
    # 学習時間を計測
    start_time = time.time()
    model.fit(X_train, y_train, optimizer)
    train_time = time.time() - start_time

    # 予測時間を計測
    start_time = time.time()
    model.predict(X_test)
    predict_time = time.time() - start_time

    # 評価
    eval_results = model.evaluate(X_test, y_test, metrics=metrics)

    return {
        'model_class': type(model).__name__,
        'optimizer': type(optimizer).__name__ if optimizer is not None else 'LBFGSOptimizer',
        'train_time': train_time,
        'predict_time': predict_time,
        'objective': model.objective_value_,
        'evaluation': eval_results
    }


def compare_optimizers(n_samples: int = 300, n_features: int = 4, n_classes: int = 3,
                       lambda_: float = 0.0001, fit_intercept: bool = True,
                       optimizers: Optional[Dict[str, Optimizer]] = None,
                       random_state: int = 42) -> Dict:
    """
    同じデータで各オプティマイザを比較

    Parameters:
    -----------
    n_samples : int, default=300
        サンプル数
    n_features : int, default=4
        特徴量の数
    n_classes : int, default=3
        クラス数
    lambda_ : float, default=0.0001
        L2正則化係数
    fit_intercept : bool, default=True
        バイアス項を使うかどうか
    optimizers : dict, optional
        名前 -> オプティマイザ（Noneの場合はL-BFGS、勾配降下法、Adam）
    random_state : int, default=42
        乱数シード

    Returns:
    --------
    results : dict
        オプティマイザ名ごとの結果
    """
    if optimizers is None:
        optimizers = {
            'L-BFGS': LBFGSOptimizer(num_basis=10, max_iterations=500),
            'GradientDescent': GradientDescentOptimizer(step_size=0.5, max_iterations=2000, tolerance=1e-8),
            'Adam': AdamOptimizer(step_size=0.01, batch_size=32, max_iterations=20000, tolerance=1e-6)
        }

    X_train, y_train, X_test, y_test = generate_gaussian_clusters(
        n_samples=n_samples,
        n_features=n_features,
        n_classes=n_classes,
        random_state=random_state
    )

    results = {}
    for name, optimizer in optimizers.items():
        print(f"Testing {name}...")
        model = SoftmaxRegression(
            num_classes=n_classes,
            fit_intercept=fit_intercept,
            lambda_=lambda_,
            random_state=random_state
        )
        results[name] = run_model_interface(model, X_train, y_train, X_test, y_test, optimizer)

    return results


def lambda_path(lambdas: List[float], n_samples: int = 200, n_features: int = 2, n_classes: int = 2,
                fit_intercept: bool = True, random_state: int = 42) -> Dict[str, List[float]]:
    """
    正則化係数ごとに学習し、バイアスを除いた重みのノルムを計算

    Parameters:
    -----------
    lambdas : list of float
        試す正則化係数
    n_samples, n_features, n_classes : int
        合成データの設定
    fit_intercept : bool, default=True
        バイアス項を使うかどうか
    random_state : int, default=42
        乱数シード

    Returns:
    --------
    path : dict
        'lambda', 'weight_norm', 'regularization', 'accuracy' のリスト
    """
    X_train, y_train, X_test, y_test = generate_gaussian_clusters(
        n_samples=n_samples,
        n_features=n_features,
        n_classes=n_classes,
        random_state=random_state
    )

    path = {'lambda': [], 'weight_norm': [], 'regularization': [], 'accuracy': []}
    for lambda_ in lambdas:
        model = SoftmaxRegression(num_classes=n_classes, fit_intercept=fit_intercept,
                                  lambda_=lambda_, random_state=random_state)
        model.fit(X_train, y_train, LBFGSOptimizer(max_iterations=1000))

        weights = model.parameters[:, :-1] if fit_intercept else model.parameters
        weight_norm = float(np.linalg.norm(weights))

        path['lambda'].append(float(lambda_))
        path['weight_norm'].append(weight_norm)
        path['regularization'].append(0.5 * lambda_ * weight_norm ** 2)
        path['accuracy'].append(model.score(X_test, y_test))

    return path
