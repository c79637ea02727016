"""
Data Transform Utilities

This module contains utility functions for data transformation and
probability computation used by softmax regression.
All matrices follow the column-per-sample layout: shape=(n_features, n_samples).
"""

import numpy as np


def _add_intercept_row(data: np.ndarray) -> np.ndarray:
    """
    Append a constant row of ones to the data matrix.

    Parameters:
    -----------
    data : array-like, shape=(n_features, n_samples)
        Input features, one sample per column

    Returns:
    --------
    augmented : array-like, shape=(n_features + 1, n_samples)
        Input features with a trailing row of ones
    """
    return np.vstack([data, np.ones((1, data.shape[1]), dtype=data.dtype)])


def _softmax_columns(logits: np.ndarray) -> np.ndarray:
    """
    列ごとにsoftmaxを計算（数値安定化のため最大値を減算）

    Parameters:
    -----------
    logits : array-like, shape=(n_classes, n_samples)
        各クラスのスコア

    Returns:
    --------
    probabilities : array-like, shape=(n_classes, n_samples)
        各列の和が1になる確率
    """
    # 最大値を引かないとexpがオーバーフローする
    shifted = logits - np.max(logits, axis=0, keepdims=True)
    exp_scores = np.exp(shifted)
    return exp_scores / np.sum(exp_scores, axis=0, keepdims=True)


def _log_softmax_columns(logits: np.ndarray) -> np.ndarray:
    """
    Column-wise log-softmax, computed with the same max shift as
    `_softmax_columns` so that log(0) never appears for finite logits.
    """
    shifted = logits - np.max(logits, axis=0, keepdims=True)
    return shifted - np.log(np.sum(np.exp(shifted), axis=0, keepdims=True))


def _one_hot_columns(labels: np.ndarray, n_classes: int) -> np.ndarray:
    """
    Convert class indices to a one-hot matrix.

    Parameters:
    -----------
    labels : array-like, shape=(n_samples,)
        Class indices in [0, n_classes)
    n_classes : int
        Number of classes

    Returns:
    --------
    ground_truth : array-like, shape=(n_classes, n_samples)
        ground_truth[k, i] = 1 if labels[i] == k else 0
    """
    n_samples = labels.shape[0]
    ground_truth = np.zeros((n_classes, n_samples))
    ground_truth[labels, np.arange(n_samples)] = 1.0
    return ground_truth


def _validate_labels(labels, n_samples: int, n_classes: int) -> np.ndarray:
    """
    ラベルの検証と整数配列への変換

    Parameters:
    -----------
    labels : array-like, shape=(n_samples,)
        クラスラベル
    n_samples : int
        データのサンプル数（列数）
    n_classes : int
        クラス数

    Returns:
    --------
    labels : np.ndarray, shape=(n_samples,)
        検証済みの整数ラベル
    """
    if n_classes < 2:
        raise ValueError(f"num_classes must be at least 2, got {n_classes}")

    labels = np.asarray(labels)
    if labels.ndim != 1:
        labels = labels.reshape(-1)

    if labels.shape[0] != n_samples:
        raise ValueError(f"data ({n_samples} samples) and labels ({labels.shape[0]} labels) have different numbers of samples")

    if labels.size > 0:
        # 整数値でないラベルは受け付けない
        if not np.issubdtype(labels.dtype, np.integer):
            if not np.all(np.isfinite(labels)) or not np.all(np.equal(np.mod(labels, 1), 0)):
                raise ValueError("labels must be integer class indices")

        label_min, label_max = labels.min(), labels.max()
        if label_min < 0 or label_max >= n_classes:
            raise ValueError(f"labels must be in [0, {n_classes}), got values in [{label_min}, {label_max}]")

    return labels.astype(np.intp)


def _parameter_penalty_mask(n_classes: int, n_cols: int, fit_intercept: bool) -> np.ndarray:
    """
    Mask of the entries subject to L2 regularization.

    Parameters:
    -----------
    n_classes : int
        Number of parameter rows
    n_cols : int
        Number of parameter columns (including the bias column, if any)
    fit_intercept : bool
        Whether the last column holds the bias term

    Returns:
    --------
    mask : array-like, shape=(n_classes, n_cols)
        1.0 for regularized weights, 0.0 for the bias column
    """
    mask = np.ones((n_classes, n_cols))
    if fit_intercept:
        mask[:, -1] = 0.0
    return mask
