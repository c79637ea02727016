"""
実験結果の保存・可視化ユーティリティモジュール

このモジュールは、ソフトマックス回帰の実験結果（オプティマイザ比較、
正則化パス、指数損失によるサンプル重み）を保存・可視化するための
ユーティリティ関数を提供します。
"""

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns
import os
import json
from typing import Dict, List, Optional
import datetime

from ..models.loss_functions import ExponentialLoss


def create_results_directory(base_dir: str = "results") -> str:
    """
    実験結果を保存するディレクトリを作成

    Parameters:
    -----------
    base_dir : str, default="results"
        基本ディレクトリ名

    Returns:
    --------
    results_dir : str
        作成された結果ディレクトリのパス
    """
    # タイムスタンプを含むディレクトリ名を生成
    timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    results_dir = os.path.join(base_dir, f"experiment_{timestamp}")

    # ディレクトリを作成
    os.makedirs(results_dir, exist_ok=True)
    os.makedirs(os.path.join(results_dir, "figures"), exist_ok=True)

    return results_dir


def save_experiment_config(config: Dict, results_dir: str) -> None:
    """
    実験設定を保存

    Parameters:
    -----------
    config : dict
        実験設定
    results_dir : str
        結果ディレクトリのパス
    """
    with open(os.path.join(results_dir, "experiment_config.json"), 'w') as f:
        json.dump(config, f, indent=2)


def results_to_frame(results: Dict) -> pd.DataFrame:
    """
    オプティマイザ比較結果をDataFrameに変換

    Parameters:
    -----------
    results : dict
        compare_optimizersの結果

    Returns:
    --------
    df : pd.DataFrame
        オプティマイザごとの1行
    """
    rows = []
    for name, result in results.items():
        row = {
            'optimizer': name,
            'train_time': result['train_time'],
            'predict_time': result['predict_time'],
            'objective': result['objective']
        }
        row.update(result['evaluation'])
        rows.append(row)
    return pd.DataFrame(rows).set_index('optimizer')


def plot_optimizer_comparison(results: Dict,
                              title: str = "Optimizer Comparison",
                              save_path: Optional[str] = None) -> None:
    """
    オプティマイザ比較をプロット

    Parameters:
    -----------
    results : dict
        compare_optimizersの結果
    title : str, default="Optimizer Comparison"
        プロットのタイトル
    save_path : str, optional
        保存先のパス
    """
    df = results_to_frame(results)
    names = list(df.index)

    fig, axes = plt.subplots(1, 3, figsize=(16, 5))
    fig.suptitle(title, fontsize=16)

    # 訓練時間
    sns.barplot(x=names, y=df['train_time'].values, ax=axes[0])
    axes[0].set_title('Training Time (s)')
    axes[0].set_ylabel('Time (s)')

    # 最終目的関数値
    sns.barplot(x=names, y=df['objective'].values, ax=axes[1])
    axes[1].set_title('Final Objective')
    axes[1].set_ylabel('Objective')

    # 正解率
    sns.barplot(x=names, y=df['accuracy'].values, ax=axes[2])
    axes[2].set_title('Test Accuracy')
    axes[2].set_ylabel('Accuracy')
    axes[2].set_ylim(0.0, 1.0)

    plt.tight_layout()
    plt.subplots_adjust(top=0.85)

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')

    plt.close(fig)


def plot_lambda_path(path: Dict[str, List[float]],
                     title: str = "Regularization Path",
                     save_path: Optional[str] = None) -> None:
    """
    正則化係数と重みノルムの関係をプロット

    Parameters:
    -----------
    path : dict
        lambda_pathの結果
    title : str, default="Regularization Path"
        プロットのタイトル
    save_path : str, optional
        保存先のパス
    """
    fig, ax = plt.subplots(figsize=(10, 6))

    ax.plot(path['lambda'], path['weight_norm'], marker='o', label='weight norm')
    # lambda=0を含む場合はsymlogで表示
    ax.set_xscale('symlog', linthresh=1e-4)
    ax.set_xlabel('lambda')
    ax.set_ylabel('||W|| (bias excluded)')
    ax.set_title(title)
    ax.legend()
    ax.grid(True, linestyle='--', alpha=0.7)

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')

    plt.close(fig)


def plot_sample_weights(error_vec: np.ndarray,
                        title: str = "Exponential Loss Sample Weights",
                        save_path: Optional[str] = None) -> np.ndarray:
    """
    残差と指数損失による重みの関係をプロット

    Parameters:
    -----------
    error_vec : array-like, shape=(n_samples,)
        残差
    title : str
        プロットのタイトル
    save_path : str, optional
        保存先のパス

    Returns:
    --------
    weights : array-like, shape=(n_samples,)
        プロットした重み
    """
    error_vec = np.asarray(error_vec, dtype=np.float64)
    weights = ExponentialLoss.calculate(error_vec)
    order = np.argsort(error_vec)

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.plot(error_vec[order], weights[order], marker='.', linestyle='-')
    ax.set_xlabel('Residual')
    ax.set_ylabel('Weight')
    ax.set_title(title)
    ax.grid(True, linestyle='--', alpha=0.7)

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')

    plt.close(fig)
    return weights


def create_summary_report(comparison_results: Dict, path: Dict[str, List[float]],
                          results_dir: str) -> str:
    """
    実験結果の要約レポートを作成

    Parameters:
    -----------
    comparison_results : dict
        オプティマイザ比較結果
    path : dict
        正則化パスの結果
    results_dir : str
        結果ディレクトリのパス

    Returns:
    --------
    report_path : str
        作成したレポートのパス
    """
    report = []

    report.append("# Softmax Regression 実験結果要約レポート")
    report.append(f"実行日時: {datetime.datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")

    report.append("## 1. オプティマイザ比較結果")
    report.append("\n| オプティマイザ | 目的関数値 | 正解率 | 訓練時間(秒) |")
    report.append("| --- | --- | --- | --- |")
    for name, result in comparison_results.items():
        accuracy = result['evaluation'].get('accuracy', float('nan'))
        report.append(f"| {name} | {result['objective']:.6f} | {accuracy:.4f} | {result['train_time']:.4f} |")

    report.append("\n\n## 2. 正則化パス")
    report.append("\n| lambda | 重みノルム | 正解率 |")
    report.append("| --- | --- | --- |")
    for lambda_, norm, accuracy in zip(path['lambda'], path['weight_norm'], path['accuracy']):
        report.append(f"| {lambda_:g} | {norm:.6f} | {accuracy:.4f} |")

    report_path = os.path.join(results_dir, "summary_report.md")
    with open(report_path, 'w') as f:
        f.write('\n'.join(report))

    return report_path
