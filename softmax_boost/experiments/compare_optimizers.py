"""
ソフトマックス回帰 オプティマイザ比較実験モジュール

このモジュールは、L-BFGS、勾配降下法、Adamで学習したソフトマックス回帰の
性能比較と、正則化係数による重みの縮小を確認する実験スクリプトを提供します。
"""

import numpy as np
import os
import json
from typing import Dict, List, Optional

from ..utils.model_interface import compare_optimizers, lambda_path
from ..utils.visualization import (
    create_results_directory,
    save_experiment_config,
    plot_optimizer_comparison,
    plot_lambda_path,
    plot_sample_weights,
    create_summary_report
)


def run_optimizer_comparison(n_samples: int = 300,
                             n_features: int = 4,
                             n_classes: int = 3,
                             lambda_: float = 0.0001,
                             fit_intercept: bool = True,
                             random_state: int = 42,
                             output_dir: str = "results",
                             optimizers: Optional[Dict] = None) -> Dict:
    """
    オプティマイザ比較実験を実行し、結果をJSONと図に保存

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
    random_state : int, default=42
        乱数シード
    output_dir : str, default="results"
        結果の出力ディレクトリ
    optimizers : dict, optional
        名前 -> オプティマイザ

    Returns:
    --------
    results : dict
        比較結果
    """
    os.makedirs(output_dir, exist_ok=True)

    results = compare_optimizers(
        n_samples=n_samples,
        n_features=n_features,
        n_classes=n_classes,
        lambda_=lambda_,
        fit_intercept=fit_intercept,
        optimizers=optimizers,
        random_state=random_state
    )

    for name, result in results.items():
        print(f"\n{name}:")
        print(f"  Train time: {result['train_time']:.4f}s")
        print(f"  Objective: {result['objective']:.6f}")
        print(f"  Accuracy: {result['evaluation']['accuracy']:.4f}")

    # 結果をJSONファイルに保存
    with open(os.path.join(output_dir, "optimizer_comparison.json"), 'w') as f:
        json.dump(results, f, indent=2)

    # 結果をプロット
    plot_optimizer_comparison(results, save_path=os.path.join(output_dir, "optimizer_comparison.png"))

    return results


def run_all_experiments(output_dir: str = "results", random_state: int = 42,
                        lambdas: Optional[List[float]] = None) -> str:
    """
    すべての実験を実行

    Parameters:
    -----------
    output_dir : str, default="results"
        結果の出力ディレクトリ
    random_state : int, default=42
        乱数シード
    lambdas : list of float, optional
        正則化パスで試す係数

    Returns:
    --------
    results_dir : str
        結果を保存したディレクトリ
    """
    if lambdas is None:
        lambdas = [0.0, 0.0001, 0.01, 0.1, 1.0, 10.0]

    results_dir = create_results_directory(output_dir)
    figures_dir = os.path.join(results_dir, "figures")

    save_experiment_config({
        'random_state': random_state,
        'lambdas': lambdas
    }, results_dir)

    # オプティマイザ比較
    comparison = run_optimizer_comparison(random_state=random_state, output_dir=results_dir)

    # 正則化パス
    path = lambda_path(lambdas, random_state=random_state)
    plot_lambda_path(path, save_path=os.path.join(figures_dir, "lambda_path.png"))

    # 指数損失によるサンプル重み
    rng = np.random.default_rng(random_state)
    plot_sample_weights(rng.normal(size=200), save_path=os.path.join(figures_dir, "sample_weights.png"))

    create_summary_report(comparison, path, results_dir)
    print(f"\nResults saved to {results_dir}")

    return results_dir


if __name__ == "__main__":
    # すべての実験を実行
    run_all_experiments(output_dir="results", random_state=42)
