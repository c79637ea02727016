"""
ユーティリティと実験スクリプトのテスト
"""

import json
import os

import numpy as np
import pandas as pd

from softmax_boost.models import LBFGSOptimizer, GradientDescentOptimizer
from softmax_boost.utils.model_interface import (
    generate_gaussian_clusters,
    run_model_interface,
    compare_optimizers,
    lambda_path
)
from softmax_boost.utils.visualization import (
    results_to_frame,
    plot_optimizer_comparison,
    plot_lambda_path,
    plot_sample_weights,
    create_summary_report
)
from softmax_boost.experiments.compare_optimizers import run_optimizer_comparison, run_all_experiments
from softmax_boost.models import SoftmaxRegression


SMALL_OPTIMIZERS = {
    'L-BFGS': LBFGSOptimizer(max_iterations=200),
    'GradientDescent': GradientDescentOptimizer(step_size=0.5, max_iterations=300)
}


def test_generate_gaussian_clusters():
    """データ生成"""
    X_train, y_train, X_test, y_test = generate_gaussian_clusters(
        n_samples=100, n_features=3, n_classes=4, test_size=0.2, random_state=42
    )
    print(f"X_train shape: {X_train.shape}")
    assert X_train.shape == (80, 3)
    assert X_test.shape == (20, 3)
    assert y_train.shape == (80,)
    assert set(np.unique(np.concatenate([y_train, y_test]))) == {0, 1, 2, 3}

    again = generate_gaussian_clusters(n_samples=100, n_features=3, n_classes=4, test_size=0.2, random_state=42)
    np.testing.assert_array_equal(X_train, again[0])


def test_run_model_interface():
    X_train, y_train, X_test, y_test = generate_gaussian_clusters(n_samples=120, n_classes=3, random_state=0)
    model = SoftmaxRegression(fit_intercept=True, random_state=0)
    results = run_model_interface(model, X_train, y_train, X_test, y_test, LBFGSOptimizer())

    assert results['model_class'] == 'SoftmaxRegression'
    assert results['optimizer'] == 'LBFGSOptimizer'
    assert results['train_time'] >= 0.0
    assert set(results['evaluation']) == {'accuracy', 'log_loss', 'macro_f1'}
    assert results['objective'] == model.objective_value_


def test_compare_optimizers():
    results = compare_optimizers(n_samples=150, n_features=2, n_classes=3,
                                 optimizers=SMALL_OPTIMIZERS, random_state=1)
    assert set(results) == {'L-BFGS', 'GradientDescent'}
    for result in results.values():
        assert 0.0 <= result['evaluation']['accuracy'] <= 1.0

    df = results_to_frame(results)
    assert isinstance(df, pd.DataFrame)
    assert list(df.index) == ['L-BFGS', 'GradientDescent']
    assert 'accuracy' in df.columns


def test_lambda_path_shrinks_weights():
    path = lambda_path([0.0001, 1.0, 100.0], n_samples=100, random_state=3)
    assert path['lambda'] == [0.0001, 1.0, 100.0]
    assert path['weight_norm'][0] > path['weight_norm'][1] > path['weight_norm'][2]


def test_plots_are_written(tmp_path):
    results = compare_optimizers(n_samples=90, n_classes=3, optimizers=SMALL_OPTIMIZERS, random_state=2)
    plot_optimizer_comparison(results, save_path=str(tmp_path / "comparison.png"))

    path = lambda_path([0.0, 0.01, 1.0], n_samples=60, random_state=2)
    plot_lambda_path(path, save_path=str(tmp_path / "path.png"))

    weights = plot_sample_weights([-2.0, 4.0, 0.0, 1.0], save_path=str(tmp_path / "weights.png"))
    np.testing.assert_allclose(weights[:3], [0.3935, 0.6321, 0.0], atol=1e-4)

    report = create_summary_report(results, path, str(tmp_path))

    for name in ["comparison.png", "path.png", "weights.png"]:
        assert (tmp_path / name).exists()
    with open(report) as f:
        assert "L-BFGS" in f.read()


def test_run_optimizer_comparison(tmp_path):
    results = run_optimizer_comparison(n_samples=90, n_features=2, n_classes=3,
                                       output_dir=str(tmp_path), optimizers=SMALL_OPTIMIZERS)

    with open(tmp_path / "optimizer_comparison.json") as f:
        saved = json.load(f)
    assert set(saved) == set(results)
    assert (tmp_path / "optimizer_comparison.png").exists()


def test_run_all_experiments(tmp_path):
    results_dir = run_all_experiments(output_dir=str(tmp_path), random_state=0, lambdas=[0.0001, 1.0])

    assert os.path.isfile(os.path.join(results_dir, "experiment_config.json"))
    assert os.path.isfile(os.path.join(results_dir, "summary_report.md"))
    assert os.path.isfile(os.path.join(results_dir, "figures", "lambda_path.png"))
    assert os.path.isfile(os.path.join(results_dir, "figures", "sample_weights.png"))
