import pytest
import pandas as pd
import numpy as np
import torch
import torch.nn as nn
import yaml
import json
import warnings
from sklearn.linear_model import LogisticRegression
from sklearn.datasets import make_classification
import os
import sys

# Add package root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import recourse
from recourse.models import from_torch, from_sklearn

# Load Config (reuse existing config)
CONFIG_PATH = os.path.join(os.path.dirname(__file__), 'test_config.yaml')
with open(CONFIG_PATH, 'r') as f:
    CONFIG = yaml.safe_load(f)

def seed_everything(seed=42):
    import random
    random.seed(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)

@pytest.fixture(scope="module")
def setup_data_model():
    seed_everything(CONFIG['random_state'])
    X, y = make_classification(
        n_samples=CONFIG['samples'],
        n_features=CONFIG['features'],
        n_informative=CONFIG['informative'],
        n_redundant=CONFIG['redundant'],
        class_sep=CONFIG['class_sep'],
        random_state=CONFIG['random_state']
    )
    feature_names = [f"feat_{i}" for i in range(CONFIG['features'])]
    df = pd.DataFrame(X, columns=feature_names)

    model = LogisticRegression(max_iter=1000)
    model.fit(df, y)

    preds = model.predict(df)
    negatives = df[preds == 0].head(CONFIG['n_queries'])

    return {
        'model': model,
        'df': df,
        'feature_names': feature_names,
        'negatives': negatives
    }

@pytest.fixture
def scenario_model():
    return recourse.LogisticModel(CONFIG['weights'], CONFIG['bias'])

@pytest.fixture
def scenario_config():
    return recourse.GenerationConfig(
        step_size=CONFIG['step_size'],
        penalty_weight=CONFIG['penalty_weight'],
        convergence_tolerance=CONFIG['convergence_tolerance'],
        max_iterations=CONFIG['max_iterations']
    )

# --- Test 1: Model adapters ---
def test_sklearn_adapter_matches_predict_proba(setup_data_model):
    sk_model = setup_data_model['model']
    model = recourse.load_model(sk_model)
    X = setup_data_model['df'].values[:20]

    np.testing.assert_allclose(model.weights, sk_model.coef_[0])
    assert model.bias == pytest.approx(sk_model.intercept_[0])
    # logits of the sample stay well inside the probability clamp
    np.testing.assert_allclose(model.predict_proba(X), sk_model.predict_proba(X), atol=1e-6)

def test_sklearn_adapter_requires_binary_model():
    X, y = make_classification(n_samples=90, n_features=4, n_informative=3, n_redundant=0,
                               n_classes=3, random_state=CONFIG['random_state'])
    sk_model = LogisticRegression(max_iter=1000).fit(X, y)
    with pytest.raises(ValueError):
        from_sklearn(sk_model)

def test_torch_adapter():
    layer = nn.Linear(3, 1)
    with torch.no_grad():
        layer.weight.copy_(torch.tensor([[0.5, -1.0, 2.0]]))
        layer.bias.fill_(0.25)

    for torch_model in (layer, nn.Sequential(layer)):
        model = recourse.load_model(torch_model)
        np.testing.assert_allclose(model.weights, [0.5, -1.0, 2.0])
        assert model.bias == pytest.approx(0.25)

        x = np.array([1.0, 2.0, 0.5])
        expected = torch.sigmoid(torch_model(torch.tensor(x, dtype=torch.float32))).item()
        assert model.probability(x) == pytest.approx(expected, abs=1e-6)

def test_torch_adapter_rejects_non_linear_models():
    mlp = nn.Sequential(nn.Linear(3, 4), nn.ReLU(), nn.Linear(4, 1))
    with pytest.raises(NotImplementedError):
        from_torch(mlp)
    with pytest.raises(ValueError):
        from_torch(nn.Linear(3, 2))

def test_load_model_passes_scoring_models_through(scenario_model):
    assert recourse.load_model(scenario_model) is scenario_model
    with pytest.raises(ValueError):
        recourse.load_model(scenario_model.weights, backend='jax')

# --- Test 2: Explainer ---
def test_explainer_dataframe_output(setup_data_model):
    explainer = recourse.Explainer(setup_data_model['model'])
    queries = setup_data_model['negatives']

    with warnings.catch_warnings():
        warnings.simplefilter("ignore", UserWarning)
        cf = explainer.generate_counterfactuals(queries, target_class=1)

    assert len(cf) == len(queries)
    assert list(cf.columns) == setup_data_model['feature_names'] + [
        'original_index', 'converged', 'iterations', 'probability'
    ]
    assert list(cf['original_index']) == list(queries.index)
    assert (cf['iterations'] <= explainer.config.max_iterations).all()

    model = explainer.model
    for _, row in cf[cf['converged']].iterrows():
        x = row[setup_data_model['feature_names']].values.astype(float)
        assert model.predicted_label(x) == 1
        assert row['probability'] > explainer.config.decision_threshold

def test_explainer_accepts_arrays(scenario_model, scenario_config):
    explainer = recourse.Explainer(scenario_model, config=scenario_config, feature_names=['income', 'debt'])

    single = explainer.generate_counterfactuals(np.array(CONFIG['original_input']), target_class=1)
    assert list(single.columns[:2]) == ['income', 'debt']
    assert len(single) == 1
    assert bool(single['converged'].iloc[0])

    batch = explainer.generate_counterfactuals([[0.5, 0.3], [0.0, 1.0]], target_class=1)
    assert len(batch) == 2

def test_explainer_matches_generate(scenario_model, scenario_config):
    explainer = recourse.Explainer(scenario_model, config=scenario_config)
    r1 = explainer.explain(CONFIG['original_input'], target_class=1)
    r2 = recourse.generate(scenario_model, CONFIG['original_input'], 1, scenario_config)
    assert np.array_equal(r1.path, r2.path)

def test_explainer_feature_name_count_checked(scenario_model):
    with pytest.raises(ValueError):
        recourse.Explainer(scenario_model, feature_names=['a', 'b', 'c'])

# --- Test 3: Interchangeable objectives ---
def test_autodiff_objectives_follow_closed_form_path(scenario_model, scenario_config):
    closed = recourse.generate(scenario_model, CONFIG['original_input'], 1, scenario_config)
    auto = recourse.generate(
        scenario_model, CONFIG['original_input'], 1, scenario_config,
        loss=recourse.AutodiffLoss(recourse.CrossEntropyLoss()),
        penalty=recourse.AutodiffPenalty(recourse.SquaredDistancePenalty())
    )

    assert closed.converged and auto.converged
    assert abs(closed.iterations - auto.iterations) <= 1
    n = min(len(closed.path), len(auto.path))
    np.testing.assert_allclose(closed.path[:n], auto.path[:n], rtol=0, atol=1e-8)

def test_autodiff_search_leaves_saturated_start(scenario_model, scenario_config):
    # logit -10 is outside the cross-entropy clamp
    start = [-10.0, 0.0]
    closed = recourse.generate(scenario_model, start, 1, scenario_config)
    auto = recourse.generate(
        scenario_model, start, 1, scenario_config,
        loss=recourse.AutodiffLoss(recourse.CrossEntropyLoss()),
        penalty=recourse.AutodiffPenalty(recourse.SquaredDistancePenalty())
    )

    assert closed.converged and auto.converged
    assert not np.array_equal(auto.path[1], auto.path[0])
    n = min(len(closed.path), len(auto.path))
    np.testing.assert_allclose(closed.path[:n], auto.path[:n], rtol=0, atol=1e-8)

def test_autodiff_accepts_read_only_model_weights(scenario_model):
    assert not scenario_model.weights.flags.writeable
    x = np.array(CONFIG['original_input'])
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        grad = recourse.AutodiffLoss(recourse.CrossEntropyLoss()).grad_wrt_features(
            x, scenario_model.weights, scenario_model.logit(x), 1
        )
        recourse.AutodiffPenalty(recourse.SquaredDistancePenalty()).grad(x, scenario_model.weights)
    np.testing.assert_allclose(
        grad,
        recourse.CrossEntropyLoss().grad_wrt_features(x, scenario_model.weights, scenario_model.logit(x), 1)
    )

def test_weighted_penalty_protects_expensive_feature(scenario_model, scenario_config):
    cheap = recourse.generate(scenario_model, CONFIG['original_input'], 1, scenario_config)
    weighted = recourse.generate(
        scenario_model, CONFIG['original_input'], 1, scenario_config,
        penalty=recourse.WeightedSquaredDistancePenalty([50.0, 1.0])
    )
    x0 = np.array(CONFIG['original_input'])

    assert weighted.converged
    assert abs(weighted.counterfactual[0] - x0[0]) < abs(cheap.counterfactual[0] - x0[0])

def test_custom_loss_extension_point(scenario_model, scenario_config):
    class ScaledCrossEntropy(recourse.CrossEntropyLoss):
        name = "scaled_crossentropy"

        def value(self, a, t):
            return 2.0 * super().value(a, t)

        def grad_wrt_features(self, x, w, a, t):
            return 2.0 * super().grad_wrt_features(x, w, a, t)

        def torch_value(self, a, t):
            return 2.0 * super().torch_value(a, t)

    result = recourse.generate(scenario_model, CONFIG['original_input'], 1, scenario_config,
                               loss=ScaledCrossEntropy())
    assert result.converged
    assert scenario_model.predicted_label(result.counterfactual) == 1

def test_penalty_weight_zero_ignores_penalty(scenario_model, scenario_config):
    cfg = scenario_config.replace(penalty_weight=0.0, max_iterations=5)
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", UserWarning)
        r1 = recourse.generate(scenario_model, CONFIG['original_input'], 1, cfg)
        r2 = recourse.generate(scenario_model, CONFIG['original_input'], 1, cfg,
                               penalty=recourse.WeightedSquaredDistancePenalty([100.0, 100.0]))
    assert np.array_equal(r1.path, r2.path)

# --- Test 4: Hooks and result helpers ---
def test_callback_observes_every_iteration(scenario_model, scenario_config):
    seen = []

    def callback(iteration, candidate, prob):
        seen.append((iteration, candidate, prob))
        candidate[:] = 0.0  # copies only; the search is unaffected

    result = recourse.generate(scenario_model, CONFIG['original_input'], 1, scenario_config, callback=callback)
    reference = recourse.generate(scenario_model, CONFIG['original_input'], 1, scenario_config)

    assert [s[0] for s in seen] == list(range(1, result.iterations + 1))
    assert seen[-1][2] == result.final_probability
    assert np.array_equal(result.path, reference.path)

def test_progress_bar_does_not_change_result(scenario_model, scenario_config):
    quiet = recourse.generate(scenario_model, CONFIG['original_input'], 1, scenario_config)
    loud = recourse.generate(scenario_model, CONFIG['original_input'], 1,
                             scenario_config.replace(progress_bar=True))
    assert np.array_equal(quiet.path, loud.path)

def test_result_to_frame_and_distance(scenario_model, scenario_config):
    result = recourse.generate(scenario_model, CONFIG['original_input'], 1, scenario_config)
    df = result.to_frame(['income', 'debt'])

    assert list(df.columns) == ['iteration', 'income', 'debt', 'probability', 'loss', 'penalty']
    assert len(df) == result.iterations + 1
    assert df['iteration'].iloc[-1] == result.iterations
    assert df['probability'].iloc[-1] == result.final_probability

    expected = np.linalg.norm(result.counterfactual - np.array(CONFIG['original_input']))
    assert result.distance() == pytest.approx(expected)
    assert result.distance(ord=1) >= result.distance()

def test_loss_decreases_along_converged_path(scenario_model, scenario_config):
    result = recourse.generate(scenario_model, CONFIG['original_input'], 1, scenario_config)
    assert result.losses[-1] < result.losses[0]

# --- Test 5: Config files ---
def test_load_yaml_config(tmp_path):
    path = tmp_path / "recourse.yaml"
    path.write_text(yaml.safe_dump({
        'generator': {'step_size': 0.05, 'max_iterations': 200, 'loss': 'hinge'}
    }))
    cfg = recourse.load_config(str(path), section='generator')

    assert cfg.step_size == 0.05
    assert cfg.max_iterations == 200
    assert cfg.loss == 'hinge'
    assert cfg.penalty_weight == recourse.GenerationConfig().penalty_weight

def test_load_json_config(tmp_path):
    path = tmp_path / "recourse.json"
    path.write_text(json.dumps({'penalty_weight': 0.0, 'decision_threshold': 0.7}))
    cfg = recourse.load_config(str(path))
    assert cfg.penalty_weight == 0.0
    assert cfg.decision_threshold == 0.7

def test_load_config_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        recourse.load_config(str(tmp_path / "missing.yaml"))

    path = tmp_path / "bad.yaml"
    path.write_text(yaml.safe_dump({'step_size': 0.1, 'learning_rate': 0.1}))
    with pytest.raises(recourse.ConfigurationError):
        recourse.load_config(str(path))

    with pytest.raises(recourse.ConfigurationError):
        recourse.load_config(str(path), section='generator')

    path.write_text(yaml.safe_dump({'step_size': -1.0}))
    with pytest.raises(recourse.ConfigurationError):
        recourse.load_config(str(path))
