import logging

import numpy as np
import pytest

from scalargrad.engine import leaf
from scalargrad.nn import MLP
from scalargrad.train import DEMO_X, DEMO_Y, TrainConfig, main, parse_args, squared_error_loss, train


def test_squared_error_loss():
    loss = squared_error_loss([leaf(0.5), leaf(-2.0)], [1.0, -1.0])
    assert loss.data == 1.25


def test_squared_error_loss_gradient():
    pred = leaf(3.0)
    loss = squared_error_loss([pred], [1.0])
    loss.backward()
    assert loss.data == 4.0
    assert pred.grad == 4.0  # 2 * (3 - 1)


def test_squared_error_loss_length_mismatch():
    with pytest.raises(ValueError):
        squared_error_loss([leaf(1.0)], [1.0, 2.0])


def test_training_reduces_loss():
    model = MLP(3, [4, 4, 1], rng=np.random.default_rng(0))
    config = TrainConfig(steps=100, log_every=0)
    history = train(model, DEMO_X, DEMO_Y, config)

    assert len(history) == 100
    assert history[-1] < history[0]


def test_training_updates_parameters_in_place():
    model = MLP(3, [1], rng=np.random.default_rng(1))
    params = model.parameters()
    before = [p.data for p in params]

    train(model, DEMO_X, DEMO_Y, TrainConfig(steps=1, log_every=0))

    assert model.parameters() == params
    assert [p.data for p in params] != before


def test_training_logs_loss(caplog):
    model = MLP(3, [2, 1], rng=np.random.default_rng(2))
    with caplog.at_level(logging.INFO, logger="scalargrad.train"):
        train(model, DEMO_X, DEMO_Y, TrainConfig(steps=20, log_every=10))

    messages = [r.getMessage() for r in caplog.records if r.name == "scalargrad.train"]
    assert len(messages) == 2
    assert messages[0].startswith("step 0 loss")
    assert messages[1].startswith("step 10 loss")


def test_parse_args_defaults():
    config, verbose = parse_args([])
    assert config == TrainConfig()
    assert verbose is False


def test_parse_args_custom():
    config, verbose = parse_args(
        ['--steps', '5', '--lr', '0.1', '--seed', '7', '--layers', '8, 1', '-v']
    )
    assert config.steps == 5
    assert config.learning_rate == 0.1
    assert config.seed == 7
    assert config.layers == [8, 1]
    assert verbose is True


@pytest.mark.parametrize("argv", [
    ['--layers', 'a,b'],
    ['--layers', '4,0'],
    ['--steps', '-1'],
])
def test_parse_args_rejects_bad_values(argv):
    with pytest.raises(SystemExit) as exc:
        parse_args(argv)
    assert exc.value.code == 2


def test_main_runs():
    assert main(['--steps', '3', '--seed', '1', '--log-every', '1']) == 0
