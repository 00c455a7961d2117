"""
Training driver: fit an MLP to a small dataset with plain gradient descent.

Run as ``scalargrad-train`` or ``python -m scalargrad.train``.
"""

import argparse
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np

from scalargrad.engine import Value, add, backward, leaf, mul
from scalargrad.nn import MLP

logger = logging.getLogger(__name__)

# Four samples with three features each, targets of +1/-1
DEMO_X = [
    [2.0, 3.0, -1.0],
    [3.0, -1.0, 0.5],
    [0.5, 1.0, 1.0],
    [1.0, 1.0, -1.0],
]
DEMO_Y = [1.0, -1.0, -1.0, 1.0]


@dataclass
class TrainConfig:
    """Hyperparameters for :func:`train`."""

    learning_rate: float = 0.05
    steps: int = 200
    log_every: int = 10
    seed: Optional[int] = None
    layers: List[int] = field(default_factory=lambda: [4, 4, 1])


def squared_error_loss(predictions: Sequence[Value], targets: Sequence[float]) -> Value:
    """Sum of squared errors, built from add/mul so it can be backpropagated."""
    if len(predictions) != len(targets):
        raise ValueError(
            f"got {len(predictions)} predictions for {len(targets)} targets"
        )

    loss = leaf(0.0, label='loss')
    for pred, target in zip(predictions, targets):
        diff = add(pred, leaf(-target))
        loss = add(loss, mul(diff, diff))
    return loss


def train(model: MLP, xs, ys, config: TrainConfig) -> List[float]:
    """
    Run gradient descent on ``model`` and return the loss of every step.

    Each step does a full forward pass over ``xs``, zeroes the parameter
    gradients, backpropagates the loss and moves every parameter against its
    gradient by ``config.learning_rate``.
    """
    history = []
    params = model.parameters()

    for k in range(config.steps):
        ypred = [model(x)[0] for x in xs]
        loss = squared_error_loss(ypred, ys)

        model.zero_grad()
        backward(loss)

        for p in params:
            p.data -= config.learning_rate * p.grad

        history.append(loss.data)
        if config.log_every and k % config.log_every == 0:
            logger.info("step %d loss %.6f", k, loss.data)

    return history


def parse_args(argv=None):
    """Parse command line arguments."""
    defaults = TrainConfig()
    parser = argparse.ArgumentParser(
        description='Train a small MLP on the demo dataset',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument('--steps', type=int, default=defaults.steps,
                        help='number of gradient descent steps')
    parser.add_argument('--lr', type=float, default=defaults.learning_rate,
                        help='learning rate')
    parser.add_argument('--log-every', type=int, default=defaults.log_every,
                        help='log the loss every N steps (0 disables)')
    parser.add_argument('--seed', type=int, default=defaults.seed,
                        help='seed for parameter initialization')
    parser.add_argument('--layers', type=str, default='4,4,1',
                        help='comma-separated layer widths, e.g. "4,4,1"')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='enable debug logging')
    args = parser.parse_args(argv)

    try:
        layers = [int(w) for w in args.layers.split(',') if w.strip()]
    except ValueError:
        parser.error(f"invalid --layers value: {args.layers!r}")
    if not layers or any(w <= 0 for w in layers):
        parser.error("--layers needs at least one positive width")
    if args.steps < 0:
        parser.error("--steps must be non-negative")

    config = TrainConfig(
        learning_rate=args.lr,
        steps=args.steps,
        log_every=args.log_every,
        seed=args.seed,
        layers=layers,
    )
    return config, args.verbose


def main(argv=None):
    config, verbose = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s %(name)s %(levelname)s %(message)s',
    )

    rng = np.random.default_rng(config.seed)
    model = MLP(len(DEMO_X[0]), config.layers, rng=rng)
    history = train(model, DEMO_X, DEMO_Y, config)

    if history:
        logger.info("final loss %.6f after %d steps", history[-1], len(history))
    for x, y in zip(DEMO_X, DEMO_Y):
        logger.info("input %s target %+.1f prediction %+.4f", x, y, model(x)[0].data)
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
