"""
Neural network building blocks for scalargrad.

This module provides scalar Neuron, Layer and MLP classes whose parameters are
leaf Values, so a loss built from their outputs can be backpropagated into
every weight and bias.
"""

import logging

import numpy as np

from scalargrad.engine import Value, add, leaf, mul, tanh

logger = logging.getLogger(__name__)


class InvalidArgument(ValueError):
    """Raised when an input or weight sequence does not match the expected width."""


def _check_width(values, expected, what):
    if len(values) != expected:
        raise InvalidArgument(f"expected {expected} {what}, got {len(values)}")


class Module:
    """
    Base class for all neural network modules.

    Provides common functionality for managing parameters and gradients.
    """

    def zero_grad(self):
        """
        Reset all gradients to zero.

        Call this before each backward pass; backward() itself never resets
        gradients, so skipping it accumulates across passes.
        """
        for p in self.parameters():
            p.grad = 0.0

    def parameters(self):
        """
        Return a list of all trainable parameters (weights and biases).

        Override this in subclasses to return actual parameters.
        """
        return []


class Neuron(Module):
    """
    A single affine unit with an optional tanh nonlinearity.

    Computes: output = tanh(b + w1*x1 + w2*x2 + ... + wn*xn)

    Args:
        nin: Number of inputs
        nonlin: If True, apply tanh to the affine sum (default: True)
        rng: numpy Generator used to draw initial values from U[-1, 1]
        weights: Optional explicit initial weights (length nin)
        bias: Optional explicit initial bias

    Example:
        >>> n = Neuron(3, rng=np.random.default_rng(0))
        >>> y = n([1.0, 2.0, 3.0])  # a single Value
    """

    def __init__(self, nin, nonlin=True, rng=None, weights=None, bias=None):
        if rng is None:
            rng = np.random.default_rng()

        if weights is not None:
            _check_width(weights, nin, "weights")
            self.w = [leaf(wi) for wi in weights]
        else:
            self.w = [leaf(rng.uniform(-1.0, 1.0)) for _ in range(nin)]

        self.b = leaf(bias if bias is not None else rng.uniform(-1.0, 1.0))
        self.nonlin = nonlin

    def __call__(self, x):
        """
        Forward pass: compute the neuron's output.

        Args:
            x: Sequence of nin inputs (Values or plain numbers)

        Returns:
            Value holding the neuron's output

        Raises:
            InvalidArgument: if len(x) != nin
        """
        _check_width(x, len(self.w), "inputs")

        act = self.b
        for wi, xi in zip(self.w, x):
            xi = xi if isinstance(xi, Value) else leaf(xi)
            act = add(act, mul(wi, xi))

        return tanh(act) if self.nonlin else act

    def parameters(self):
        """Weights in order, followed by the bias."""
        return self.w + [self.b]

    def __repr__(self):
        return f"{'Tanh' if self.nonlin else 'Linear'}Neuron({len(self.w)})"


class Layer(Module):
    """
    A layer of neurons that all receive the same inputs.

    Args:
        nin: Number of inputs to each neuron
        nout: Number of neurons (outputs)
        nonlin: Passed to every neuron (default: True)
        rng: numpy Generator shared by all neurons
        weights: Optional per-neuron weight lists (nout lists of nin values)
        biases: Optional per-neuron biases (nout values)
    """

    def __init__(self, nin, nout, nonlin=True, rng=None, weights=None, biases=None):
        if rng is None:
            rng = np.random.default_rng()
        if weights is not None:
            _check_width(weights, nout, "weight rows")
        if biases is not None:
            _check_width(biases, nout, "biases")

        self.nin = nin
        self.neurons = [
            Neuron(
                nin,
                nonlin=nonlin,
                rng=rng,
                weights=weights[i] if weights is not None else None,
                bias=biases[i] if biases is not None else None,
            )
            for i in range(nout)
        ]

    def __call__(self, x):
        """
        Forward pass: apply every neuron to the same input.

        Returns:
            List with one Value per neuron, in neuron order
        """
        _check_width(x, self.nin, "inputs")
        return [n(x) for n in self.neurons]

    def parameters(self):
        """Return parameters of all neurons, in neuron order."""
        return [p for n in self.neurons for p in n.parameters()]

    def __repr__(self):
        return f"Layer of [{', '.join(str(n) for n in self.neurons)}]"


class MLP(Module):
    """
    Multi-Layer Perceptron: a sequence of fully-connected layers.

    Every layer uses tanh except the last one, which is linear.

    Args:
        nin: Number of input features
        nouts: List of output sizes for each layer
               Example: [4, 4, 1] creates 3 layers: input→4→4→1
        rng: numpy Generator used for every parameter's initial value
        weights: Optional explicit weights, weights[i][j] for neuron j of layer i
        biases: Optional explicit biases, biases[i][j] for neuron j of layer i

    Example:
        >>> mlp = MLP(3, [4, 4, 1], rng=np.random.default_rng(42))
        >>> y = mlp([2.0, 3.0, -1.0])[0]
        >>> loss = (y - 1.0) * (y - 1.0)
        >>> mlp.zero_grad()  # Reset gradients
        >>> loss.backward()  # Compute gradients
        >>> for p in mlp.parameters():
        ...     p.data -= 0.05 * p.grad
    """

    def __init__(self, nin, nouts, rng=None, weights=None, biases=None):
        if rng is None:
            rng = np.random.default_rng()
        nouts = list(nouts)
        if not nouts:
            raise InvalidArgument("an MLP needs at least one layer")
        if weights is not None:
            _check_width(weights, len(nouts), "weight layers")
        if biases is not None:
            _check_width(biases, len(nouts), "bias layers")

        # Build layer sizes: [input_size, hidden1, hidden2, ..., output_size]
        layer_sizes = [nin] + nouts

        self.layers = []
        for i in range(len(nouts)):
            is_output_layer = (i == len(nouts) - 1)

            layer = Layer(
                layer_sizes[i],
                layer_sizes[i + 1],
                nonlin=not is_output_layer,  # No activation on output layer
                rng=rng,
                weights=weights[i] if weights is not None else None,
                biases=biases[i] if biases is not None else None,
            )
            self.layers.append(layer)

        logger.debug("built %r with %d parameters", self, len(self.parameters()))

    def __call__(self, x):
        """
        Forward pass: pass input through all layers sequentially.

        Returns:
            List of Values produced by the last layer
        """
        for layer in self.layers:
            x = layer(x)
        return x

    def parameters(self):
        """Return all trainable parameters from all layers."""
        return [p for layer in self.layers for p in layer.parameters()]

    def __repr__(self):
        layer_str = ', '.join(f"{layer.nin}→{len(layer.neurons)}" for layer in self.layers)
        return f"MLP[{layer_str}]"
