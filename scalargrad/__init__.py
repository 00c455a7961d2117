"""
Scalargrad: a minimal scalar reverse-mode autograd engine.

This package builds computation graphs of float64 scalars, backpropagates
gradients through them, and provides small Neuron/Layer/MLP building blocks
on top.
"""

from scalargrad.engine import Op, Value, add, backward, leaf, mul, relu, tanh
from scalargrad import nn
from scalargrad.nn import InvalidArgument
from scalargrad.utils import draw_dot

__version__ = "0.1.0"
__all__ = [
    "Op", "Value", "leaf", "add", "mul", "relu", "tanh", "backward",
    "nn", "InvalidArgument", "draw_dot",
]
