import itertools
import numbers
from enum import Enum

import numpy as np


# Process-wide source of node ids, strictly increasing in creation order
_ids = itertools.count()


class Op(Enum):
    """Kind of operation that produced a Value. Also selects its gradient rule."""

    LEAF = ''
    ADD = '+'
    MUL = '*'
    RELU = 'ReLU'
    TANH = 'tanh'


class Value:
    """
    Wraps a single float64 scalar and records how it was computed.

    The Value class is the node type of the computation graph. It stores the
    forward result and a gradient accumulator, plus the operation kind and the
    operand Values it was built from, so that backward() can walk the graph.

    Example:
        >>> x = Value(2.0)
        >>> y = Value(3.0)
        >>> z = x * y + x
        >>> z.backward()  # Compute gradients
        >>> print(x.grad)  # dz/dx = y + 1 = 4.0
    """

    __slots__ = ('data', 'grad', 'op', 'operands', 'label', 'id')

    def __init__(self, data, _operands=(), _op=Op.LEAF, label=""):
        """
        Initialize a Value object.

        Args:
            data: The numerical value (anything float() accepts)
            _operands: Tuple of operand Values (internal use for autograd)
            _op: Op kind that created this Value (internal)
            label: Optional name for debugging and visualization
        """
        self.data = float(data)

        # Gradient accumulator, only meaningful after a backward pass
        self.grad = 0.0

        self.op = _op
        self.operands = tuple(_operands)
        self.label = label
        self.id = next(_ids)

    # Operator sugar over the named operations below

    def __add__(self, other):
        other = _as_value(other)
        if other is NotImplemented:
            return other
        return add(self, other)

    def __radd__(self, other):
        """Right addition: other + self (when other is not a Value)"""
        other = _as_value(other)
        if other is NotImplemented:
            return other
        return add(other, self)

    def __mul__(self, other):
        other = _as_value(other)
        if other is NotImplemented:
            return other
        return mul(self, other)

    def __rmul__(self, other):
        """Right multiplication: other * self (when other is not a Value)"""
        other = _as_value(other)
        if other is NotImplemented:
            return other
        return mul(other, self)

    def __neg__(self):
        """Negation: -x = x * -1"""
        return self * -1.0

    def __sub__(self, other):
        """Subtraction: a - b = a + (-b)"""
        other = _as_value(other)
        if other is NotImplemented:
            return other
        return self + (-other)

    def __rsub__(self, other):
        """Right subtraction: other - self"""
        other = _as_value(other)
        if other is NotImplemented:
            return other
        return other + (-self)

    def relu(self):
        return relu(self)

    def tanh(self):
        return tanh(self)

    def backward(self):
        """Backpropagate from this Value. See :func:`backward`."""
        backward(self)

    def __repr__(self):
        """Return a readable string representation of the Value."""
        label_str = f"'{self.label}' " if self.label else ""
        op_str = f" from {self.op.value}" if self.op is not Op.LEAF else ""
        return f"Value({label_str}data={self.data}, grad={self.grad}{op_str})"


def _as_value(other):
    if isinstance(other, Value):
        return other
    if isinstance(other, numbers.Real):
        return Value(other)
    return NotImplemented


def leaf(data, label=""):
    """Create an independent input or parameter node with zero gradient."""
    return Value(data, label=label)


def add(a, b):
    """
    Addition node: a + b

    Example:
        >>> c = add(leaf(2.0), leaf(3.0))  # c.data = 5.0
    """
    return Value(a.data + b.data, (a, b), Op.ADD)


def mul(a, b):
    """
    Multiplication node: a * b

    Example:
        >>> c = mul(leaf(3.0), leaf(4.0))  # c.data = 12.0
    """
    return Value(a.data * b.data, (a, b), Op.MUL)


def relu(a):
    """
    ReLU (Rectified Linear Unit) node: max(0, a)

    NaN inputs stay NaN, following numpy's maximum.
    """
    return Value(np.maximum(0.0, a.data), (a,), Op.RELU)


def tanh(a):
    """Hyperbolic tangent node: tanh(a)"""
    return Value(np.tanh(a.data), (a,), Op.TANH)


# Local gradient rules. Each one reads out.grad and adds the contribution of
# `out` into the gradients of its operands.

def _leaf_backward(out):
    pass


def _add_backward(out):
    """d(a+b)/da = 1, d(a+b)/db = 1"""
    a, b = out.operands
    a.grad += out.grad
    b.grad += out.grad


def _mul_backward(out):
    """d(a*b)/da = b, d(a*b)/db = a"""
    a, b = out.operands
    a.grad += b.data * out.grad
    b.grad += a.data * out.grad


def _relu_backward(out):
    """d(ReLU(a))/da = 1 if a > 0, else 0 (including at 0)"""
    a, = out.operands
    if a.data > 0:
        a.grad += out.grad


def _tanh_backward(out):
    """d(tanh(a))/da = 1 - tanh(a)^2, computed from the output"""
    a, = out.operands
    y = out.data
    a.grad += (1.0 - y * y) * out.grad


_GRADIENT_RULES = {
    Op.LEAF: _leaf_backward,
    Op.ADD: _add_backward,
    Op.MUL: _mul_backward,
    Op.RELU: _relu_backward,
    Op.TANH: _tanh_backward,
}


def topological_order(root):
    """
    Return every Value reachable from root, each one after all of its operands.

    The depth-first traversal keeps an explicit stack instead of recursing, so
    graph depth is not bounded by the interpreter's recursion limit.
    """
    topo = []
    visited = set()
    stack = [(root, False)]  # (node, operands already expanded?)

    while stack:
        node, expanded = stack.pop()

        if expanded:
            topo.append(node)
            continue

        if node.id in visited:
            continue
        visited.add(node.id)

        # Post-order: node is recorded once its operands have been
        stack.append((node, True))
        for operand in reversed(node.operands):
            if operand.id not in visited:
                stack.append((operand, False))

    return topo


def backward(root):
    """
    Perform backpropagation: compute d(root)/d(node) for every node in the graph.

    This implements reverse-mode automatic differentiation. The graph is
    ordered once so that every node follows its operands, then walked in
    reverse so each node's rule fires only after all of its consumers have
    added their contributions to its gradient.

    Gradients accumulate. Nothing is zeroed here and only the root is
    re-seeded, so a second call without resetting adds onto the gradients
    every node kept from the first one.

    Example:
        >>> x = leaf(2.0)
        >>> y = add(mul(x, leaf(3.0)), leaf(1.0))
        >>> backward(y)
        >>> print(x.grad)  # dy/dx = 3.0
    """
    topo = topological_order(root)

    # Seed: d(root)/d(root) = 1
    root.grad = 1.0

    for v in reversed(topo):
        _GRADIENT_RULES[v.op](v)
