"""
Visualization utilities for scalargrad computation graphs.

This module renders the graph behind a Value as a Graphviz diagram, showing
each node's data and gradient and the operation that produced it.
"""

from graphviz import Digraph

from scalargrad.engine import Op, topological_order


def trace(root):
    """
    Collect the computation graph reachable from a root Value.

    Args:
        root: A Value object representing the output of a computation

    Returns:
        tuple: (nodes, edges) where:
            - nodes: list of all Values, each after its operands
            - edges: list of (operand, result) tuples, one per operand slot

    Example:
        >>> from scalargrad.engine import Value
        >>> x = Value(2.0)
        >>> y = Value(3.0)
        >>> z = x * y + x
        >>> nodes, edges = trace(z)
        >>> len(nodes)  # x, y, x*y and z
        4
    """
    nodes = topological_order(root)
    edges = [(operand, v) for v in nodes for operand in v.operands]
    return nodes, edges


def draw_dot(root, format='svg', rankdir='LR'):
    """
    Visualize the computation graph of a Value as a directed graph.

    Creates a Graphviz diagram showing:
    - Value nodes with their label, data and gradient
    - Operation nodes (+, *, ReLU, tanh)
    - Edges from each operand through the operation to its result

    Node names come from Value.id, so the same graph always renders with the
    same identifiers.

    Args:
        root: A Value object (typically the loss) to visualize from
        format: Output format ('svg', 'png', 'pdf', etc.)
        rankdir: Graph direction - 'LR' (left-right) or 'TB' (top-bottom)

    Returns:
        Digraph: A graphviz Digraph object that can be rendered or displayed

    Example:
        >>> x = leaf(2.0, label='x')
        >>> z = mul(x, leaf(-3.0, label='y'))
        >>> z.backward()
        >>> draw_dot(z).render('computation_graph')  # needs the dot binary
    """
    if rankdir not in ('LR', 'TB'):
        raise ValueError("rankdir must be 'LR' (left-right) or 'TB' (top-bottom)")

    nodes, edges = trace(root)

    dot = Digraph(format=format, graph_attr={'rankdir': rankdir})

    for n in nodes:
        label = f'{{ {n.label} | data {n.data:.4f} | grad {n.grad:.4f} }}'
        dot.node(name=str(n.id), label=label, shape='record')

        # Non-leaf nodes get an operation node feeding into them
        if n.op is not Op.LEAF:
            dot.node(name=f'{n.id}{n.op.name}', label=n.op.value)
            dot.edge(f'{n.id}{n.op.name}', str(n.id))

    for n1, n2 in edges:
        dot.edge(str(n1.id), f'{n2.id}{n2.op.name}')

    return dot
