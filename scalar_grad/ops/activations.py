# scalar_grad/ops/activations.py
import numpy as np
from ..core.var import Value
from ..core.node import Op
from .arithmetic import _as_value, _graph_of, _tag

def _unary(x, f, op):
    graph = _graph_of(x)
    x = _as_value(x, graph)
    idx = graph.push_node(
        op=op, value=f(x.get()), operands=(x.idx,), label=f"{op.value}({_tag(x)})",
    )
    return Value._wrap(graph, idx)

def tanh(x):
    return _unary(x, np.tanh, Op.TANH)

def relu(x):
    """ReLU: max(0, x). Backward passes gradient only where the output is > 0."""
    return _unary(x, lambda v: np.maximum(np.float64(0.0), v), Op.RELU)

def exp(x):
    # overflows to inf for large x
    return _unary(x, np.exp, Op.EXP)
