# scalar_grad/__init__.py
# Scalar reverse-mode automatic differentiation

from .core.var import Value, leaf, leaf_labeled
from .core.node import Node, Op
from .core.graph import Graph, global_graph, use_graph
from .core.engine import (
    collect_order,
    zero_grad,
    backward,
)
from .core.seeds import grad, grads, grads_list, value

# Operator layer (function forms of the overloaded operators)
from . import ops
from .ops import add, sub, mul, div, pow, tanh, relu, exp

# Graph inspection
from .core.graph_utils import (
    get_graph_stats,
    print_graph_summary,
    print_computation_graph,
)

__all__ = [
    # Core
    'Value',
    'leaf',
    'leaf_labeled',
    'Node',
    'Op',
    'Graph',
    'global_graph',
    'use_graph',
    # Engine
    'collect_order',
    'zero_grad',
    'backward',
    # Helpers
    'grad',
    'grads',
    'grads_list',
    'value',
    # Ops
    'ops',
    'add', 'sub', 'mul', 'div', 'pow',
    'tanh', 'relu', 'exp',
    # Inspection
    'get_graph_stats',
    'print_graph_summary',
    'print_computation_graph',
]
