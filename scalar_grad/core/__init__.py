# scalar_grad/core/__init__.py

"""
Core public API for the scalar_grad package.

Exports:
    Value           : Handle to one scalar node; carries operator overloading.
    leaf, leaf_labeled : Construct leaf nodes in the active graph.
    Node, Op        : Arena record and operator tag.
    Graph           : Node arena addressed by integer index.
    global_graph    : The default arena new leaves are recorded in.
    use_graph       : Context manager to temporarily switch the active graph.
    collect_order   : Topological order of the nodes reachable from a root.
    zero_grad       : Reset gradients on everything reachable from a root.
    backward        : Single reverse pass accumulating gradients.
    grad, grads, grads_list, value : Convenience wrappers over backward.
"""

from .node import Node, Op
from .graph import Graph, global_graph, use_graph
from .var import Value, leaf, leaf_labeled
from .engine import collect_order, zero_grad, backward
from .seeds import grad, grads, grads_list, value

__all__ = [
    "Node", "Op",
    "Graph", "global_graph", "use_graph",
    "Value", "leaf", "leaf_labeled",
    "collect_order", "zero_grad", "backward",
    "grad", "grads", "grads_list", "value",
]
