# scalar_grad/core/graph.py
from __future__ import annotations
from typing import List, Optional, Sequence
from contextlib import contextmanager
from .node import Node, Op

class Graph:
    """
    Node arena: every node lives in `nodes` and is addressed by its index.
    Operands are always created before the node that uses them, so an
    operand index is strictly smaller than its consumer's index.
    """
    def __init__(self):
        self.nodes: List[Node] = []
        self._serial = 0  # creation counter, survives reset/truncate

    def __len__(self):
        return len(self.nodes)

    def reset(self):
        """Drop every node. Handles into this graph become invalid."""
        self.nodes.clear()

    def truncate(self, size: int):
        """
        Drop every node from index `size` on, keeping the first `size`.
        Nodes only depend on earlier indices, so what remains is intact.
        Indices are reused afterwards; handles to dropped nodes raise
        IndexError instead of reading whatever node took their place:
            mark = len(graph)          # after creating parameters
            ... forward, backward, update ...
            graph.truncate(mark)       # free this step's nodes
        """
        if not 0 <= size <= len(self.nodes):
            raise ValueError(f"cannot truncate a graph of {len(self.nodes)} nodes to {size}")
        del self.nodes[size:]

    def push_node(self, *, op: Op, value, operands: Sequence[int] = (), label: str = "") -> int:
        """
        Append a Node(op, value, operands, label) and return its index.
        """
        self._serial += 1
        self.nodes.append(Node(op=op, value=value, operands=tuple(operands),
                               label=label, serial=self._serial))
        return len(self.nodes) - 1

# Default arena used when no `use_graph()` block is active
global_graph = Graph()

@contextmanager
def use_graph(graph: Optional[Graph] = None):
    """
    Context manager to temporarily build into a fresh (or given) graph:
        with use_graph():
            ... build computation ...
            backward(y)
    """
    from . import graph as _graph_mod  # local import so ops see the swap
    prev = _graph_mod.global_graph
    try:
        _graph_mod.global_graph = graph if graph is not None else Graph()
        yield _graph_mod.global_graph
    finally:
        _graph_mod.global_graph = prev
