# scalar_grad/core/var.py
from __future__ import annotations
import numpy as np
from typing import Any, Optional

from . import graph as graph_mod  # module access so use_graph() swaps are seen
from .graph import Graph
from .node import Node, Op

_NUMERIC = (int, float, np.integer, np.floating)


def _check_numeric(data: Any) -> None:
    # bool is an int subclass but never meaningful node data
    if isinstance(data, (bool, np.bool_)) or not isinstance(data, _NUMERIC):
        raise TypeError(
            f"Value only accepts real scalars (int, float, numpy scalar), "
            f"but got {type(data)}"
        )


class Value:
    """
    Handle to one node of a Graph arena.

    A handle is just the pair (graph, idx); copying it is cheap and every
    copy refers to the same node. Equality and hashing follow node identity,
    so two handles holding equal numbers are still different unless they
    point at the same node.

    Attributes
    ----------
    graph : Graph
        Arena that owns the node.
    idx   : int
        Position of the node inside `graph.nodes`.
    serial: int
        Creation number of that node; a mismatch means the node was dropped
        (reset/truncate) and its index reused.
    """

    __slots__ = ("graph", "idx", "serial")

    def __init__(self, data: Any, label: str = "", *, graph: Optional[Graph] = None):
        _check_numeric(data)
        self.graph = graph if graph is not None else graph_mod.global_graph
        self.idx = self.graph.push_node(op=Op.LEAF, value=data, label=label)
        self.serial = self.graph.nodes[self.idx].serial

    @classmethod
    def _wrap(cls, graph: Graph, idx: int) -> "Value":
        """Make a handle for an existing node without allocating a new one."""
        obj = cls.__new__(cls)
        obj.graph = graph
        obj.idx = idx
        obj.serial = graph.nodes[idx].serial
        return obj

    @classmethod
    def default(cls) -> "Value":
        return cls(0.0)

    def _check_live(self) -> None:
        nodes = self.graph.nodes
        if self.idx >= len(nodes) or nodes[self.idx].serial != self.serial:
            raise IndexError(
                f"node {self.idx} is no longer in the graph (reset or truncated)"
            )

    @property
    def node(self) -> Node:
        self._check_live()
        return self.graph.nodes[self.idx]

    @property
    def op(self) -> Op:
        return self.node.op

    @property
    def label(self) -> str:
        return self.node.label

    @property
    def operands(self):
        """Operand handles in argument order."""
        return tuple(Value._wrap(self.graph, i) for i in self.node.operands)

    # ---- in-place access (identity preserved) ----
    def get(self) -> np.float64:
        return self.node.value

    def set(self, value) -> None:
        """Overwrite the forward value in place; `grad` is untouched."""
        if isinstance(value, Value):
            value = value.get()
        _check_numeric(value)
        self.node.value = np.float64(value)

    def grad(self) -> np.float64:
        return self.node.grad

    def set_grad(self, value) -> None:
        if isinstance(value, Value):
            value = value.grad()
        _check_numeric(value)
        self.node.grad = np.float64(value)

    # ---- identity semantics ----
    def __eq__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        return (self.graph is other.graph and self.idx == other.idx
                and self.serial == other.serial)

    def __hash__(self):
        return hash((id(self.graph), self.idx, self.serial))

    def __float__(self):
        return float(self.get())

    def __repr__(self):
        n = self.node
        return f"Value(data={float(n.value)}, grad={float(n.grad)}, label={n.label!r})"

    def __str__(self):
        return f"Value({float(self.get())})"

    # Operator overloading for arithmetic operations
    def __add__(self, other):
        from ..ops.arithmetic import add
        return add(self, other)

    def __radd__(self, other):
        from ..ops.arithmetic import add
        return add(other, self)

    def __sub__(self, other):
        from ..ops.arithmetic import sub
        return sub(self, other)

    def __rsub__(self, other):
        from ..ops.arithmetic import sub
        return sub(other, self)

    def __mul__(self, other):
        from ..ops.arithmetic import mul
        return mul(self, other)

    def __rmul__(self, other):
        from ..ops.arithmetic import mul
        return mul(other, self)

    def __truediv__(self, other):
        from ..ops.arithmetic import div
        return div(self, other)

    def __rtruediv__(self, other):
        from ..ops.arithmetic import div
        return div(other, self)

    def __neg__(self):
        from ..ops.arithmetic import mul
        return mul(self, -1.0)

    def __pow__(self, exponent):
        from ..ops.arithmetic import pow
        return pow(self, exponent)

    def pow(self, exponent):
        from ..ops.arithmetic import pow
        return pow(self, exponent)

    def tanh(self):
        from ..ops.activations import tanh
        return tanh(self)

    def relu(self):
        from ..ops.activations import relu
        return relu(self)

    def exp(self):
        from ..ops.activations import exp
        return exp(self)

    # Bound forms of the engine entry points
    def zero_grad(self) -> None:
        from .engine import zero_grad
        zero_grad(self)

    def backward(self, verbose: bool = False) -> None:
        from .engine import backward
        backward(self, verbose=verbose)


def leaf(value) -> Value:
    """New unlabeled leaf in the active graph."""
    return Value(value)


def leaf_labeled(value, label: str) -> Value:
    """New labeled leaf in the active graph."""
    return Value(value, label=label)
