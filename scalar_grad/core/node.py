# scalar_grad/core/node.py
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

import numpy as np


class Op(Enum):
    """Operator tag recorded on every node; selects the local gradient rule."""
    LEAF = "leaf"
    ADD = "add"
    SUB = "sub"
    MUL = "mul"
    DIV = "div"
    TANH = "tanh"
    RELU = "relu"
    EXP = "exp"
    POW = "pow"


# Number of operand slots each operator expects.
ARITY = {
    Op.LEAF: 0,
    Op.ADD: 2,
    Op.SUB: 2,
    Op.MUL: 2,
    Op.DIV: 2,
    Op.TANH: 1,
    Op.RELU: 1,
    Op.EXP: 1,
    Op.POW: 2,   # operands[1] is the constant exponent leaf
}


@dataclass
class Node:
    """
    One scalar vertex of the computation graph, stored in a Graph arena.

    Attributes
    ----------
    op       : Op
        Which operator produced this node (LEAF for inputs/constants).
    value    : np.float64
        Forward value, computed eagerly when the node is created.
    operands : Tuple[int, ...]
        Arena indices of the inputs, in argument order. The same index may
        appear twice (e.g. x + x).
    label    : str
        Debug label; informational only.
    grad     : np.float64
        Accumulated gradient of the backward root w.r.t. this node.
    serial   : int
        Graph-wide creation number, never reused; tells a stale handle apart
        from a newer node that took over its index.
    """
    op: Op
    value: np.float64
    operands: Tuple[int, ...] = ()
    label: str = ""
    grad: np.float64 = np.float64(0.0)
    serial: int = 0

    def __post_init__(self):
        # An arity mismatch is a bug in the operator layer, not bad input.
        assert len(self.operands) == ARITY[self.op], (
            f"{self.op.value} expects {ARITY[self.op]} operand(s), "
            f"got {len(self.operands)}"
        )
        self.value = np.float64(self.value)
        self.grad = np.float64(self.grad)
