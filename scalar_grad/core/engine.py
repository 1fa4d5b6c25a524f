# scalar_grad/core/engine.py
from __future__ import annotations
import numpy as np
from typing import List
from .node import Node, Op
from .var import Value

# ---------------- Graph traversal ---------------- #
def _topo_indices(nodes: List[Node], root_idx: int) -> List[int]:
    """
    Iterative depth-first post-order from `root_idx`: operands (left to right)
    before the node itself, each reachable index exactly once.

    The visited set lives only for this call. Nothing is marked on the nodes,
    so repeated traversals of a long-lived graph always see the full graph.
    """
    if not 0 <= root_idx < len(nodes):
        raise IndexError(f"node {root_idx} is not in the graph (was it reset?)")
    visited = set()
    order: List[int] = []
    stack = [(root_idx, False)]
    while stack:
        idx, expanded = stack.pop()
        if expanded:
            order.append(idx)
            continue
        if idx in visited:
            continue
        visited.add(idx)
        stack.append((idx, True))
        for op_idx in reversed(nodes[idx].operands):
            if op_idx not in visited:
                stack.append((op_idx, False))
    return order

def collect_order(root: Value) -> List[Value]:
    """
    Topological order of every node reachable from `root` (root last).
    Each node appears after all of its operands and never twice.
    """
    root._check_live()
    return [Value._wrap(root.graph, i) for i in _topo_indices(root.graph.nodes, root.idx)]

def zero_grad(root: Value) -> None:
    """
    Set grad = 0 on `root` and every node it depends on.

    Call this before a backward pass over nodes that already took part in an
    earlier pass (e.g. parameters reused across training steps), otherwise
    the old gradients add into the new ones.
    """
    root._check_live()
    nodes = root.graph.nodes
    for idx in _topo_indices(nodes, root.idx):
        nodes[idx].grad = np.float64(0.0)

# ---------------- Local gradient rules ---------------- #
#
# Each rule reads out.grad (already complete when the rule runs) and pushes
# contributions into its operands with +=. For binary ops the two operand
# slots may hold the same index (x+x, x*x, ...); that case is checked first
# and uses d/dx f(x, x) instead of the two per-slot terms.

def _leaf_rule(nodes: List[Node], out: Node) -> None:
    pass

def _add_rule(nodes, out):
    a, b = out.operands
    o = out.grad
    if a == b:
        # y = x + x  -> dy/dx = 2
        nodes[a].grad += o * 2.0
    else:
        nodes[a].grad += o
        nodes[b].grad += o

def _sub_rule(nodes, out):
    a, b = out.operands
    if a == b:
        return  # y = x - x -> dy/dx = 0
    o = out.grad
    nodes[a].grad += o
    nodes[b].grad += -o

def _mul_rule(nodes, out):
    a, b = out.operands
    o = out.grad
    if a == b:
        # y = x * x -> dy/dx = 2x
        nodes[a].grad += o * 2.0 * nodes[a].value
    else:
        x, z = nodes[a], nodes[b]
        x.grad += o * z.value
        z.grad += o * x.value

def _div_rule(nodes, out):
    a, b = out.operands
    if a == b:
        return  # y = x / x -> dy/dx = 0
    o = out.grad
    num, den = nodes[a], nodes[b]
    # y = x/z -> dy/dx = 1/z, dy/dz = -x/z^2
    num.grad += o / den.value
    den.grad += -o * num.value / (den.value * den.value)

def _tanh_rule(nodes, out):
    (a,) = out.operands
    nodes[a].grad += out.grad * (1.0 - out.value * out.value)

def _relu_rule(nodes, out):
    (a,) = out.operands
    nodes[a].grad += out.grad * (1.0 if out.value > 0.0 else 0.0)

def _exp_rule(nodes, out):
    (a,) = out.operands
    nodes[a].grad += out.grad * out.value

def _pow_rule(nodes, out):
    # exponent leaf is a constant: it receives nothing
    a, e_idx = out.operands
    base, e = nodes[a], nodes[e_idx].value
    base.grad += out.grad * (e * np.power(base.value, e - 1.0))

_RULES = {
    Op.LEAF: _leaf_rule,
    Op.ADD: _add_rule,
    Op.SUB: _sub_rule,
    Op.MUL: _mul_rule,
    Op.DIV: _div_rule,
    Op.TANH: _tanh_rule,
    Op.RELU: _relu_rule,
    Op.EXP: _exp_rule,
    Op.POW: _pow_rule,
}
assert set(_RULES) == set(Op), "every operator needs a gradient rule"

# ---------------- Backward pass ---------------- #
def backward(root: Value, verbose: bool = False) -> None:
    """
    Run a single reverse pass from `root`.

    Steps:
        1) topological order of everything reachable from root
        2) reverse it, so root comes first and leaves last
        3) seed root.grad = 1.0 (d root / d root)
        4) apply each node's local rule in that order

    In reverse topological order every consumer of a node runs before the
    node itself, so its grad is fully accumulated before it propagates.

    Notes:
        - Gradients accumulate with +=. Running backward twice on the same
          graph without zero_grad() in between double-counts everything
          below the root; clearing is the caller's job.
        - inf/nan values propagate per IEEE-754; nothing raises.
        - verbose=True prints every node after its rule has run.
    """
    root._check_live()
    nodes = root.graph.nodes
    order = _topo_indices(nodes, root.idx)
    nodes[root.idx].grad = np.float64(1.0)

    for idx in reversed(order):
        node = nodes[idx]
        _RULES[node.op](nodes, node)
        if verbose:
            print(f"Node {idx:4d}: {node.op.value:5s} data={float(node.value):.6g} "
                  f"grad={float(node.grad):.6g} {node.label}")
