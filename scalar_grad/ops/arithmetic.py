# scalar_grad/ops/arithmetic.py
import numpy as np
from ..core.var import Value, _check_numeric
from ..core.node import Op
from ..core import graph as graph_mod  # Use module access for use_graph() compatibility

def _graph_of(*xs):
    """
    Pick the arena a new node goes into: the one owning the Value operands,
    or the active graph when every operand is a raw number.
    """
    graph = None
    for x in xs:
        if isinstance(x, Value):
            if graph is None:
                graph = x.graph
            elif x.graph is not graph:
                raise ValueError("cannot combine Values from different graphs")
    return graph if graph is not None else graph_mod.global_graph

def _as_value(x, graph):
    """Ensure x is a Value in `graph`; otherwise wrap it as a fresh leaf."""
    return x if isinstance(x, Value) else Value(x, graph=graph)

def _tag(x):
    """How an operand shows up inside a derived label."""
    n = x.node
    if n.op is Op.LEAF and n.label:
        return n.label
    return f"{float(n.value):g}"

def _binary(x, y, f, op, sym):
    """
    Generic binary primitive:
      - rejects non-numeric operands before touching the graph
      - coerces raw numbers into leaves
      - computes out.value = f(x.value, y.value) eagerly
      - records (x, y) as operands in argument order
    """
    graph = _graph_of(x, y)
    for v in (x, y):
        if not isinstance(v, Value):
            _check_numeric(v)
    x = _as_value(x, graph)
    y = _as_value(y, graph)
    idx = graph.push_node(
        op=op, value=f(x.get(), y.get()), operands=(x.idx, y.idx),
        label=f"({_tag(x)}{sym}{_tag(y)})",
    )
    return Value._wrap(graph, idx)

def add(x, y): return _binary(x, y, lambda a,b:a+b, Op.ADD, "+")
def sub(x, y): return _binary(x, y, lambda a,b:a-b, Op.SUB, "-")
def mul(x, y): return _binary(x, y, lambda a,b:a*b, Op.MUL, "*")
# np.float64 division follows IEEE-754: x/0 -> ±inf, 0/0 -> nan
def div(x, y): return _binary(x, y, lambda a,b:np.divide(a, b), Op.DIV, "/")

def pow(x, exponent):
    """
    Power with a constant exponent:
      out.value = x.value ** exponent

    The exponent is stored as a leaf in operand slot 1 but is treated as a
    constant on backward. A negative base with a fractional exponent gives
    nan, as np.power does.
    """
    if isinstance(exponent, Value):
        raise TypeError("pow() exponent must be a constant number, not a Value")
    _check_numeric(exponent)
    graph = _graph_of(x)
    x = _as_value(x, graph)
    e = np.float64(exponent)
    e_idx = graph.push_node(op=Op.LEAF, value=e)
    idx = graph.push_node(
        op=Op.POW, value=np.power(x.get(), e), operands=(x.idx, e_idx),
        label=f"pow({_tag(x)},{float(e):g})",
    )
    return Value._wrap(graph, idx)
