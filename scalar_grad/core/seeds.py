# scalar_grad/core/seeds.py

#-----------------------------------------------------------------------------
# We "plant" a seed (dy/dy = 1) at the scalar output and let gradients grow
# backwards through the graph.
#-----------------------------------------------------------------------------
from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, List
import numpy as np

from .var import Value
from .graph import use_graph
from .engine import backward, zero_grad


def value(x: Any) -> Any:
    """Return the forward value of a Value; pass through plain numbers unchanged."""
    return x.get() if isinstance(x, Value) else x


def _ensure_value(v: Any, *, label: str) -> Value:
    """Wrap a plain number as a labeled leaf if needed; otherwise return the Value itself."""
    return v if isinstance(v, Value) else Value(v, label=label)


def _run(y: Any) -> bool:
    """Reverse pass from y. False when f returned a plain number (no dependence)."""
    if not isinstance(y, Value):
        return False
    zero_grad(y)
    backward(y)
    return True


# ----------------------------- single-input grad ----------------------------- #
def grad(f: Callable[[Value], Value], x0: float) -> np.float64:
    """
    Derivative of a scalar function y=f(x) at x0 (single input).
    Runs one reverse pass within a fresh, isolated graph.
    """
    with use_graph():
        x = _ensure_value(x0, label="x")
        if not _run(f(x)):
            return np.float64(0.0)
        return x.grad()


# ----------------------------- multi-input grads ----------------------------- #
def grads(f: Callable[[Dict[str, Value]], Value],
          inputs: Dict[str, float]) -> Dict[str, np.float64]:
    """
    Gradient of y=f(vars) w.r.t. ALL inputs (dict form).
    Performs ONE reverse pass to obtain all dy/dvar simultaneously.

    Parameters
    ----------
    f       : function taking a dict {name: Value} and returning a Value
    inputs  : dict {name: number}

    Returns
    -------
    dict {name: gradient}  # same key order as `inputs`
    """
    with use_graph():
        vars_ad: Dict[str, Value] = {
            k: _ensure_value(v, label=k) for k, v in inputs.items()
        }
        if not _run(f(vars_ad)):
            return {k: np.float64(0.0) for k in inputs.keys()}
        return {k: vars_ad[k].grad() for k in inputs.keys()}


def grads_list(f: Callable[[List[Value]], Value],
               x0_list: Iterable[float]) -> List[np.float64]:
    """
    Same as grads(), but the inputs are provided as a list and the result is a list
    of partials in the same order.

    Example
    -------
    f = lambda xs: xs[0]*xs[0] + 3*xs[1]
    grads_list(f, [2.0, 4.0]) -> [4.0, 3.0]
    """
    with use_graph():
        xs: List[Value] = [
            _ensure_value(v, label=f"x{i}") for i, v in enumerate(x0_list)
        ]
        if not _run(f(xs)):
            return [np.float64(0.0) for _ in xs]
        return [x.grad() for x in xs]
