# scalar_grad/ops/__init__.py

# Convenience re-exports so users can do: from scalar_grad.ops import mul, tanh, ...
from .arithmetic import add, sub, mul, div, pow
from .activations import tanh, relu, exp

__all__ = [
    "add", "sub", "mul", "div", "pow",
    "tanh", "relu", "exp",
]
