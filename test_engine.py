import numpy as np
import pytest

from scalar_grad import Value, backward, collect_order, grads_list, zero_grad


# ---------------- basic and shared-node gradients ---------------- #
def test_add_backward():
    a, b = Value(2.0), Value(3.0)
    c = a + b
    backward(c)
    assert c.grad() == 1.0
    assert a.grad() == 1.0 and b.grad() == 1.0


def test_self_add():
    a = Value(2.0)
    c = a + a
    backward(c)
    assert a.grad() == 2.0


def test_self_mul():
    a = Value(3.0)
    c = a * a
    backward(c)
    assert a.grad() == 6.0


def test_self_sub_and_div_cancel():
    a = Value(5.0)
    c = a - a
    backward(c)
    assert c.get() == 0.0
    assert a.grad() == 0.0

    b = Value(5.0)
    d = b / b
    backward(d)
    assert d.get() == 1.0
    assert b.grad() == 0.0


def test_self_use_scales_with_upstream_gradient():
    a = Value(3.0)
    y = (a + a) * 5.0
    backward(y)
    assert a.grad() == 10.0

    b = Value(3.0)
    z = (b * b) * 2.0
    backward(z)
    assert b.grad() == 12.0


def test_diamond_sums_both_paths():
    a, b = Value(2.0), Value(3.0)
    d = a + b
    e = a * b
    f = d + e
    assert f.get() == 11.0
    backward(f)
    assert a.grad() == 1.0 + b.get() == 4.0
    assert b.grad() == 1.0 + a.get() == 3.0


def test_reuse_across_operations():
    x = Value(3.0)
    y = x * x + x
    backward(y)
    assert x.grad() == 7.0  # 2x + 1


def test_nested_self_use():
    x = Value(1.5)
    t = x + x
    y = t * t  # 4x^2
    backward(y)
    assert y.get() == 9.0
    assert x.grad() == pytest.approx(12.0)


# ---------------- per-operator rules ---------------- #
def test_sub_rule():
    a, b = Value(4.0), Value(1.0)
    backward(a - b)
    assert a.grad() == 1.0 and b.grad() == -1.0


def test_div_rule():
    a, b = Value(3.0), Value(2.0)
    backward(a / b)
    assert a.grad() == 0.5
    assert b.grad() == -0.75  # -a / b^2


def test_scalar_on_left():
    x = Value(4.0)
    backward(2.0 - x)
    assert x.grad() == -1.0
    y = Value(4.0)
    backward(1.0 / y)
    assert y.grad() == pytest.approx(-1.0 / 16.0)


def test_neg():
    x = Value(2.0)
    backward(-x)
    assert x.grad() == -1.0


def test_tanh_at_zero():
    x = Value(0.0)
    y = x.tanh()
    assert y.get() == 0.0
    backward(y)
    assert x.grad() == 1.0


def test_tanh_rule():
    x = Value(0.7)
    y = x.tanh()
    backward(y)
    assert x.grad() == pytest.approx(1.0 - np.tanh(0.7) ** 2)


@pytest.mark.parametrize("x0, expected", [(3.0, 1.0), (-2.0, 0.0), (0.0, 0.0)])
def test_relu_rule(x0, expected):
    x = Value(x0)
    backward(x.relu())
    assert x.grad() == expected


def test_exp_rule():
    x = Value(1.0)
    y = x.exp()
    backward(y)
    assert x.grad() == pytest.approx(np.e)


def test_pow_rule_ignores_exponent():
    x = Value(2.0)
    y = x ** 3
    backward(y)
    assert y.get() == 8.0
    assert x.grad() == 12.0
    exponent = y.operands[1]
    assert exponent.grad() == 0.0


def test_pow_fractional_exponent():
    x = Value(4.0)
    backward(x.pow(0.5))
    assert x.grad() == pytest.approx(0.25)


def test_ieee_propagates_through_backward():
    x, z = Value(1.0), Value(0.0)
    with np.errstate(all="ignore"):
        y = x / z
        backward(y)
    assert y.get() == np.inf
    assert x.grad() == np.inf
    assert z.grad() == -np.inf


# ---------------- finite-difference cross-check ---------------- #
def _numeric_grads(f, xs, h=1e-6):
    out = []
    for i in range(len(xs)):
        up = list(xs); up[i] += h
        dn = list(xs); dn[i] -= h
        out.append((f(up) - f(dn)) / (2 * h))
    return out


@pytest.mark.parametrize("f, f_float, xs", [
    (lambda v: (v[0] * v[1] + v[0]).tanh(),
     lambda v: np.tanh(v[0] * v[1] + v[0]), [0.3, -0.8]),
    (lambda v: (v[0] / v[1]).exp() - v[1] ** 2,
     lambda v: np.exp(v[0] / v[1]) - v[1] ** 2, [1.2, 2.5]),
    (lambda v: (v[0] * v[0] - 3.0 / v[1]).relu() * v[1],
     lambda v: max(0.0, v[0] * v[0] - 3.0 / v[1]) * v[1], [2.0, 1.5]),
    (lambda v: (v[0] + v[1]) * (v[0] - v[1]) / (v[0] * v[1]),
     lambda v: (v[0] + v[1]) * (v[0] - v[1]) / (v[0] * v[1]), [1.7, 0.4]),
    (lambda v: v[0].pow(2.5) * v[1].tanh() + v[0],
     lambda v: v[0] ** 2.5 * np.tanh(v[1]) + v[0], [1.3, 0.2]),
])
def test_matches_finite_differences(f, f_float, xs):
    analytic = grads_list(f, xs)
    numeric = _numeric_grads(f_float, xs)
    assert analytic == pytest.approx(numeric, rel=1e-5, abs=1e-7)


# ---------------- traversal ---------------- #
def _build_shared_graph():
    a, b, c = Value(0.5, label="a"), Value(-1.0, label="b"), Value(2.0, label="c")
    ab = a * b
    s = ab + c
    t = (s * ab).tanh()
    u = t + s / c
    return u + a * a, (a, b, c)


def test_collect_order_is_topological_and_unique():
    root, leaves = _build_shared_graph()
    order = collect_order(root)
    assert len(order) == len(set(order))
    pos = {v: i for i, v in enumerate(order)}
    for v in order:
        for op in v.operands:
            assert pos[op] < pos[v]
    assert order[-1] == root
    assert all(l in pos for l in leaves)


def test_collect_order_visits_shared_node_once():
    a = Value(1.0)
    y = a
    for _ in range(30):
        y = y + y  # 2^30 paths, 31 nodes
    order = collect_order(y)
    assert len(order) == 31
    backward(y)
    assert a.grad() == 2.0 ** 30


def test_collect_order_only_reaches_dependencies():
    a, b = Value(1.0), Value(2.0)
    unrelated = Value(9.0)
    c = a + b
    order = collect_order(c)
    assert unrelated not in order
    assert [v.idx for v in order] == [a.idx, b.idx, c.idx]


def test_deep_chain_has_no_recursion_limit():
    x = Value(1.0)
    y = x
    for _ in range(5000):
        y = y + x
    backward(y)
    assert x.grad() == 5001.0


def test_leaf_backward_seeds_itself():
    x = Value(4.0)
    backward(x)
    assert x.grad() == 1.0


# ---------------- zero_grad and repeated passes ---------------- #
def test_zero_grad_clears_every_reachable_node():
    root, leaves = _build_shared_graph()
    backward(root)
    assert any(l.grad() != 0.0 for l in leaves)
    zero_grad(root)
    assert all(v.grad() == 0.0 for v in collect_order(root))


def test_backward_is_repeatable_after_zero_grad():
    root, leaves = _build_shared_graph()
    zero_grad(root)
    backward(root)
    first = [l.grad() for l in leaves]
    zero_grad(root)
    backward(root)
    second = [l.grad() for l in leaves]
    assert first == second


def test_backward_twice_without_reset_accumulates():
    a, b = Value(2.0), Value(3.0)
    c = a * b
    backward(c)
    backward(c)
    # caller forgot zero_grad: leaf contributions are counted twice
    assert a.grad() == 6.0 and b.grad() == 4.0
    assert c.grad() == 1.0


def test_bound_methods():
    a = Value(2.0)
    y = a * 3.0
    y.backward()
    assert a.grad() == 3.0
    y.zero_grad()
    assert a.grad() == 0.0 and y.grad() == 0.0


def test_verbose_backward_prints_each_node(capsys):
    a = Value(2.0, label="a")
    y = (a * 3.0).tanh()
    backward(y, verbose=True)
    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == len(collect_order(y))
    assert "tanh" in lines[0]
    assert any(line.rstrip().endswith(" a") for line in lines)
