"""
Forward values and local derivatives of every primitive, checked against
exact results and central finite differences.
"""

import warnings

import numpy as np
import pytest

from microdiff import (
    Value, add, sub, mul, div, neg, pow, sigmoid, relu, linear,
    use_tape, DivisionByZero,
)


def _numeric_grad(f, xs, h=1e-6):
    """Central finite differences of a float function at the point xs."""
    out = []
    for i in range(len(xs)):
        up = list(xs); up[i] += h
        dn = list(xs); dn[i] -= h
        out.append((f(*up) - f(*dn)) / (2 * h))
    return out


@pytest.mark.parametrize("op, f, point", [
    (add, lambda a, b: a + b, (1.5, -2.0)),
    (sub, lambda a, b: a - b, (1.5, -2.0)),
    (mul, lambda a, b: a * b, (1.5, -2.0)),
    (div, lambda a, b: a / b, (1.5, -2.0)),
])
def test_binary_ops_match_finite_differences(op, f, point):
    a, b = Value(point[0]), Value(point[1])
    out = op(a, b)
    assert out.value == pytest.approx(f(*point))
    out.backward()
    expected = _numeric_grad(f, point)
    assert a.grad == pytest.approx(expected[0], rel=1e-5)
    assert b.grad == pytest.approx(expected[1], rel=1e-5)


@pytest.mark.parametrize("op, f, x0", [
    (sigmoid, lambda a: 1.0 / (1.0 + np.exp(-a)), 0.7),
    (relu, lambda a: max(a, 0.0), 0.7),
    (linear, lambda a: a, 0.7),
    (neg, lambda a: -a, 0.7),
    (lambda v: pow(v, 3), lambda a: a ** 3, 0.7),
    (lambda v: pow(v, -2), lambda a: a ** -2, 0.7),
])
def test_unary_ops_match_finite_differences(op, f, x0):
    a = Value(x0)
    out = op(a)
    assert out.value == pytest.approx(f(x0))
    out.backward()
    assert a.grad == pytest.approx(_numeric_grad(f, (x0,))[0], rel=1e-5)


def test_sub_and_div_exact():
    a, b = Value(5.0), Value(2.0)
    d = sub(a, b)
    d.backward()
    assert (d.value, a.grad, b.grad) == (3.0, 1.0, -1.0)

    a, b = Value(6.0), Value(3.0)
    q = div(a, b)
    q.backward()
    assert q.value == 2.0
    assert a.grad == pytest.approx(1.0 / 3.0)
    assert b.grad == pytest.approx(-6.0 / 9.0)


def test_sigmoid_at_zero():
    z = Value(0.0)
    s = sigmoid(z)
    assert s.value == 0.5
    s.backward()
    assert z.grad == 0.25


def test_sigmoid_saturates_without_overflow():
    hi, lo = sigmoid(Value(1000.0)), sigmoid(Value(-1000.0))
    assert hi.value == 1.0
    assert lo.value == 0.0
    hi.backward()
    assert hi.operands[0].grad == 0.0


@pytest.mark.parametrize("x0, value, slope", [(-2.0, 0.0, 0.0), (0.0, 0.0, 0.0), (3.0, 3.0, 1.0)])
def test_relu_gates_on_its_own_output(x0, value, slope):
    x = Value(x0)
    r = relu(x)
    assert r.value == value
    # upstream grad other than 1 so an add-style rule would show up
    out = mul(r, 5.0)
    out.backward()
    assert x.grad == 5.0 * slope


def test_linear_passes_gradient_through():
    x = Value(-4.0)
    y = linear(x)
    assert y.value == -4.0
    mul(y, 3.0).backward()
    assert x.grad == 3.0


def test_pow_accumulates_on_shared_operand():
    # y = x^2 + 4x at x = 3 -> y' = 2x + 4 = 10
    x = Value(3.0)
    y = add(pow(x, 2), mul(x, 4.0))
    y.backward()
    assert y.value == 21.0
    assert x.grad == 10.0


def test_pow_zero_exponent():
    x = Value(0.0)
    y = pow(x, 0)
    assert y.value == 1.0
    y.backward()
    assert x.grad == 0.0


def test_pow_negative_exponent_on_zero_is_inf():
    y = pow(Value(0.0), -1)
    assert np.isinf(y.value)


@pytest.mark.parametrize("k", [2.5, True, "2", Value(2.0)])
def test_pow_requires_integer_exponent(k):
    with pytest.raises(TypeError):
        pow(Value(2.0), k)


def test_pow_accepts_numpy_integer():
    assert pow(Value(2.0), np.int64(3)).value == 8.0


def test_division_by_zero_raised_at_construction():
    with use_tape() as tape:
        a, b = Value(1.0), Value(0.0)
        with pytest.raises(DivisionByZero):
            div(a, b)
        assert len(tape) == 0
    # also a ZeroDivisionError for callers that catch the builtin
    with pytest.raises(ZeroDivisionError):
        Value(1.0) / 0


def test_ops_do_not_mutate_operands():
    a, b = Value(2.0), Value(-3.0)
    for op in (add, sub, mul, div):
        op(a, b)
    sigmoid(a); relu(b); pow(a, 4)
    assert (a.value, b.value) == (2.0, -3.0)


def test_operator_overloading():
    x = Value(2.0)
    assert (x + 1).value == 3.0
    assert (1 + x).value == 3.0
    assert (x - 5).value == -3.0
    assert (5 - x).value == 3.0
    assert (3 * x).value == 6.0
    assert (x / 4).value == 0.5
    assert (4 / x).value == 2.0
    assert (-x).value == -2.0
    assert (x ** 3).value == 8.0
    assert x.sigmoid().op_tag == "sigmoid"
    assert x.relu().value == 2.0
    assert x.linear().value == 2.0


def test_constants_are_wrapped_as_leaves():
    x = Value(2.0)
    y = x * 3
    c = y.operands[1]
    assert c.is_leaf and c.value == 3.0
    y.backward()
    assert c.grad == 2.0


@pytest.mark.parametrize("bad", ["1.0", True, [1.0], None])
def test_leaf_rejects_non_numeric(bad):
    with pytest.raises(TypeError):
        Value(bad)


def test_leaf_and_repr():
    x = Value(1.5, name="x")
    assert x.is_leaf
    assert x.operands == ()
    assert x.op_tag == "leaf"
    assert x.grad == 0.0
    assert repr(x) == "Value(value=1.5000, grad=0.0000)"


def test_div_gradient_with_tiny_divisor():
    a, b = Value(1e-200), Value(1e-200)
    q = div(a, b)
    assert q.value == 1.0
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        q.backward()
    assert a.grad == pytest.approx(1e200)
    assert b.grad == pytest.approx(-1e200)


@pytest.mark.parametrize("op, x0, y0", [
    (add, 1e308, 1e308),
    (sub, -1e308, 1e308),
    (mul, 1e200, 1e200),
    (div, 1e200, 1e-200),
])
def test_binary_overflow_gives_inf_without_warnings(op, x0, y0):
    a, b = Value(x0), Value(y0)
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        out = op(a, b)
        mul(out, 1e200).backward()
    assert np.isinf(out.value)
