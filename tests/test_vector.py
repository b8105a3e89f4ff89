import math

import pytest
import torch

from springcurve import ZERO, Vector2


def test_arithmetic_returns_new_vectors() -> None:
    a = Vector2(3.0, 4.0)
    b = Vector2(1.0, -2.0)
    assert a.add(b) == Vector2(4.0, 2.0)
    assert a.subtract(b) == Vector2(2.0, 6.0)
    assert a.multiply(2.0) == Vector2(6.0, 8.0)
    assert a.divide(2.0) == Vector2(1.5, 2.0)
    # Operands are untouched.
    assert a == Vector2(3.0, 4.0)
    assert b == Vector2(1.0, -2.0)


def test_operators_match_named_methods() -> None:
    a = Vector2(3.0, 4.0)
    b = Vector2(0.5, 0.25)
    assert a + b == a.add(b)
    assert a - b == a.subtract(b)
    assert a * 3.0 == a.multiply(3.0)
    assert 3.0 * a == a.multiply(3.0)
    assert a / 4.0 == a.divide(4.0)
    assert -a == Vector2(-3.0, -4.0)


def test_vectors_are_immutable() -> None:
    v = Vector2(1.0, 2.0)
    with pytest.raises(AttributeError):
        v.x = 5.0  # type: ignore[misc]


def test_magnitude_and_distance() -> None:
    assert Vector2(3.0, 4.0).magnitude() == 5.0
    assert Vector2(1.0, 1.0).distance_to(Vector2(4.0, 5.0)) == 5.0


def test_normalize() -> None:
    unit = Vector2(3.0, 4.0).normalize()
    assert unit == Vector2(0.6, 0.8)
    assert math.isclose(unit.magnitude(), 1.0)


def test_normalize_zero_vector_is_zero() -> None:
    assert ZERO.normalize() == ZERO


def test_divide_by_zero_follows_ieee() -> None:
    result = Vector2(1.0, -2.0).divide(0.0)
    assert result.x == math.inf
    assert result.y == -math.inf

    nan_result = ZERO.divide(0.0)
    assert math.isnan(nan_result.x)
    assert math.isnan(nan_result.y)


def test_cross_and_dot() -> None:
    a = Vector2(1.0, 0.0)
    b = Vector2(0.0, 1.0)
    assert a.cross(b) == 1.0
    assert b.cross(a) == -1.0
    assert a.dot(b) == 0.0
    assert Vector2(2.0, 3.0).dot(Vector2(4.0, 5.0)) == 23.0


def test_tensor_conversion() -> None:
    v = Vector2(1.25, -7.5)
    tensor = v.to_tensor()
    assert tensor.dtype == torch.float64
    assert Vector2.from_tensor(tensor) == v
    with pytest.raises(ValueError):
        Vector2.from_tensor(torch.zeros(3))


def test_str_uses_one_decimal() -> None:
    assert str(Vector2(1.234, -5.0)) == "(1.2, -5.0)"
