"""Two-dimensional vector value type. / 二维向量值类型。

Every control point, velocity and target in the simulation is a :class:`Vector2`. /
仿真中的每个控制点、速度和目标位置都是 :class:`Vector2`。
Instances are immutable: each operation returns a new vector and never touches its operands. /
实例不可变：每个运算都返回新向量，绝不修改操作数。
Arithmetic follows IEEE-754 double precision so results stay bit-for-bit comparable across hosts. /
运算遵循 IEEE-754 双精度规则，使不同平台上的结果可以逐位比较。
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import torch

Tensor = torch.Tensor


@dataclass(frozen=True)
class Vector2:
    """Immutable 2D point or direction. / 不可变的二维点或方向。"""

    x: float
    y: float

    def add(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def subtract(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def multiply(self, scalar: float) -> Vector2:
        return Vector2(self.x * scalar, self.y * scalar)

    def divide(self, scalar: float) -> Vector2:
        """Divide both components by ``scalar``. / 将两个分量同时除以 ``scalar``。

        Division by zero yields ``inf`` or ``nan`` instead of raising. /
        除以零时返回 ``inf`` 或 ``nan``，而不是抛出异常。
        Python floats raise :class:`ZeroDivisionError`, so the quotient is taken in float64 torch arithmetic,
        which is IEEE-754 and identical to float division for every non-zero divisor. /
        Python 浮点数会抛出 :class:`ZeroDivisionError`，因此这里改用 float64 的 torch 运算，
        它遵循 IEEE-754，并且在除数非零时与普通浮点除法结果完全一致。
        """

        if scalar != 0:
            return Vector2(self.x / scalar, self.y / scalar)
        quotient = torch.tensor((self.x, self.y), dtype=torch.float64) / float(scalar)
        x, y = quotient.tolist()
        return Vector2(x, y)

    def magnitude(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y)

    def normalize(self) -> Vector2:
        """Unit vector with the same direction; the zero vector maps to itself. / 同方向的单位向量；零向量返回自身。"""

        mag = self.magnitude()
        if mag == 0:
            return ZERO
        return Vector2(self.x / mag, self.y / mag)

    def distance_to(self, other: Vector2) -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        return math.sqrt(dx * dx + dy * dy)

    def dot(self, other: Vector2) -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: Vector2) -> float:
        """Scalar 2D cross product ``ax * by - ay * bx``. / 二维标量叉积 ``ax * by - ay * bx``。"""

        return self.x * other.y - self.y * other.x

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def to_tensor(self, dtype: torch.dtype = torch.float64) -> Tensor:
        return torch.tensor((self.x, self.y), dtype=dtype)

    @classmethod
    def from_tensor(cls, value: Tensor) -> Vector2:
        """Build a vector from a tensor of shape ``(2,)``. / 由形状为 ``(2,)`` 的张量构造向量。"""

        if value.shape != (2,):
            raise ValueError(f"Vector2.from_tensor expects shape (2,), received {tuple(value.shape)}")
        x, y = value.tolist()
        return cls(float(x), float(y))

    # Operator sugar delegating to the named methods. / 运算符重载，委托给具名方法。
    def __add__(self, other: Vector2) -> Vector2:
        return self.add(other)

    def __sub__(self, other: Vector2) -> Vector2:
        return self.subtract(other)

    def __mul__(self, scalar: float) -> Vector2:
        return self.multiply(scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vector2:
        return self.divide(scalar)

    def __neg__(self) -> Vector2:
        return Vector2(-self.x, -self.y)

    def __str__(self) -> str:
        return f"({self.x:.1f}, {self.y:.1f})"


ZERO = Vector2(0.0, 0.0)


__all__ = ["Vector2", "ZERO"]
