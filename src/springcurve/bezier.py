"""Cubic Bézier evaluation. / 三次贝塞尔曲线求值。

The interactive curve is a single cubic Bézier with two fixed anchors ``p0``/``p3`` and two
spring-driven handles ``p1``/``p2``. / 交互曲线是一条三次贝塞尔曲线：``p0``/``p3`` 为固定端点，``p1``/``p2`` 由弹簧驱动。
This module evaluates positions, tangents and curvature in closed form and samples the curve
into a polyline for drawing. / 本模块以解析形式计算位置、切向量与曲率，并将曲线采样为折线用于绘制。
Scalar helpers work on :class:`~springcurve.vector.Vector2` values; the batched variants run on PyTorch
tensors so a whole polyline is produced in one vectorised pass. /
标量接口基于 :class:`~springcurve.vector.Vector2`；批量接口基于 PyTorch 张量，一次向量化计算即可得到整条折线。
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import torch

from .vector import Vector2

Tensor = torch.Tensor

# Tangents shorter than this are too unstable to draw a direction from. / 短于该值的切向量方向不稳定，不予绘制。
MIN_GUIDE_TANGENT = 0.001


@dataclass(frozen=True)
class CubicCurve:
    """Stateless evaluator over four control points. / 基于四个控制点的无状态求值器。

    ``t`` is expected in ``[0, 1]`` but never clamped; callers guarantee the range.
    / ``t`` 应位于 ``[0, 1]``，但此处不做截断，由调用方保证范围。
    """

    p0: Vector2
    p1: Vector2
    p2: Vector2
    p3: Vector2

    @classmethod
    def from_control_points(cls, control_points: Tensor) -> CubicCurve:
        """Build a curve from a ``(4, 2)`` tensor. / 由 ``(4, 2)`` 张量构造曲线。"""

        if control_points.shape != (4, 2):
            raise ValueError(
                "CubicCurve.control_points must have shape (4, 2). "
                f"Received {tuple(control_points.shape)}"
            )
        p0, p1, p2, p3 = (Vector2.from_tensor(row) for row in control_points)
        return cls(p0, p1, p2, p3)

    @property
    def control_points(self) -> Tensor:
        """Control points stacked as a float64 ``(4, 2)`` tensor. / 以 float64 ``(4, 2)`` 张量形式堆叠的控制点。"""

        return torch.tensor(
            [p.as_tuple() for p in (self.p0, self.p1, self.p2, self.p3)],
            dtype=torch.float64,
        )

    # ------------------------------------------------------------------
    # Scalar evaluation / 标量求值
    # ------------------------------------------------------------------
    def point_at(self, t: float) -> Vector2:
        """Position ``B(t)`` from the Bernstein form. / 由 Bernstein 形式计算位置 ``B(t)``。"""

        u = 1.0 - t
        u2 = u * u
        t2 = t * t
        return (
            self.p0.multiply(u2 * u)
            .add(self.p1.multiply(3.0 * u2 * t))
            .add(self.p2.multiply(3.0 * u * t2))
            .add(self.p3.multiply(t2 * t))
        )

    def tangent_at(self, t: float) -> Vector2:
        """First derivative ``B'(t)``. / 一阶导数 ``B'(t)``。"""

        u = 1.0 - t
        return (
            self.p1.subtract(self.p0).multiply(3.0 * u * u)
            .add(self.p2.subtract(self.p1).multiply(6.0 * u * t))
            .add(self.p3.subtract(self.p2).multiply(3.0 * t * t))
        )

    def second_derivative_at(self, t: float) -> Vector2:
        u = 1.0 - t
        first = self.p2.subtract(self.p1.multiply(2.0)).add(self.p0)
        second = self.p3.subtract(self.p2.multiply(2.0)).add(self.p1)
        return first.multiply(6.0 * u).add(second.multiply(6.0 * t))

    def curvature_at(self, t: float) -> float:
        """Unsigned curvature ``|B' x B''| / |B'|^3``. / 无符号曲率 ``|B' x B''| / |B'|^3``。

        Returns exactly ``0.0`` where the tangent vanishes so callers never see ``nan`` or ``inf``.
        / 切向量为零时精确返回 ``0.0``，保证调用方不会得到 ``nan`` 或 ``inf``。
        """

        tangent = self.tangent_at(t)
        speed = tangent.magnitude()
        if speed == 0:
            return 0.0
        return abs(tangent.cross(self.second_derivative_at(t))) / speed ** 3

    # ------------------------------------------------------------------
    # Batched evaluation / 批量求值
    # ------------------------------------------------------------------
    def evaluate(self, t: Tensor) -> Tensor:
        """Evaluate positions for a tensor of parameters. / 对参数张量批量计算位置。

        Parameters
        ----------
        t:
            A float64 tensor of shape ``(N,)``. / 形状为 ``(N,)`` 的 float64 张量。

        Returns a tensor of shape ``(N, 2)``. / 返回形状为 ``(N, 2)`` 的张量。
        """

        t = t.unsqueeze(-1)  # (N, 1) shape / 张量形状 (N, 1)
        u = 1.0 - t
        cp = self.control_points.to(t.dtype)
        return (
            (u ** 3) * cp[0]
            + 3.0 * (u ** 2) * t * cp[1]
            + 3.0 * u * (t ** 2) * cp[2]
            + (t ** 3) * cp[3]
        )

    def tangent(self, t: Tensor) -> Tensor:
        t = t.unsqueeze(-1)
        u = 1.0 - t
        cp = self.control_points.to(t.dtype)
        return (
            3.0 * (u ** 2) * (cp[1] - cp[0])
            + 6.0 * u * t * (cp[2] - cp[1])
            + 3.0 * (t ** 2) * (cp[3] - cp[2])
        )

    def second_derivative(self, t: Tensor) -> Tensor:
        t = t.unsqueeze(-1)
        u = 1.0 - t
        cp = self.control_points.to(t.dtype)
        return 6.0 * u * (cp[2] - 2.0 * cp[1] + cp[0]) + 6.0 * t * (cp[3] - 2.0 * cp[2] + cp[1])

    def speed(self, t: Tensor) -> Tensor:
        """Return the magnitude of the tangent vector for parameter ``t``. / 返回参数 ``t`` 对应切向量的模长。"""

        return torch.linalg.norm(self.tangent(t), dim=-1)

    def curvature(self, t: Tensor) -> Tensor:
        """Batched curvature with zero at degenerate points. / 批量曲率，退化点处为零。"""

        d1 = self.tangent(t)
        d2 = self.second_derivative(t)
        cross = d1[..., 0] * d2[..., 1] - d1[..., 1] * d2[..., 0]
        speed = torch.linalg.norm(d1, dim=-1)
        # Substitute 1 before dividing so the masked branch stays finite. / 先以 1 替换零速度，使被屏蔽分支保持有限。
        safe_speed = torch.where(speed == 0, torch.ones_like(speed), speed)
        return torch.where(speed == 0, torch.zeros_like(speed), cross.abs() / safe_speed ** 3)

    def sample_tensor(self, steps: int) -> Tensor:
        """Positions at ``t = i / steps`` for ``i = 0..steps`` as a ``(steps + 1, 2)`` tensor. / 以 ``(steps + 1, 2)`` 张量返回 ``t = i / steps`` 处的位置。"""

        if steps < 1:
            raise ValueError(f"steps must be at least 1 to sample a curve, got {steps}")
        # arange / steps reproduces i / steps exactly, unlike linspace. / arange / steps 与 i / steps 完全一致，linspace 则不然。
        t_values = torch.arange(steps + 1, dtype=torch.float64) / steps
        return self.evaluate(t_values)

    def sample(self, steps: int) -> List[Vector2]:
        """Sample the curve into ``steps + 1`` points including both endpoints. / 将曲线采样为包含两端点的 ``steps + 1`` 个点。"""

        return [Vector2(float(x), float(y)) for x, y in self.sample_tensor(steps).tolist()]

    def tangent_guides(self, count: int, length: float) -> List[Tuple[Vector2, Vector2]]:
        """Short tangent segments at ``count`` evenly spaced parameters. / 在 ``count`` 个均匀参数处生成短切线段。

        Each entry is ``(point, point + direction * length)``; points with a vanishing tangent are skipped.
        / 每个元素为 ``(point, point + direction * length)``；切向量几乎为零的点会被跳过。
        """

        if count < 2:
            raise ValueError(f"count must be at least 2 to include both endpoints, got {count}")
        guides = []
        for i in range(count):
            t = i / (count - 1)
            tangent = self.tangent_at(t)
            if tangent.magnitude() <= MIN_GUIDE_TANGENT:
                continue
            point = self.point_at(t)
            guides.append((point, point.add(tangent.normalize().multiply(length))))
        return guides


__all__ = ["CubicCurve", "MIN_GUIDE_TANGENT"]
