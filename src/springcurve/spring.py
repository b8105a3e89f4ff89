"""Spring-damper control points. / 弹簧阻尼控制点。

Each movable handle of the curve is a :class:`SpringPoint`: a unit mass pulled toward a target by a
linear spring and slowed by a velocity-proportional damper. / 曲线的每个可动控制柄都是 :class:`SpringPoint`：
单位质量在线性弹簧作用下被拉向目标点，并受与速度成正比的阻尼减速。
While the pointer holds a point, physics is suspended and the point follows the pointer exactly. /
指针按住控制点时物理模拟暂停，控制点严格跟随指针。
"""
from __future__ import annotations

from dataclasses import dataclass

from .vector import ZERO, Vector2

DEFAULT_STIFFNESS = 0.08
DEFAULT_DAMPING = 0.88
POINT_MASS = 1.0
HIT_RADIUS = 12.0
# Residual per-step friction applied after integration. / 每步积分后施加的残余摩擦。
FRICTION = 0.999


@dataclass(frozen=True)
class SpringState:
    """Read-only copy of a spring point handed to renderers. / 交给渲染层的弹簧点只读副本。"""

    position: Vector2
    velocity: Vector2
    target: Vector2
    is_dragging: bool


class SpringPoint:
    """A point integrated toward ``target`` unless it is being dragged. / 除非被拖拽，否则向 ``target`` 积分运动的点。

    The point has two states: *free*, where :meth:`step` integrates the spring, and *dragging*, where only
    :meth:`update_drag` moves it and velocity stays zero. / 控制点有两种状态：*自由* 状态下 :meth:`step` 执行弹簧积分；
    *拖拽* 状态下只能由 :meth:`update_drag` 移动，且速度始终为零。
    """

    mass = POINT_MASS
    radius = HIT_RADIUS

    def __init__(
        self,
        position: Vector2 = ZERO,
        *,
        stiffness: float = DEFAULT_STIFFNESS,
        damping: float = DEFAULT_DAMPING,
    ):
        self.position = position
        self.velocity = ZERO
        self.target = position
        self.is_dragging = False
        self.drag_offset = ZERO
        self.stiffness = stiffness
        self.damping = damping

    def __repr__(self) -> str:
        return (
            f"SpringPoint(position={self.position}, target={self.target}, "
            f"velocity={self.velocity}, dragging={self.is_dragging})"
        )

    def step(self, elapsed_time: float) -> None:
        """Advance the point by ``elapsed_time`` with semi-implicit Euler. / 用半隐式欧拉法将控制点推进 ``elapsed_time``。

        ``elapsed_time`` must already be clamped by the caller. / ``elapsed_time`` 须由调用方预先截断。
        """

        if self.is_dragging:
            self.velocity = ZERO
            return

        displacement = self.position.subtract(self.target)
        spring_force = displacement.multiply(-self.stiffness)
        damping_force = self.velocity.multiply(-self.damping)
        acceleration = spring_force.add(damping_force).divide(self.mass)

        # Velocity first, then position from the new velocity. / 先更新速度，再用新速度更新位置。
        self.velocity = self.velocity.add(acceleration.multiply(elapsed_time))
        self.position = self.position.add(self.velocity.multiply(elapsed_time))
        self.velocity = self.velocity.multiply(FRICTION)

    def set_target(self, target: Vector2) -> None:
        self.target = target

    def place(self, position: Vector2) -> None:
        """Move the point and its target at once, at rest. / 同时移动控制点及其目标，并使其静止。"""

        self.position = position
        self.target = position
        self.velocity = ZERO

    def start_drag(self, pointer: Vector2) -> None:
        self.is_dragging = True
        self.drag_offset = pointer.subtract(self.position)
        self.velocity = ZERO

    def update_drag(self, pointer: Vector2) -> None:
        # Duplicate move events after release are ignored. / 释放后的重复移动事件会被忽略。
        if not self.is_dragging:
            return
        self.position = pointer.subtract(self.drag_offset)

    def end_drag(self) -> None:
        """Release the point where it is; it rests there until the target moves. / 在当前位置释放控制点，目标改变前它将停留于此。"""

        if not self.is_dragging:
            return
        self.is_dragging = False
        self.target = self.position

    def hit_test(self, pointer: Vector2) -> bool:
        return self.position.distance_to(pointer) <= self.radius

    def reset(self) -> None:
        """Snap to the target and stop. / 立即跳回目标并停止运动。"""

        self.velocity = ZERO
        self.position = self.target

    def snapshot(self) -> SpringState:
        return SpringState(
            position=self.position,
            velocity=self.velocity,
            target=self.target,
            is_dragging=self.is_dragging,
        )


__all__ = [
    "DEFAULT_DAMPING",
    "DEFAULT_STIFFNESS",
    "FRICTION",
    "HIT_RADIUS",
    "POINT_MASS",
    "SpringPoint",
    "SpringState",
]
