"""Interactive curve controller. / 交互曲线控制器。

:class:`CurveController` owns the two spring-driven handles and the fixed anchors, advances the
physics on every tick and keeps the sampled polyline current. / :class:`CurveController` 持有两个弹簧控制柄与固定端点，
在每次 tick 时推进物理模拟，并保持采样折线始终最新。
Input arrives as plain method calls: pointer events in screen coordinates and tilt angles in radians.
/ 输入以普通方法调用的形式到达：屏幕坐标下的指针事件，以及以弧度表示的倾斜角。
The controller never reads a clock; the host passes elapsed time to :meth:`CurveController.tick`.
/ 控制器从不读取时钟；宿主需将经过的时间传给 :meth:`CurveController.tick`。

All public methods take one re-entrant lock, so hosts that deliver input on another thread are
serialised against the tick. / 所有公共方法共用一把可重入锁，因此即使宿主在其他线程投递输入，也会与 tick 串行执行。
Consumers only ever receive frozen snapshots, never the live spring points. /
使用方只会拿到冻结的快照，而不是活动的弹簧点对象。
"""
from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .bezier import CubicCurve
from .config import (
    DAMPING_RANGE,
    GYRO_INFLUENCE_RANGE,
    RESOLUTION_RANGE,
    STIFFNESS_RANGE,
    PhysicsConfig,
    clamp,
)
from .spring import SpringPoint, SpringState
from .vector import ZERO, Vector2

logger = logging.getLogger(__name__)

# Empirical "feel" constants. / 凭手感调出的经验常数。
POINTER_INFLUENCE = 0.5
SECONDARY_INFLUENCE = 0.7
TILT_VIEWPORT_GAIN = 0.3
# Upper bound on a single physics step after a stall. / 卡顿后单步物理更新的时间上限。
MAX_ELAPSED_TIME = 0.1

HORIZONTAL_SPREAD_RATIO = 0.35
MAX_HORIZONTAL_SPREAD = 300.0
VERTICAL_SPREAD_RATIO = 0.25
MAX_VERTICAL_SPREAD = 150.0


class ControlPointId(enum.Enum):
    FIRST = 1
    SECOND = 2


@dataclass(frozen=True)
class ScreenSize:
    width: float
    height: float


@dataclass(frozen=True)
class Layout:
    """Screen-derived placement of anchors and neutral handle positions. / 由屏幕尺寸推导出的端点与控制柄中性位置。"""

    screen: ScreenSize
    center: Vector2
    horizontal_spread: float
    vertical_spread: float

    @classmethod
    def from_screen(cls, screen: ScreenSize) -> Layout:
        if screen.width <= 0 or screen.height <= 0:
            raise ValueError(
                f"Screen dimensions must be positive, got {screen.width}x{screen.height}"
            )
        return cls(
            screen=screen,
            center=Vector2(screen.width / 2, screen.height / 2),
            horizontal_spread=min(screen.width * HORIZONTAL_SPREAD_RATIO, MAX_HORIZONTAL_SPREAD),
            vertical_spread=min(screen.height * VERTICAL_SPREAD_RATIO, MAX_VERTICAL_SPREAD),
        )

    @property
    def start(self) -> Vector2:
        return Vector2(self.center.x - self.horizontal_spread, self.center.y)

    @property
    def end(self) -> Vector2:
        return Vector2(self.center.x + self.horizontal_spread, self.center.y)

    @property
    def first_neutral(self) -> Vector2:
        return Vector2(self.center.x - self.horizontal_spread / 2, self.center.y - self.vertical_spread)

    @property
    def second_neutral(self) -> Vector2:
        return Vector2(self.center.x + self.horizontal_spread / 2, self.center.y + self.vertical_spread)

    @property
    def short_side(self) -> float:
        return min(self.screen.width, self.screen.height)


@dataclass(frozen=True)
class CurveSnapshot:
    """Everything a renderer needs for one frame. / 渲染一帧所需的全部数据。"""

    start: Vector2
    end: Vector2
    first: SpringState
    second: SpringState
    polyline: Tuple[Vector2, ...]
    update_count: int
    resolution: int
    gyroscope_enabled: bool
    screen: Optional[ScreenSize] = None

    @property
    def curve(self) -> CubicCurve:
        return CubicCurve(self.start, self.first.position, self.second.position, self.end)


class CurveController:
    """Drives a cubic Bézier whose inner control points hang on springs. / 驱动内部控制点挂在弹簧上的三次贝塞尔曲线。

    Typical host loop / 典型宿主循环::

        controller = CurveController()
        controller.setup(ScreenSize(1000, 800))
        while running:
            controller.tick(clock.elapsed())
            draw(controller.snapshot())
    """

    def __init__(self, config: PhysicsConfig | None = None):
        self._config = replace(config) if config is not None else PhysicsConfig()
        self._config.validate()
        self._lock = threading.RLock()
        self._first = SpringPoint(stiffness=self._config.stiffness, damping=self._config.damping)
        self._second = SpringPoint(stiffness=self._config.stiffness, damping=self._config.damping)
        self._start = ZERO
        self._end = ZERO
        self._layout: Optional[Layout] = None
        self._update_count = 0
        self._polyline: Tuple[Vector2, ...] = ()
        self._resample()

    # ------------------------------------------------------------------
    # Read-only surface / 只读接口
    # ------------------------------------------------------------------
    @property
    def config(self) -> PhysicsConfig:
        with self._lock:
            return replace(self._config)

    @property
    def layout(self) -> Optional[Layout]:
        return self._layout

    @property
    def update_count(self) -> int:
        return self._update_count

    @property
    def polyline(self) -> Tuple[Vector2, ...]:
        return self._polyline

    @property
    def endpoints(self) -> Tuple[Vector2, Vector2]:
        with self._lock:
            return (self._start, self._end)

    @property
    def first(self) -> SpringState:
        with self._lock:
            return self._first.snapshot()

    @property
    def second(self) -> SpringState:
        with self._lock:
            return self._second.snapshot()

    @property
    def curve(self) -> CubicCurve:
        with self._lock:
            return self._curve()

    @property
    def dragging(self) -> Optional[ControlPointId]:
        with self._lock:
            for point_id, point in self._points():
                if point.is_dragging:
                    return point_id
            return None

    def snapshot(self) -> CurveSnapshot:
        with self._lock:
            return CurveSnapshot(
                start=self._start,
                end=self._end,
                first=self._first.snapshot(),
                second=self._second.snapshot(),
                polyline=self._polyline,
                update_count=self._update_count,
                resolution=self._config.resolution,
                gyroscope_enabled=self._config.gyroscope_enabled,
                screen=self._layout.screen if self._layout is not None else None,
            )

    # ------------------------------------------------------------------
    # Lifecycle / 生命周期
    # ------------------------------------------------------------------
    def setup(self, screen: ScreenSize) -> None:
        """Lay the curve out for ``screen``; safe to call again on resize. / 按 ``screen`` 布置曲线；窗口尺寸变化时可重复调用。

        Empty sizes, e.g. a collapsed window, are ignored and the current layout is kept.
        / 空尺寸（例如窗口被折叠）会被忽略，保留当前布局。
        """

        if screen.width <= 0 or screen.height <= 0:
            logger.debug("Ignoring empty screen %sx%s", screen.width, screen.height)
            return
        layout = Layout.from_screen(screen)
        with self._lock:
            self._layout = layout
            self._start = layout.start
            self._end = layout.end
            self._first.place(layout.first_neutral)
            self._second.place(layout.second_neutral)
            self._resample()
        logger.debug(
            "Layout for %sx%s: spread=(%.1f, %.1f)",
            screen.width, screen.height, layout.horizontal_spread, layout.vertical_spread,
        )

    def tick(self, elapsed_time: float) -> None:
        """Advance both springs by ``elapsed_time`` seconds and refresh the polyline. / 将两个弹簧推进 ``elapsed_time`` 秒并刷新折线。

        The step is clamped to :data:`MAX_ELAPSED_TIME` so a long stall cannot blow up the integration.
        / 步长会被截断到 :data:`MAX_ELAPSED_TIME`，避免长时间卡顿导致积分发散。
        """

        dt = min(max(elapsed_time, 0.0), MAX_ELAPSED_TIME)
        with self._lock:
            self._first.step(dt)
            self._second.step(dt)
            self._resample()
            self._update_count += 1

    def reset(self) -> None:
        """Snap both handles to their targets and send them home. / 让两个控制柄跳回目标，再将目标恢复到中性位置。"""

        with self._lock:
            self._update_count = 0
            self._first.reset()
            self._second.reset()
            if self._layout is not None:
                self._first.set_target(self._layout.first_neutral)
                self._second.set_target(self._layout.second_neutral)
            self._resample()
        logger.debug("Curve reset")

    # ------------------------------------------------------------------
    # Input / 输入
    # ------------------------------------------------------------------
    def pointer_down(self, pointer: Vector2) -> Optional[ControlPointId]:
        """Grab the handle under ``pointer``; the first handle wins ties. / 抓取 ``pointer`` 下的控制柄；重叠时优先第一个。"""

        with self._lock:
            if any(point.is_dragging for _, point in self._points()):
                return None
            for point_id, point in self._points():
                if point.hit_test(pointer):
                    point.start_drag(pointer)
                    logger.debug("Drag started on %s at %s", point_id.name, pointer)
                    return point_id
            return None

    def pointer_move(self, pointer: Vector2) -> None:
        with self._lock:
            for _, point in self._points():
                if point.is_dragging:
                    point.update_drag(pointer)
                    return
            if self._config.gyroscope_enabled or self._layout is None:
                return
            offset = pointer.subtract(self._layout.center).multiply(POINTER_INFLUENCE)
            self._shift_targets(self._layout, offset)

    def pointer_up(self) -> None:
        with self._lock:
            for point_id, point in self._points():
                if point.is_dragging:
                    point.end_drag()
                    logger.debug("Drag ended on %s at %s", point_id.name, point.position)
                    return

    def set_tilt_input(self, pitch: float, roll: float) -> None:
        """Map device attitude (radians) onto the spring targets. / 将设备姿态角（弧度）映射到弹簧目标。

        Roll moves the handles horizontally, pitch vertically with its sign inverted. Ignored unless the
        gyroscope is enabled and a layout exists. / 横滚角控制水平方向，俯仰角控制竖直方向且符号取反。
        仅在启用陀螺仪且已完成布局时生效。
        """

        with self._lock:
            if not self._config.gyroscope_enabled or self._layout is None:
                return
            gain = self._config.gyro_influence * self._layout.short_side * TILT_VIEWPORT_GAIN
            self._shift_targets(self._layout, Vector2(roll * gain, -pitch * gain))

    # ------------------------------------------------------------------
    # Configuration / 配置
    # ------------------------------------------------------------------
    def set_stiffness(self, stiffness: float) -> None:
        with self._lock:
            value = _clamped("stiffness", stiffness, STIFFNESS_RANGE)
            self._config.stiffness = value
            self._first.stiffness = value
            self._second.stiffness = value

    def set_damping(self, damping: float) -> None:
        with self._lock:
            value = _clamped("damping", damping, DAMPING_RANGE)
            self._config.damping = value
            self._first.damping = value
            self._second.damping = value

    def set_resolution(self, resolution: int) -> None:
        with self._lock:
            self._config.resolution = int(_clamped("resolution", int(resolution), RESOLUTION_RANGE))
            self._resample()

    def set_gyro_influence(self, influence: float) -> None:
        with self._lock:
            self._config.gyro_influence = _clamped("gyro_influence", influence, GYRO_INFLUENCE_RANGE)

    def set_gyroscope_enabled(self, enabled: bool) -> None:
        """Switch tilt control on or off; switching off recentres the curve. / 开关倾斜控制；关闭时曲线回到中心。"""

        with self._lock:
            was_enabled = self._config.gyroscope_enabled
            self._config.gyroscope_enabled = bool(enabled)
            if was_enabled == self._config.gyroscope_enabled:
                return
            logger.debug("Gyroscope %s", "enabled" if enabled else "disabled")
            if not enabled:
                self.reset()

    # ------------------------------------------------------------------
    # Internals / 内部实现
    # ------------------------------------------------------------------
    def _points(self) -> Tuple[Tuple[ControlPointId, SpringPoint], ...]:
        return ((ControlPointId.FIRST, self._first), (ControlPointId.SECOND, self._second))

    def _curve(self) -> CubicCurve:
        return CubicCurve(self._start, self._first.position, self._second.position, self._end)

    def _shift_targets(self, layout: Layout, offset: Vector2) -> None:
        # The second handle mirrors the first, scaled down. / 第二个控制柄按比例缩小后与第一个反向运动。
        self._first.set_target(layout.first_neutral.add(offset))
        self._second.set_target(
            layout.second_neutral.subtract(offset.multiply(SECONDARY_INFLUENCE))
        )

    def _resample(self) -> None:
        self._polyline = tuple(self._curve().sample(self._config.resolution))


def _clamped(name: str, value: float, bounds: Tuple[float, float]) -> float:
    result = clamp(value, bounds)
    if result != value:
        logger.warning("%s=%r outside [%s, %s], clamped to %s", name, value, bounds[0], bounds[1], result)
    return result


__all__ = [
    "ControlPointId",
    "CurveController",
    "CurveSnapshot",
    "Layout",
    "MAX_ELAPSED_TIME",
    "POINTER_INFLUENCE",
    "SECONDARY_INFLUENCE",
    "ScreenSize",
    "TILT_VIEWPORT_GAIN",
]
