"""Interactive cubic Bézier curve with spring-driven control points. / 控制点由弹簧驱动的交互式三次贝塞尔曲线。

The two inner control points of a cubic Bézier hang on damped springs: dragging a point moves it directly,
while pointer motion or device tilt moves the spring targets and the points follow. /
三次贝塞尔曲线的两个内部控制点挂在阻尼弹簧上：拖拽时控制点直接跟随指针，
而指针移动或设备倾斜会改变弹簧目标，控制点随之运动。
The package is a pure model: hosts feed it elapsed time and input events and read back frozen snapshots.
/ 本包是纯模型层：宿主向其提供经过时间和输入事件，并读取冻结的快照。
"""

from .bezier import CubicCurve
from .config import PhysicsConfig
from .controller import ControlPointId, CurveController, CurveSnapshot, Layout, ScreenSize
from .rendering import FrameRenderer, RenderConfig
from .spring import SpringPoint, SpringState
from .timing import FrameRateCounter, TickClock
from .vector import ZERO, Vector2

__all__ = [
    "ControlPointId",
    "CubicCurve",
    "CurveController",
    "CurveSnapshot",
    "FrameRateCounter",
    "FrameRenderer",
    "Layout",
    "PhysicsConfig",
    "RenderConfig",
    "ScreenSize",
    "SpringPoint",
    "SpringState",
    "TickClock",
    "Vector2",
    "ZERO",
]
