"""Tunable physics parameters. / 可调物理参数。

The ranges match the controls exposed to users: sliders for stiffness, damping, resolution and tilt
gain, plus a gyroscope toggle. / 这些范围与用户界面上的控件一致：刚度、阻尼、分辨率与倾斜增益滑块，以及陀螺仪开关。
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .spring import DEFAULT_DAMPING, DEFAULT_STIFFNESS

Bounds = Tuple[float, float]

STIFFNESS_RANGE: Bounds = (0.01, 0.3)
DAMPING_RANGE: Bounds = (0.7, 0.99)
RESOLUTION_RANGE: Tuple[int, int] = (20, 200)
GYRO_INFLUENCE_RANGE: Bounds = (0.1, 2.0)


def clamp(value: float, bounds: Bounds) -> float:
    low, high = bounds
    return max(low, min(high, value))


def _check_range(name: str, value: float, bounds: Bounds) -> None:
    low, high = bounds
    if not low <= value <= high:
        raise ValueError(f"{name} must lie in [{low}, {high}], got {value}")


@dataclass
class PhysicsConfig:
    """Configuration shared by the controller and both spring points. / 控制器与两个弹簧点共享的配置。"""

    stiffness: float = DEFAULT_STIFFNESS
    damping: float = DEFAULT_DAMPING
    resolution: int = 100  # Sample intervals along the curve / 曲线采样区间数
    gyroscope_enabled: bool = False
    gyro_influence: float = 0.5

    def validate(self) -> None:
        _check_range("stiffness", self.stiffness, STIFFNESS_RANGE)
        _check_range("damping", self.damping, DAMPING_RANGE)
        if isinstance(self.resolution, bool) or not isinstance(self.resolution, int):
            raise ValueError(f"resolution must be an integer, got {self.resolution!r}")
        _check_range("resolution", self.resolution, RESOLUTION_RANGE)
        _check_range("gyro_influence", self.gyro_influence, GYRO_INFLUENCE_RANGE)


__all__ = [
    "DAMPING_RANGE",
    "GYRO_INFLUENCE_RANGE",
    "PhysicsConfig",
    "RESOLUTION_RANGE",
    "STIFFNESS_RANGE",
    "clamp",
]
