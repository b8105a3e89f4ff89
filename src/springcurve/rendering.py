"""Offscreen frame rendering with Gaussian splats. / 基于高斯斑点的离屏帧渲染。

A :class:`~springcurve.controller.CurveSnapshot` is turned into an RGB image by splatting samples along
every stroke as small Gaussians and compositing the layers over a dark background. /
:class:`~springcurve.controller.CurveSnapshot` 会被渲染为 RGB 图像：沿每条笔划的采样点转换为小高斯斑点，
再将各图层依次叠加到深色背景上。
Layers, bottom to top: control polygon, curve, tangent guides, velocity vectors, anchors and spring
handles. / 图层自下而上依次为：控制多边形、曲线、切线参考、速度向量、端点与弹簧控制柄。
The renderer is meant for previews, screenshots and tests rather than interactive display. /
该渲染器用于预览、截图和测试，而非交互式显示。
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import torch

from .controller import CurveSnapshot
from .spring import SpringState
from .vector import Vector2

Tensor = torch.Tensor
Color = Tuple[float, float, float]

POLYGON_COLOR: Color = (1.0, 1.0, 1.0)
CURVE_COLOR: Color = (0.35, 0.45, 1.0)
TANGENT_COLOR: Color = (1.0, 0.6, 0.1)
VELOCITY_COLOR: Color = (1.0, 0.4, 0.7)
ANCHOR_COLOR: Color = (0.95, 0.2, 0.2)
FREE_COLOR: Color = (0.2, 0.85, 0.35)
DRAGGING_COLOR: Color = (1.0, 0.85, 0.1)

ANCHOR_RADIUS = 7.0
# Velocities below this are not drawn. / 低于该值的速度不绘制。
MIN_DRAWN_SPEED = 0.01
# Splats processed per pass to bound memory. / 每批处理的斑点数，用于限制内存占用。
SPLAT_CHUNK = 64


def _prepare_grid(height: int, width: int, device: torch.device, dtype: torch.dtype) -> Tuple[Tensor, Tensor]:
    """Create ``(H, W)`` mesh grids measured in pixel coordinates. / 生成以像素坐标计量的 ``(H, W)`` 网格。"""

    y = torch.linspace(0.0, height - 1, height, device=device, dtype=dtype)
    x = torch.linspace(0.0, width - 1, width, device=device, dtype=dtype)
    grid_y, grid_x = torch.meshgrid(y, x, indexing="ij")
    return grid_x, grid_y


@dataclass
class RenderConfig:
    """Options shared across render calls. Lengths are in screen units. / 跨渲染调用共享的选项，长度以屏幕单位计。"""

    canvas_width: int = 256
    canvas_height: int = 256
    background: Color = (0.03, 0.03, 0.04)
    curve_width: float = 4.0
    marker_radius: float = 11.0
    show_tangents: bool = True
    tangent_count: int = 7
    show_velocity: bool = True
    velocity_scale: float = 12.0

    def validate(self) -> None:
        if self.canvas_height <= 0 or self.canvas_width <= 0:
            raise ValueError("Canvas dimensions must be positive integers")
        if self.curve_width <= 0 or self.marker_radius <= 0:
            raise ValueError("curve_width and marker_radius must be positive")
        if self.tangent_count < 2:
            raise ValueError("tangent_count must be at least 2 to cover both curve ends")


class FrameRenderer:
    """Rasterise controller snapshots to ``(H, W, 3)`` tensors. / 将控制器快照光栅化为 ``(H, W, 3)`` 张量。"""

    def __init__(self, config: RenderConfig | None = None, *, device: Optional[torch.device] = None):
        self.config = config or RenderConfig()
        self.config.validate()
        self.device = device or torch.device("cpu")
        self.dtype = torch.float32
        self._grid = _prepare_grid(self.config.canvas_height, self.config.canvas_width, self.device, self.dtype)

    def render(self, snapshot: CurveSnapshot) -> Tensor:
        """Render one frame with values in ``[0, 1]``. / 渲染一帧，像素值位于 ``[0, 1]``。"""

        cfg = self.config
        scale = self._scale(snapshot)
        image = torch.tensor(cfg.background, device=self.device, dtype=self.dtype).expand(
            cfg.canvas_height, cfg.canvas_width, 3
        ).clone()

        first, second = snapshot.first, snapshot.second
        polygon = [snapshot.start, first.position, second.position, snapshot.end]
        image = self._stroke(image, polygon, 1.0 * scale, POLYGON_COLOR, 0.15, scale)
        image = self._stroke(image, snapshot.polyline, cfg.curve_width * scale, CURVE_COLOR, 0.9, scale)

        if cfg.show_tangents and snapshot.screen is not None:
            length = min(snapshot.screen.width, snapshot.screen.height) * 0.1
            for point, tip in snapshot.curve.tangent_guides(cfg.tangent_count, length):
                image = self._stroke(image, [point, tip], 2.0 * scale, TANGENT_COLOR, 0.6, scale)
                image = self._dots(image, [point], 2.5 * scale, TANGENT_COLOR, 0.8, scale)

        if cfg.show_velocity:
            for state in (first, second):
                image = self._velocity(image, state, scale)

        image = self._dots(image, [snapshot.start, snapshot.end], ANCHOR_RADIUS * scale, ANCHOR_COLOR, 1.0, scale)
        for state in (first, second):
            if state.is_dragging:
                # Halo around the grabbed handle. / 被抓取控制柄周围的光晕。
                image = self._dots(image, [state.position], 20.0 * scale, DRAGGING_COLOR, 0.2, scale)
            color = DRAGGING_COLOR if state.is_dragging else FREE_COLOR
            image = self._dots(image, [state.position], cfg.marker_radius * scale, color, 1.0, scale)
        return image.clamp(0.0, 1.0)

    # ------------------------------------------------------------------
    # Layers / 图层
    # ------------------------------------------------------------------
    def _velocity(self, image: Tensor, state: SpringState, scale: float) -> Tensor:
        if state.velocity.magnitude() <= MIN_DRAWN_SPEED:
            return image
        tip = state.position.add(state.velocity.multiply(self.config.velocity_scale))
        image = self._stroke(image, [state.position, tip], 1.5 * scale, VELOCITY_COLOR, 0.8, scale)
        return self._dots(image, [tip], 3.0 * scale, VELOCITY_COLOR, 1.0, scale)

    def _stroke(
        self, image: Tensor, points: Sequence[Vector2], width_px: float, color: Color, opacity: float, scale: float
    ) -> Tensor:
        if len(points) < 2:
            return image
        sigma = max(width_px * 0.5, 0.5)
        vertices = self._to_canvas(points, scale)
        # Densify so neighbouring splats overlap into a continuous line. / 加密采样，使相邻斑点重叠成连续线条。
        seg_lengths = torch.linalg.norm(vertices[1:] - vertices[:-1], dim=-1)
        per_segment = int(min(max(math.ceil(float(seg_lengths.max()) / sigma), 1), 256)) + 1
        t = torch.linspace(0.0, 1.0, per_segment, device=self.device, dtype=self.dtype).view(1, -1, 1)
        dense = vertices[:-1].unsqueeze(1) * (1.0 - t) + vertices[1:].unsqueeze(1) * t
        return self._composite(image, self._coverage(dense.reshape(-1, 2), sigma), color, opacity)

    def _dots(
        self, image: Tensor, points: Sequence[Vector2], radius_px: float, color: Color, opacity: float, scale: float
    ) -> Tensor:
        if not points:
            return image
        return self._composite(image, self._coverage(self._to_canvas(points, scale), max(radius_px * 0.5, 0.5)), color, opacity)

    def _coverage(self, centres: Tensor, sigma: float) -> Tensor:
        """Pointwise maximum of unit-peak Gaussians at ``centres``. / ``centres`` 处单位峰值高斯的逐像素最大值。"""

        grid_x, grid_y = self._grid
        coverage = torch.zeros_like(grid_x)
        inv_two_sigma2 = 0.5 / (sigma ** 2)
        for chunk in torch.split(centres, SPLAT_CHUNK):
            dx = chunk[:, 0].view(-1, 1, 1) - grid_x  # (N, H, W) shape / 张量形状 (N, H, W)
            dy = chunk[:, 1].view(-1, 1, 1) - grid_y
            gaussians = torch.exp(-(dx ** 2 + dy ** 2) * inv_two_sigma2)
            coverage = torch.maximum(coverage, gaussians.amax(dim=0))
        return coverage

    def _composite(self, image: Tensor, coverage: Tensor, color: Color, opacity: float) -> Tensor:
        alpha = (coverage * opacity).clamp(0.0, 1.0).unsqueeze(-1)
        rgb = torch.tensor(color, device=self.device, dtype=self.dtype)
        return rgb * alpha + image * (1.0 - alpha)

    # ------------------------------------------------------------------
    # Coordinates / 坐标
    # ------------------------------------------------------------------
    def _scale(self, snapshot: CurveSnapshot) -> float:
        """Canvas pixels per screen unit, preserving aspect ratio. / 每个屏幕单位对应的画布像素数，保持纵横比。"""

        if snapshot.screen is None:
            return 1.0
        return min(
            self.config.canvas_width / snapshot.screen.width,
            self.config.canvas_height / snapshot.screen.height,
        )

    def _to_canvas(self, points: Sequence[Vector2], scale: float) -> Tensor:
        coords = torch.tensor([p.as_tuple() for p in points], device=self.device, dtype=torch.float64)
        return (coords * scale).to(self.dtype)


__all__ = ["FrameRenderer", "RenderConfig"]
