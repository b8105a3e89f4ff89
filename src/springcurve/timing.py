"""Host-side frame timing helpers. / 宿主侧的帧计时工具。

The controller itself never reads a clock. These helpers give a host loop the elapsed time per tick and
a frames-per-second readout. / 控制器本身从不读取时钟；这些工具为宿主循环提供每次 tick 的经过时间以及帧率读数。
"""
from __future__ import annotations

import time
from typing import Callable, Optional


class TickClock:
    """Elapsed seconds between consecutive calls. / 相邻两次调用之间经过的秒数。"""

    def __init__(self, now: Callable[[], float] = time.perf_counter):
        self._now = now
        self._last: Optional[float] = None

    def elapsed(self) -> float:
        current = self._now()
        if self._last is None:
            self._last = current
            return 0.0
        delta = current - self._last
        self._last = current
        return delta


class FrameRateCounter:
    """Counts frames and publishes a rate once per ``window`` seconds. / 统计帧数，并每隔 ``window`` 秒发布一次帧率。"""

    def __init__(self, window: float = 1.0):
        if window <= 0:
            raise ValueError("window must be positive")
        self.window = window
        self.fps = 0
        self._frames = 0
        self._window_start: Optional[float] = None

    def record(self, timestamp: float) -> Optional[int]:
        """Count one frame at ``timestamp``; return the new rate when a window closes. / 在 ``timestamp`` 记一帧；窗口结束时返回新帧率。"""

        if self._window_start is None:
            self._window_start = timestamp
        self._frames += 1
        if timestamp - self._window_start < self.window:
            return None
        self.fps = self._frames
        self._frames = 0
        self._window_start = timestamp
        return self.fps


__all__ = ["FrameRateCounter", "TickClock"]
