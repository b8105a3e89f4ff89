"""Drag a handle, let go and watch it settle. / 拖动控制柄、松手并观察其回稳。

Run the script with ``python examples/drag_and_release.py``; it simulates two seconds of input at 60 Hz,
logs the handle positions and saves the final frame as a PNG next to the script. /
使用 ``python examples/drag_and_release.py`` 运行脚本：以 60 Hz 模拟两秒输入，记录控制柄位置，并将最后一帧保存为脚本旁的 PNG。
"""
from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image

from springcurve import CurveController, FrameRenderer, RenderConfig, ScreenSize, Vector2
from springcurve.logging_config import setup_logging

OUTPUT_PATH = Path(__file__).with_suffix(".png")
FRAME_TIME = 1.0 / 60.0

logger = logging.getLogger("springcurve.examples")


def simulate(controller: CurveController) -> None:
    grab = controller.first.position
    if controller.pointer_down(grab) is None:
        raise RuntimeError(f"No handle under {grab}")

    # Pull the handle down and to the left over half a second. / 半秒内将控制柄向左下方拖动。
    for frame in range(30):
        controller.pointer_move(grab.add(Vector2(-2.0 * frame, 6.0 * frame)))
        controller.tick(FRAME_TIME)
    controller.pointer_up()

    # Sweep the pointer so the spring targets move. / 扫动指针使弹簧目标移动。
    for frame in range(90):
        controller.pointer_move(Vector2(300.0 + 5.0 * frame, 300.0))
        controller.tick(FRAME_TIME)
        if frame % 30 == 0:
            logger.info("frame %d: p1=%s p2=%s", frame, controller.first.position, controller.second.position)


def main() -> None:
    setup_logging(logging.DEBUG)
    controller = CurveController()
    controller.setup(ScreenSize(1000, 800))
    simulate(controller)

    renderer = FrameRenderer(RenderConfig(canvas_width=500, canvas_height=400))
    image = renderer.render(controller.snapshot())
    image_np = (image.clamp(0.0, 1.0).cpu().numpy() * 255.0).astype("uint8")
    Image.fromarray(image_np).save(OUTPUT_PATH)
    print(f"Saved final frame to {OUTPUT_PATH}")  # 提示保存路径 / Notify where the output was saved


if __name__ == "__main__":
    main()
